"""
Tests for utils/watcher.py without starting the observer thread.
"""
import pytest
from unittest.mock import MagicMock, patch

from disasexpl.utils.watcher import FileWatcher, ListingUpdateHandler


def _event(path, is_directory=False):
    return MagicMock(src_path=str(path), is_directory=is_directory)


class TestListingUpdateHandler:
    """Event filtering and debouncing."""

    def test_modified_fires(self, tmp_path):
        target = tmp_path / "a.s"
        callback = MagicMock()
        ListingUpdateHandler(str(target), callback).on_modified(_event(target))
        callback.assert_called_once_with(str(target.resolve()))

    def test_created_fires(self, tmp_path):
        target = tmp_path / "a.s"
        callback = MagicMock()
        ListingUpdateHandler(str(target), callback).on_created(_event(target))
        callback.assert_called_once()

    def test_other_file_ignored(self, tmp_path):
        callback = MagicMock()
        ListingUpdateHandler(str(tmp_path / "a.s"), callback).on_modified(_event(tmp_path / "b.s"))
        callback.assert_not_called()

    def test_directory_ignored(self, tmp_path):
        callback = MagicMock()
        ListingUpdateHandler(str(tmp_path), callback).on_modified(_event(tmp_path, is_directory=True))
        callback.assert_not_called()

    def test_debounce(self, tmp_path):
        target = tmp_path / "a.s"
        callback = MagicMock()
        handler = ListingUpdateHandler(str(target), callback)
        with patch("disasexpl.utils.watcher.time.time", side_effect=[100.0, 100.1, 101.0]):
            handler.on_modified(_event(target))
            handler.on_modified(_event(target))
            handler.on_modified(_event(target))
        assert callback.call_count == 2


class TestFileWatcher:
    """Observer setup."""

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FileWatcher().start_watching(str(tmp_path / "no" / "a.s"), MagicMock())

    def test_schedules_parent_directory(self, tmp_path):
        watcher = FileWatcher()
        watcher.observer = MagicMock()
        watcher.start_watching(str(tmp_path / "a.s"), MagicMock())
        _handler, directory = watcher.observer.schedule.call_args[0]
        assert directory == str(tmp_path.resolve())
        watcher.observer.start.assert_called_once()

    def test_stop_when_not_started(self):
        FileWatcher().stop_watching()
