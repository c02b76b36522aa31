import time
from pathlib import Path
from typing import Callable
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler

class ListingUpdateHandler(FileSystemEventHandler):
    """
    Listens for changes to a specific listing file and triggers a callback.
    """
    def __init__(self, target_file: str, callback: Callable[[str], None]):
        self.target_file = str(Path(target_file).resolve())
        self.callback = callback
        self.last_triggered = 0.0
        self.debounce_seconds = 0.5  # build tools often write the listing twice

    def _matches(self, path: str) -> bool:
        return str(Path(path).resolve()) == self.target_file

    def on_modified(self, event):
        if event.is_directory or not self._matches(event.src_path):
            return
        self._fire()

    def on_created(self, event):
        # Compilers usually replace the listing instead of rewriting it
        if event.is_directory or not self._matches(event.src_path):
            return
        self._fire()

    def _fire(self):
        now = time.time()
        if now - self.last_triggered > self.debounce_seconds:
            self.callback(self.target_file)
            self.last_triggered = now

class FileWatcher:
    """
    Manages the watchdog observer thread.
    """
    def __init__(self):
        self.observer = Observer()
        self.watch = None

    def start_watching(self, file_path: str, callback: Callable[[str], None]):
        """
        Starts a background thread watching the directory of file_path.
        The file itself need not exist yet; its directory must.
        """
        path = Path(file_path).resolve()
        if not path.parent.exists():
            raise FileNotFoundError(f"Cannot watch in non-existent directory: {path.parent}")

        handler = ListingUpdateHandler(str(path), callback)
        self.watch = self.observer.schedule(handler, str(path.parent), recursive=False)
        self.observer.start()

    def stop_watching(self):
        if self.observer.is_alive():
            self.observer.stop()
            self.observer.join()
