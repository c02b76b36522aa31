from typing import Callable, Optional
from .parsing import AsmParser, FilterConfig, failure_line, ParseResult
from .utils.config import ConfigManager
from .utils.paths import disassembly_path_for
from .utils.state import DisassemblyState
from .utils.watcher import FileWatcher
import os
import time

class DisassemblyEngine:
    def __init__(
        self,
        listing_file: Optional[str] = None,
        source_file: Optional[str] = None,
        config_manager: Optional[ConfigManager] = None,
        filter_config: Optional[FilterConfig] = None,
        workspace_folder: Optional[str] = None,
    ):
        self.config = config_manager if config_manager else ConfigManager()
        self.filter_config = filter_config if filter_config else self.config.filter_config()

        if listing_file is None:
            if source_file is None:
                raise ValueError("Either a listing file or a source file is required")
            listing_file = disassembly_path_for(
                source_file, self.config.get("associations", {}), workspace_folder or os.getcwd()
            )

        self.state = DisassemblyState(source_path=source_file or "", listing_path=listing_file)
        self.parser = AsmParser(self.filter_config.hide_function_pattern)
        self.watcher = FileWatcher()
        self.on_update_callback: Optional[Callable[[DisassemblyState], None]] = None
        self.log_file = "/tmp/disasexpl_engine.log"

    def _log(self, msg: str):
        with open(self.log_file, "a") as f:
            f.write(f"[{time.time()}] {msg}\n")

    def start(self, watch: bool = True):
        self.refresh()
        if watch:
            self.watcher.start_watching(self.state.listing_path, self._on_file_saved)

    def stop(self):
        self.watcher.stop_watching()

    def _on_file_saved(self, path: str):
        self._log(f"Listing changed: {path}")
        self.refresh()

    def set_filter(self, filter_config: FilterConfig):
        self.filter_config = filter_config
        self.parser = AsmParser(filter_config.hide_function_pattern)
        self.refresh()

    def load_listing(self) -> ParseResult:
        """Parse the listing; an unreadable file becomes a one-line failure document."""
        path = self.state.listing_path
        try:
            with open(path, "r") as f:
                raw = f.read()
        except (OSError, UnicodeDecodeError) as e:
            self._log(f"Failed to load {path}: {e}")
            return ParseResult(lines=[failure_line(f"Failed to load file '{path}'")])
        return self.parser.process(raw, self.filter_config)

    def refresh(self):
        try:
            self._log(f"Refreshing {self.state.listing_path} with {self.filter_config}")
            if self.state.source_path:
                try:
                    with open(self.state.source_path, "r") as f:
                        self.state.source_lines = f.read().splitlines()
                except (OSError, UnicodeDecodeError) as e:
                    self._log(f"Source unavailable: {e}")
                    self.state.source_lines = []

            result = self.load_listing()
            self.state.update_asm(result)
            self.state.error = ""
            self.state.last_update = time.time()
            self._log(f"Parsed {len(result.lines)} lines, {len(result.label_definitions)} labels")

        except Exception as e:
            self.state.error = f"Internal Engine Error: {str(e)}"
            try:
                self._log(f"Refresh Error: {str(e)}")
            except OSError:
                # the log itself may be what failed; state.error already carries it
                pass

        if self.on_update_callback:
            self.on_update_callback(self.state)
