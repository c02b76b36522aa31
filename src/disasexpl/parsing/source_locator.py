"""
Source Locator: tracks which (file, line) of the original source the
instructions being scanned came from.

Toolchains disagree on how to say this, so several encodings are
understood, first match wins:

  * `.loc FILE LINE` with files numbered by `.file N "dir" ["name"]`
  * `.d2line LINE` (line only)
  * stabs `.stabn 68,0,LINE,...`; kinds 100 and 132 end a function
  * cc65 `.dbg line, "file", LINE` and its bare `.dbg line` terminator
"""
from typing import Dict, List, Optional

from .asm_types import SourceLocation
from .patterns import (
    DEFAULT_DIALECT,
    Dialect,
    RE_FILE,
    RE_SOURCE_6502_DBG,
    RE_SOURCE_6502_DBG_END,
    RE_SOURCE_D2_TAG,
    RE_SOURCE_STAB,
    RE_SOURCE_TAG,
    is_synthetic_path,
)

# cf http://www.math.utah.edu/docs/info/stabs_11.html#SEC48
STAB_SLINE = 68
STAB_SO = 100
STAB_FUN = 132


def parse_files(lines: List[str]) -> Dict[int, str]:
    """Build the `.file` table for the whole document."""
    files: Dict[int, str] = {}
    for line in lines:
        match = RE_FILE.match(line)
        if not match:
            continue
        file_id = int(match.group(1))
        if match.group(4):
            # Clang style: .file N "dir" "name"
            files[file_id] = match.group(2) + "/" + match.group(4)
        else:
            files[file_id] = match.group(2)
    return files


def _location(path: Optional[str], line: int) -> Optional[SourceLocation]:
    # line 0 marks compiler-generated code with no source position
    if line < 1:
        return None
    if path is not None and is_synthetic_path(path):
        path = None
    return SourceLocation(path, line)


class SourceLocator:
    def __init__(self, files: Dict[int, str]):
        self.files = files
        self.current: Optional[SourceLocation] = None
        # Last live label definition; data right after it is worth keeping
        self.previous_label: Optional[str] = None

    @classmethod
    def for_lines(cls, lines: List[str]) -> "SourceLocator":
        return cls(parse_files(lines))

    def reset(self):
        self.current = None
        self.previous_label = None

    def update(self, line: str, dialect: Dialect = DEFAULT_DIALECT):
        """Feed the next physical line, in document order."""
        if not self._handle_source(line):
            if not self._handle_stabs(line):
                self._handle_6502(line)

        if dialect.closes_block(line):
            self.reset()

    def _handle_source(self, line: str) -> bool:
        match = RE_SOURCE_TAG.match(line)
        if match:
            path = self.files.get(int(match.group(1)))
            if path:
                self.current = _location(path, int(match.group(2)))
            else:
                self.current = None
            return True

        match = RE_SOURCE_D2_TAG.match(line)
        if match:
            self.current = _location(None, int(match.group(1)))
            return True
        return False

    def _handle_stabs(self, line: str) -> bool:
        match = RE_SOURCE_STAB.match(line)
        if not match:
            return False
        kind = int(match.group(1))
        if kind == STAB_SLINE:
            self.current = _location(None, int(match.group(2)))
        elif kind in (STAB_SO, STAB_FUN):
            self.reset()
        return True

    def _handle_6502(self, line: str) -> bool:
        match = RE_SOURCE_6502_DBG.match(line)
        if match:
            self.current = _location(match.group(1), int(match.group(2)))
            return True
        if RE_SOURCE_6502_DBG_END.match(line):
            self.current = None
            return True
        return False
