"""
Data model shared by the text-mode and binary-mode parsers.

Output lines form a tagged union: every line carries a ``kind`` tag
("text" or "binary") and consumers branch on it instead of relying on
an overridden render method.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

TEXT_LINE = "text"
BINARY_LINE = "binary"


class IndentMode(str, Enum):
    """How leading indentation survives whitespace squashing."""
    MARKER = "marker"  # collapse to a fixed two-space indent
    DELETE = "delete"  # drop it entirely


@dataclass(frozen=True)
class FilterConfig:
    trim: bool = True
    binary: bool = False
    comment_only_stripped: bool = False
    directives_stripped: bool = True
    dead_labels_stripped: bool = True
    indent_mode: IndentMode = IndentMode.MARKER
    # Binary mode only: functions whose name matches are hidden entirely
    hide_function_pattern: Optional[str] = None


@dataclass(frozen=True)
class SourceLocation:
    file: Optional[str]
    line: int


@dataclass(frozen=True)
class LabelReference:
    name: str
    start_column: int  # 1-based
    end_column: int    # exclusive


@dataclass(frozen=True)
class TextLine:
    text: str
    source: Optional[SourceLocation] = None
    label_references: List[LabelReference] = field(default_factory=list)
    kind: str = field(default=TEXT_LINE, init=False)


@dataclass(frozen=True)
class BinaryLine:
    text: str
    address: int
    opcode_bytes: str
    source: Optional[SourceLocation] = None
    label_references: List[LabelReference] = field(default_factory=list)
    kind: str = field(default=BINARY_LINE, init=False)


OutputLine = Union[TextLine, BinaryLine]


@dataclass
class ParseResult:
    lines: List[OutputLine] = field(default_factory=list)
    # label name -> 1-based index of the defining line in ``lines``
    label_definitions: Dict[str, int] = field(default_factory=dict)


def render_line(line: OutputLine) -> str:
    """Render a single output line, newline included."""
    if line.kind == BINARY_LINE:
        address = format(line.address, "08x")[-8:]
        return f"<{address}> {line.text}\n"
    return line.text + "\n"


def failure_line(message: str) -> TextLine:
    """The synthetic line used when the raw text could not be loaded at all."""
    return TextLine(message)
