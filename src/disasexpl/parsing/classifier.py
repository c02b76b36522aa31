"""
Line Classifier: decides what a single physical line of assembly is and
pulls out the fields the later stages need.
"""
from enum import Enum
from typing import NamedTuple, Optional

from .patterns import (
    DEFAULT_DIALECT,
    Dialect,
    RE_ASSIGNMENT_DEF,
    RE_CUDA_BEGIN_DEF,
    RE_DATA_DEFN,
    RE_DEFINES_FUNCTION,
    RE_DEFINES_GLOBAL,
    RE_DEFINES_WEAK,
    RE_DIRECTIVE,
    RE_INDENTED_LABEL_DEF,
    RE_INST_OPCODE,
    RE_LABEL_DEF,
)


class LineKind(str, Enum):
    BLANK = "blank"
    LABEL = "label"            # foo:  (possibly followed by more text)
    ASSIGNMENT = "assignment"  # foo = expr
    CUDA_BEGIN = "cuda_begin"  # .entry foo(
    DATA = "data"              # .quad, .string, ...
    DIRECTIVE = "directive"
    INSTRUCTION = "instruction"
    OTHER = "other"


class LineInfo(NamedTuple):
    kind: LineKind
    text: str                  # the line after any label re-indentation
    label: Optional[str]       # name defined by this line, if any
    definition: Optional[str]  # the matched definition text
    body: str                  # what follows a leading label definition
    has_opcode: bool

    @property
    def is_definition(self) -> bool:
        return self.label is not None


def fix_label_indentation(line: str) -> str:
    """Inline asm blocks may be re-indented arbitrarily; labels in them are unindented."""
    if RE_INDENTED_LABEL_DEF.match(line):
        return line.lstrip()
    return line


def exported_name(line: str) -> Optional[str]:
    """Name exported by `.globl`/`.weak` or opened by a CUDA `.entry`/`.func`."""
    match = RE_DEFINES_GLOBAL.match(line) or RE_DEFINES_WEAK.match(line)
    if match:
        return match.group(1)
    match = RE_CUDA_BEGIN_DEF.search(line)
    if match:
        return match.group(2)
    return None


def defines_function(line: str) -> bool:
    return bool(RE_DEFINES_FUNCTION.match(line))


def inside_cuda_body(info: LineInfo, inside: bool) -> bool:
    """Whether the lines after this one belong to a CUDA `.entry`/`.func` definition."""
    if info.kind == LineKind.CUDA_BEGIN:
        return True
    if inside and "}" in info.text:
        return False
    return inside


def classify(line: str, dialect: Dialect = DEFAULT_DIALECT, in_custom_block: bool = False) -> LineInfo:
    if in_custom_block:
        line = fix_label_indentation(line)

    if not line.strip():
        return LineInfo(LineKind.BLANK, line, None, None, "", False)

    has_opcode = dialect.has_opcode(line)

    match = RE_LABEL_DEF.match(line)
    if match:
        return LineInfo(LineKind.LABEL, line, match.group(1), match.group(0),
                        line[match.end():], has_opcode)

    match = RE_ASSIGNMENT_DEF.match(line)
    if match:
        return LineInfo(LineKind.ASSIGNMENT, line, match.group(1), match.group(0), line, has_opcode)

    match = RE_CUDA_BEGIN_DEF.search(line)
    if match:
        return LineInfo(LineKind.CUDA_BEGIN, line, match.group(2), match.group(0), line, has_opcode)

    if RE_DATA_DEFN.match(line):
        kind = LineKind.DATA
    elif RE_DIRECTIVE.match(line):
        kind = LineKind.INSTRUCTION if RE_INST_OPCODE.search(line) else LineKind.DIRECTIVE
    elif has_opcode:
        kind = LineKind.INSTRUCTION
    else:
        kind = LineKind.OTHER
    return LineInfo(kind, line, None, None, line, has_opcode)
