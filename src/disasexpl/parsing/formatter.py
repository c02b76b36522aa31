"""
Line Filter & Formatter: the user-configurable policy deciding which
lines survive, and how surviving lines are rendered.
"""
from typing import List, Optional, Set

from .asm_types import FilterConfig, IndentMode, LabelReference
from .classifier import LineInfo, LineKind
from .patterns import (
    Dialect,
    RE_BLOCK_COMMENTS,
    RE_CUDA_END_DEF,
    RE_IDENTIFIER,
    RE_INSTRUCTION,
    strip_comment,
)

INDENT_MARKER = "  "


def strip_block_comments(text: str) -> str:
    """Remove `/* ... */` comments that occupy whole lines."""
    return RE_BLOCK_COMMENTS.sub("", text)


def squash_horizontal_whitespace(line: str, indent_mode: IndentMode = IndentMode.MARKER) -> str:
    words = line.split()
    if not words:
        return ""
    text = " ".join(words)
    if line[0].isspace() and indent_mode == IndentMode.MARKER:
        return INDENT_MARKER + text
    return text


def format_line(line: str, config: FilterConfig) -> str:
    line = line.expandtabs()
    if not config.trim:
        return line
    return squash_horizontal_whitespace(line, config.indent_mode)


def extract_label_references(text: str) -> List[LabelReference]:
    """Label-like identifiers in the operand field, with 1-based column spans."""
    instruction = strip_comment(text)
    params = RE_INSTRUCTION.sub("", instruction, count=1)
    first_col = len(instruction) - len(params) + 1
    refs = []
    for match in RE_IDENTIFIER.finditer(params):
        start = first_col + match.start()
        refs.append(LabelReference(match.group(0), start, start + len(match.group(0))))
    return refs


class LineFilter:
    def __init__(self, config: FilterConfig, live_labels: Set[str]):
        self.config = config
        self.live_labels = live_labels
        self.in_nvcc_definition = False

    def drops_comment(self, line: str, dialect: Dialect) -> bool:
        return self.config.comment_only_stripped and dialect.is_comment_only(line)

    def drops_label(self, info: LineInfo) -> bool:
        return info.label not in self.live_labels and self.config.dead_labels_stripped

    def drops_directive(self, info: LineInfo, previous_label: Optional[str]) -> bool:
        """
        Directives are only examined on non-definition lines; a label would
        otherwise look like a directive. Data right after a live label is kept.
        """
        if info.kind == LineKind.CUDA_BEGIN:
            self.in_nvcc_definition = True
        if self.in_nvcc_definition:
            if RE_CUDA_END_DEF.match(info.text):
                self.in_nvcc_definition = False
            return False
        if info.is_definition or not self.config.directives_stripped:
            return False
        if info.kind == LineKind.DATA and previous_label:
            return False
        return info.kind in (LineKind.DATA, LineKind.DIRECTIVE)
