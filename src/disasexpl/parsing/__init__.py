from typing import Optional

from .asm_types import (
    BinaryLine,
    FilterConfig,
    IndentMode,
    LabelReference,
    OutputLine,
    ParseResult,
    SourceLocation,
    TextLine,
    failure_line,
    render_line,
)
from .mapper import build_asm_map, build_source_map, render_lines
from .parser import AsmParser


def process_assembly(raw_asm: str, config: Optional[FilterConfig] = None) -> ParseResult:
    """
    Pipeline: Raw listing -> live labels -> filtered, annotated lines
    """
    return AsmParser().process(raw_asm, config)
