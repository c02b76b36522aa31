"""
Result Assembler: runs the label pre-pass, then a single forward scan
that decides, line by line, what gets emitted.
"""
import re
from typing import List, Optional, Pattern

from .asm_types import FilterConfig, OutputLine, ParseResult, TextLine
from .binary import BinaryListingParser
from .classifier import LineKind, classify, inside_cuda_body
from .formatter import LineFilter, extract_label_references, format_line, strip_block_comments
from .labels import find_used_labels, remove_undefined_references
from .patterns import DEFAULT_DIALECT, NVCC_DIALECT, custom_block_depth
from .source_locator import SourceLocator


class AsmParser:
    """
    Parses compiler/assembler output, or objdump output in binary mode.

    Holds nothing but the compiled hide-function pattern, so one instance
    can serve any number of independent `process` calls.
    """

    def __init__(self, hide_function_pattern: Optional[str] = None):
        self.binary_hide_func_re: Optional[Pattern] = (
            re.compile(hide_function_pattern) if hide_function_pattern else None
        )

    def process(self, asm: str, config: Optional[FilterConfig] = None) -> ParseResult:
        config = config or FilterConfig()
        if config.binary:
            hide_re = self.binary_hide_func_re
            if config.hide_function_pattern:
                hide_re = re.compile(config.hide_function_pattern)
            return BinaryListingParser(hide_re).parse(asm, config)
        return self._process_asm(asm, config)

    def _process_asm(self, asm: str, config: FilterConfig) -> ParseResult:
        if config.comment_only_stripped:
            asm = strip_block_comments(asm)

        asm_lines = asm.splitlines()
        live_labels = find_used_labels(asm_lines, config.directives_stripped)
        locator = SourceLocator.for_lines(asm_lines)
        line_filter = LineFilter(config, live_labels)

        result = ParseResult()
        out: List[OutputLine] = result.lines
        dialect = DEFAULT_DIALECT
        depth = 0
        in_cuda = False

        for line in asm_lines:
            if not line.strip():
                if out and out[-1].text != "":
                    out.append(TextLine(""))
                continue

            depth = custom_block_depth(line, depth)
            locator.update(line, dialect)

            if line_filter.drops_comment(line, dialect):
                continue

            info = classify(line, dialect, in_custom_block=depth > 0 or in_cuda)
            if info.kind == LineKind.CUDA_BEGIN:
                dialect = NVCC_DIALECT
            in_cuda = inside_cuda_body(info, in_cuda)

            if info.is_definition:
                if info.label not in live_labels:
                    if line_filter.drops_label(info):
                        continue
                else:
                    locator.previous_label = info.definition
                    result.label_definitions[info.label] = len(out) + 1

            if line_filter.drops_directive(info, locator.previous_label):
                continue

            expanded = info.text.expandtabs()
            text = format_line(expanded, config)
            refs = [] if info.is_definition else extract_label_references(text)
            source = locator.current if dialect.has_opcode(expanded) else None
            out.append(TextLine(text, source, refs))

        result.lines = remove_undefined_references(out, result.label_definitions)
        return result
