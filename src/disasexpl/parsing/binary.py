"""
Binary Listing Parser for `objdump -d -l` style output:

    0000000000401000 <main>:
    /home/user/main.c:3
      401000:	55                   	push   %rbp
      401001:	e8 fa ff ff ff       	call   401000 <main>
"""
from typing import List, Optional, Pattern

from .asm_types import BinaryLine, FilterConfig, LabelReference, OutputLine, ParseResult, SourceLocation, TextLine
from .formatter import squash_horizontal_whitespace
from .labels import remove_undefined_references
from .patterns import RE_BINARY_DEST, RE_BINARY_FUNCTION, RE_BINARY_OPCODE, RE_BINARY_SOURCE


def destination_reference(text: str) -> List[LabelReference]:
    """The `<name>` a call or jump points at, if any."""
    match = RE_BINARY_DEST.search(text)
    if not match:
        return []
    start = match.start(2) + 1
    return [LabelReference(match.group(2), start, start + len(match.group(2)))]


class BinaryListingParser:
    def __init__(self, hide_func_re: Optional[Pattern] = None):
        self.hide_func_re = hide_func_re

    def is_user_function(self, func: str) -> bool:
        if self.hide_func_re is None:
            return True
        return not self.hide_func_re.search(func)

    def parse(self, text: str, config: FilterConfig) -> ParseResult:
        result = ParseResult()
        lines = text.splitlines()

        # Error documents are a single "<...>" line; pass them through.
        if len(lines) == 1 and lines[0].startswith("<"):
            result.lines.append(TextLine(lines[0]))
            return result

        out: List[OutputLine] = result.lines
        source: Optional[SourceLocation] = None
        func: Optional[str] = None

        for line in lines:
            match = RE_BINARY_SOURCE.match(line)
            if match:
                source = SourceLocation(match.group(1), int(match.group(2)))
                continue

            match = RE_BINARY_FUNCTION.match(line)
            if match:
                func = match.group(2)
                source = None
                if self.is_user_function(func):
                    out.append(TextLine(func + ":"))
                    result.label_definitions[func] = len(out)
                continue

            if func is None or not self.is_user_function(func):
                continue

            match = RE_BINARY_OPCODE.match(line)
            if match:
                address = int(match.group(1), 16)
                opcodes = " ".join(match.group(2).split())
                disassembly = match.group(4)
                if config.trim:
                    disassembly = squash_horizontal_whitespace(disassembly, config.indent_mode)
                disassembly = " " + disassembly
                out.append(BinaryLine(disassembly, address, opcodes, source, destination_reference(disassembly)))

        result.lines = remove_undefined_references(out, result.label_definitions)
        return result
