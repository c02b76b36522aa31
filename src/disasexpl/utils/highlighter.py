import re
from typing import Dict, List, Optional

from rich.text import Text

from ..parsing.asm_types import BINARY_LINE, OutputLine, render_line

REGISTERS = re.compile(
    r"%?\b("
    r"r[abcd]x|r[sd]i|r[bs]p|r(?:8|9|1[0-5])[dwb]?"
    r"|e[abcd]x|e[sd]i|e[bs]p"
    r"|[abcd][hl]|[abcd]x|[sd]il?|[bs]pl?"
    r"|[xyz]mm[0-9]+"
    r"|[wx](?:[12]?[0-9]|3[01])|sp|lr|pc"
    r")\b",
    re.IGNORECASE,
)

SIZE_KEYWORDS = re.compile(
    r"\b(DWORD|QWORD|WORD|BYTE|PTR|OFFSET|FLAT)\b",
)

NUMBERS = re.compile(
    r"[#$]?\b(0x[0-9a-fA-F]+|0b[01]+|[0-9]+)\b",
)

LABEL_DEF = re.compile(r"^(\s*[$.@\w]+\s*:)")
DIRECTIVE = re.compile(r"^\s*(\.[\w.]+)")
MNEMONIC = re.compile(r"^\s*([A-Za-z][\w.]*)")
COMMENT = re.compile(r"\s(;|#\s|//).*$|^\s*(#|;|//).*$")
ADDRESS_PREFIX = re.compile(r"^<[0-9a-f]{8}> ")


def highlight_asm_line(line: str, label_names: Optional[Dict[str, int]] = None, bg: str = "") -> Text:
    """
    Syntax-highlight one rendered listing line.

      - Label definitions -> YELLOW / bold
      - Directives -> GREEN
      - Mnemonics -> BLUE
      - Size keywords (DWORD, PTR, etc.) -> MAGENTA
      - Numeric literals -> CYAN
      - Registers -> RED / bold
      - Known labels used as operands -> YELLOW / underline
      - Comments -> DIM / GREY
      - Binary address prefix -> DIM
    """
    token_styles: List[Optional[str]] = [None] * len(line)

    def paint(start: int, end: int, style: str):
        for j in range(start, end):
            token_styles[j] = style

    body_start = 0
    prefix = ADDRESS_PREFIX.match(line)
    if prefix:
        paint(0, prefix.end(), "dim")
        body_start = prefix.end()
    body = line[body_start:]

    label_match = LABEL_DEF.match(body)
    if label_match:
        paint(body_start, body_start + label_match.end(), "bold yellow")
    else:
        directive = DIRECTIVE.match(body)
        mnemonic = MNEMONIC.match(body)
        if directive:
            paint(body_start + directive.start(1), body_start + directive.end(1), "green")
        elif mnemonic:
            paint(body_start + mnemonic.start(1), body_start + mnemonic.end(1), "blue")

    for pattern, style in ((SIZE_KEYWORDS, "magenta"), (NUMBERS, "cyan"), (REGISTERS, "bold red")):
        for m in pattern.finditer(body):
            paint(body_start + m.start(), body_start + m.end(), style)

    if label_names:
        for m in re.finditer(r"[$.@A-Z_a-z][\w$.@]*", body):
            if m.group(0) in label_names and not (label_match and m.start() < label_match.end()):
                paint(body_start + m.start(), body_start + m.end(), "underline yellow")

    comment = COMMENT.search(body)
    if comment:
        paint(body_start + comment.start(), len(line), "dim grey")

    # Emit characters, grouping consecutive runs of the same style
    segment = Text()
    i = 0
    while i < len(line):
        cur_style = token_styles[i]
        j = i
        while j < len(line) and token_styles[j] == cur_style:
            j += 1
        full_style = f"{cur_style} {bg}" if cur_style else bg
        segment.append(line[i:j], style=full_style.strip())
        i = j
    return segment


def highlight_listing(lines: List[OutputLine], label_names: Optional[Dict[str, int]] = None) -> Text:
    """Highlight a whole parsed listing into one Rich Text renderable."""
    result = Text()
    for i, line in enumerate(lines):
        rendered = render_line(line).rstrip("\n")
        result.append_text(highlight_asm_line(rendered, label_names))
        if line.kind == BINARY_LINE and line.opcode_bytes:
            result.append(f"    ; {line.opcode_bytes}", style="dim")
        if i < len(lines) - 1:
            result.append("\n")
    return result
