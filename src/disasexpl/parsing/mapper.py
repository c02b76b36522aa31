from typing import Dict, List

from .asm_types import ParseResult, render_line


def render_lines(result: ParseResult) -> str:
    """Render every line of a parse back to display text."""
    return "".join(render_line(line) for line in result.lines)


def build_source_map(result: ParseResult) -> Dict[int, List[int]]:
    """
    Group emitted line indices by the source line they came from.
    Returns: { source_line (1-based): [asm_line_idx (0-based), ...] }
    """
    mapping: Dict[int, List[int]] = {}
    for idx, line in enumerate(result.lines):
        if line.source is None:
            continue
        mapping.setdefault(line.source.line, []).append(idx)
    return mapping


def build_asm_map(result: ParseResult) -> Dict[int, int]:
    """
    The reverse direction: { asm_line_idx (0-based): source_line (1-based) }
    """
    return {
        idx: line.source.line
        for idx, line in enumerate(result.lines)
        if line.source is not None
    }
