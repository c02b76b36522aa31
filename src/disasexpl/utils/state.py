from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..parsing.asm_types import OutputLine, ParseResult, render_line
from ..parsing.mapper import build_asm_map, build_source_map


@dataclass
class DisassemblyState:
    """
    The single source of truth for the viewer's data.
    """
    source_path: str = ""
    source_lines: List[str] = field(default_factory=list)
    listing_path: str = ""

    # Parsed listing
    asm_lines: List[OutputLine] = field(default_factory=list)
    label_definitions: Dict[str, int] = field(default_factory=dict)
    asm_mapping: Dict[int, int] = field(default_factory=dict)         # asm idx -> source line
    source_mapping: Dict[int, List[int]] = field(default_factory=dict)  # source line -> asm idxs

    error: str = ""
    last_update: float = 0.0

    @property
    def has_errors(self) -> bool:
        return bool(self.error)

    @property
    def asm_text(self) -> List[str]:
        return [render_line(line).rstrip("\n") for line in self.asm_lines]

    def update_asm(self, result: ParseResult):
        self.asm_lines = result.lines
        self.label_definitions = result.label_definitions
        self.asm_mapping = build_asm_map(result)
        self.source_mapping = build_source_map(result)

    def get_source_line_for_asm(self, asm_idx: int) -> Optional[str]:
        line_num = self.asm_mapping.get(asm_idx)
        if line_num and 0 < line_num <= len(self.source_lines):
            return self.source_lines[line_num - 1]
        return None

    def asm_lines_for_source(self, line_num: int) -> List[int]:
        """All listing lines generated from a 1-based source line."""
        return self.source_mapping.get(line_num, [])

    def definition_of(self, label: str) -> Optional[int]:
        """0-based listing index where a label is defined."""
        idx = self.label_definitions.get(label)
        return idx - 1 if idx else None
