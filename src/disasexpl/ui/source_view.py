"""
Source View Widget
==================
Left-hand pane showing the source file, with the line that produced the
listing line under the cursor highlighted.
"""

from __future__ import annotations

from typing import List, Optional

from rich.text import Text
from textual.widgets import Static


class SourceView(Static):
    """
    Renders the whole source file with a line-number gutter.
    ID: #source-view
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(id="source-view", **kwargs)
        self._source_lines: List[str] = []
        self._highlighted: Optional[int] = None

    @property
    def highlighted_line(self) -> Optional[int]:
        return self._highlighted

    def set_source(self, source_lines: List[str]) -> None:
        self._source_lines = source_lines
        self._render_source()

    def highlight(self, line_num: Optional[int]) -> None:
        """Highlight a 1-based source line, or clear with None."""
        if line_num is not None and not 0 < line_num <= len(self._source_lines):
            line_num = None
        if line_num == self._highlighted:
            return
        self._highlighted = line_num
        self._render_source()

    def _render_source(self) -> None:
        if not self._source_lines:
            t = Text()
            t.append("SOURCE ", style="bold cyan")
            t.append("│ ", style="dim")
            t.append("(no source file)", style="dim italic")
            self.update(t)
            return

        width = len(str(len(self._source_lines)))
        body = Text()
        for i, code in enumerate(self._source_lines, start=1):
            if i == self._highlighted:
                body.append(f"► {i:>{width}} │ ", style="bold yellow")
                body.append(code, style="bold white on #5a1e1e")
            else:
                body.append(f"  {i:>{width}} │ ", style="dim")
                body.append(code)
            if i < len(self._source_lines):
                body.append("\n")
        self.update(body)
