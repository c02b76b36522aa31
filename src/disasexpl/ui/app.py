from textual.app import App, ComposeResult
from textual.widgets import Footer, Static, TextArea
from textual.containers import VerticalScroll, Horizontal, Vertical
from textual.binding import Binding
from textual.message import Message
from rich.text import Text
from ..engine import DisassemblyEngine
from ..parsing.asm_types import BINARY_LINE, render_line
from ..utils.state import DisassemblyState
from ..utils.highlighter import highlight_asm_line
from .source_view import SourceView

# User Palette
C_BG = "#1e1e1e"
C_TEXT = "#d4d4d4"
C_ACCENT1 = "#45d3ee" # Cyan
C_ACCENT2 = "#264f78" # Selection Blue
C_ACCENT3 = "#5a1e1e" # Linked Red
C_ACCENT4 = "#fecd91" # Orange

class AsmLine(Static): pass
class AsmScroll(VerticalScroll): BINDINGS = []

class DisassemblyApp(App):
    """Source and listing side by side, correlated through debug info."""

    CSS = f"""
    Screen {{
        background: {C_BG};
        color: {C_TEXT};
    }}

    #main-layout {{ height: 1fr; width: 100%; }}

    #source-container {{
        width: 1fr;
        border: solid {C_ACCENT2};
        margin: 0 1;
    }}

    #asm-container {{
        width: 1fr;
        border: solid {C_ACCENT2};
        margin: 0 1;
    }}

    #error-view {{ color: #f48771; display: none; margin: 1 2; }}

    AsmLine {{ width: 100%; height: 1; }}
    AsmLine.linked {{ background: {C_ACCENT3}; }}
    AsmLine.cursor {{ background: {C_ACCENT2}; }}

    Footer {{ background: {C_TEXT}; color: {C_BG}; }}
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("r", "refresh", "Reload", show=True),
        Binding("g", "goto_label", "Go to label", show=True),
        Binding("up", "cursor_up", "Up", show=False, priority=True),
        Binding("down", "cursor_down", "Down", show=False, priority=True),
        Binding("k", "cursor_up", show=False, priority=True),
        Binding("j", "cursor_down", show=False, priority=True),
    ]

    class StateUpdated(Message):
        def __init__(self, state: DisassemblyState) -> None:
            super().__init__()
            self.state = state

    def __init__(self, engine: DisassemblyEngine, watch: bool = True):
        super().__init__()
        self.engine = engine
        self.engine.on_update_callback = lambda state: self.post_message(self.StateUpdated(state))
        self._watch_listing = watch
        self._cursor = 0
        self._state: DisassemblyState = engine.state
        self._linked_lines: set[int] = set()  # asm indices sharing the cursor's source line

    def compose(self) -> ComposeResult:
        with Vertical(id="main-layout"):
            yield TextArea(id="error-view", read_only=True)
            with Horizontal():
                with VerticalScroll(id="source-container"):
                    yield SourceView()
                yield AsmScroll(id="asm-container")
        yield Footer()

    def on_mount(self) -> None:
        self.engine.start(watch=self._watch_listing)

    def _render_line(self, idx: int) -> Text:
        lines = self._state.asm_lines
        if idx >= len(lines): return Text("")
        line = lines[idx]
        row = Text()
        if idx == self._cursor:
            row.append("▶ ", style=f"bold {C_ACCENT4}")
        elif idx in self._linked_lines:
            row.append("│ ", style=f"bold {C_ACCENT1}")
        else:
            row.append("  ")
        row.append_text(highlight_asm_line(render_line(line).rstrip("\n"), self._state.label_definitions))
        if line.kind == BINARY_LINE and line.opcode_bytes:
            row.append(f"    ; {line.opcode_bytes}", style="dim")
        return row

    def _populate_asm_lines(self) -> None:
        scroll = self.query_one("#asm-container", AsmScroll)
        scroll.query(AsmLine).remove()
        self._generation = getattr(self, "_generation", 0) + 1
        widgets = []
        for i in range(len(self._state.asm_lines)):
            widget = AsmLine(self._render_line(i), id=f"asm-line-{self._generation}-{i}")
            if i in self._linked_lines: widget.add_class("linked")
            if i == self._cursor: widget.add_class("cursor")
            widgets.append(widget)
        if widgets: scroll.mount(*widgets)

    def _compute_linked(self) -> set[int]:
        """All asm line indices generated by the same source line as the cursor."""
        src = self._state.asm_mapping.get(self._cursor)
        if src is None:
            return set()
        return {idx for idx in self._state.asm_lines_for_source(src) if idx != self._cursor}

    def _move_cursor(self, new: int) -> None:
        if new < 0 or new >= len(self._state.asm_lines): return
        old, self._cursor = self._cursor, new
        gen = getattr(self, "_generation", 0)

        old_linked = self._linked_lines
        self._linked_lines = self._compute_linked()
        dirty = {old} | old_linked | {new} | self._linked_lines

        for idx in dirty:
            matches = self.query(f"#asm-line-{gen}-{idx}")
            if not matches: continue
            w = matches.first(AsmLine)
            w.set_class(idx == new, "cursor")
            w.set_class(idx in self._linked_lines, "linked")
            w.update(self._render_line(idx))
            if idx == new:
                w.scroll_visible()

        self._sync_source()

    def action_cursor_up(self) -> None: self._move_cursor(self._cursor - 1)
    def action_cursor_down(self) -> None: self._move_cursor(self._cursor + 1)

    def action_refresh(self) -> None:
        self.engine.refresh()

    def action_goto_label(self) -> None:
        """Jump to the definition of the first label the cursor line refers to."""
        if not 0 <= self._cursor < len(self._state.asm_lines): return
        for ref in self._state.asm_lines[self._cursor].label_references:
            target = self._state.definition_of(ref.name)
            if target is not None:
                self._move_cursor(target)
                return

    def on_disassembly_app_state_updated(self, message: StateUpdated) -> None:
        state = message.state
        self._state = state
        error_view = self.query_one("#error-view", TextArea)
        if state.has_errors:
            error_view.display = True
            error_view.text = state.error
        else:
            error_view.display = False
        self._cursor = min(self._cursor, max(len(state.asm_lines) - 1, 0))
        self._linked_lines = self._compute_linked()
        self.query_one(SourceView).set_source(state.source_lines)
        self._populate_asm_lines()
        self._sync_source()

    def _sync_source(self) -> None:
        line_num = self._state.asm_mapping.get(self._cursor)
        self.query_one(SourceView).highlight(line_num)

    def on_unmount(self) -> None:
        if self._watch_listing: self.engine.stop()

def run_tui(engine: DisassemblyEngine, watch: bool = True):
    app = DisassemblyApp(engine, watch=watch)
    app.run()
