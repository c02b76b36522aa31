"""
Unit tests for parsing/source_locator.py: the debug-location state machine.
"""
from disasexpl.parsing.asm_types import SourceLocation
from disasexpl.parsing.patterns import NVCC_DIALECT
from disasexpl.parsing.source_locator import SourceLocator, parse_files


def _feed(lines):
    locator = SourceLocator.for_lines(lines)
    seen = []
    for line in lines:
        locator.update(line)
        seen.append(locator.current)
    return seen


class TestParseFiles:
    """The `.file` table."""

    def test_gcc_style(self):
        assert parse_files(['\t.file 1 "/src/a.c"']) == {1: "/src/a.c"}

    def test_clang_style_joins_directory(self):
        assert parse_files(['\t.file 2 "/src" "b.c" md5 0x1234']) == {2: "/src/b.c"}

    def test_unnumbered_file_ignored(self):
        assert parse_files(['\t.file\t"a.c"']) == {}


class TestLoc:
    """`.loc` and `.d2line`."""

    def test_loc_resolves_file(self):
        seen = _feed(['.file 1 "a.c"', ".loc 1 7 3", "\tnop"])
        assert seen[-1] == SourceLocation("a.c", 7)

    def test_loc_unknown_file_clears(self):
        seen = _feed([".loc 9 7", "\tnop"])
        assert seen[-1] is None

    def test_line_zero_means_no_location(self):
        seen = _feed(['.file 1 "a.c"', ".loc 1 7", ".loc 1 0"])
        assert seen == [None, SourceLocation("a.c", 7), None]

    def test_synthetic_path_drops_file(self):
        seen = _feed(['.file 1 "<stdin>"', ".loc 1 4"])
        assert seen[-1] == SourceLocation(None, 4)

    def test_d2line(self):
        seen = _feed([".d2line 12"])
        assert seen[-1] == SourceLocation(None, 12)


class TestStabs:
    """`.stabn` line records."""

    def test_sline(self):
        assert _feed([".stabn 68,0,15,.LM1-main"])[-1] == SourceLocation(None, 15)

    def test_function_end_resets(self):
        seen = _feed([".stabn 68,0,15,.LM1-main", ".stabn 132,0,0,0"])
        assert seen == [SourceLocation(None, 15), None]

    def test_other_kinds_leave_location(self):
        seen = _feed([".stabn 68,0,15,.LM1-main", ".stabn 192,0,0,.LBB2"])
        assert seen[-1] == SourceLocation(None, 15)


class TestCc65:
    """cc65 `.dbg line` records."""

    def test_dbg_line(self):
        assert _feed(['.dbg line, "game.c", 33'])[-1] == SourceLocation("game.c", 33)

    def test_bare_dbg_line_clears(self):
        seen = _feed(['.dbg line, "game.c", 33', ".dbg line"])
        assert seen[-1] is None


class TestBlockBoundaries:
    """Locations do not leak across functions or sections."""

    def test_endproc_resets(self):
        seen = _feed(['.file 1 "a.c"', ".loc 1 3", "\tret", "\t.cfi_endproc"])
        assert seen[2] == SourceLocation("a.c", 3)
        assert seen[3] is None

    def test_section_change_resets_previous_label(self):
        locator = SourceLocator({})
        locator.previous_label = "msg:"
        locator.update("\t.data")
        assert locator.previous_label is None

    def test_nvcc_closing_brace(self):
        locator = SourceLocator({1: "k.cu"})
        locator.update(".loc 1 5 1", NVCC_DIALECT)
        assert locator.current == SourceLocation("k.cu", 5)
        locator.update("}", NVCC_DIALECT)
        assert locator.current is None

    def test_brace_ignored_outside_nvcc(self):
        locator = SourceLocator({1: "a.c"})
        locator.update(".loc 1 5")
        locator.update("}")
        assert locator.current == SourceLocation("a.c", 5)
