"""
Unit tests for parsing/formatter.py: whitespace handling, label
reference extraction and the line filter policy.
"""
import pytest
from disasexpl.parsing.asm_types import FilterConfig, IndentMode, LabelReference
from disasexpl.parsing.classifier import classify
from disasexpl.parsing.formatter import (
    INDENT_MARKER,
    LineFilter,
    extract_label_references,
    format_line,
    squash_horizontal_whitespace,
    strip_block_comments,
)
from disasexpl.parsing.patterns import DEFAULT_DIALECT


class TestSquash:
    """Horizontal whitespace normalisation."""

    def test_marker_indent(self):
        assert squash_horizontal_whitespace("\t  mov   eax,  1") == INDENT_MARKER + "mov eax, 1"

    def test_delete_indent(self):
        assert squash_horizontal_whitespace("\t  mov   eax,  1", IndentMode.DELETE) == "mov eax, 1"

    def test_unindented_line(self):
        assert squash_horizontal_whitespace("foo:   ret") == "foo: ret"

    def test_whitespace_only(self):
        assert squash_horizontal_whitespace("  \t ") == ""

    @pytest.mark.parametrize("mode", list(IndentMode))
    def test_idempotent(self, mode):
        once = squash_horizontal_whitespace("    jmp    .L3   # back", mode)
        assert squash_horizontal_whitespace(once, mode) == once


class TestFormatLine:
    """Tab expansion followed by optional trimming."""

    def test_trimmed(self):
        assert format_line("\tmov\teax, 1", FilterConfig()) == "  mov eax, 1"

    def test_untrimmed_expands_tabs(self):
        assert format_line("\tmov\teax, 1", FilterConfig(trim=False)) == "        mov     eax, 1"


class TestBlockComments:
    """Whole-line /* */ comments."""

    def test_single_line(self):
        assert strip_block_comments("/* hi */\nfoo:\n") == "foo:\n"

    def test_multi_line(self):
        assert strip_block_comments("  /* a\n * b\n */\nret\n") == "ret\n"

    def test_trailing_comment_kept(self):
        text = "mov eax, 1 /* one */\n"
        assert strip_block_comments(text) == text


class TestExtractLabelReferences:
    """Operand identifiers with 1-based columns."""

    def test_comment_ignored(self):
        assert extract_label_references("  jmp .L3 # loop") == [LabelReference(".L3", 7, 10)]

    def test_mnemonic_skipped(self):
        refs = extract_label_references("call foo")
        assert refs == [LabelReference("foo", 6, 9)]

    def test_multiple_operands(self):
        names = [r.name for r in extract_label_references("  lea rax, [rip + .LC0]")]
        assert names == ["rax", "rip", ".LC0"]

    def test_columns_address_text(self):
        text = "  mov eax, .L1"
        for ref in extract_label_references(text):
            assert text[ref.start_column - 1:ref.end_column - 1] == ref.name

    def test_no_operands(self):
        assert extract_label_references("  ret") == []


class TestLineFilter:
    """Which lines survive the configured policy."""

    def test_comment_dropped_only_when_enabled(self):
        assert not LineFilter(FilterConfig(), set()).drops_comment("# x", DEFAULT_DIALECT)
        assert LineFilter(FilterConfig(comment_only_stripped=True), set()).drops_comment("# x", DEFAULT_DIALECT)

    def test_dead_label(self):
        info = classify(".L9:")
        assert LineFilter(FilterConfig(), set()).drops_label(info)
        assert not LineFilter(FilterConfig(), {".L9"}).drops_label(info)
        assert not LineFilter(FilterConfig(dead_labels_stripped=False), set()).drops_label(info)

    def test_directive_dropped(self):
        line_filter = LineFilter(FilterConfig(), set())
        assert line_filter.drops_directive(classify("\t.p2align 4"), None)
        assert not line_filter.drops_directive(classify("\tret"), None)

    def test_directives_kept_when_disabled(self):
        line_filter = LineFilter(FilterConfig(directives_stripped=False), set())
        assert not line_filter.drops_directive(classify("\t.p2align 4"), None)

    def test_data_after_label_kept(self):
        line_filter = LineFilter(FilterConfig(), set())
        assert not line_filter.drops_directive(classify("\t.long 42"), "answer:")
        assert line_filter.drops_directive(classify("\t.long 42"), None)
        # Plain directives go even after a label
        assert line_filter.drops_directive(classify("\t.align 4"), "answer:")

    def test_definition_never_treated_as_directive(self):
        line_filter = LineFilter(FilterConfig(), set())
        assert not line_filter.drops_directive(classify(".Lfoo: .quad 1"), None)

    def test_nvcc_parameter_block_kept(self):
        line_filter = LineFilter(FilterConfig(), set())
        assert not line_filter.drops_directive(classify(".entry k("), None)
        assert not line_filter.drops_directive(classify("\t.param .u64 p"), None)
        assert not line_filter.drops_directive(classify(")"), None)
        assert line_filter.drops_directive(classify("\t.reg .b32 %r<3>;"), None)
