"""Tests for the BoundaryResolver component."""

from quoteless.pipeline.resolver import BoundaryResolver


def _lines(markers: str) -> list[str]:
    """Helper to build placeholder lines for a marker string."""
    return [f"line {i}" for i in range(len(markers))]


class TestDemotion:
    """Untrusted quotation marker tests."""

    def test_markers_without_splitter_are_demoted(self) -> None:
        """Two quote lines without a splitter are not a quotation."""
        resolution = BoundaryResolver().resolve(_lines("tmm"), "tmm")

        assert resolution.was_cut is False
        assert resolution.first_cut == -1
        assert resolution.last_cut == -1

    def test_alternating_markers_are_demoted(self) -> None:
        """Quote lines split by empty lines, fewer than three, are demoted."""
        resolution = BoundaryResolver().resolve(_lines("memt"), "memt")

        assert resolution.was_cut is False

    def test_three_quote_lines_are_kept(self) -> None:
        """A run of three quote lines is trusted without a splitter."""
        resolution = BoundaryResolver().resolve(_lines("tmmm"), "tmmm")

        assert resolution.was_cut is True
        assert resolution.first_cut == 1
        assert resolution.last_cut == 3
        assert resolution.lines == ("line 0",)


class TestForwarded:
    """Forwarded message tests."""

    def test_forward_after_text(self) -> None:
        """A forward header after text keeps the message whole."""
        resolution = BoundaryResolver().resolve(_lines("tefsst"), "tefsst")

        assert resolution.is_forwarded is True
        assert resolution.was_cut is False
        assert resolution.rule == "forwarded"
        assert len(resolution.lines) == 6

    def test_forward_after_quotation_is_cut(self) -> None:
        """A forward header after a quotation does not make a forward."""
        resolution = BoundaryResolver().resolve(_lines("tsmf"), "tsmf")

        assert resolution.is_forwarded is False


class TestInlineReply:
    """Inline reply tests."""

    def test_text_between_quotes(self) -> None:
        """Text sandwiched between quote blocks is an inline reply."""
        resolution = BoundaryResolver().resolve(_lines("smtmt"), "smtmt")

        assert resolution.was_cut is False
        assert resolution.rule == "inline_reply"

    def test_wrapped_link_is_not_inline_reply(self) -> None:
        """A link broken across lines explains the text line."""
        lines = [
            "Reply",
            "On Tue, Apr 4, 2012 at 3:59 PM, Bob <bob@example.com> wrote:",
            "> see [http://example.com/a",
            "long/path]",
            "> end",
        ]

        resolution = BoundaryResolver().resolve(lines, "tsmtm")

        assert resolution.was_cut is True
        assert resolution.rule == "quotation"
        assert resolution.lines == ("Reply",)

    def test_link_opening_the_text_line(self) -> None:
        """A text line starting with a wrapped link is not an inline reply."""
        lines = ["Reply", "On Tue, Apr 4, 2012 at 3:59 PM, Bob wrote:", "> see", "  <http://example.com>", "> end"]

        resolution = BoundaryResolver().resolve(lines, "tsmtm")

        assert resolution.was_cut is True


class TestCuts:
    """Quotation cut tests."""

    def test_trailing_splitter(self) -> None:
        """Everything from a splitter followed by text is cut."""
        resolution = BoundaryResolver().resolve(_lines("teset"), "teset")

        assert resolution.was_cut is True
        assert resolution.rule == "trailing_splitter"
        assert resolution.first_cut == 2
        assert resolution.last_cut == 4
        assert resolution.splitter_lines == (2,)

    def test_splitter_quotation(self) -> None:
        """A splitter followed by quote lines is cut."""
        resolution = BoundaryResolver().resolve(_lines("tesemmmm"), "tesemmmm")

        assert resolution.rule == "quotation"
        assert resolution.first_cut == 2
        assert resolution.last_cut == 7
        assert resolution.lines == ("line 0", "line 1")

    def test_text_after_quotation_is_kept(self) -> None:
        """Text after the quotation (e.g. a signature) survives."""
        resolution = BoundaryResolver().resolve(_lines("tsmmet"), "tsmmet")

        # Empty lines closing the quotation go with it
        assert resolution.first_cut == 1
        assert resolution.last_cut == 4
        assert resolution.lines == ("line 0", "line 5")

    def test_empty_quotation(self) -> None:
        """A splitter followed only by empty lines is cut."""
        resolution = BoundaryResolver().resolve(_lines("tesee"), "tesee")

        assert resolution.rule == "empty_quotation"
        assert resolution.first_cut == 2
        assert resolution.lines == ("line 0", "line 1")

    def test_multi_line_splitter_indices(self) -> None:
        """Every splitter line inside the cut is reported."""
        resolution = BoundaryResolver().resolve(_lines("tssemm"), "tssemm")

        assert resolution.splitter_lines == (1, 2)

    def test_nothing_to_cut(self) -> None:
        """Plain text is left alone."""
        resolution = BoundaryResolver().resolve(_lines("tet"), "tet")

        assert resolution.was_cut is False
        assert resolution.rule is None
        assert resolution.splitter_lines == ()
