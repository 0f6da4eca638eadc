"""Tests for the PlainTextPipeline component."""

import pytest

from quoteless import InvalidOptionError
from quoteless.pipeline.plain import (
    PlainTextPipeline,
    find_delimiter,
    postprocess,
    preprocess,
    replace_link_brackets,
    wrap_splitter_with_newline,
)


def _extract(body: str) -> str:
    """Helper to extract the reply text."""
    return PlainTextPipeline().extract(body).body


class TestSplitterReplies:
    """Replies above a splitter."""

    def test_on_date_somebody_wrote(self) -> None:
        """Standard attribution with a quoted block."""
        body = "Test reply\n\nOn 11-Apr-2011, at 6:54 PM, Roman <romant@example.com> wrote:\n\n>\n> Test\n>\n> Roman"

        result = PlainTextPipeline().extract(body)

        assert result.body == "Test reply"
        assert result.did_find_quote is True

    def test_date_with_slashes(self) -> None:
        """Attribution with a slashed date."""
        body = "Test reply\n\nOn 04/19/2011 07:10 AM, Roman Tkachenko wrote:\n\n>\n> Test.\n>\n> Roman"

        assert _extract(body) == "Test reply"

    def test_sent_instead_of_wrote(self) -> None:
        """Attribution ending with "sent"."""
        body = "Test reply\n\nOn 11-Apr-2011, at 6:54 PM, Roman <romant@example.com> sent:\n\n>\n> Test\n>\n> Roman"

        assert _extract(body) == "Test reply"

    def test_wrapped_attribution(self) -> None:
        """Attribution wrapped over two lines."""
        body = (
            "Thanks Thanmai\n"
            'On Mar 8, 2012 9:59 AM, "Example.com" <\n'
            "r+7f1b094ceb90e18cca93d53d3703feae@example.com> wrote:\n\n\n"
            ">**\n"
            ">  Blah-blah-blah"
        )

        assert _extract(body) == "Thanks Thanmai"

    def test_samsung_attribution(self) -> None:
        """Samsung mobile attribution."""
        body = "Test reply\n\nSent from Samsung MobileName <address@example.com> wrote:\n\n>\n> Test\n>\n> Roman"

        assert _extract(body) == "Test reply"

    def test_dutch_attribution_without_markers(self) -> None:
        """Quoted text without markers after a splitter is cut."""
        body = (
            "Lorem\n\n"
            "Op 13-02-2014 3:18 schreef Julius Caesar <pantheon@rome.com>:\n\n"
            "Veniam laborum mlkshk kale chips authentic.\n"
        )

        assert _extract(body) == "Lorem"

    def test_iso_date_attribution(self) -> None:
        """ISO date attribution with the address on the next line."""
        body = (
            "Test reply\n\n"
            "2014-10-17 11:28 GMT+03:00 Postmaster <\n"
            "postmaster@sandbox.mailgun.org>:\n\n"
            "> First from site\n>\n    "
        )

        assert _extract(body) == "Test reply"

    def test_crlf_delimiter_is_kept(self) -> None:
        """Surviving lines are joined with the body's own delimiter."""
        body = "Line one\r\nLine two\r\n\r\nOn 11-Apr-2011, at 6:54 PM, Bob <bob@example.com> wrote:\r\n> a\r\n> b"

        assert _extract(body) == "Line one\r\nLine two"


class TestGluedSplitters:
    """Splitters glued to the last line of the reply."""

    def test_splitter_after_text(self) -> None:
        """Splitter on the same line as the reply."""
        assert _extract("reply On Wed, Apr 4, 2012 at 3:59 PM, bob@example.com wrote:\n> Hi") == "reply"

    def test_dashed_splitter_after_text(self) -> None:
        """Dash-prefixed splitter on the same line as the reply."""
        assert _extract("reply--- On Wed, Apr 4, 2012 at 3:59 PM, me@domain.com wrote:\n> Hi") == "reply"

    def test_dashes_in_reply_text(self) -> None:
        """Dashes inside the reply are not part of the splitter."""
        body = "reply\nbla-bla - bla--- On Wed, Apr 4, 2012 at 3:59 PM, me@domain.com wrote:\n> Hi"

        assert _extract(body) == "reply\nbla-bla - bla"


class TestUncut:
    """Bodies that must come back unchanged."""

    def test_no_quotation(self) -> None:
        """Text without splitters or markers is returned as is."""
        body = "Hi Bob,\n\nSee you tomorrow.\n\nAlice\n"

        result = PlainTextPipeline().extract(body)

        assert result.body == body
        assert result.did_find_quote is False

    def test_line_starting_with_on(self) -> None:
        """A line starting with "On" is not a splitter."""
        body = "Blah-blah-blah\nOn blah-blah-blah"

        assert _extract(body) == body

    def test_empty_body(self) -> None:
        """Empty and whitespace-only bodies are returned unchanged."""
        assert PlainTextPipeline().extract("").body == ""
        assert PlainTextPipeline().extract("  \n ").body == "  \n "

    def test_forwarded_message(self) -> None:
        """A forwarded message is never cut."""
        body = (
            "FYI\n\n"
            "---------- Forwarded message ----------\n"
            "From: Bob <bob@example.com>\n"
            "Date: Fri, 23 Mar 2012 12:35:31 -0600\n"
            "\n"
            "> quoted\n> more\n> lines"
        )

        result = PlainTextPipeline().extract(body)

        assert result.body == body
        assert result.did_find_quote is False

    def test_demoted_markers(self) -> None:
        """Two quote lines without a splitter stay."""
        body = "> one\n> two"

        assert _extract(body) == body

    def test_inline_reply(self) -> None:
        """Answers interleaved with quotes are kept."""
        body = (
            "On Tue, Apr 4, 2012 at 3:59 PM, Bob <bob@example.com> wrote:\n"
            "> question 1\n"
            "answer 1\n"
            "> question 2\n"
            "answer 2"
        )

        assert _extract(body) == body

    def test_idempotent(self) -> None:
        """Extracting twice changes nothing more."""
        body = "Test reply\n\nOn 11-Apr-2011, at 6:54 PM, Roman <romant@example.com> wrote:\n\n> Test"

        once = _extract(body)

        assert _extract(once) == once


class TestLinks:
    """Link bracket protection tests."""

    def test_wrapped_link_survives(self) -> None:
        """A link whose ">" starts a line is restored after the cut."""
        body = (
            "Please see <http://example.com/long\n>\n\n"
            "On Tue, Apr 4, 2012 at 3:59 PM, Bob <bob@example.com> wrote:\n"
            "> hi\n"
            "> there"
        )

        assert _extract(body) == "Please see <http://example.com/long\n>"

    def test_replace_link_brackets(self) -> None:
        """Links are rewritten to the neutral form."""
        assert replace_link_brackets("see <http://example.com>") == "see @@http://example.com@@"

    def test_link_on_quoted_line_is_kept(self) -> None:
        """Links closed on a quoted line keep their brackets."""
        body = "> see <http://example.com>"

        assert replace_link_brackets(body) == body

    def test_link_with_at_sign_restored(self) -> None:
        """Links with an @ in the path get their brackets back."""
        body = (
            "Reply see <https://medium.com/@bob/post>\n\n"
            "On Wed, Apr 4, 2012 at 3:59 PM, bob@example.com wrote:\n"
            "> Hi\n"
            "> there"
        )

        assert _extract(body) == "Reply see <https://medium.com/@bob/post>"

    def test_two_links_on_one_line(self) -> None:
        """Each normalized link is restored on its own."""
        body = "see <http://a.example.com/@x> and <http://b.example.com>"

        assert postprocess(replace_link_brackets(body)) == body

    def test_link_round_trip(self) -> None:
        """Pre- and post-processing restore the original brackets."""
        body = "see <http://example.com/a/very/long/path\n> for details"

        assert postprocess(preprocess(body, "\n")) == body


class TestHelpers:
    """Pre-processing helper tests."""

    def test_find_delimiter(self) -> None:
        """The first line break decides the delimiter."""
        assert find_delimiter("a\r\nb\nc") == "\r\n"
        assert find_delimiter("a\nb") == "\n"
        assert find_delimiter("single line") == "\n"

    def test_wrap_splitter_with_newline(self) -> None:
        """A glued splitter is moved to its own line."""
        body = "reply On Wed, Apr 4, 2012 at 3:59 PM, bob@example.com wrote:"

        wrapped = wrap_splitter_with_newline(body, "\n")

        assert wrapped.split("\n")[0] == "reply"

    def test_splitter_at_line_start_is_untouched(self) -> None:
        """A splitter already on its own line is left alone."""
        body = "reply\nOn Wed, Apr 4, 2012 at 3:59 PM, bob@example.com wrote:"

        assert wrap_splitter_with_newline(body, "\n") == body


class TestLineLimit:
    """max_lines_count tests."""

    def test_lines_past_limit_dropped_with_quotation(self) -> None:
        """Lines past the limit go with a quotation reaching the limit."""
        body = "Reply\nOn Tue, Apr 4, 2012 at 3:59 PM, Bob <bob@example.com> wrote:\n> a\n> b\n> c"

        result = PlainTextPipeline(max_lines_count=3).extract(body)

        assert result.body == "Reply"

    def test_lines_past_limit_dropped_after_inner_cut(self) -> None:
        """Lines past the limit are dropped even when the cut ends before the limit."""
        body = (
            "Reply\n"
            "On Tue, Apr 4, 2012 at 3:59 PM, Bob <bob@example.com> wrote:\n"
            "> a\n"
            "> b\n"
            "signature\n"
            "extra line"
        )

        result = PlainTextPipeline(max_lines_count=5).extract(body)

        assert result.body == "Reply\nsignature"

    def test_quoted_lines_past_limit_dropped(self) -> None:
        """Quoted lines past the limit never reach the reply."""
        body = (
            "Reply\n\n"
            "On Wed, Apr 4, 2012 at 3:59 PM, bob@example.com wrote:\n"
            "> Hi\n"
            "> there\n"
            "thanks\n"
            "> secret quoted line"
        )

        result = PlainTextPipeline(max_lines_count=6).extract(body)

        assert result.body == "Reply\n\nthanks"

    def test_lines_past_limit_kept_without_cut(self) -> None:
        """Without a cut the lines past the limit stay."""
        body = "one\ntwo\nthree\nfour"

        assert PlainTextPipeline(max_lines_count=2).extract(body).body == body

    def test_invalid_limit(self) -> None:
        """Non-positive limits are rejected."""
        with pytest.raises(InvalidOptionError):
            PlainTextPipeline(max_lines_count=0)
