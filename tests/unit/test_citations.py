"""Unit tests for citation formatting helpers."""

import pytest

from app.schemas.chat import Message, MessageRole
from app.shared.citations import format_citations, format_message_citations


class TestFormatCitations:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Paris [citation:1].", "Paris [citation](1)."),
            ("Paris [[citation:2]].", "Paris [citation](2)."),
            ("Paris [[Citation:3]]", "Paris [citation](3)"),
            ("A [citation:1][citation:4]", "A [citation](1)[citation](4)"),
            ("No markers here.", "No markers here."),
        ],
    )
    def test_markers_become_links(self, raw, expected):
        assert format_citations(raw) == expected

    def test_partial_stream_is_left_alone(self):
        """An unfinished marker mid-stream is not rewritten yet."""
        assert format_citations("Paris [citation:") == "Paris [citation:"


class TestFormatMessageCitations:
    def test_only_assistant_messages_are_rewritten(self):
        messages = [
            Message(id="m1", role=MessageRole.USER, content="Quote [citation:1] for me"),
            Message(id="m2", role=MessageRole.ASSISTANT, content="Paris [[citation:1]]."),
        ]

        formatted = format_message_citations(messages)

        assert formatted[0].content == "Quote [citation:1] for me"
        assert formatted[1].content == "Paris [citation](1)."
        assert messages[1].content == "Paris [[citation:1]]."
