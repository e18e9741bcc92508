"""Citation helpers for search-grounded answers.

Assistant answers cite their search sources in a handful of slightly
different spellings, which are normalised here into markdown links before
the conversation is stored.
"""

import re

from app.schemas.chat import Message, MessageRole

_DOUBLE_OPEN = re.compile(r"\[\[([cC])itation")
_DOUBLE_CLOSE = re.compile(r"[cC]itation:(\d+)]]")
_DOUBLE_WRAPPED = re.compile(r"\[\[([cC]itation:\d+)]](?!])")
_SINGLE = re.compile(r"\[[cC]itation:(\d+)]")


def format_citations(text: str) -> str:
    """Rewrite ``[citation:N]`` style markers as ``[citation](N)``."""
    text = _DOUBLE_OPEN.sub("[citation", text)
    text = _DOUBLE_CLOSE.sub(r"citation:\1]", text)
    text = _DOUBLE_WRAPPED.sub(r"[\1]", text)
    return _SINGLE.sub(r"[citation](\1)", text)


def format_message_citations(messages: list[Message]) -> list[Message]:
    """Normalise citation markers in assistant messages; other roles are left as written."""
    return [
        message.model_copy(update={"content": format_citations(message.content)})
        if message.role == MessageRole.ASSISTANT
        else message
        for message in messages
    ]
