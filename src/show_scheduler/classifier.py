"""Keyword gate deciding whether a chat message asks for a schedule."""

from typing import Iterable

SCHEDULING_KEYWORDS = frozenset({"schedule", "playlist", "show", "hour", "interstitial"})


def is_scheduling_request(message: str, keywords: Iterable[str] = SCHEDULING_KEYWORDS) -> bool:
    """True when any keyword occurs (case-insensitively) as a substring of the message.

    Recall is preferred over precision: "can you show me my stats" passes.
    """
    if not message:
        return False
    lower_message = message.lower()
    return any(keyword.lower() in lower_message for keyword in keywords)
