"""URL filters deciding which requests get captured."""

from __future__ import annotations

from fnmatch import fnmatchcase
from typing import Iterable, Protocol

from core.constants import DEFAULT_RECORDER_KEYWORDS


class RequestFilter(Protocol):
    """Predicate over request URLs."""

    def matches(self, url: str) -> bool: ...


class KeywordFilter:
    """Match URLs containing any keyword, case-insensitively."""

    def __init__(self, keywords: Iterable[str] = DEFAULT_RECORDER_KEYWORDS) -> None:
        self._keywords = tuple(keyword.lower() for keyword in keywords if keyword)

    def matches(self, url: str) -> bool:
        lowered = url.lower()
        return any(keyword in lowered for keyword in self._keywords)


class PatternFilter:
    """Match URLs against one whole-URL glob pattern, minus exclusions.

    ``PatternFilter("https://api.example.com/v1/*", exclusions=("/health",))``
    captures every v1 call except health checks.
    """

    def __init__(self, pattern: str, exclusions: Iterable[str] = ()) -> None:
        self._pattern = pattern
        self._exclusions = tuple(exclusion for exclusion in exclusions if exclusion)

    def matches(self, url: str) -> bool:
        if not fnmatchcase(url, self._pattern):
            return False
        return not any(exclusion in url for exclusion in self._exclusions)
