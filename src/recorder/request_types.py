"""Typed models for captured requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from core.constants import DEFAULT_REPLAY_METHOD
from core.errors import RecorderError


@dataclass(frozen=True)
class RequestOptions:
    """Serializable request options.

    Mirrors the fetch option set. Cancellation tokens are never stored.
    """

    method: str = DEFAULT_REPLAY_METHOD
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str | None = None
    mode: str | None = None
    credentials: str | None = None
    cache: str | None = None
    redirect: str | None = None
    referrer: str | None = None
    referrer_policy: str | None = None
    integrity: str | None = None
    keepalive: bool | None = None

    def to_payload(self) -> dict[str, Any]:
        """Render options with their wire field names."""
        return {
            "method": self.method,
            "headers": dict(self.headers),
            "body": self.body,
            "mode": self.mode,
            "credentials": self.credentials,
            "cache": self.cache,
            "redirect": self.redirect,
            "referrer": self.referrer,
            "referrerPolicy": self.referrer_policy,
            "integrity": self.integrity,
            "keepalive": self.keepalive,
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RequestOptions":
        """Build options from a stored payload."""
        headers = payload.get("headers") or {}
        if not isinstance(headers, Mapping):
            raise RecorderError("Stored request headers must be an object.")
        return cls(
            method=str(payload.get("method") or DEFAULT_REPLAY_METHOD),
            headers={str(key): str(value) for key, value in headers.items()},
            body=payload.get("body"),
            mode=payload.get("mode"),
            credentials=payload.get("credentials"),
            cache=payload.get("cache"),
            redirect=payload.get("redirect"),
            referrer=payload.get("referrer"),
            referrer_policy=payload.get("referrerPolicy"),
            integrity=payload.get("integrity"),
            keepalive=payload.get("keepalive"),
        )


@dataclass(frozen=True)
class CapturedRequest:
    """One captured request.

    Attributes:
        url: Request URL.
        options: Serializable request options.
        timestamp: Capture time in epoch milliseconds.
    """

    url: str
    options: RequestOptions
    timestamp: int

    def to_payload(self) -> dict[str, Any]:
        """Render the entry as a JSON-compatible mapping."""
        return {"url": self.url, "options": self.options.to_payload(), "timestamp": self.timestamp}

    @classmethod
    def from_payload(cls, payload: object) -> "CapturedRequest":
        """Build an entry from a stored mapping.

        Raises:
            RecorderError: If the payload does not match the entry shape.
        """
        if not isinstance(payload, Mapping):
            raise RecorderError(
                f"Stored request entry must be an object, got {type(payload).__name__}."
            )
        url = payload.get("url")
        timestamp = payload.get("timestamp")
        options = payload.get("options") or {}
        if not isinstance(url, str) or not isinstance(timestamp, int):
            raise RecorderError("Stored request entry requires string 'url' and integer 'timestamp'.")
        if not isinstance(options, Mapping):
            raise RecorderError("Stored request entry field 'options' must be an object.")
        return cls(url=url, options=RequestOptions.from_payload(options), timestamp=timestamp)


@dataclass(frozen=True)
class ReplayOutcome:
    """Result of replaying one captured request."""

    index: int
    url: str
    status_code: int | None = None
    reason: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        """Whether a response was received."""
        return self.error is None
