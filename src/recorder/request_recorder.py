"""Request recorder bound to a requests session.

``install`` wraps ``session.request`` so matching calls are captured before
they are sent. Each call is prepared the way ``requests`` would send it, so
the stored URL carries query parameters and the stored body is the encoded
payload. ``replay`` re-issues captured calls in order through the
unwrapped callable, one at a time with a fixed delay between them.
"""

from __future__ import annotations

import inspect
import time
from typing import Any, Callable, Mapping

import requests

from core.constants import DEFAULT_REPLAY_DELAY_SECONDS
from core.logging_config import get_logger
from recorder.request_filters import KeywordFilter, RequestFilter
from recorder.request_store import JsonRequestStore
from recorder.request_types import CapturedRequest, ReplayOutcome, RequestOptions

_LOGGER = get_logger(__name__)

RequestCallable = Callable[..., Any]
_SESSION_REQUEST_SIGNATURE = inspect.signature(requests.Session.request)
_BODY_ENCODING = "utf-8"


class RequestRecorder:
    """Capture, list, clear and replay HTTP requests."""

    def __init__(
        self,
        store: JsonRequestStore,
        request_filter: RequestFilter | None = None,
        replay_delay_seconds: float = DEFAULT_REPLAY_DELAY_SECONDS,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._store = store
        self._filter = request_filter or KeywordFilter()
        self._replay_delay_seconds = replay_delay_seconds
        self._clock = clock
        self._sleep = sleep
        self._session: requests.Session | None = None
        self._original_request: RequestCallable | None = None
        self._store.initialize()

    def install(self, session: requests.Session) -> None:
        """Wrap ``session.request`` so matching requests are captured.

        Installing again on the same session is a no-op; installing on a
        different session moves the recorder there.
        """
        if self._session is session:
            return
        self.uninstall()
        original_request = session.request

        def capturing_request(method: str, url: Any, *args: Any, **kwargs: Any) -> Any:
            self._capture_call(method, url, args, kwargs)
            return original_request(method, url, *args, **kwargs)

        session.request = capturing_request  # type: ignore[method-assign]
        self._session = session
        self._original_request = original_request
        _LOGGER.info("request_recorder_installed")

    def uninstall(self) -> None:
        """Restore the wrapped session's original request callable."""
        if self._session is None or self._original_request is None:
            return
        self._session.request = self._original_request  # type: ignore[method-assign]
        self._session = None
        self._original_request = None

    def list_requests(self) -> tuple[CapturedRequest, ...]:
        """Return captured requests in capture order."""
        entries = tuple(CapturedRequest.from_payload(payload) for payload in self._store.load())
        _LOGGER.info("captured_requests_listed", count=len(entries))
        return entries

    def clear(self) -> None:
        """Delete every captured request."""
        self._store.save([])
        _LOGGER.info("captured_requests_cleared")

    def replay(self, session: requests.Session | None = None) -> tuple[ReplayOutcome, ...]:
        """Re-issue every captured request sequentially.

        Args:
            session: Session used for replay. Defaults to the installed
                session, or a fresh session when none is installed.

        Returns:
            One outcome per captured request. Transport failures are
            recorded and do not stop the replay.
        """
        captured = self.list_requests()
        if not captured:
            _LOGGER.info("replay_skipped", reason="no captured requests")
            return ()
        request_fn = self._replay_callable(session)
        _LOGGER.info("replay_started", count=len(captured))
        outcomes: list[ReplayOutcome] = []
        for index, entry in enumerate(captured, 1):
            outcomes.append(_replay_one(request_fn, index, len(captured), entry))
            self._sleep(self._replay_delay_seconds)
        _LOGGER.info("replay_completed", count=len(outcomes))
        return tuple(outcomes)

    def _replay_callable(self, session: requests.Session | None) -> RequestCallable:
        if self._original_request is not None and session in (None, self._session):
            return self._original_request
        return (session or requests.Session()).request

    def _capture_call(
        self,
        method: str,
        url: Any,
        args: tuple[Any, ...],
        kwargs: Mapping[str, Any],
    ) -> None:
        try:
            call = _SESSION_REQUEST_SIGNATURE.bind(None, method, url, *args, **kwargs).arguments
            prepared = _prepare_call(call)
        except (TypeError, ValueError, requests.RequestException) as error:
            # The wrapped call raises the same error when it runs.
            _LOGGER.warning("request_capture_skipped", url=str(url), error=str(error))
            return
        sent_url = str(prepared.url)
        if not self._filter.matches(sent_url):
            return
        entry = CapturedRequest(
            url=sent_url,
            options=_options_from_prepared(prepared, call),
            timestamp=int(self._clock() * 1000),
        )
        entries = self._store.load()
        entries.append(entry.to_payload())
        self._store.save(entries)
        _LOGGER.info("request_captured", url=sent_url, method=entry.options.method)


def _replay_one(
    request_fn: RequestCallable,
    index: int,
    total: int,
    entry: CapturedRequest,
) -> ReplayOutcome:
    _LOGGER.info("request_replaying", index=index, total=total, url=entry.url)
    try:
        response = request_fn(entry.options.method, entry.url, **_kwargs_from_options(entry.options))
    except requests.RequestException as error:
        _LOGGER.warning("request_replay_failed", index=index, url=entry.url, error=str(error))
        return ReplayOutcome(index=index, url=entry.url, error=str(error))
    _LOGGER.info(
        "request_replayed",
        index=index,
        url=entry.url,
        status_code=response.status_code,
        reason=response.reason,
    )
    return ReplayOutcome(
        index=index,
        url=entry.url,
        status_code=response.status_code,
        reason=response.reason,
    )


def _prepare_call(call: Mapping[str, Any]) -> requests.PreparedRequest:
    """Encode one bound ``Session.request`` call without sending it."""
    data, files, json_body = call.get("data"), call.get("files"), call.get("json")
    if not _is_replayable_payload(data, files):
        _LOGGER.warning("request_body_not_recorded", url=str(call["url"]), reason="stream")
        data, files, json_body = None, None, None
    # Session.request drops None-valued headers before sending.
    headers = {key: value for key, value in (call.get("headers") or {}).items() if value is not None}
    return requests.Request(
        method=call["method"],
        url=call["url"],
        headers=headers,
        files=files,
        data=data or {},
        params=call.get("params") or {},
        auth=call.get("auth"),
        cookies=call.get("cookies"),
        json=json_body,
    ).prepare()


def _is_replayable_payload(data: Any, files: Any) -> bool:
    # Streams would be consumed by encoding them before the real send.
    if data is not None and not isinstance(data, (str, bytes, Mapping, list, tuple)):
        return False
    if files is None:
        return True
    file_values = files.values() if isinstance(files, Mapping) else [value for _, value in files]
    for value in file_values:
        content = value[1] if isinstance(value, tuple) else value
        if not isinstance(content, (str, bytes)):
            return False
    return True


def _options_from_prepared(
    prepared: requests.PreparedRequest,
    call: Mapping[str, Any],
) -> RequestOptions:
    headers = {str(key): _text(value) for key, value in prepared.headers.items()}
    return RequestOptions(
        method=str(prepared.method),
        headers=headers,
        body=_recorded_body(prepared.body, str(prepared.url)),
        redirect="follow" if call.get("allow_redirects", True) else "manual",
        referrer=prepared.headers.get("Referer"),
    )


def _recorded_body(body: Any, url: str) -> str | None:
    if body is None or isinstance(body, str):
        return body
    if isinstance(body, bytes):
        try:
            return body.decode(_BODY_ENCODING)
        except UnicodeDecodeError:
            _LOGGER.warning("request_body_not_recorded", url=url, reason="binary")
            return None
    _LOGGER.warning("request_body_not_recorded", url=url, reason="stream")
    return None


def _text(value: str | bytes) -> str:
    return value.decode("latin-1") if isinstance(value, bytes) else value


def _kwargs_from_options(options: RequestOptions) -> dict[str, Any]:
    return {
        "headers": dict(options.headers),
        "data": None if options.body is None else options.body.encode(_BODY_ENCODING),
        "allow_redirects": options.redirect != "manual",
    }
