"""StreamingClient for pulling generated text from LLM SSE endpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

import requests
from requests.exceptions import ConnectTimeout, ReadTimeout, RequestException

from util.sse_client import iter_sse_lines

logger = logging.getLogger(__name__)


class UpstreamError(RuntimeError):
    """The generation source failed before its stream ended normally."""


@dataclass
class StreamResult:
    """Result from streaming an LLM request."""
    text: str
    model_name: Optional[str] = None
    aborted: bool = False
    error: Optional[str] = None


@dataclass
class StreamEvent:
    """Individual event from the stream."""
    kind: str
    value: Optional[str] = None


class StreamingClient:
    """Handles streaming SSE interactions with LLM providers."""

    def __init__(self, timeout: float = 60.0, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session
        self.model_name: Optional[str] = None
        self._abort = False

    def abort(self) -> None:
        """Signal the current stream to abort."""
        self._abort = True

    def iter_sse_lines(
        self,
        url: str,
        *,
        json: Optional[dict] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Iterator[str]:
        return iter_sse_lines(
            url, json=json, headers=headers, timeout=self.timeout, session=self.session
        )

    def _stream_events(
        self, url: str, payload: dict, mapper, headers: Optional[Dict[str, str]] = None
    ) -> Iterator[StreamEvent]:
        """Stream and map SSE events."""
        lines = self.iter_sse_lines(url, json=payload, headers=headers)
        try:
            for kind, value in mapper(lines):
                yield StreamEvent(kind=kind, value=value)
        finally:
            close = getattr(lines, "close", None)
            if close is not None:
                close()

    def iter_text(
        self,
        url: str,
        payload: dict,
        *,
        mapper,
        headers: Optional[Dict[str, str]] = None,
    ) -> Iterator[str]:
        """Yield text fragments as they arrive.

        The stream ends on a "done" event, when the source is exhausted, or
        after ``abort()``. Transport failures are raised as UpstreamError.
        Closing the generator closes the underlying HTTP response.
        """
        self._abort = False
        self.model_name = None
        events = self._stream_events(url, payload, mapper, headers)
        try:
            for event in events:
                if self._abort:
                    logger.info("Stream aborted by caller")
                    break
                if event.kind == "model":
                    self.model_name = event.value or self.model_name
                elif event.kind == "text":
                    if event.value:
                        yield event.value
                elif event.kind == "done":
                    break
        except (ReadTimeout, ConnectTimeout) as e:
            raise UpstreamError(f"Request timed out: {e}") from e
        except RequestException as e:
            raise UpstreamError(f"Network error: {e}") from e
        finally:
            events.close()

    def send_message(
        self,
        url: str,
        payload: dict,
        *,
        mapper,
        headers: Optional[Dict[str, str]] = None,
    ) -> StreamResult:
        """Send a message and collect the whole streamed response.

        Args:
            url: The endpoint URL
            payload: The request payload
            mapper: Provider-specific event mapper function
            headers: Extra HTTP headers, e.g. authorization

        Returns:
            StreamResult with accumulated response data
        """
        text_buffer: List[str] = []
        try:
            for fragment in self.iter_text(url, payload, mapper=mapper, headers=headers):
                text_buffer.append(fragment)
        except UpstreamError as e:
            return StreamResult(
                text="".join(text_buffer),
                model_name=self.model_name,
                error=str(e),
            )

        return StreamResult(
            text="".join(text_buffer),
            model_name=self.model_name,
            aborted=self._abort,
        )
