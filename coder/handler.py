"""Drives the generation source and re-derives a snapshot per fragment."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional

from coder.code_format import ShapeError, Snapshot, validate_snapshot
from coder.config import CoderConfig
from coder.prompts import CODER_SYSTEM_PROMPT
from coder.scanner import scan
from providers import get_provider
from streaming_client import StreamingClient, UpstreamError

logger = logging.getLogger(__name__)


def iter_snapshots(fragments: Iterable[str]) -> Iterator[Snapshot]:
    """Yield the validated snapshot of the accumulated text after each fragment.

    The whole buffer is re-scanned every time. A fragment whose result fails
    validation is skipped and the previous snapshot stays current. Errors from
    ``fragments`` propagate; closing this generator closes ``fragments``.
    """
    source = iter(fragments)
    buffer: List[str] = []
    try:
        for fragment in source:
            if not fragment:
                continue
            buffer.append(fragment)
            try:
                snapshot = validate_snapshot(scan("".join(buffer)))
            except ShapeError as e:
                logger.debug("Skipping unparsable partial output: %s", e)
                continue
            yield snapshot
    finally:
        close = getattr(source, "close", None)
        if close is not None:
            close()


class CodeHandler:
    """Requests code from the model and parses the response into files."""

    def __init__(
        self,
        config: Optional[CoderConfig] = None,
        client: Optional[StreamingClient] = None,
        provider=None,
    ):
        self.config = config or CoderConfig.from_env()
        self.client = client or StreamingClient(timeout=self.config.timeout)
        self.provider = provider or get_provider("openai")

    def build_payload(self, messages: List[dict]) -> dict:
        return self.provider.build_payload(
            messages,
            model=self.config.model,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
            system_prompt=CODER_SYSTEM_PROMPT,
        )

    def iter_fragments(self, messages: List[dict]) -> Iterator[str]:
        return self.client.iter_text(
            self.config.completions_url,
            self.build_payload(messages),
            mapper=self.provider.map_events,
            headers=self.config.headers(),
        )

    def generate_code_stream(self, messages: List[dict]) -> Iterator[Snapshot]:
        """Stream snapshots of the response as it is generated."""
        logger.info("Streaming code generation with %s", self.config.model)
        return iter_snapshots(self.iter_fragments(messages))

    def generate_code(self, messages: List[dict]) -> Snapshot:
        """Generate the full response, then parse it once."""
        result = self.client.send_message(
            self.config.completions_url,
            self.build_payload(messages),
            mapper=self.provider.map_events,
            headers=self.config.headers(),
        )
        if result.error:
            logger.error("Error generating code: %s", result.error)
            raise UpstreamError(result.error)
        return validate_snapshot(scan(result.text, final=True))
