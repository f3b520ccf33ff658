"""Deduplicated, ordered emission of finished files across snapshots."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List

from coder.code_format import FileRecord, Snapshot

logger = logging.getLogger(__name__)


@dataclass
class FinalizedFile:
    """A file whose closing fence has been seen, emitted exactly once."""
    filename: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"filename": self.filename, "content": self.content}


@dataclass
class EmissionState:
    file_order: List[str] = field(default_factory=list)
    latest_content: Dict[str, str] = field(default_factory=dict)
    emitted_count: int = 0


class FileEmitter:
    """Turns successive snapshots of one session into FinalizedFile events.

    Files are emitted in the order their filename was first seen, each at most
    once, and only once a snapshot reports the file as done. A later file that
    closes first waits until every earlier file has been emitted.
    """

    def __init__(self) -> None:
        self._state = EmissionState()

    @property
    def emitted_count(self) -> int:
        return self._state.emitted_count

    def feed(self, snapshot: Snapshot) -> Iterator[FinalizedFile]:
        """Process one snapshot and yield the files it finalizes.

        Bookkeeping happens eagerly; only the yielding is lazy.
        """
        state = self._state
        current: Dict[str, FileRecord] = {}

        for record in snapshot.files:
            name = record.filename
            if not name:
                continue
            if name not in state.latest_content:
                state.file_order.append(name)
            state.latest_content[name] = record.content
            # last record with this name wins, matching latest_content
            current[name] = record

        ready: List[FinalizedFile] = []
        while state.emitted_count < len(state.file_order):
            name = state.file_order[state.emitted_count]
            record = current.get(name)
            if record is None or not record.done:
                break
            ready.append(FinalizedFile(name, state.latest_content[name]))
            state.emitted_count += 1

        return iter(ready)


def iter_finalized(snapshots: Iterable[Snapshot]) -> Iterator[FinalizedFile]:
    """Lazily map a session's snapshot stream to FinalizedFile events.

    Errors raised by ``snapshots`` propagate after the events already yielded.
    Closing this generator early closes the upstream iterator.
    """
    emitter = FileEmitter()
    source = iter(snapshots)
    try:
        for snapshot in source:
            for finalized in emitter.feed(snapshot):
                logger.debug("Finalized %s (%d chars)", finalized.filename, len(finalized.content))
                yield finalized
    finally:
        close = getattr(source, "close", None)
        if close is not None:
            close()
