"""Coder agent: turns a task history into a stream of status and file updates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, Optional

from chat.conversation import ConversationManager
from coder.emitter import FinalizedFile, iter_finalized

logger = logging.getLogger(__name__)

WORKING = "working"
COMPLETED = "completed"
FAILED = "failed"


@dataclass
class AgentUpdate:
    """One update forwarded to the task orchestration layer."""
    state: str
    text: Optional[str] = None
    file: Optional[FinalizedFile] = None

    @property
    def kind(self) -> str:
        return "file-finalized" if self.file is not None else self.state

    @property
    def is_terminal(self) -> bool:
        return self.state in (COMPLETED, FAILED)

    def to_dict(self) -> Dict[str, Any]:
        if self.file is not None:
            parts = [{
                "type": "file",
                "name": self.file.filename,
                "content": self.file.content,
                "done": True,
            }]
        else:
            parts = [{"type": "text", "text": self.text or ""}]
        return {"state": self.state, "message": {"role": "agent", "parts": parts}}


def coder_agent(history: Optional[Iterable[dict]], handler) -> Iterator[AgentUpdate]:
    """Generate code for the conversation and yield each finished file once.

    Ends with a single ``completed`` or ``failed`` update. Files yielded before
    a failure stay delivered.
    """
    messages = ConversationManager.from_task_history(history).get_sanitized_history()
    if not messages:
        logger.warning("No history/messages found for task")
        yield AgentUpdate(FAILED, text="No input message found.")
        return

    yield AgentUpdate(WORKING, text="Generating code...")

    emitted = 0
    finalized_files = None
    try:
        finalized_files = iter_finalized(handler.generate_code_stream(messages))
        for finalized in finalized_files:
            emitted += 1
            yield AgentUpdate(WORKING, file=finalized)
    except Exception as e:
        logger.error("Code generation failed after %d file(s)", emitted, exc_info=True)
        yield AgentUpdate(FAILED, text=f"Error generating code: {e}")
        return
    finally:
        if finalized_files is not None:
            finalized_files.close()

    logger.info("Code generation completed with %d file(s)", emitted)
    yield AgentUpdate(COMPLETED, text="Code generation completed.")
