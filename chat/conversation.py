"""Conversation history management."""

from typing import Iterable, List, Optional


def _text_of(parts: Optional[Iterable]) -> str:
    texts = []
    for part in parts or []:
        if isinstance(part, dict) and part.get("text"):
            texts.append(part["text"])
    return "\n".join(texts)


class ConversationManager:
    """Manages conversation history and message sanitization."""

    def __init__(self):
        self.history: List[dict] = []

    @classmethod
    def from_task_history(cls, task_history: Optional[Iterable[dict]]) -> "ConversationManager":
        """Build chat messages from task history entries.

        Entries carry a ``role`` ("agent" or "user") and a list of ``parts``;
        only text parts are kept, joined by newlines.
        """
        manager = cls()
        for entry in task_history or []:
            content = _text_of(entry.get("parts"))
            if entry.get("role") == "agent":
                manager.add_assistant_message(content)
            else:
                manager.add_user_message(content)
        return manager

    def add_user_message(self, content: str) -> None:
        """Add a user message to conversation history."""
        self.history.append({"role": "user", "content": content})

    def add_assistant_message(self, content: str) -> None:
        """Add an assistant message to conversation history."""
        if content and content.strip():  # Only add non-empty responses
            self.history.append({"role": "assistant", "content": content})

    def clear_history(self) -> None:
        """Clear the conversation history."""
        self.history = []

    def get_sanitized_history(self) -> List[dict]:
        """Get conversation history with empty messages filtered out."""
        return [
            msg for msg in self.history
            if isinstance(msg.get("content"), str) and msg["content"].strip()
        ]
