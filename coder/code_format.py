"""Code message data model and shape validation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class ShapeError(ValueError):
    """Raised when a code message does not have the expected shape."""


@dataclass
class FileRecord:
    """One fenced region found in generated text."""
    content: str = ""
    done: bool = False
    preamble: Optional[str] = None
    filename: Optional[str] = None
    language: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "preamble": self.preamble,
            "filename": self.filename,
            "language": self.language,
            "content": self.content,
            "done": self.done,
        }


@dataclass
class Snapshot:
    """Structured interpretation of the whole buffer at one point in time."""
    files: List[FileRecord] = field(default_factory=list)
    postamble: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files": [f.to_dict() for f in self.files],
            "postamble": self.postamble,
        }


class CodeMessage:
    """Snapshot wrapper exposing the first file's fields as shortcuts."""

    def __init__(self, files: Optional[List[FileRecord]] = None, postamble: str = ""):
        self.files = files or []
        self.postamble = postamble

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "CodeMessage":
        return cls(list(snapshot.files), snapshot.postamble or "")

    def _first(self, name: str) -> str:
        if not self.files:
            return ""
        return getattr(self.files[0], name) or ""

    @property
    def preamble(self) -> str:
        return self._first("preamble")

    @property
    def filename(self) -> str:
        return self._first("filename")

    @property
    def language(self) -> str:
        return self._first("language")

    @property
    def content(self) -> str:
        return self._first("content")

    def to_dict(self) -> Dict[str, Any]:
        return Snapshot(self.files, self.postamble).to_dict()


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_mapping(obj: Any) -> Optional[Mapping]:
    if isinstance(obj, (Snapshot, FileRecord)):
        return obj.to_dict()
    if isinstance(obj, Mapping):
        return obj
    return None


def validate_snapshot(data: Any) -> Snapshot:
    """Normalize scanner output (or decoded JSON) into a canonical Snapshot.

    Accepts a ``Snapshot`` or a mapping with ``files`` and ``postamble``; file
    entries may be ``FileRecord`` instances or mappings. Optional text fields
    that are not strings become ``None``.

    Raises:
        ShapeError: if the top level is not a mapping, ``files`` is not a
            sequence, or any entry has non-string ``content`` or non-boolean
            ``done``.
    """
    raw = _as_mapping(data)
    if raw is None:
        raise ShapeError("Invalid code message data")

    raw_files = raw.get("files")
    if not isinstance(raw_files, (list, tuple)):
        raise ShapeError("Files must be an array")

    files: List[FileRecord] = []
    for entry in raw_files:
        item = _as_mapping(entry)
        if item is None:
            raise ShapeError("File entry must be an object")
        content = item.get("content")
        if not isinstance(content, str):
            raise ShapeError("File content must be a string")
        done = item.get("done")
        if not isinstance(done, bool):
            raise ShapeError("File done must be a boolean")
        files.append(
            FileRecord(
                content=content,
                done=done,
                preamble=_optional_str(item.get("preamble")),
                filename=_optional_str(item.get("filename")),
                language=_optional_str(item.get("language")),
            )
        )

    return Snapshot(files=files, postamble=_optional_str(raw.get("postamble")))
