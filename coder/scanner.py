from __future__ import annotations

import re
from typing import List, Optional, Tuple

from coder.code_format import FileRecord, Snapshot


FENCE = "```"
_WS_RE = re.compile(r"\s+")


def _split_fence_info(info: str) -> Tuple[Optional[str], Optional[str]]:
    """Split the text after an opening fence into (language, filename).

    Tokens past the second are dropped.
    """
    parts = _WS_RE.split(info.strip(), maxsplit=2)
    language = parts[0] or None
    filename = parts[1] if len(parts) > 1 and parts[1] else None
    return language, filename


def _lines(text: str) -> Tuple[List[str], bool]:
    """Split into lines; the flag tells whether the last one is unterminated."""
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
        return lines, False
    return lines, True


def _undecided(stripped: str, in_code: bool) -> bool:
    """True when an unterminated last line may still change meaning.

    That is a line that may grow into a fence, or an opening fence whose
    language and filename are not complete yet.
    """
    if len(stripped) < len(FENCE) and FENCE.startswith(stripped):
        return True
    return not in_code and stripped.startswith(FENCE)


def scan(text: str, *, final: bool = False) -> Snapshot:
    """Scan the accumulated buffer for fenced file regions.

    Always returns a snapshot for any input. Records that were opened but not
    closed yet keep ``done=False`` with the content seen so far. Pass
    ``final=True`` once no more text will arrive, so an unterminated last line
    is taken as it is.
    """
    files: List[FileRecord] = []
    preamble: List[str] = []
    postamble: List[str] = []
    in_code = False

    lines, last_partial = _lines(text)
    for i, line in enumerate(lines):
        stripped = line.strip()
        if last_partial and not final and i == len(lines) - 1 and _undecided(stripped, in_code):
            break

        if stripped.startswith(FENCE):
            if not in_code:
                in_code = True
                language, filename = _split_fence_info(stripped[len(FENCE):])
                files.append(
                    FileRecord(
                        preamble="".join(preamble).strip(),
                        filename=filename,
                        language=language,
                    )
                )
                preamble = []
            else:
                in_code = False
                files[-1].done = True
            continue

        if in_code:
            files[-1].content += line + "\n"
        elif files and files[-1].content:
            postamble.append(line + "\n")
        else:
            preamble.append(line + "\n")

    return Snapshot(files=files, postamble="".join(postamble).strip())
