"""Bounded-memory file reads."""

from __future__ import annotations

from pathlib import Path

CHUNK_SIZE = 64 * 1024
DEFAULT_MAX_BYTES = 1_048_576
DEEP_MAX_BYTES = 50 * 1_048_576


def read_capped(path: str | Path, max_bytes: int = DEFAULT_MAX_BYTES) -> tuple[str, bool]:
    """Read at most ``max_bytes`` from ``path`` and decode once.

    Returns ``(content, truncated)``. Files at or below the budget are returned
    verbatim. Larger files are streamed in raw chunks and decoded after the
    last read, so a multi-byte character is never split mid-stream; an
    incomplete trailing sequence at the cut is dropped.

    Raises ``OSError`` when the file cannot be opened; callers decide how to
    degrade.
    """
    file_path = Path(path)
    size = file_path.stat().st_size
    if size <= max_bytes:
        return file_path.read_bytes().decode("utf-8", errors="replace"), False

    chunks: list[bytes] = []
    remaining = max_bytes
    with file_path.open("rb") as handle:
        while remaining > 0:
            chunk = handle.read(min(CHUNK_SIZE, remaining))
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)

    return b"".join(chunks).decode("utf-8", errors="ignore"), True


def budget_for(deep: bool) -> int:
    return DEEP_MAX_BYTES if deep else DEFAULT_MAX_BYTES
