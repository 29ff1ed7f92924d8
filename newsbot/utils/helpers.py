"""Small shared helpers."""

# Telegram rejects messages longer than this.
MAX_MESSAGE_LENGTH = 4096


def split_message(text: str, limit: int = MAX_MESSAGE_LENGTH) -> list[str]:
    """Split text into segments no longer than ``limit``.

    Each cut is made at the last newline inside the window, and that newline
    is dropped. A window without a newline is cut at exactly ``limit``.
    Segments come back in order; empty ones are skipped.
    """
    if limit <= 0:
        raise ValueError("limit must be positive")
    if len(text) <= limit:
        return [text]

    segments: list[str] = []
    remaining = text
    while len(remaining) > limit:
        split_at = remaining.rfind("\n", 0, limit)
        if split_at == -1:
            segments.append(remaining[:limit])
            remaining = remaining[limit:]
        else:
            if split_at > 0:
                segments.append(remaining[:split_at])
            remaining = remaining[split_at + 1:]
    if remaining:
        segments.append(remaining)
    return segments


def truncate_string(s: str, max_len: int = 100, suffix: str = "...") -> str:
    if len(s) <= max_len:
        return s
    return s[: max_len - len(suffix)] + suffix
