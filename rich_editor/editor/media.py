"""URL helpers for embedded media."""
from __future__ import annotations

import re
from typing import Optional

YOUTUBE_EMBED_PREFIX = "https://www.youtube.com/embed/"

_YOUTUBE_ID = re.compile(r"^.*(youtu\.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*")


def youtube_embed_url(url: str) -> Optional[str]:
    """Return the embeddable form of a YouTube URL, or None if it is not one."""
    match = _YOUTUBE_ID.match(url.strip())
    if match is None or len(match.group(2)) != 11:
        return None
    return f"{YOUTUBE_EMBED_PREFIX}{match.group(2)}"
