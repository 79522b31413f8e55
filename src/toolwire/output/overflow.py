"""Spill untruncated tool output to the system temp directory."""

from __future__ import annotations

import logging
import re
import tempfile
import time
from pathlib import Path
from uuid import uuid4

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def spill(identifier_hint: str, full_text: str, *, prefix: str = "toolwire") -> Path:
    """Write *full_text* to a new temp file and return its path.

    The name combines the sanitized hint, a millisecond timestamp and a
    random suffix; the file is opened in exclusive mode so two spills never
    share a path. Files are left for the OS to clean up.
    """
    safe_hint = _UNSAFE_CHARS.sub("_", identifier_hint)
    filename = f"{prefix}-{safe_hint}-{int(time.time() * 1000)}-{uuid4().hex[:8]}.txt"
    path = Path(tempfile.gettempdir()) / filename
    with path.open("x", encoding="utf-8") as fh:
        fh.write(full_text)
    logger.debug("Spilled %d chars of %s output to %s", len(full_text), identifier_hint, path)
    return path
