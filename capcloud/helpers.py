"""Small encoding helpers shared by the cloud operations."""

from __future__ import annotations

import base64
import gzip


def compress_and_encode_string(text: str) -> str:
    """Gzip-compress ``text`` (UTF-8) and return it as standard base64."""
    compressed = gzip.compress(text.encode("utf-8"))
    return base64.b64encode(compressed).decode("ascii")