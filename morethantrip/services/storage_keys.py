"""
More Than Trip Core — Storage Key Derivation
==============================================

What:  Builds the object key a photo is stored under:
       <unix-seconds>_<sanitized original filename>
Why:   Keys stay human-traceable (you can tell when and what was uploaded
       from the bucket listing) and cost nothing to generate: no counter,
       no coordination service.

Known weakness:
    Two uploads with the same filename inside the same wall-clock second
    derive the same key, and the second put_object overwrites the first
    object. KEY_COLLISION_WINDOW_SECONDS names that window. It is accepted,
    not solved; there is no lock.

Sanitization:
    The filename comes from the client and is untrusted. Only its last path
    segment is kept (both '/' and '\\' count as separators), control
    characters are removed, and an empty or dot-only result becomes
    DEFAULT_FILENAME. Nothing else is rewritten, so 'beach.jpg' stays
    'beach.jpg'.
"""

import re
import time
from typing import Optional

# Resolution of the timestamp prefix. Same-name uploads closer together
# than this share a key.
KEY_COLLISION_WINDOW_SECONDS = 1

DEFAULT_FILENAME = "upload"

_SEPARATORS = re.compile(r"[\\/]")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def sanitize_filename(filename: Optional[str]) -> str:
    """Reduce an untrusted filename to a single safe key segment."""
    if not filename:
        return DEFAULT_FILENAME
    name = _SEPARATORS.split(filename)[-1]
    name = _CONTROL_CHARS.sub("", name).strip()
    if not name or set(name) == {"."}:
        return DEFAULT_FILENAME
    return name


def derive_storage_key(filename: Optional[str], now: Optional[float] = None) -> str:
    """
    Return '<unix-seconds>_<sanitized filename>'.

    Args:
        filename: original filename from the multipart part
        now: wall-clock seconds; defaults to time.time()

    Example:
        >>> derive_storage_key("../../etc/beach.jpg", now=1700000000.7)
        '1700000000_beach.jpg'
    """
    if now is None:
        now = time.time()
    seconds = int(now // KEY_COLLISION_WINDOW_SECONDS) * KEY_COLLISION_WINDOW_SECONDS
    return f"{seconds}_{sanitize_filename(filename)}"
