import hashlib
import json
from typing import Any


def hash_payload(value: Any) -> str:
    """
    Return a SHA-256 digest of an imported file so report runs can be correlated
    in logs without recording subscription names or notes.
    """

    if value is None:
        normalized = b"null"
    elif isinstance(value, bytes):
        normalized = value
    elif isinstance(value, str):
        normalized = value.encode("utf-8")
    else:
        normalized = json.dumps(value, sort_keys=True, default=str).encode("utf-8")

    return hashlib.sha256(normalized).hexdigest()
