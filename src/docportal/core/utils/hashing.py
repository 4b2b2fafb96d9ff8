"""Content hashing for rendered topic bodies"""

import hashlib


def sha256(content: str) -> str:
    """Hex SHA-256 of the UTF-8 encoded text; recorded in sidecars to spot changed output."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()
