from __future__ import annotations

import hashlib
import json
import logging
import typing as tp

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "md5"


def canonical_bytes(content: tp.Mapping[str, tp.Any]) -> bytes:
    """
    Encode content so that equal mappings always produce equal bytes,
    regardless of key insertion order.

    Examples:
        >>> canonical_bytes({"b": 1, "a": "x"})
        b'{"a":"x","b":1}'
    """
    return json.dumps(content, sort_keys=True, separators=(",", ":")).encode("utf-8")


def generate_etag(content: tp.Mapping[str, tp.Any], algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Compute the entity tag for a representation's logical content.

    The content must not contain request-specific values such as the time
    the representation was built, otherwise every response gets a fresh tag
    and conditional requests never match.

    Args:
        content: JSON-serializable logical content.
        algorithm: Any name accepted by `hashlib.new`.

    Returns:
        Lowercase hexadecimal digest.

    Raises:
        TypeError: If the content is not JSON-serializable.
    """
    hasher = hashlib.new(algorithm)
    hasher.update(canonical_bytes(content))
    etag = hasher.hexdigest()
    logger.debug("Generated fingerprint: algorithm=%s etag=%s", algorithm, etag)
    return etag
