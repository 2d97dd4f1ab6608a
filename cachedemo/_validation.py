from __future__ import annotations

import enum
import logging
import typing as tp
from dataclasses import dataclass
from typing import Literal, Optional, Union

logger = logging.getLogger(__name__)


class ValidatorPolicy(enum.Flag):
    """
    Which request validators an endpoint honors.

    `EITHER` is an inclusive OR: a match on any honored validator is enough
    to answer 304, even if the other validator is stale.
    """

    NONE = 0
    ETAG = enum.auto()
    LAST_MODIFIED = enum.auto()
    EITHER = ETAG | LAST_MODIFIED


@dataclass(frozen=True)
class RequestValidators:
    if_none_match: Optional[str] = None
    if_modified_since: Optional[str] = None

    @classmethod
    def from_headers(cls, headers: tp.Mapping[str, str]) -> "RequestValidators":
        """
        Read validators from a case-insensitive header mapping.

        Values are taken verbatim. Anything unparseable simply won't match later.
        """
        return cls(
            if_none_match=headers.get("if-none-match"),
            if_modified_since=headers.get("if-modified-since"),
        )


@dataclass(frozen=True)
class FullResponse:
    """The client has no usable copy; send the whole representation."""


@dataclass(frozen=True)
class NotModified:
    """The client's copy is current; answer 304 without a body."""

    matched: Literal["etag", "last-modified"]


Decision = Union[FullResponse, NotModified]


def evaluate(
    validators: RequestValidators,
    etag: Optional[str],
    last_modified: Optional[str],
    policy: ValidatorPolicy,
) -> Decision:
    """
    Decide whether a request can be answered with 304 Not Modified.

    Comparison is exact string equality for both validators. Entity tags are
    not parsed, so weak tags, quoted tags and lists in If-None-Match only
    match if the client echoes the tag byte for byte. If-Modified-Since is
    not parsed as a date either: only the exact Last-Modified string matches.

    The ETag is checked first. With `ValidatorPolicy.EITHER` a Last-Modified
    match still wins when the ETag doesn't match.

    Args:
        validators: Validators supplied by the client.
        etag: The current fingerprint, or None if the endpoint has none.
        last_modified: The current HTTP-date, or None if the endpoint has none.
        policy: Validators honored by the endpoint.

    Returns:
        `NotModified` when an honored validator matches, else `FullResponse`.

    Examples:
        >>> evaluate(RequestValidators(if_none_match="abc"), "abc", None, ValidatorPolicy.ETAG)
        NotModified(matched='etag')
        >>> evaluate(RequestValidators(if_none_match="abc"), "abc", None, ValidatorPolicy.LAST_MODIFIED)
        FullResponse()
    """
    logger.debug(
        "Evaluating validators: policy=%s if_none_match=%s if_modified_since=%s",
        policy.name,
        validators.if_none_match,
        validators.if_modified_since,
    )

    if ValidatorPolicy.ETAG in policy and etag is not None and validators.if_none_match == etag:
        logger.debug("ETag matched, responding not modified")
        return NotModified(matched="etag")

    if (
        ValidatorPolicy.LAST_MODIFIED in policy
        and last_modified is not None
        and validators.if_modified_since == last_modified
    ):
        logger.debug("Last-Modified matched, responding not modified")
        return NotModified(matched="last-modified")

    return FullResponse()
