from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from cachedemo._headers import Headers


@dataclass(frozen=True)
class Representation:
    """
    The JSON body of a strategy endpoint.

    Optional fields are omitted from the body when they are None.
    """

    message: str
    timestamp: str
    counter: int
    cache_strategy: str
    version: Optional[int] = None
    etag: Optional[str] = None
    last_modified: Optional[str] = None

    def logical_content(self) -> Dict[str, Any]:
        """
        Fields that identify this version of the content.

        Leaves out `timestamp` because it differs on every request, and the
        validators because they are derived from this content.
        """
        content: Dict[str, Any] = {
            "message": self.message,
            "counter": self.counter,
            "cacheStrategy": self.cache_strategy,
        }
        if self.version is not None:
            content["version"] = self.version
        return content

    def to_json(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "message": self.message,
            "timestamp": self.timestamp,
            "counter": self.counter,
        }
        if self.version is not None:
            body["version"] = self.version
        body["cacheStrategy"] = self.cache_strategy
        if self.etag is not None:
            body["etag"] = self.etag
        if self.last_modified is not None:
            body["lastModified"] = self.last_modified
        return body


@dataclass
class StrategyResponse:
    status_code: int
    headers: Headers = field(default_factory=Headers)
    body: Optional[Dict[str, Any]] = None
