from __future__ import annotations

from dataclasses import dataclass
from typing import (
    Any,
    Iterable,
    Iterator,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Tuple,
)

HeaderMutation = Tuple[str, str]


class Headers(MutableMapping[str, str]):
    """
    Case-insensitive, insertion-ordered response headers.

    Setting a header replaces any previous value and keeps its original position.
    """

    def __init__(self, headers: Optional[Mapping[str, str]] = None) -> None:
        self._headers: dict[str, str] = {}
        for key, value in (headers or {}).items():
            self[key] = value

    def __getitem__(self, key: str) -> str:
        return self._headers[key.lower()]

    def __setitem__(self, key: str, value: str) -> None:
        self._headers[key.lower()] = value

    def __delitem__(self, key: str) -> None:
        del self._headers[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __repr__(self) -> str:
        return f"Headers({self._headers!r})"

    def __eq__(self, other_headers: Any) -> bool:
        return isinstance(other_headers, Headers) and self._headers == other_headers._headers

    def apply(self, mutations: Iterable[HeaderMutation]) -> "Headers":
        """Apply header mutations in order and return self."""
        for name, value in mutations:
            self[name] = value
        return self


@dataclass(frozen=True)
class CacheDirectives:
    """
    Response Cache-Control directives.

    Rendering order is fixed: public, no-cache, no-store, max-age,
    stale-while-revalidate, stale-if-error, must-revalidate.

    Directives:
    - public [RFC9111, Section 5.2.2.9]
    - no-cache [RFC9111, Section 5.2.2.4]
    - no-store [RFC9111, Section 5.2.2.5]
    - max-age [RFC9111, Section 5.2.2.1]
    - stale-while-revalidate [RFC5861, Section 3]
    - stale-if-error [RFC5861, Section 4]
    - must-revalidate [RFC9111, Section 5.2.2.2]

    Examples:
        >>> str(CacheDirectives(public=True, max_age=60))
        'public, max-age=60'
        >>> str(CacheDirectives(no_store=True))
        'no-store'
    """

    public: bool = False
    no_cache: bool = False
    no_store: bool = False
    max_age: Optional[int] = None
    stale_while_revalidate: Optional[int] = None
    stale_if_error: Optional[int] = None
    must_revalidate: bool = False

    def directives(self) -> List[str]:
        directives: List[str] = []

        if self.public:
            directives.append("public")

        if self.no_cache:
            directives.append("no-cache")

        if self.no_store:
            directives.append("no-store")

        if self.max_age is not None:
            directives.append(f"max-age={self.max_age}")

        if self.stale_while_revalidate is not None:
            directives.append(f"stale-while-revalidate={self.stale_while_revalidate}")

        if self.stale_if_error is not None:
            directives.append(f"stale-if-error={self.stale_if_error}")

        if self.must_revalidate:
            directives.append("must-revalidate")

        return directives

    def __str__(self) -> str:
        return ", ".join(self.directives())
