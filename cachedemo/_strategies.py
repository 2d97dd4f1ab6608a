from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from typing_extensions import assert_never

from cachedemo._fingerprint import generate_etag
from cachedemo._headers import CacheDirectives, HeaderMutation, Headers
from cachedemo._state import DataStore
from cachedemo._utils import generate_http_date, isoformat_millis
from cachedemo._validation import (
    Decision,
    FullResponse,
    NotModified,
    RequestValidators,
    ValidatorPolicy,
    evaluate,
)
from cachedemo.models import Representation, StrategyResponse

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class Strategy:
    """
    A demo endpoint: the Cache-Control value it emits, the validators it
    honors and the body it builds.

    Attributes:
        name: Identifier, also the last segment of `path`.
        path: Route the strategy is served on.
        directives: Rendered into the Cache-Control header.
        policy: Validators honored on conditional requests. Every honored
            validator is also emitted as a response header and echoed in
            the body.
        message: Human readable `message` field.
        label: `cacheStrategy` field.
        title, description, section: Navigation page entry.
    """

    name: str
    directives: CacheDirectives
    message: str
    label: str
    title: str
    description: str
    section: str
    policy: ValidatorPolicy = ValidatorPolicy.NONE

    @property
    def path(self) -> str:
        return f"/{self.name}"

    @property
    def cache_control(self) -> str:
        return str(self.directives)

    @property
    def uses_etag(self) -> bool:
        return ValidatorPolicy.ETAG in self.policy

    @property
    def uses_last_modified(self) -> bool:
        return ValidatorPolicy.LAST_MODIFIED in self.policy


MAX_AGE = Strategy(
    name="max-age",
    directives=CacheDirectives(public=True, max_age=60),
    message="This response is cached for 60 seconds",
    label="max-age=60",
    title="Max-Age Caching",
    description="Cache for 60 seconds with max-age directive",
    section="Basic Cache Control",
)

NO_CACHE = Strategy(
    name="no-cache",
    directives=CacheDirectives(no_cache=True),
    message="This response uses no-cache (always revalidate)",
    label="no-cache",
    title="No-Cache",
    description="Always revalidate with server before using cached response",
    section="Basic Cache Control",
)

NO_STORE = Strategy(
    name="no-store",
    directives=CacheDirectives(no_store=True),
    message="This response is never cached (no-store)",
    label="no-store",
    title="No-Store",
    description="Never cache this response",
    section="Basic Cache Control",
)

STALE_WHILE_REVALIDATE = Strategy(
    name="stale-while-revalidate",
    directives=CacheDirectives(public=True, max_age=30, stale_while_revalidate=60),
    message="Fresh for 30s, then stale-while-revalidate for 60s",
    label="max-age=30, stale-while-revalidate=60",
    title="Stale-While-Revalidate (SWR)",
    description="Serve stale content while fetching fresh content in background",
    section="Advanced Cache Control",
)

STALE_IF_ERROR = Strategy(
    name="stale-if-error",
    directives=CacheDirectives(public=True, max_age=30, stale_if_error=300),
    message="Fresh for 30s, serve stale for 300s if server error occurs",
    label="max-age=30, stale-if-error=300",
    title="Stale-If-Error (SIE)",
    description="Serve stale content if server returns an error",
    section="Advanced Cache Control",
)

ETAG_DEMO = Strategy(
    name="etag-demo",
    directives=CacheDirectives(public=True, max_age=0, must_revalidate=True),
    message="This response uses ETag for validation",
    label="ETag validation",
    title="ETag Demo",
    description="Use ETags for efficient cache validation",
    section="Conditional Requests",
    policy=ValidatorPolicy.ETAG,
)

LAST_MODIFIED_DEMO = Strategy(
    name="last-modified-demo",
    directives=CacheDirectives(public=True, max_age=0, must_revalidate=True),
    message="This response uses Last-Modified for validation",
    label="Last-Modified validation",
    title="Last-Modified Demo",
    description="Use Last-Modified header for cache validation",
    section="Conditional Requests",
    policy=ValidatorPolicy.LAST_MODIFIED,
)

COMBINED_STRATEGY = Strategy(
    name="combined-strategy",
    directives=CacheDirectives(public=True, max_age=20, stale_while_revalidate=40, must_revalidate=True),
    message="Combined caching strategy: ETag + Last-Modified + SWR",
    label="ETag + Last-Modified + SWR",
    title="Combined Strategy",
    description="ETag + Last-Modified + SWR",
    section="Combined Strategies",
    policy=ValidatorPolicy.EITHER,
)

STRATEGIES: Tuple[Strategy, ...] = (
    MAX_AGE,
    NO_CACHE,
    NO_STORE,
    STALE_WHILE_REVALIDATE,
    STALE_IF_ERROR,
    ETAG_DEMO,
    LAST_MODIFIED_DEMO,
    COMBINED_STRATEGY,
)


def get_strategy(name: str) -> Strategy:
    for strategy in STRATEGIES:
        if strategy.name == name:
            return strategy
    raise KeyError(name)


def group_by_section(strategies: Tuple[Strategy, ...] = STRATEGIES) -> Dict[str, List[Strategy]]:
    sections: Dict[str, List[Strategy]] = {}
    for strategy in strategies:
        sections.setdefault(strategy.section, []).append(strategy)
    return sections


def build_representation(strategy: Strategy, data: DataStore, now: datetime) -> Representation:
    """Build the body without validators; `respond` fills those in."""
    return Representation(
        message=strategy.message,
        timestamp=isoformat_millis(now),
        counter=data.counter,
        cache_strategy=strategy.label,
        version=data.version if strategy.uses_etag else None,
    )


def respond(
    strategy: Strategy,
    data: DataStore,
    validators: RequestValidators,
    now: datetime,
) -> StrategyResponse:
    """
    Produce the response for a strategy endpoint.

    Pure with respect to its arguments: the same snapshot, validators and
    moment always give the same response.

    Args:
        strategy: The endpoint being served.
        data: Snapshot of the server data, read once for this request.
        validators: Conditional headers sent by the client.
        now: Construction time, rendered into the `timestamp` field.

    Returns:
        A 304 with cache and validator headers only, or a 200 carrying the
        JSON representation.
    """
    representation = build_representation(strategy, data, now)

    etag: Optional[str] = None
    last_modified: Optional[str] = None
    if strategy.uses_etag:
        etag = generate_etag(representation.logical_content())
    if strategy.uses_last_modified:
        last_modified = generate_http_date(data.last_updated)

    cache_headers: List[HeaderMutation] = [("Cache-Control", strategy.cache_control)]
    validator_headers: List[HeaderMutation] = []
    if etag is not None:
        validator_headers.append(("ETag", etag))
    if last_modified is not None:
        validator_headers.append(("Last-Modified", last_modified))

    decision: Decision = FullResponse()
    if strategy.policy:
        decision = evaluate(validators, etag, last_modified, strategy.policy)

    if isinstance(decision, NotModified):
        logger.debug("Handling decision: NotModified strategy=%s matched=%s", strategy.name, decision.matched)
        return StrategyResponse(
            status_code=304,
            headers=Headers().apply([*cache_headers, *validator_headers]),
        )
    elif isinstance(decision, FullResponse):
        logger.debug("Handling decision: FullResponse strategy=%s", strategy.name)
        representation = replace(representation, etag=etag, last_modified=last_modified)
        return StrategyResponse(
            status_code=200,
            headers=Headers().apply([*cache_headers, *validator_headers, ("Content-Type", JSON_CONTENT_TYPE)]),
            body=representation.to_json(),
        )
    else:
        assert_never(decision)
