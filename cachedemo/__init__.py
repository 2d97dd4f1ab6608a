from cachedemo._exceptions import CacheDemoError, SimulatedServerError
from cachedemo._fingerprint import generate_etag
from cachedemo._headers import CacheDirectives, Headers
from cachedemo._state import DataStore, ServerState
from cachedemo._strategies import (
    COMBINED_STRATEGY as COMBINED_STRATEGY,
    ETAG_DEMO as ETAG_DEMO,
    LAST_MODIFIED_DEMO as LAST_MODIFIED_DEMO,
    MAX_AGE as MAX_AGE,
    NO_CACHE as NO_CACHE,
    NO_STORE as NO_STORE,
    STALE_IF_ERROR as STALE_IF_ERROR,
    STALE_WHILE_REVALIDATE as STALE_WHILE_REVALIDATE,
    STRATEGIES as STRATEGIES,
    Strategy as Strategy,
    get_strategy as get_strategy,
    respond as respond,
)
from cachedemo._validation import (
    Decision as Decision,
    FullResponse as FullResponse,
    NotModified as NotModified,
    RequestValidators as RequestValidators,
    ValidatorPolicy as ValidatorPolicy,
    evaluate as evaluate,
)
from cachedemo.models import Representation, StrategyResponse

__all__ = (
    # State
    "DataStore",
    "ServerState",
    # Fingerprints and validation
    "generate_etag",
    "RequestValidators",
    "ValidatorPolicy",
    "Decision",
    "FullResponse",
    "NotModified",
    "evaluate",
    # Strategies
    "Strategy",
    "STRATEGIES",
    "MAX_AGE",
    "NO_CACHE",
    "NO_STORE",
    "STALE_WHILE_REVALIDATE",
    "STALE_IF_ERROR",
    "ETAG_DEMO",
    "LAST_MODIFIED_DEMO",
    "COMBINED_STRATEGY",
    "get_strategy",
    "respond",
    ## Models
    "Representation",
    "StrategyResponse",
    ## Headers
    "Headers",
    "CacheDirectives",
    # Errors
    "CacheDemoError",
    "SimulatedServerError",
)
