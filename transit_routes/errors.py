"""
Error taxonomy for transit route resolution

Only FatalError stops a run. Everything else is caught at the fan-out
boundary where it happened and collected as a ResolutionIssue.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence


class TransitRoutesError(Exception):
    """Base class for all resolver errors"""


class TransportError(TransitRoutesError):
    """HTTP request failed after the client's retries"""

    def __init__(self, message: str, status_code: Optional[int] = None, timed_out: bool = False):
        super().__init__(message)
        self.status_code = status_code
        self.timed_out = timed_out


class ParseError(TransitRoutesError):
    """Response body is not well-formed XML"""


class MalformedEntityError(TransitRoutesError):
    """Parsed document is not a usable node, way or relation"""


class FetchErrorKind(Enum):
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    MALFORMED = "malformed"


class FetchError(TransitRoutesError):
    """A single entity could not be fetched"""

    def __init__(self, reason: FetchErrorKind, kind: str, entity_id: int, detail: str = ""):
        message = f"{reason.value}: {kind} {entity_id}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.reason = reason
        self.kind = kind
        self.entity_id = entity_id


class PartialFailure(TransitRoutesError):
    """A member of a composite could not be resolved"""


class WayResolutionError(PartialFailure):
    """At least one node of a way failed; the way is discarded"""

    def __init__(self, way_id: int, failed_node_ids: Sequence[int]):
        super().__init__(
            f"way {way_id}: {len(failed_node_ids)} node(s) unresolved: "
            + ", ".join(str(n) for n in failed_node_ids)
        )
        self.way_id = way_id
        self.failed_node_ids = list(failed_node_ids)


class RouteMaterializationError(PartialFailure):
    """No way of a route could be resolved"""

    def __init__(self, route_id: int, detail: str = "no resolvable ways"):
        super().__init__(f"route {route_id}: {detail}")
        self.route_id = route_id


class EmptyRelationError(PartialFailure):
    """Route-typed relation with neither way nor relation members"""

    def __init__(self, relation_id: int):
        super().__init__(f"relation {relation_id} has no way or relation members")
        self.relation_id = relation_id


class FatalError(TransitRoutesError):
    """The run cannot produce anything meaningful"""


@dataclass(frozen=True)
class ResolutionIssue:
    """A non-fatal error and where it happened"""
    context: str
    error: Exception

    def __str__(self) -> str:
        return f"{self.context}: {self.error}"
