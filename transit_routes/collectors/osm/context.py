"""
Run-scoped resolution state

One ResolutionContext per resolve_all() call. It is the only state shared
between worker threads: the visited relation ids, the terminal routes found
so far, the relations that could not be fetched and the non-fatal issues
collected along the way.
"""

import threading
from typing import List, Set

from .models import RouteRef
from ...errors import ResolutionIssue


class ResolutionContext:
    """Visited-set, route list and issue list for one run"""

    def __init__(self):
        self._lock = threading.Lock()
        self._visited: Set[int] = set()
        self._unreachable: Set[int] = set()
        self._routes: List[RouteRef] = []
        self._issues: List[ResolutionIssue] = []

    def claim(self, relation_id: int) -> bool:
        """Mark a relation as dispatched; False if it already was"""
        with self._lock:
            if relation_id in self._visited:
                return False
            self._visited.add(relation_id)
            return True

    def mark_unreachable(self, relation_id: int):
        with self._lock:
            self._unreachable.add(relation_id)

    def add_route(self, route: RouteRef):
        with self._lock:
            self._routes.append(route)

    def record(self, context: str, error: Exception):
        with self._lock:
            self._issues.append(ResolutionIssue(context=context, error=error))

    @property
    def visited(self) -> Set[int]:
        with self._lock:
            return set(self._visited)

    @property
    def unreachable(self) -> Set[int]:
        """Relation ids whose fetch failed"""
        with self._lock:
            return set(self._unreachable)

    @property
    def routes(self) -> List[RouteRef]:
        with self._lock:
            return list(self._routes)

    @property
    def issues(self) -> List[ResolutionIssue]:
        with self._lock:
            return list(self._issues)
