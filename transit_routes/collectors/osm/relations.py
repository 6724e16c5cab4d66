"""
Relation resolution

Walks nested route/network/route_master relations down to the terminal
routes, i.e. the relations that reference ways directly.
"""

from collections import deque
from concurrent.futures import ThreadPoolExecutor, FIRST_COMPLETED, wait
from enum import Enum
from typing import Deque, Dict, Iterable, List, Optional, Tuple
from loguru import logger

from .context import ResolutionContext
from .fetcher import EntityFetcher
from .models import OSMRelation, RouteRef
from ...errors import FetchError, EmptyRelationError

ROUTE_RELATION_TYPES = {"route", "network", "route_master"}

WorkItem = Tuple[int, int]  # (relation id, parent id)


class RelationState(Enum):
    """Final state of a dispatched relation"""
    TERMINAL = "terminal"
    RECURSING = "recursing"
    IGNORED = "ignored"
    FAILED = "failed"


def classify(relation: OSMRelation) -> RelationState:
    """
    Classify a fetched relation

    A relation with any way member is a terminal route, even if it also has
    sub-relations: there is no other reliable signal for the bottom of the
    hierarchy, since route and route_master are used interchangeably.
    """
    relation_type = relation.tags.get("type")
    if relation_type is None or relation_type not in ROUTE_RELATION_TYPES:
        return RelationState.IGNORED
    if relation.way_members:
        return RelationState.TERMINAL
    if relation.relation_members:
        return RelationState.RECURSING
    return RelationState.FAILED


class RelationResolver:
    """Resolves root relations into the set of terminal routes"""

    def __init__(self, fetcher: EntityFetcher, max_workers: int = 10):
        self.fetcher = fetcher
        self.max_workers = max_workers

    def resolve(self, root_ids: Iterable[int], context: ResolutionContext) -> Dict[int, RelationState]:
        """
        Resolve all relations reachable from root_ids

        Work is driven by an explicit queue: every finished relation hands
        back its sub-relations, which are queued with the relation as
        parent. At most max_workers relations are in flight. Terminal routes
        are collected in context.routes, in completion order.

        Args:
            root_ids: Relation ids to start from (parent 0)
            context: Run-scoped state

        Returns:
            Final state of every relation that was dispatched, by id
        """
        states: Dict[int, RelationState] = {}
        backlog: Deque[WorkItem] = deque()
        for relation_id in root_ids:
            logger.debug(f"pushing relation {relation_id} to queue")
            backlog.append((relation_id, 0))

        in_flight = {}
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            while backlog or in_flight:
                while backlog and len(in_flight) < self.max_workers:
                    relation_id, parent = backlog.popleft()
                    future = executor.submit(self._resolve_one, relation_id, parent, context)
                    in_flight[future] = relation_id

                done, _ = wait(in_flight, return_when=FIRST_COMPLETED)
                for future in done:
                    relation_id = in_flight.pop(future)
                    state, children = future.result()
                    if state is not None:
                        states[relation_id] = state
                    backlog.extend(children)

        logger.info(f"Resolved {len(states)} relations, found {len(context.routes)} routes")
        return states

    def _resolve_one(
        self,
        relation_id: int,
        parent: int,
        context: ResolutionContext
    ) -> Tuple[Optional[RelationState], List[WorkItem]]:
        # prevent double fetching
        if not context.claim(relation_id):
            logger.debug(f"already fetched relation {relation_id}")
            return None, []

        try:
            relation = self.fetcher.fetch_relation(relation_id)
        except FetchError as e:
            logger.warning(f"error fetching relation {relation_id}: {e}")
            context.record(f"relation {relation_id} (parent {parent})", e)
            context.mark_unreachable(relation_id)
            return RelationState.FAILED, []

        state = classify(relation)

        if state is RelationState.TERMINAL:
            logger.debug(
                f"found single line {relation_id}: {relation.tags.get('name')} ({relation.tags.get('ref')})"
            )
            context.add_route(RouteRef(relation=relation, parent=parent))
            return state, []

        if state is RelationState.RECURSING:
            children = [(member.ref, relation_id) for member in relation.relation_members]
            logger.debug(f"relation {relation_id} has {len(children)} subrelations")
            return state, children

        if state is RelationState.IGNORED:
            logger.debug(f"osm relation {relation_id} has ignored type {relation.tags.get('type')}")
            return state, []

        error = EmptyRelationError(relation_id)
        logger.warning(f"ran into trouble with relation {relation_id}: {error}")
        context.record(f"relation {relation_id} (parent {parent})", error)
        return state, []
