"""
Entity fetcher

Retrieves one node, way or relation through the API client and normalizes it.
Optionally memoizes nodes and ways for the lifetime of the fetcher, so a node
shared by several ways (or a way shared by several routes) is requested once.
"""

import threading
from concurrent.futures import Future
from typing import Dict, Optional, Tuple
from loguru import logger

from .api_client import OSMAPIClient
from .models import OSMNode, OSMWay, OSMRelation, ENTITY_KINDS, NODE, WAY, RELATION
from .parser import OSMResponseParser, OSMEntity
from ...errors import (
    FetchError, FetchErrorKind, TransportError, ParseError, MalformedEntityError
)

NOT_FOUND_STATUS_CODES = (404, 410)


class EntityFetcher:
    """Fetches and normalizes single OSM entities"""

    def __init__(self, api_client: OSMAPIClient, parser: Optional[OSMResponseParser] = None,
                 share_member_cache: bool = False):
        self.api_client = api_client
        self.parser = parser or OSMResponseParser()
        self.share_member_cache = share_member_cache
        self._memo: Dict[Tuple[str, int], Future] = {}
        self._memo_lock = threading.Lock()

    def fetch(self, kind: str, entity_id: int) -> OSMEntity:
        """
        Fetch one entity

        Args:
            kind: "node", "way" or "relation"
            entity_id: OSM id

        Returns:
            The normalized entity

        Raises:
            FetchError: NOT_FOUND, TIMEOUT, TRANSPORT or MALFORMED
        """
        if kind not in ENTITY_KINDS:
            raise ValueError(f"unknown entity kind: {kind}")

        # Relations are deduplicated by the resolver's visited-set instead
        if not self.share_member_cache or kind == RELATION:
            return self._fetch(kind, entity_id)

        key = (kind, entity_id)
        with self._memo_lock:
            pending = self._memo.get(key)
            owner = pending is None
            if owner:
                pending = Future()
                self._memo[key] = pending

        if not owner:
            # Waits for the thread that owns the request; failures are shared too
            return pending.result()

        try:
            entity = self._fetch(kind, entity_id)
        except Exception as e:
            pending.set_exception(e)
            raise
        pending.set_result(entity)
        return entity

    def _fetch(self, kind: str, entity_id: int) -> OSMEntity:
        url = self.api_client.url_for(kind, entity_id)
        try:
            body = self.api_client.get(url)
        except TransportError as e:
            if e.timed_out:
                reason = FetchErrorKind.TIMEOUT
            elif e.status_code in NOT_FOUND_STATUS_CODES:
                reason = FetchErrorKind.NOT_FOUND
            else:
                reason = FetchErrorKind.TRANSPORT
            raise FetchError(reason, kind, entity_id, str(e)) from e

        try:
            entity = self.parser.parse(body)
        except (ParseError, MalformedEntityError) as e:
            raise FetchError(FetchErrorKind.MALFORMED, kind, entity_id, str(e)) from e

        if entity.kind != kind or entity.id != entity_id:
            raise FetchError(
                FetchErrorKind.MALFORMED, kind, entity_id,
                f"response holds {entity.kind} {entity.id}"
            )

        logger.debug(f"got {kind} {entity_id}")
        return entity

    def fetch_node(self, node_id: int) -> OSMNode:
        return self.fetch(NODE, node_id)

    def fetch_way(self, way_id: int) -> OSMWay:
        return self.fetch(WAY, way_id)

    def fetch_relation(self, relation_id: int) -> OSMRelation:
        return self.fetch(RELATION, relation_id)
