"""
Request executor with loading/error state and a response cache.

Views share one ``GraphQLContext``. Reads go through the cache unless told
otherwise; successful mutations drop the cached reads named for them in the
invalidation rules so the next fetch goes to the server.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from client.cache import QueryCache
from client.queries import INVALIDATION_RULES
from client.transport import GraphQLRequestError, GraphQLTransport

logger = logging.getLogger(__name__)

Listener = Callable[["GraphQLContext"], None]


def is_mutation(query: str) -> bool:
    return query.strip().upper().startswith("MUTATION")


class GraphQLContext:
    def __init__(
        self,
        transport: GraphQLTransport,
        cache: Optional[QueryCache] = None,
        invalidation_rules: Optional[Mapping[str, Iterable[str]]] = None,
    ):
        self.transport = transport
        self.cache = cache if cache is not None else QueryCache()
        self.invalidation_rules = INVALIDATION_RULES if invalidation_rules is None else invalidation_rules
        self.loading = False
        self.error: Optional[str] = None
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` on every loading/error change; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, **changes: Any) -> None:
        for name, value in changes.items():
            setattr(self, name, value)
        for listener in list(self._listeners):
            listener(self)

    async def execute_query(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        include_credentials: bool = True,
        use_cache: Optional[bool] = None,
        ttl: Optional[float] = None,
    ) -> Dict[str, Any]:
        mutation = is_mutation(query)
        if use_cache is None:
            use_cache = not mutation
        key = self.cache.make_key(query, variables)

        if use_cache:
            entry = self.cache.get(key, ttl)
            if entry is not None:
                return entry.data

        self._set_state(loading=True, error=None)
        try:
            data = await self.transport.execute(query, variables, include_credentials)
            if mutation:
                self._invalidate_for(data)
            else:
                self.cache.put(key, data)
            return data
        except GraphQLRequestError as e:
            self._set_state(error=e.message)
            raise
        finally:
            self._set_state(loading=False)

    def _invalidate_for(self, data: Dict[str, Any]) -> None:
        for field in data:
            for query in self.invalidation_rules.get(field, ()):
                self.invalidate(query)

    def get_cached_data(self, query: str, variables: Optional[Dict[str, Any]] = None, ttl: Optional[float] = None):
        entry = self.cache.get(self.cache.make_key(query, variables), ttl)
        return entry.data if entry is not None else None

    def invalidate(self, query: str) -> int:
        removed = self.cache.invalidate(self.cache.prefix_for(query))
        if removed:
            logger.debug("Invalidated %d cached entries", removed)
        return removed

    def clear_cache(self) -> None:
        self.cache.clear()

    def clear_error(self) -> None:
        self._set_state(error=None)
