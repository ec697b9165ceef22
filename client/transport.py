import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class GraphQLRequestError(Exception):
    """A GraphQL call failed at the network, HTTP or GraphQL level.

    ``message`` is the first error message; ``errors`` keeps every error
    object the server sent (empty for network failures).
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None, status_code: Optional[int] = None):
        self.message = message
        self.errors = errors or []
        self.status_code = status_code
        super().__init__(message)

    @property
    def extensions(self) -> Dict[str, Any]:
        if self.errors:
            return self.errors[0].get("extensions") or {}
        return {}


class GraphQLTransport:
    """Posts ``{query, variables}`` to a GraphQL endpoint with httpx."""

    def __init__(self, url: str, http: Optional[httpx.AsyncClient] = None):
        self.url = url
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient()

    async def execute(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        include_credentials: bool = True,
    ) -> Dict[str, Any]:
        request = self.http.build_request(
            "POST", self.url, json={"query": query, "variables": variables or {}}
        )
        if not include_credentials:
            request.headers.pop("cookie", None)
        try:
            response = await self.http.send(request)
        except httpx.HTTPError as e:
            logger.error("GraphQL request to %s failed: %s", self.url, e)
            raise GraphQLRequestError(f"Network error: {e}") from e

        try:
            body = response.json()
        except ValueError:
            raise GraphQLRequestError(
                f"Unexpected response from server (HTTP {response.status_code})",
                status_code=response.status_code,
            )

        if not isinstance(body, dict):
            raise GraphQLRequestError(
                f"Unexpected response from server (HTTP {response.status_code})",
                status_code=response.status_code,
            )

        errors = body.get("errors")
        if errors:
            raise GraphQLRequestError(
                errors[0].get("message", "Unknown error"), errors, status_code=response.status_code
            )
        if response.status_code >= 400:
            raise GraphQLRequestError(f"HTTP error {response.status_code}", status_code=response.status_code)
        return body.get("data") or {}

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()
