from typing import Any, Callable, Optional

from starlette.concurrency import run_in_threadpool
from strawberry.fastapi import BaseContext

from auth import SessionUser, TokenService, extract_token
from config import Settings
from database import DocumentStore
from errors import AuthenticationError


class GraphContext(BaseContext):
    """Per-request context handed to every resolver as ``info.context``.

    ``request`` and ``response`` are filled in by the GraphQL router after
    the context getter returns.
    """

    def __init__(self, store: DocumentStore, settings: Settings, tokens: TokenService):
        super().__init__()
        self.store = store
        self.settings = settings
        self.tokens = tokens

    async def run(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Call a store-bound resolver function off the event loop."""
        return await run_in_threadpool(fn, self.store, *args, **kwargs)

    def _token(self) -> Optional[str]:
        if self.request is None:
            return None
        return extract_token(self.request.headers, self.request.cookies, self.settings.SESSION_COOKIE_NAME)

    @property
    def session_user(self) -> Optional[SessionUser]:
        """Signed-in user, or None when the session is missing or invalid."""
        token = self._token()
        if not token:
            return None
        try:
            return self.tokens.verify(token)
        except AuthenticationError:
            return None

    def require_user(self) -> SessionUser:
        return self.tokens.verify(self._token())

    @property
    def auto_provision(self) -> bool:
        return self.settings.AUTO_PROVISION_REFERENCES


def context_getter(store: DocumentStore, settings: Settings, tokens: TokenService):
    async def get_context() -> GraphContext:
        return GraphContext(store, settings, tokens)

    return get_context
