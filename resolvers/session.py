import logging
from datetime import timedelta
from typing import Any, Dict, Optional, Tuple

from auth import SessionUser, TokenService, verify_password
from database import DocumentStore
from errors import AuthenticationError
from schemas import User, collection_name

from resolvers import common

logger = logging.getLogger(__name__)


def login(
    store: DocumentStore,
    tokens: TokenService,
    name: str,
    password: str,
    expires_delta: Optional[timedelta] = None,
) -> Tuple[Dict[str, Any], str]:
    """Check credentials and return ``(user, token)``."""
    doc = store.find_one(collection_name(User), {"name": (name or "").strip()})
    if doc is None or not verify_password(password or "", doc.get("password", "")):
        logger.info("Failed login for '%s'", name)
        raise AuthenticationError("Invalid credentials")
    user = common.serialize(doc, User)
    token = tokens.create_token(user, expires_delta=expires_delta)
    logger.info("User %s logged in", user["id"])
    return user, token


def current_user(store: DocumentStore, session: Optional[SessionUser]) -> Optional[Dict[str, Any]]:
    if session is None:
        return None
    return common.find(store, User, session.user_id)
