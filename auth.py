"""
Password hashing and signed session tokens.

One mechanism only: an HS256 JWT carrying ``{sub, role, name, exp}``. It is
set as an http-only cookie by the ``login`` mutation and may also be sent as
an ``Authorization: Bearer`` header.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from errors import AuthenticationError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        # Not a recognised hash (e.g. legacy plaintext)
        return False


@dataclass(frozen=True)
class SessionUser:
    user_id: str
    role: str
    name: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class TokenService:
    """Issues and verifies session tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 60 * 24):
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def create_token(self, user: Mapping[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=self.expire_minutes))
        to_encode = {
            "sub": str(user["id"]),
            "role": user["role"],
            "name": user.get("name", ""),
            "exp": expire,
        }
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise AuthenticationError("Session expired. Please log in again.")
        except JWTError:
            raise AuthenticationError("Invalid session. Please log in again.")

    def verify(self, token: Optional[str]) -> SessionUser:
        if not token:
            raise AuthenticationError()
        payload = self.decode(token)
        if not payload.get("sub") or not payload.get("role"):
            raise AuthenticationError("Invalid session. Please log in again.")
        return SessionUser(user_id=payload["sub"], role=payload["role"], name=payload.get("name", ""))


def extract_token(headers: Mapping[str, str], cookies: Mapping[str, str], cookie_name: str = "session") -> Optional[str]:
    """Session cookie first, then a bearer Authorization header."""
    token = cookies.get(cookie_name)
    if token:
        return token
    auth = headers.get("authorization") or headers.get("Authorization")
    if auth and auth.lower().startswith("bearer "):
        return auth.split(" ", 1)[1].strip() or None
    return None
