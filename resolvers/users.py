import logging
from typing import Any, Dict, List, Optional

from auth import hash_password
from database import DocumentStore
from errors import ConflictError, ValidationError
from schemas import User, collection_name

from resolvers import common

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "User with this name or email already exists"


def _check_unique(store: DocumentStore, name: str, email: str, exclude=None) -> None:
    query: Dict[str, Any] = {"$or": [{"name": name}, {"email": email}]}
    if exclude is not None:
        query["_id"] = {"$ne": exclude}
    if store.find_one(collection_name(User), query) is not None:
        raise ConflictError(DUPLICATE_MESSAGE)


def get_all(store: DocumentStore) -> List[Dict[str, Any]]:
    return common.get_all(store, User)


def get_one(store: DocumentStore, user_id: str) -> Dict[str, Any]:
    return common.get_one(store, User, user_id)


def find_user(store: DocumentStore, user_id: Optional[str]) -> Optional[Dict[str, Any]]:
    return common.find(store, User, user_id)


def get_by_name(store: DocumentStore, name: str) -> Optional[Dict[str, Any]]:
    return common.serialize(store.find_one(collection_name(User), {"name": name.strip()}), User)


def create(store: DocumentStore, fields: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(fields)
    password = data.get("password")
    if not password:
        raise ValidationError(field_errors={"password": "Password is required"})
    data["password"] = hash_password(password)
    user = common.validate_model(User, data)
    _check_unique(store, user.name, user.email)
    return common.insert(store, user)


def update(store: DocumentStore, user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    oid, existing = common.require(store, User, user_id)
    changes = dict(fields)
    # role is fixed at signup; an explicit null means "leave it"
    role = changes.pop("role", None)
    if role is not None and role != existing.get("role"):
        raise ValidationError("User role cannot be changed", field="role")
    if "password" in changes:
        if not changes["password"]:
            raise ValidationError(field_errors={"password": "Password is required"})
        changes["password"] = hash_password(changes["password"])
    if not changes:
        return common.serialize(existing, User)
    user = common.merge(User, existing, changes)
    if "name" in changes or "email" in changes:
        _check_unique(store, user.name, user.email, exclude=oid)
    return common.save_changes(store, User, oid, user, changes)


def delete(store: DocumentStore, user_id: str) -> Dict[str, Any]:
    return common.remove(store, User, user_id)
