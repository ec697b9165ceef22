import logging
from typing import Any, Dict, List, Optional, Tuple

from database import DocumentStore
from errors import ConflictError, NotFoundError, ValidationError
from schemas import Admin, Role, User, collection_name

from resolvers import common

logger = logging.getLogger(__name__)


def _check_user(store: DocumentStore, user_id: str, auto_provision: bool = False) -> Tuple[str, bool]:
    """Return a usable user id for an admin record and whether it is the placeholder user."""
    oid = common.try_parse_id(user_id)
    user = store.find_by_id(collection_name(User), oid) if oid is not None else None
    if user is None:
        if auto_provision:
            return str(common.placeholder_user(store, common.PLACEHOLDER_ADMIN_NAME, Role.ADMIN)), True
        raise ValidationError("Reference validation error", field_errors={"userId": "User not found"})
    if user.get("role") != Role.ADMIN.value:
        raise ValidationError("User must have the admin role", field="userId")
    return str(oid), False


def get_all(store: DocumentStore) -> List[Dict[str, Any]]:
    return common.get_all(store, Admin)


def get_one(store: DocumentStore, admin_id: str) -> Dict[str, Any]:
    return common.get_one(store, Admin, admin_id)


def find_admin(store: DocumentStore, admin_id: Optional[str]) -> Optional[Dict[str, Any]]:
    return common.find(store, Admin, admin_id)


def get_by_user(store: DocumentStore, user_id: str) -> Dict[str, Any]:
    oid = common.parse_id(user_id, "user")
    doc = store.find_one(collection_name(Admin), {"user_id": oid})
    if doc is None:
        raise NotFoundError("Admin not found")
    return common.serialize(doc, Admin)


def create(store: DocumentStore, fields: Dict[str, Any], auto_provision: bool = False) -> Dict[str, Any]:
    admin = common.validate_model(Admin, fields)
    user_id, provisioned = _check_user(store, admin.user_id, auto_provision)
    existing = store.find_one(collection_name(Admin), {"user_id": common.parse_id(user_id)})
    if existing is not None:
        if provisioned:
            # the placeholder user keeps a single admin record
            return common.serialize(existing, Admin)
        raise ConflictError("This user is already an admin")
    return common.insert(store, admin.model_copy(update={"user_id": user_id}))


def update(store: DocumentStore, admin_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    oid, existing = common.require(store, Admin, admin_id)
    changes = dict(fields)
    if not changes:
        return common.serialize(existing, Admin)
    if "user_id" in changes and changes["user_id"] != str(existing.get("user_id")):
        changes["user_id"], _ = _check_user(store, changes["user_id"])
        taken = store.find_one(collection_name(Admin), {"user_id": common.parse_id(changes["user_id"])})
        if taken is not None:
            raise ConflictError("This user is already an admin")
    admin = common.merge(Admin, existing, changes)
    return common.save_changes(store, Admin, oid, admin, changes)


def delete(store: DocumentStore, admin_id: str) -> Dict[str, Any]:
    return common.remove(store, Admin, admin_id)
