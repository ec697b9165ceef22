import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from database import DocumentStore
from errors import ConflictError, NotFoundError, ValidationError
from schemas import Role, Student, User, collection_name

from resolvers import common

logger = logging.getLogger(__name__)


def _check_user(store: DocumentStore, user_id: str, auto_provision: bool = False) -> Tuple[str, bool]:
    oid = common.try_parse_id(user_id)
    user = store.find_by_id(collection_name(User), oid) if oid is not None else None
    if user is None:
        if auto_provision:
            return str(common.placeholder_user(store, common.PLACEHOLDER_STUDENT_NAME, Role.STUDENT)), True
        raise ValidationError("Reference validation error", field_errors={"userId": "User not found"})
    if user.get("role") != Role.STUDENT.value:
        raise ValidationError("User must have the student role", field="userId")
    return str(oid), False


def _existing_for(store: DocumentStore, user_id: str) -> Optional[Dict[str, Any]]:
    return store.find_one(collection_name(Student), {"user_id": common.parse_id(user_id)})


def _ensure_free(store: DocumentStore, user_id: str) -> None:
    if _existing_for(store, user_id) is not None:
        raise ConflictError("This user is already a student")


def get_all(store: DocumentStore) -> List[Dict[str, Any]]:
    return common.get_all(store, Student)


def get_one(store: DocumentStore, student_id: str) -> Dict[str, Any]:
    return common.get_one(store, Student, student_id)


def find_student(store: DocumentStore, student_id: Optional[str]) -> Optional[Dict[str, Any]]:
    return common.find(store, Student, student_id)


def find_students(store: DocumentStore, student_ids: Iterable[str]) -> List[Dict[str, Any]]:
    """Existing students among ``student_ids``; deleted ones are skipped."""
    return common.find_many(store, Student, student_ids)


def get_by_user(store: DocumentStore, user_id: str) -> Dict[str, Any]:
    oid = common.parse_id(user_id, "user")
    doc = store.find_one(collection_name(Student), {"user_id": oid})
    if doc is None:
        raise NotFoundError("Student not found")
    return common.serialize(doc, Student)


def create(store: DocumentStore, fields: Dict[str, Any], auto_provision: bool = False) -> Dict[str, Any]:
    student = common.validate_model(Student, fields)
    user_id, provisioned = _check_user(store, student.user_id, auto_provision)
    if provisioned:
        # the placeholder user keeps a single student record
        existing = _existing_for(store, user_id)
        if existing is not None:
            return common.serialize(existing, Student)
    _ensure_free(store, user_id)
    return common.insert(store, student.model_copy(update={"user_id": user_id}))


def update(store: DocumentStore, student_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    oid, existing = common.require(store, Student, student_id)
    changes = dict(fields)
    if not changes:
        return common.serialize(existing, Student)
    if "user_id" in changes and changes["user_id"] != str(existing.get("user_id")):
        changes["user_id"], _ = _check_user(store, changes["user_id"])
        _ensure_free(store, changes["user_id"])
    student = common.merge(Student, existing, changes)
    return common.save_changes(store, Student, oid, student, changes)


def delete(store: DocumentStore, student_id: str) -> Dict[str, Any]:
    return common.remove(store, Student, student_id)
