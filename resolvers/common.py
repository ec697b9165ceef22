"""
Helpers shared by the entity resolvers: id parsing, conversion between
stored documents and plain records, model validation and the update flow.

A *record* is what resolvers return: a dict with ``id`` as a string,
reference ids as strings and date fields as ``datetime.date``.
"""

import logging
import secrets
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type

import pydantic
from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel

from auth import hash_password
from database import DocumentStore
from errors import NotFoundError, ValidationError
from schemas import Admin, Role, Student, User, collection_name

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

PLACEHOLDER_ADMIN_NAME = "Default Admin"
PLACEHOLDER_STUDENT_NAME = "Default Student"


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def parse_id(value: Any, entity: str = "record") -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid {entity} ID")


def try_parse_id(value: Any) -> Optional[ObjectId]:
    try:
        return parse_id(value)
    except ValidationError:
        return None


def date_fields(model_cls: Type[BaseModel]) -> List[str]:
    return [name for name, f in model_cls.model_fields.items() if f.annotation is date]


def _plain(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


def serialize(doc: Optional[Dict[str, Any]], model_cls: Optional[Type[BaseModel]] = None) -> Optional[Record]:
    if doc is None:
        return None
    record: Record = {"id": str(doc["_id"])}
    for key, value in doc.items():
        if key != "_id":
            record[key] = _plain(value)
    if model_cls is not None:
        for name in date_fields(model_cls):
            if isinstance(record.get(name), datetime):
                record[name] = record[name].date()
    return record


def serialize_list(docs: Iterable[Dict[str, Any]], model_cls: Optional[Type[BaseModel]] = None) -> List[Record]:
    return [serialize(d, model_cls) for d in docs]


def _stored(value: Any) -> Any:
    # BSON has no date type
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.min)
    if isinstance(value, list):
        return [_stored(v) for v in value]
    if isinstance(value, dict):
        return {k: _stored(v) for k, v in value.items()}
    return value


def to_document(model: BaseModel, fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    """Storage form of a validated model, optionally limited to ``fields``."""
    include = set(fields) if fields is not None else None
    data = model.model_dump(include=include)
    doc = {name: _stored(value) for name, value in data.items()}
    for name in type(model).REFERENCES:
        if name not in doc or doc[name] is None:
            continue
        if isinstance(doc[name], list):
            doc[name] = [ObjectId(v) for v in doc[name]]
        else:
            doc[name] = ObjectId(doc[name])
    return doc


def field_errors_from(exc: pydantic.ValidationError) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for err in exc.errors():
        loc = err.get("loc") or ()
        key = to_camel(str(loc[0])) if loc else "input"
        msg = err.get("msg", "Invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        errors.setdefault(key, msg)
    return errors


def validate_model(model_cls: Type[BaseModel], data: Dict[str, Any]) -> BaseModel:
    try:
        return model_cls(**data)
    except pydantic.ValidationError as e:
        raise ValidationError("Validation error", field_errors=field_errors_from(e))


def require(store: DocumentStore, model_cls: Type[BaseModel], record_id: Any) -> Tuple[ObjectId, Dict[str, Any]]:
    """Return ``(oid, document)`` or raise the not-found error for the entity."""
    entity = model_cls.__name__
    oid = parse_id(record_id, entity.lower())
    doc = store.find_by_id(collection_name(model_cls), oid)
    if doc is None:
        raise NotFoundError(f"{entity} not found")
    return oid, doc


def find(store: DocumentStore, model_cls: Type[BaseModel], record_id: Any) -> Optional[Record]:
    """Lenient lookup used by nested fields; dangling or malformed ids give None."""
    oid = try_parse_id(record_id) if record_id is not None else None
    if oid is None:
        return None
    return serialize(store.find_by_id(collection_name(model_cls), oid), model_cls)


def find_many(store: DocumentStore, model_cls: Type[BaseModel], record_ids: Iterable[Any]) -> List[Record]:
    oids = [o for o in (try_parse_id(r) for r in record_ids or []) if o is not None]
    return serialize_list(store.find_by_ids(collection_name(model_cls), oids), model_cls)


def get_all(store: DocumentStore, model_cls: Type[BaseModel], filter_dict=None, sort=None, limit=None) -> List[Record]:
    docs = store.get_documents(collection_name(model_cls), filter_dict, sort=sort, limit=limit)
    return serialize_list(docs, model_cls)


def get_one(store: DocumentStore, model_cls: Type[BaseModel], record_id: Any) -> Record:
    _, doc = require(store, model_cls, record_id)
    return serialize(doc, model_cls)


def insert(store: DocumentStore, model: BaseModel) -> Record:
    model_cls = type(model)
    new_id = store.create_document(collection_name(model_cls), to_document(model))
    logger.info("Created %s %s", collection_name(model_cls), new_id)
    return serialize(store.find_by_id(collection_name(model_cls), ObjectId(new_id)), model_cls)


def merge(model_cls: Type[BaseModel], existing: Dict[str, Any], changes: Dict[str, Any]) -> BaseModel:
    """Validate the stored record with ``changes`` applied on top."""
    current = serialize(existing, model_cls)
    data = {name: current[name] for name in model_cls.model_fields if name in current}
    data.update(changes)
    return validate_model(model_cls, data)


def save_changes(
    store: DocumentStore,
    model_cls: Type[BaseModel],
    oid: ObjectId,
    model: BaseModel,
    changes: Dict[str, Any],
) -> Record:
    """Write only the changed fields of an already merged model."""
    doc = to_document(model, changes.keys())
    updated = store.update_by_id(collection_name(model_cls), oid, doc)
    if updated is None:
        raise NotFoundError(f"{model_cls.__name__} not found")
    logger.info("Updated %s %s fields=%s", collection_name(model_cls), oid, sorted(changes))
    return serialize(updated, model_cls)


def remove(store: DocumentStore, model_cls: Type[BaseModel], record_id: Any) -> Record:
    oid = parse_id(record_id, model_cls.__name__.lower())
    doc = store.delete_by_id(collection_name(model_cls), oid)
    if doc is None:
        raise NotFoundError(f"{model_cls.__name__} not found")
    logger.info("Deleted %s %s", collection_name(model_cls), oid)
    return serialize(doc, model_cls)


# -----------------------------
# Reference checks and placeholders
# -----------------------------

def missing_ids(store: DocumentStore, model_cls: Type[BaseModel], record_ids: Iterable[str]) -> List[str]:
    """Ids from ``record_ids`` that are malformed or point at nothing."""
    missing = []
    for rid in record_ids:
        oid = try_parse_id(rid)
        if oid is None or not store.exists(collection_name(model_cls), oid):
            missing.append(rid)
    return missing


def placeholder_user(store: DocumentStore, name: str, role: Role) -> ObjectId:
    existing = store.find_one(collection_name(User), {"name": name})
    if existing is not None:
        return existing["_id"]
    email = name.lower().replace(" ", "-") + "@placeholder.local"
    user = User(name=name, email=email, password=hash_password(secrets.token_urlsafe(16)), role=role)
    new_id = store.create_document(collection_name(User), to_document(user))
    logger.warning("Provisioned placeholder user '%s' (%s)", name, new_id)
    return ObjectId(new_id)


def provision_admin(store: DocumentStore) -> str:
    user_oid = placeholder_user(store, PLACEHOLDER_ADMIN_NAME, Role.ADMIN)
    existing = store.find_one(collection_name(Admin), {"user_id": user_oid})
    if existing is not None:
        return str(existing["_id"])
    admin = Admin(user_id=str(user_oid))
    new_id = store.create_document(collection_name(Admin), to_document(admin))
    logger.warning("Provisioned placeholder admin %s", new_id)
    return new_id


def provision_student(store: DocumentStore) -> str:
    user_oid = placeholder_user(store, PLACEHOLDER_STUDENT_NAME, Role.STUDENT)
    existing = store.find_one(collection_name(Student), {"user_id": user_oid})
    if existing is not None:
        return str(existing["_id"])
    student = Student(user_id=str(user_oid), university_id="N/A", major="Undeclared", year="1")
    new_id = store.create_document(collection_name(Student), to_document(student))
    logger.warning("Provisioned placeholder student %s", new_id)
    return new_id


def resolve_creator(store: DocumentStore, admin_id: str, auto_provision: bool, errors: Dict[str, str]) -> str:
    if not missing_ids(store, Admin, [admin_id]):
        return admin_id
    if auto_provision:
        return provision_admin(store)
    errors["createdBy"] = "Admin not found"
    return admin_id


def resolve_students(
    store: DocumentStore, student_ids: List[str], auto_provision: bool, errors: Dict[str, str]
) -> List[str]:
    missing = missing_ids(store, Student, student_ids)
    if not missing:
        return student_ids
    if not auto_provision:
        errors["studentsWorkingOn"] = "Students not found: " + ", ".join(missing)
        return student_ids
    placeholder = provision_student(store)
    resolved = []
    for sid in student_ids:
        sid = placeholder if sid in missing else sid
        if sid not in resolved:
            resolved.append(sid)
    return resolved
