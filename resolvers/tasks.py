import logging
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId

from database import DocumentStore
from errors import ConflictError, ValidationError
from schemas import Project, Task, collection_name

from resolvers import common

logger = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 5


def _check_title(store: DocumentStore, title: str, project_id: str, exclude: Optional[ObjectId] = None) -> None:
    project_oid = common.try_parse_id(project_id)
    if project_oid is None:
        # a malformed project id is reported by the reference check
        return
    query: Dict[str, Any] = {"title": title, "project_id": project_oid}
    if exclude is not None:
        query["_id"] = {"$ne": exclude}
    if store.find_one(collection_name(Task), query) is not None:
        raise ConflictError("Task with this title already exists in this project")


def _resolve_references(store: DocumentStore, task: Task, fields, auto_provision: bool) -> Task:
    errors: Dict[str, str] = {}
    updates: Dict[str, Any] = {}
    if "project_id" in fields and common.missing_ids(store, Project, [task.project_id]):
        errors["projectId"] = "Project not found"
        if auto_provision:
            # projects are never provisioned; fail before any placeholder is written
            raise ValidationError("Reference validation error", field_errors=errors)
    if "created_by" in fields:
        updates["created_by"] = common.resolve_creator(store, task.created_by, auto_provision, errors)
    if "students_working_on" in fields:
        updates["students_working_on"] = common.resolve_students(
            store, task.students_working_on, auto_provision, errors
        )
    if errors:
        raise ValidationError("Reference validation error", field_errors=errors)
    return task.model_copy(update=updates)


def _link_to_project(store: DocumentStore, task: Dict[str, Any]) -> None:
    store.add_to_set(collection_name(Project), ObjectId(task["project_id"]), "tasks", ObjectId(task["id"]))


def _unlink_from_project(store: DocumentStore, project_id: Any, task_oid: ObjectId) -> None:
    project_oid = common.try_parse_id(project_id)
    if project_oid is not None:
        store.pull(collection_name(Project), project_oid, "tasks", task_oid)


def get_all(store: DocumentStore) -> List[Dict[str, Any]]:
    return common.get_all(store, Task)


def get_one(store: DocumentStore, task_id: str) -> Dict[str, Any]:
    return common.get_one(store, Task, task_id)


def find_tasks(store: DocumentStore, task_ids: Iterable[str]) -> List[Dict[str, Any]]:
    return common.find_many(store, Task, task_ids)


def get_by_project(store: DocumentStore, project_id: str) -> List[Dict[str, Any]]:
    oid = common.parse_id(project_id, "project")
    return common.get_all(store, Task, {"project_id": oid})


def get_by_student(store: DocumentStore, student_id: str) -> List[Dict[str, Any]]:
    oid = common.parse_id(student_id, "student")
    return common.get_all(store, Task, {"students_working_on": oid})


def get_recent(store: DocumentStore, limit: int = DEFAULT_RECENT_LIMIT) -> List[Dict[str, Any]]:
    """Most recently updated tasks first."""
    if limit <= 0:
        return []
    return common.get_all(store, Task, sort=[("updated_at", -1)], limit=limit)


def create(store: DocumentStore, fields: Dict[str, Any], auto_provision: bool = False) -> Dict[str, Any]:
    task = common.validate_model(Task, fields)
    _check_title(store, task.title, task.project_id)
    task = _resolve_references(store, task, ("project_id", "created_by", "students_working_on"), auto_provision)
    record = common.insert(store, task)
    _link_to_project(store, record)
    return record


def update(store: DocumentStore, task_id: str, fields: Dict[str, Any], auto_provision: bool = False) -> Dict[str, Any]:
    oid, existing = common.require(store, Task, task_id)
    changes = dict(fields)
    if not changes:
        return common.serialize(existing, Task)
    task = common.merge(Task, existing, changes)
    if "title" in changes or "project_id" in changes:
        _check_title(store, task.title, task.project_id, exclude=oid)
    task = _resolve_references(store, task, changes.keys(), auto_provision)
    previous_project = existing.get("project_id")
    record = common.save_changes(store, Task, oid, task, changes)
    if "project_id" in changes and str(previous_project) != record["project_id"]:
        _unlink_from_project(store, previous_project, oid)
        _link_to_project(store, record)
    return record


def delete(store: DocumentStore, task_id: str) -> Dict[str, Any]:
    return common.remove(store, Task, task_id)
