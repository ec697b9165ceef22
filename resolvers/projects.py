import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId

from database import DocumentStore
from errors import ConflictError, ValidationError
from schemas import Project, Status, Task, collection_name

from resolvers import common

logger = logging.getLogger(__name__)

PLACEHOLDER_TASK_TITLE = "Default Task"


def _check_title(store: DocumentStore, title: str, exclude: Optional[ObjectId] = None) -> None:
    query: Dict[str, Any] = {"title": title}
    if exclude is not None:
        query["_id"] = {"$ne": exclude}
    if store.find_one(collection_name(Project), query) is not None:
        raise ConflictError("Project with this title already exists")


def _resolve_references(
    store: DocumentStore,
    project: Project,
    fields,
    auto_provision: bool,
    creating: bool = False,
):
    """Check the reference fields named in ``fields``.

    Returns the project with provisioned ids substituted and whether a
    placeholder task should be attached after insert.
    """
    errors: Dict[str, str] = {}
    updates: Dict[str, Any] = {}
    needs_task = False

    if "tasks" in fields:
        missing = common.missing_ids(store, Task, project.tasks)
        if missing and auto_provision and creating:
            updates["tasks"] = [t for t in project.tasks if t not in missing]
            needs_task = True
        elif missing:
            errors["tasks"] = "Tasks not found: " + ", ".join(missing)
    if errors and auto_provision:
        # fail before any placeholder is written
        raise ValidationError("Reference validation error", field_errors=errors)

    if "created_by" in fields:
        updates["created_by"] = common.resolve_creator(store, project.created_by, auto_provision, errors)
    if "students_working_on" in fields:
        updates["students_working_on"] = common.resolve_students(
            store, project.students_working_on, auto_provision, errors
        )

    if errors:
        raise ValidationError("Reference validation error", field_errors=errors)
    return project.model_copy(update=updates), needs_task


def _attach_placeholder_task(store: DocumentStore, project: Dict[str, Any]) -> Dict[str, Any]:
    task = Task(
        title=PLACEHOLDER_TASK_TITLE,
        description=f"Placeholder task for {project['title']}",
        due_date=project["end_date"],
        status=Status.NOT_STARTED,
        project_id=project["id"],
        created_by=project["created_by"],
    )
    new_id = store.create_document(collection_name(Task), common.to_document(task))
    logger.warning("Provisioned placeholder task %s for project %s", new_id, project["id"])
    oid = ObjectId(project["id"])
    store.add_to_set(collection_name(Project), oid, "tasks", ObjectId(new_id))
    return common.serialize(store.find_by_id(collection_name(Project), oid), Project)


def get_all(store: DocumentStore) -> List[Dict[str, Any]]:
    return common.get_all(store, Project)


def get_one(store: DocumentStore, project_id: str) -> Dict[str, Any]:
    return common.get_one(store, Project, project_id)


def find_project(store: DocumentStore, project_id: Optional[str]) -> Optional[Dict[str, Any]]:
    return common.find(store, Project, project_id)


def get_by_admin(store: DocumentStore, admin_id: str) -> List[Dict[str, Any]]:
    oid = common.parse_id(admin_id, "admin")
    return common.get_all(store, Project, {"created_by": oid})


def get_by_student(store: DocumentStore, student_id: str) -> List[Dict[str, Any]]:
    oid = common.parse_id(student_id, "student")
    return common.get_all(store, Project, {"students_working_on": oid})


def create(store: DocumentStore, fields: Dict[str, Any], auto_provision: bool = False) -> Dict[str, Any]:
    project = common.validate_model(Project, fields)
    _check_title(store, project.title)
    project, needs_task = _resolve_references(
        store, project, ("created_by", "students_working_on", "tasks"), auto_provision, creating=True
    )
    record = common.insert(store, project)
    if needs_task:
        record = _attach_placeholder_task(store, record)
    return record


def update(store: DocumentStore, project_id: str, fields: Dict[str, Any], auto_provision: bool = False) -> Dict[str, Any]:
    oid, existing = common.require(store, Project, project_id)
    changes = dict(fields)
    if not changes:
        return common.serialize(existing, Project)
    project = common.merge(Project, existing, changes)
    if "title" in changes:
        _check_title(store, project.title, exclude=oid)
    project, _ = _resolve_references(store, project, changes.keys(), auto_provision)
    return common.save_changes(store, Project, oid, project, changes)


def delete(store: DocumentStore, project_id: str) -> Dict[str, Any]:
    return common.remove(store, Project, project_id)
