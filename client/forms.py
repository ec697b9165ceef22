"""
Client-side form validation and the modal used for create/edit.

Validators take the camelCase values a form would send and return a dict
of field -> message; an empty dict means the form may be submitted.
"""

import json
import logging
import re
from datetime import date
from typing import Any, Awaitable, Callable, Dict, Optional

from client.transport import GraphQLRequestError

logger = logging.getLogger(__name__)

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

FieldErrors = Dict[str, str]


def _parse_iso(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DATE_RE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_project_form(values: Dict[str, Any]) -> FieldErrors:
    errors: FieldErrors = {}
    if _blank(values.get("title")):
        errors["title"] = "Title is required"
    if _blank(values.get("description")):
        errors["description"] = "Description is required"

    start = end = None
    for key, label in (("startDate", "Start date"), ("endDate", "End date")):
        raw = values.get(key)
        if _blank(raw):
            errors[key] = f"{label} is required"
            continue
        parsed = _parse_iso(raw)
        if parsed is None:
            errors[key] = f"{label} must be in YYYY-MM-DD format"
        elif key == "startDate":
            start = parsed
        else:
            end = parsed
    if start and end and start > end:
        errors["endDate"] = "End date must be on or after start date"

    progress = values.get("progress")
    if progress not in (None, ""):
        try:
            number = int(progress)
        except (TypeError, ValueError):
            errors["progress"] = "Progress must be a number"
        else:
            if not 0 <= number <= 100:
                errors["progress"] = "Progress must be between 0 and 100"
    return errors


def validate_task_form(
    values: Dict[str, Any],
    baseline_due_date: Optional[str] = None,
    today: Optional[date] = None,
) -> FieldErrors:
    """``baseline_due_date`` is the stored due date when editing; keeping it is allowed even if past."""
    errors: FieldErrors = {}
    title = values.get("title")
    if _blank(title):
        errors["title"] = "Title is required"
    elif len(title.strip()) < 3:
        errors["title"] = "Title must be at least 3 characters"
    if _blank(values.get("description")):
        errors["description"] = "Description is required"
    if _blank(values.get("projectId")):
        errors["projectId"] = "Project is required"
    if _blank(values.get("createdBy")):
        errors["createdBy"] = "Creator is required"

    raw_due = values.get("dueDate")
    if _blank(raw_due):
        errors["dueDate"] = "Due date is required"
    else:
        due = _parse_iso(raw_due)
        if due is None:
            errors["dueDate"] = "Due date must be in YYYY-MM-DD format"
        elif baseline_due_date is None or due != _parse_iso(baseline_due_date):
            if due < (today or date.today()):
                errors["dueDate"] = "Due date cannot be in the past"
    return errors


def parse_field_errors(message: Optional[str]) -> FieldErrors:
    """Pull the JSON object out of a ``"Validation error: {...}"`` message."""
    if not message:
        return {}
    start, end = message.find("{"), message.rfind("}")
    if start == -1 or end <= start:
        return {}
    try:
        parsed = json.loads(message[start:end + 1])
    except ValueError:
        return {}
    if not isinstance(parsed, dict):
        return {}
    return {str(k): str(v) for k, v in parsed.items()}


def field_errors_from(error: GraphQLRequestError) -> FieldErrors:
    structured = error.extensions.get("fieldErrors")
    if isinstance(structured, dict) and structured:
        return {str(k): str(v) for k, v in structured.items()}
    return parse_field_errors(error.message)


Validator = Callable[[Dict[str, Any]], FieldErrors]
Submit = Callable[[Dict[str, Any]], Awaitable[Any]]


class FormModal:
    """Create/edit modal state.

    A failed submit keeps the modal open with the values the user typed;
    only a successful one closes and resets it.
    """

    def __init__(self, validator: Validator, initial: Optional[Dict[str, Any]] = None):
        self.validator = validator
        self.initial = dict(initial or {})
        self.values: Dict[str, Any] = dict(self.initial)
        self.errors: FieldErrors = {}
        self.error: Optional[str] = None
        self.is_open = False
        self.submitting = False

    def open(self, values: Optional[Dict[str, Any]] = None) -> None:
        self.values = dict(values if values is not None else self.initial)
        self.errors = {}
        self.error = None
        self.is_open = True

    def set(self, field: str, value: Any) -> None:
        self.values[field] = value
        self.errors.pop(field, None)

    def close(self) -> None:
        self.is_open = False
        self.values = dict(self.initial)
        self.errors = {}
        self.error = None

    async def submit(self, action: Submit) -> bool:
        self.errors = self.validator(self.values)
        if self.errors:
            return False
        self.submitting = True
        try:
            await action(dict(self.values))
        except GraphQLRequestError as e:
            logger.info("Form submit failed: %s", e.message)
            self.error = e.message
            self.errors = field_errors_from(e)
            return False
        finally:
            self.submitting = False
        self.close()
        return True
