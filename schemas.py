"""
Database Schemas for the Task Board

Each Pydantic model below maps to a MongoDB collection (class name lowercased).
Use these to validate data and as the source of truth for the application domain.

``REFERENCES`` lists the fields that hold ids of other documents, with the
collection they point at. Those fields are strings here and ObjectIds in the
database.
"""

from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator


class Status(str, Enum):
    NOT_STARTED = "Not Started"
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


# Board ordering, used by the dashboards when sorting by status
STATUS_ORDER = [Status.NOT_STARTED, Status.PENDING, Status.IN_PROGRESS, Status.COMPLETED]


class Role(str, Enum):
    STUDENT = "student"
    ADMIN = "admin"


class SenderRole(str, Enum):
    STUDENT = "Student"
    ADMIN = "Admin"


def collection_name(model_cls) -> str:
    return model_cls.__name__.lower()


def _not_blank(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


# Core identities
class User(BaseModel):
    REFERENCES: ClassVar[Dict[str, str]] = {}

    name: str = Field(..., min_length=1)
    email: str
    password: str = Field(..., description="bcrypt hash")
    role: Role

    @field_validator("name")
    @classmethod
    def _trim_name(cls, v: str) -> str:
        return _not_blank(v)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError("must be a valid email address")
        return v


class Admin(BaseModel):
    REFERENCES: ClassVar[Dict[str, str]] = {"user_id": "user"}

    user_id: str
    permissions: List[str] = Field(default_factory=lambda: ["create_project", "manage_tasks"])

    @field_validator("permissions")
    @classmethod
    def _dedupe(cls, v: List[str]) -> List[str]:
        # permissions behave as a set but keep their given order
        seen = []
        for p in v:
            if p not in seen:
                seen.append(p)
        return seen


class Student(BaseModel):
    REFERENCES: ClassVar[Dict[str, str]] = {"user_id": "user"}

    user_id: str
    university_id: str = Field(..., min_length=1)
    major: str = Field(..., min_length=1)
    year: str = Field(..., min_length=1)


# Work
class Project(BaseModel):
    REFERENCES: ClassVar[Dict[str, str]] = {
        "created_by": "admin",
        "students_working_on": "student",
        "tasks": "task",
    }

    title: str
    description: str
    category: Optional[str] = None
    start_date: date
    end_date: date
    status: Status = Status.PENDING
    progress: int = Field(0, ge=0, le=100)
    created_by: str
    students_working_on: List[str] = Field(default_factory=list)
    tasks: List[str] = Field(default_factory=list)

    @field_validator("title", "description")
    @classmethod
    def _required_text(cls, v: str) -> str:
        return _not_blank(v)

    @field_validator("end_date")
    @classmethod
    def _check_dates(cls, v: date, info: ValidationInfo) -> date:
        start = info.data.get("start_date")
        if start is not None and v < start:
            raise ValueError("End date must be on or after start date")
        return v


class Task(BaseModel):
    REFERENCES: ClassVar[Dict[str, str]] = {
        "project_id": "project",
        "created_by": "admin",
        "students_working_on": "student",
    }

    title: str = Field(..., min_length=3, max_length=100)
    description: str
    due_date: date
    status: Status = Status.NOT_STARTED
    project_id: str
    created_by: str
    students_working_on: List[str] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def _trim_title(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("description")
    @classmethod
    def _required_description(cls, v: str) -> str:
        return _not_blank(v)


# Communications
class MessageParty(BaseModel):
    id: str
    role: SenderRole


class Message(BaseModel):
    REFERENCES: ClassVar[Dict[str, str]] = {}

    content: str
    sender: MessageParty
    receiver: MessageParty
    timestamp: datetime
    read: bool = False

    @field_validator("content")
    @classmethod
    def _required_content(cls, v: str) -> str:
        return _not_blank(v)
