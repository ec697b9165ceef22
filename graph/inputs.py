"""
GraphQL input types.

Create inputs mirror the document models. Update inputs default every field
to ``UNSET`` so that only the fields a client actually sent reach the
resolver; ``provided()`` collects them.
"""

import dataclasses
from datetime import date
from typing import Any, Dict, List, Optional

import strawberry
from strawberry import UNSET

from graph.types import Role, Status


def provided(data: Any) -> Dict[str, Any]:
    """Fields of an input object that were set by the client."""
    if data is None or data is UNSET:
        return {}
    values = {}
    for f in dataclasses.fields(data):
        value = getattr(data, f.name)
        if value is not UNSET:
            values[f.name] = value
    return values


@strawberry.input
class UserInput:
    name: str
    email: str
    password: str
    role: Role


@strawberry.input
class UserUpdateInput:
    name: Optional[str] = UNSET
    email: Optional[str] = UNSET
    password: Optional[str] = UNSET
    role: Optional[Role] = UNSET


@strawberry.input
class AdminInput:
    user_id: strawberry.ID
    permissions: Optional[List[str]] = UNSET


@strawberry.input
class AdminUpdateInput:
    user_id: Optional[strawberry.ID] = UNSET
    permissions: Optional[List[str]] = UNSET


@strawberry.input
class StudentInput:
    user_id: strawberry.ID
    university_id: str
    major: str
    year: str


@strawberry.input
class StudentUpdateInput:
    user_id: Optional[strawberry.ID] = UNSET
    university_id: Optional[str] = UNSET
    major: Optional[str] = UNSET
    year: Optional[str] = UNSET


@strawberry.input
class ProjectInput:
    title: str
    description: str
    start_date: date
    end_date: date
    created_by: strawberry.ID
    category: Optional[str] = UNSET
    status: Optional[Status] = UNSET
    progress: Optional[int] = UNSET
    students_working_on: Optional[List[strawberry.ID]] = UNSET
    tasks: Optional[List[strawberry.ID]] = UNSET


@strawberry.input
class ProjectUpdateInput:
    title: Optional[str] = UNSET
    description: Optional[str] = UNSET
    category: Optional[str] = UNSET
    start_date: Optional[date] = UNSET
    end_date: Optional[date] = UNSET
    status: Optional[Status] = UNSET
    progress: Optional[int] = UNSET
    created_by: Optional[strawberry.ID] = UNSET
    students_working_on: Optional[List[strawberry.ID]] = UNSET
    tasks: Optional[List[strawberry.ID]] = UNSET


@strawberry.input
class TaskInput:
    title: str
    description: str
    due_date: date
    project_id: strawberry.ID
    created_by: strawberry.ID
    status: Optional[Status] = UNSET
    students_working_on: Optional[List[strawberry.ID]] = UNSET


@strawberry.input
class TaskUpdateInput:
    title: Optional[str] = UNSET
    description: Optional[str] = UNSET
    due_date: Optional[date] = UNSET
    status: Optional[Status] = UNSET
    project_id: Optional[strawberry.ID] = UNSET
    created_by: Optional[strawberry.ID] = UNSET
    students_working_on: Optional[List[strawberry.ID]] = UNSET


@strawberry.input
class MessageInput:
    content: str
    receiver_id: strawberry.ID


@strawberry.input
class LoginInput:
    name: str
    password: str
    remember_me: bool = False
