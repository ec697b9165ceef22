"""
GraphQL object types.

Each type is built from a resolver record with ``from_record``. Reference
ids are kept as private fields and the referenced objects are loaded
lazily, so a dangling reference comes back as ``null`` (or is skipped in a
list) instead of failing the whole query.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

import strawberry
from strawberry.types import Info

import schemas
from resolvers import admins, projects, students, tasks, users

Status = strawberry.enum(schemas.Status, description="Progress of a project or task")
Role = strawberry.enum(schemas.Role, description="Role a user signed up with")
SenderRole = strawberry.enum(schemas.SenderRole, name="MessageRole")


@strawberry.type
class User:
    id: strawberry.ID
    name: str
    email: str
    role: Role
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "User":
        return cls(
            id=strawberry.ID(record["id"]),
            name=record["name"],
            email=record["email"],
            role=schemas.Role(record["role"]),
            created_at=record.get("created_at"),
            updated_at=record.get("updated_at"),
        )


async def _load_user(info: Info, user_id: Optional[str]) -> Optional[User]:
    record = await info.context.run(users.find_user, user_id)
    return User.from_record(record) if record else None


@strawberry.type
class Admin:
    id: strawberry.ID
    user_id: strawberry.ID
    permissions: List[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @strawberry.field
    async def user(self, info: Info) -> Optional[User]:
        return await _load_user(info, self.user_id)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Admin":
        return cls(
            id=strawberry.ID(record["id"]),
            user_id=strawberry.ID(record["user_id"]),
            permissions=list(record.get("permissions") or []),
            created_at=record.get("created_at"),
            updated_at=record.get("updated_at"),
        )


@strawberry.type
class Student:
    id: strawberry.ID
    user_id: strawberry.ID
    university_id: str
    major: str
    year: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @strawberry.field
    async def user(self, info: Info) -> Optional[User]:
        return await _load_user(info, self.user_id)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Student":
        return cls(
            id=strawberry.ID(record["id"]),
            user_id=strawberry.ID(record["user_id"]),
            university_id=record["university_id"],
            major=record["major"],
            year=str(record["year"]),
            created_at=record.get("created_at"),
            updated_at=record.get("updated_at"),
        )


async def _load_admin(info: Info, admin_id: Optional[str]) -> Optional[Admin]:
    record = await info.context.run(admins.find_admin, admin_id)
    return Admin.from_record(record) if record else None


async def _load_students(info: Info, student_ids: List[str]) -> List[Student]:
    records = await info.context.run(students.find_students, student_ids)
    return [Student.from_record(r) for r in records]


@strawberry.type
class Project:
    id: strawberry.ID
    title: str
    description: str
    category: Optional[str]
    start_date: date
    end_date: date
    status: Status
    progress: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    created_by_id: strawberry.Private[Optional[str]]
    student_ids: strawberry.Private[List[str]]
    task_ids: strawberry.Private[List[str]]

    @strawberry.field
    async def created_by(self, info: Info) -> Optional[Admin]:
        return await _load_admin(info, self.created_by_id)

    @strawberry.field
    async def students_working_on(self, info: Info) -> List[Student]:
        return await _load_students(info, self.student_ids)

    @strawberry.field
    async def tasks(self, info: Info) -> List["Task"]:
        records = await info.context.run(tasks.find_tasks, self.task_ids)
        return [Task.from_record(r) for r in records]

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Project":
        return cls(
            id=strawberry.ID(record["id"]),
            title=record["title"],
            description=record["description"],
            category=record.get("category"),
            start_date=record["start_date"],
            end_date=record["end_date"],
            status=schemas.Status(record["status"]),
            progress=int(record.get("progress") or 0),
            created_at=record.get("created_at"),
            updated_at=record.get("updated_at"),
            created_by_id=record.get("created_by"),
            student_ids=list(record.get("students_working_on") or []),
            task_ids=list(record.get("tasks") or []),
        )


@strawberry.type
class Task:
    id: strawberry.ID
    title: str
    description: str
    due_date: date
    status: Status
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    project_id: strawberry.Private[Optional[str]]
    created_by_id: strawberry.Private[Optional[str]]
    student_ids: strawberry.Private[List[str]]

    @strawberry.field
    async def project(self, info: Info) -> Optional[Project]:
        record = await info.context.run(projects.find_project, self.project_id)
        return Project.from_record(record) if record else None

    @strawberry.field
    async def created_by(self, info: Info) -> Optional[Admin]:
        return await _load_admin(info, self.created_by_id)

    @strawberry.field
    async def students_working_on(self, info: Info) -> List[Student]:
        return await _load_students(info, self.student_ids)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Task":
        return cls(
            id=strawberry.ID(record["id"]),
            title=record["title"],
            description=record["description"],
            due_date=record["due_date"],
            status=schemas.Status(record["status"]),
            created_at=record.get("created_at"),
            updated_at=record.get("updated_at"),
            project_id=record.get("project_id"),
            created_by_id=record.get("created_by"),
            student_ids=list(record.get("students_working_on") or []),
        )


@strawberry.type
class MessageParty:
    id: strawberry.ID
    role: SenderRole

    @strawberry.field
    async def user(self, info: Info) -> Optional[User]:
        return await _load_user(info, self.id)


@strawberry.type
class Message:
    id: strawberry.ID
    content: str
    sender: MessageParty
    receiver: MessageParty
    timestamp: datetime
    read: bool

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Message":
        def party(data: Dict[str, Any]) -> MessageParty:
            return MessageParty(id=strawberry.ID(data["id"]), role=schemas.SenderRole(data["role"]))

        return cls(
            id=strawberry.ID(record["id"]),
            content=record["content"],
            sender=party(record["sender"]),
            receiver=party(record["receiver"]),
            timestamp=record["timestamp"],
            read=bool(record.get("read")),
        )


@strawberry.type
class AuthPayload:
    user: User
    token: str
