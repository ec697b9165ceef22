from typing import List

import strawberry
from strawberry.types import Info

from graph.inputs import TaskInput, TaskUpdateInput, provided
from graph.types import Task
from resolvers import tasks
from resolvers.tasks import DEFAULT_RECENT_LIMIT


@strawberry.type
class TaskQuery:
    @strawberry.field
    async def tasks(self, info: Info) -> List[Task]:
        records = await info.context.run(tasks.get_all)
        return [Task.from_record(r) for r in records]

    @strawberry.field
    async def task(self, info: Info, id: strawberry.ID) -> Task:
        return Task.from_record(await info.context.run(tasks.get_one, id))

    @strawberry.field
    async def tasks_by_project(self, info: Info, project_id: strawberry.ID) -> List[Task]:
        records = await info.context.run(tasks.get_by_project, project_id)
        return [Task.from_record(r) for r in records]

    @strawberry.field
    async def tasks_by_student(self, info: Info, student_id: strawberry.ID) -> List[Task]:
        records = await info.context.run(tasks.get_by_student, student_id)
        return [Task.from_record(r) for r in records]

    @strawberry.field
    async def recent_tasks(self, info: Info, limit: int = DEFAULT_RECENT_LIMIT) -> List[Task]:
        records = await info.context.run(tasks.get_recent, limit)
        return [Task.from_record(r) for r in records]


@strawberry.type
class TaskMutation:
    @strawberry.mutation
    async def add_task(self, info: Info, input: TaskInput) -> Task:
        record = await info.context.run(tasks.create, provided(input), info.context.auto_provision)
        return Task.from_record(record)

    @strawberry.mutation
    async def update_task(self, info: Info, id: strawberry.ID, input: TaskUpdateInput) -> Task:
        record = await info.context.run(tasks.update, id, provided(input), info.context.auto_provision)
        return Task.from_record(record)

    @strawberry.mutation
    async def delete_task(self, info: Info, id: strawberry.ID) -> Task:
        return Task.from_record(await info.context.run(tasks.delete, id))
