from typing import List

import strawberry
from strawberry.types import Info

from graph.inputs import ProjectInput, ProjectUpdateInput, provided
from graph.types import Project
from resolvers import projects


@strawberry.type
class ProjectQuery:
    @strawberry.field
    async def projects(self, info: Info) -> List[Project]:
        records = await info.context.run(projects.get_all)
        return [Project.from_record(r) for r in records]

    @strawberry.field
    async def project(self, info: Info, id: strawberry.ID) -> Project:
        return Project.from_record(await info.context.run(projects.get_one, id))

    @strawberry.field
    async def projects_by_admin(self, info: Info, admin_id: strawberry.ID) -> List[Project]:
        records = await info.context.run(projects.get_by_admin, admin_id)
        return [Project.from_record(r) for r in records]

    @strawberry.field
    async def projects_by_student(self, info: Info, student_id: strawberry.ID) -> List[Project]:
        records = await info.context.run(projects.get_by_student, student_id)
        return [Project.from_record(r) for r in records]


@strawberry.type
class ProjectMutation:
    @strawberry.mutation
    async def add_project(self, info: Info, input: ProjectInput) -> Project:
        record = await info.context.run(projects.create, provided(input), info.context.auto_provision)
        return Project.from_record(record)

    @strawberry.mutation
    async def update_project(self, info: Info, id: strawberry.ID, input: ProjectUpdateInput) -> Project:
        record = await info.context.run(projects.update, id, provided(input), info.context.auto_provision)
        return Project.from_record(record)

    @strawberry.mutation
    async def delete_project(self, info: Info, id: strawberry.ID) -> Project:
        return Project.from_record(await info.context.run(projects.delete, id))
