from typing import List

import strawberry
from strawberry.types import Info

from graph.inputs import StudentInput, StudentUpdateInput, provided
from graph.types import Student
from resolvers import students


@strawberry.type
class StudentQuery:
    @strawberry.field
    async def students(self, info: Info) -> List[Student]:
        records = await info.context.run(students.get_all)
        return [Student.from_record(r) for r in records]

    @strawberry.field
    async def student(self, info: Info, id: strawberry.ID) -> Student:
        return Student.from_record(await info.context.run(students.get_one, id))

    @strawberry.field
    async def student_by_user_id(self, info: Info, user_id: strawberry.ID) -> Student:
        return Student.from_record(await info.context.run(students.get_by_user, user_id))


@strawberry.type
class StudentMutation:
    @strawberry.mutation
    async def add_student(self, info: Info, input: StudentInput) -> Student:
        record = await info.context.run(students.create, provided(input), info.context.auto_provision)
        return Student.from_record(record)

    @strawberry.mutation
    async def update_student(self, info: Info, id: strawberry.ID, input: StudentUpdateInput) -> Student:
        return Student.from_record(await info.context.run(students.update, id, provided(input)))

    @strawberry.mutation
    async def delete_student(self, info: Info, id: strawberry.ID) -> Student:
        return Student.from_record(await info.context.run(students.delete, id))
