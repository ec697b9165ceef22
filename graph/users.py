from typing import List

import strawberry
from strawberry.types import Info

from graph.inputs import UserInput, UserUpdateInput, provided
from graph.types import User
from resolvers import users


@strawberry.type
class UserQuery:
    @strawberry.field
    async def users(self, info: Info) -> List[User]:
        records = await info.context.run(users.get_all)
        return [User.from_record(r) for r in records]

    @strawberry.field
    async def user(self, info: Info, id: strawberry.ID) -> User:
        return User.from_record(await info.context.run(users.get_one, id))


@strawberry.type
class UserMutation:
    @strawberry.mutation
    async def add_user(self, info: Info, input: UserInput) -> User:
        return User.from_record(await info.context.run(users.create, provided(input)))

    @strawberry.mutation
    async def update_user(self, info: Info, id: strawberry.ID, input: UserUpdateInput) -> User:
        return User.from_record(await info.context.run(users.update, id, provided(input)))

    @strawberry.mutation
    async def delete_user(self, info: Info, id: strawberry.ID) -> User:
        return User.from_record(await info.context.run(users.delete, id))
