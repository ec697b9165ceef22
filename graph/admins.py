from typing import List

import strawberry
from strawberry.types import Info

from graph.inputs import AdminInput, AdminUpdateInput, provided
from graph.types import Admin
from resolvers import admins


@strawberry.type
class AdminQuery:
    @strawberry.field
    async def admins(self, info: Info) -> List[Admin]:
        records = await info.context.run(admins.get_all)
        return [Admin.from_record(r) for r in records]

    @strawberry.field
    async def admin(self, info: Info, id: strawberry.ID) -> Admin:
        return Admin.from_record(await info.context.run(admins.get_one, id))

    @strawberry.field
    async def admin_by_user_id(self, info: Info, user_id: strawberry.ID) -> Admin:
        return Admin.from_record(await info.context.run(admins.get_by_user, user_id))


@strawberry.type
class AdminMutation:
    @strawberry.mutation
    async def add_admin(self, info: Info, input: AdminInput) -> Admin:
        record = await info.context.run(admins.create, provided(input), info.context.auto_provision)
        return Admin.from_record(record)

    @strawberry.mutation
    async def update_admin(self, info: Info, id: strawberry.ID, input: AdminUpdateInput) -> Admin:
        return Admin.from_record(await info.context.run(admins.update, id, provided(input)))

    @strawberry.mutation
    async def delete_admin(self, info: Info, id: strawberry.ID) -> Admin:
        return Admin.from_record(await info.context.run(admins.delete, id))
