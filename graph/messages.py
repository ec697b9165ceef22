from typing import List

import strawberry
from strawberry.types import Info

from graph.inputs import MessageInput, provided
from graph.types import Message
from resolvers import messages


@strawberry.type
class MessageQuery:
    @strawberry.field
    async def messages(self, info: Info) -> List[Message]:
        user = info.context.require_user()
        records = await info.context.run(messages.get_all, user)
        return [Message.from_record(r) for r in records]

    @strawberry.field
    async def message(self, info: Info, id: strawberry.ID) -> Message:
        user = info.context.require_user()
        return Message.from_record(await info.context.run(messages.get_one, user, id))

    @strawberry.field
    async def messages_between_users(self, info: Info, user_id: strawberry.ID) -> List[Message]:
        user = info.context.require_user()
        records = await info.context.run(messages.get_between, user, user_id)
        return [Message.from_record(r) for r in records]


@strawberry.type
class MessageMutation:
    @strawberry.mutation
    async def create_message(self, info: Info, input: MessageInput) -> Message:
        user = info.context.require_user()
        return Message.from_record(await info.context.run(messages.create, user, provided(input)))

    @strawberry.mutation
    async def mark_message_as_read(self, info: Info, id: strawberry.ID) -> Message:
        user = info.context.require_user()
        return Message.from_record(await info.context.run(messages.mark_read, user, id))

    @strawberry.mutation(description="Returns the number of messages that changed")
    async def mark_all_messages_as_read(self, info: Info, sender_id: strawberry.ID) -> int:
        user = info.context.require_user()
        return await info.context.run(messages.mark_all_read, user, sender_id)

    @strawberry.mutation
    async def delete_message(self, info: Info, id: strawberry.ID) -> Message:
        user = info.context.require_user()
        return Message.from_record(await info.context.run(messages.delete, user, id))
