from datetime import timedelta
from typing import Optional

import strawberry
from strawberry.types import Info

from graph.inputs import LoginInput
from graph.types import AuthPayload, User
from resolvers import session


@strawberry.type
class SessionQuery:
    @strawberry.field
    async def me(self, info: Info) -> Optional[User]:
        record = await info.context.run(session.current_user, info.context.session_user)
        return User.from_record(record) if record else None


@strawberry.type
class SessionMutation:
    @strawberry.mutation
    async def login(self, info: Info, input: LoginInput) -> AuthPayload:
        settings = info.context.settings
        if input.remember_me:
            lifetime = timedelta(days=settings.REMEMBER_ME_EXPIRE_DAYS)
        else:
            lifetime = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        user, token = await info.context.run(
            session.login, info.context.tokens, input.name, input.password, lifetime
        )
        info.context.response.set_cookie(
            key=settings.SESSION_COOKIE_NAME,
            value=token,
            max_age=int(lifetime.total_seconds()),
            httponly=True,
            secure=settings.COOKIE_SECURE,
            samesite="lax",
        )
        return AuthPayload(user=User.from_record(user), token=token)

    @strawberry.mutation
    def logout(self, info: Info) -> bool:
        info.context.response.delete_cookie(info.context.settings.SESSION_COOKIE_NAME)
        return True
