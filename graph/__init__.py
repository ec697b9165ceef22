"""
GraphQL schema: one Query and one Mutation merged from the per-entity modules.
"""

import strawberry
from strawberry.tools import merge_types

from graph.admins import AdminMutation, AdminQuery
from graph.extensions import ErrorFormatter
from graph.messages import MessageMutation, MessageQuery
from graph.projects import ProjectMutation, ProjectQuery
from graph.session import SessionMutation, SessionQuery
from graph.students import StudentMutation, StudentQuery
from graph.tasks import TaskMutation, TaskQuery
from graph.users import UserMutation, UserQuery

Query = merge_types(
    "Query",
    (UserQuery, AdminQuery, StudentQuery, ProjectQuery, TaskQuery, MessageQuery, SessionQuery),
)
Mutation = merge_types(
    "Mutation",
    (UserMutation, AdminMutation, StudentMutation, ProjectMutation, TaskMutation, MessageMutation, SessionMutation),
)

schema = strawberry.Schema(query=Query, mutation=Mutation, extensions=[ErrorFormatter])
