"""
Python client for the task board API: query templates, a caching request
context and the list stores/views the dashboards are built from.

    transport = GraphQLTransport("http://localhost:8000/graphql")
    ctx = GraphQLContext(transport)
    projects = ProjectsResource(ctx)
    await projects.fetch()
"""

from client.cache import CacheEntry, QueryCache
from client.context import GraphQLContext
from client.resources import (
    AdminsResource,
    ProjectsResource,
    StudentsResource,
    StudentTasksResource,
    TasksResource,
)
from client.transport import GraphQLRequestError, GraphQLTransport

__all__ = [
    "AdminsResource",
    "CacheEntry",
    "GraphQLContext",
    "GraphQLRequestError",
    "GraphQLTransport",
    "ProjectsResource",
    "QueryCache",
    "StudentsResource",
    "StudentTasksResource",
    "TasksResource",
]
