"""
List stores backing the dashboard views.

A resource owns one list query. Every fetch takes a generation number; when
the result arrives it is only applied if no newer fetch started in the
meantime and the resource has not been closed, so a slow superseded request
cannot overwrite fresher state.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from client import queries
from client.context import GraphQLContext
from client.transport import GraphQLRequestError

logger = logging.getLogger(__name__)


class Resource:
    list_query: str = ""
    list_field: str = ""
    create_mutation: Optional[str] = None
    update_mutation: Optional[str] = None
    delete_mutation: Optional[str] = None
    create_field = ""
    update_field = ""
    delete_field = ""

    def __init__(self, context: GraphQLContext, variables: Optional[Dict[str, Any]] = None):
        self.context = context
        self.variables = variables
        self.items: List[Dict[str, Any]] = []
        self.loading = False
        self.error: Optional[str] = None
        self.closed = False
        self._generation = 0
        self._listeners: List[Callable[["Resource"], None]] = []

    def subscribe(self, listener: Callable[["Resource"], None]) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _is_current(self, generation: int) -> bool:
        return not self.closed and generation == self._generation

    async def fetch(self, force_refresh: bool = False) -> List[Dict[str, Any]]:
        self._generation += 1
        generation = self._generation
        self.loading = True
        self._notify()
        try:
            data = await self.context.execute_query(
                self.list_query, self.variables, use_cache=not force_refresh
            )
        except GraphQLRequestError as e:
            if self._is_current(generation):
                self.error = e.message
                self.loading = False
                self._notify()
            return self.items

        if not self._is_current(generation):
            logger.debug("Dropping stale %s result (generation %d)", self.list_field, generation)
            return self.items
        self.items = list(data.get(self.list_field) or [])
        self.error = None
        self.loading = False
        self._notify()
        return self.items

    async def _mutate(self, mutation: Optional[str], field: str, variables: Dict[str, Any]) -> Any:
        if mutation is None:
            raise NotImplementedError(f"{type(self).__name__} does not support {field}")
        data = await self.context.execute_query(mutation, variables, use_cache=False)
        await self.fetch(force_refresh=True)
        return data.get(field)

    async def create(self, values: Dict[str, Any]) -> Any:
        return await self._mutate(self.create_mutation, self.create_field, {"input": values})

    async def update(self, record_id: str, values: Dict[str, Any]) -> Any:
        return await self._mutate(self.update_mutation, self.update_field, {"id": record_id, "input": values})

    async def delete(self, record_id: str) -> Any:
        return await self._mutate(self.delete_mutation, self.delete_field, {"id": record_id})

    def dismiss_error(self) -> None:
        self.error = None
        self._notify()

    def close(self) -> None:
        """Stop accepting results; in-flight fetches are discarded when they land."""
        self.closed = True


class ProjectsResource(Resource):
    list_query = queries.GET_PROJECTS_QUERY
    list_field = "projects"
    create_mutation = queries.CREATE_PROJECT_MUTATION
    update_mutation = queries.UPDATE_PROJECT_MUTATION
    delete_mutation = queries.DELETE_PROJECT_MUTATION
    create_field = "addProject"
    update_field = "updateProject"
    delete_field = "deleteProject"


class TasksResource(Resource):
    list_query = queries.GET_TASKS_QUERY
    list_field = "tasks"
    create_mutation = queries.CREATE_TASK_MUTATION
    update_mutation = queries.UPDATE_TASK_MUTATION
    delete_mutation = queries.DELETE_TASK_MUTATION
    create_field = "addTask"
    update_field = "updateTask"
    delete_field = "deleteTask"


class StudentTasksResource(Resource):
    """Tasks assigned to one student; students may only change them."""

    list_query = queries.GET_TASKS_BY_STUDENT_QUERY
    list_field = "tasksByStudent"
    update_mutation = queries.UPDATE_TASK_MUTATION
    update_field = "updateTask"

    def __init__(self, context: GraphQLContext, student_id: str):
        super().__init__(context, {"studentId": student_id})
        self.student_id = student_id


class StudentsResource(Resource):
    list_query = queries.GET_STUDENTS_QUERY
    list_field = "students"
    create_mutation = queries.CREATE_STUDENT_MUTATION
    update_mutation = queries.UPDATE_STUDENT_MUTATION
    delete_mutation = queries.DELETE_STUDENT_MUTATION
    create_field = "addStudent"
    update_field = "updateStudent"
    delete_field = "deleteStudent"


class AdminsResource(Resource):
    list_query = queries.GET_ADMINS_QUERY
    list_field = "admins"
    create_mutation = queries.CREATE_ADMIN_MUTATION
    update_mutation = queries.UPDATE_ADMIN_MUTATION
    delete_mutation = queries.DELETE_ADMIN_MUTATION
    create_field = "addAdmin"
    update_field = "updateAdmin"
    delete_field = "deleteAdmin"
