import logging

from strawberry.extensions import SchemaExtension

from errors import TaskBoardError

logger = logging.getLogger(__name__)


class ErrorFormatter(SchemaExtension):
    """Adds ``extensions.code`` (and ``fieldErrors``) to errors from the task board taxonomy.

    Message and path are left as GraphQL produced them.
    """

    def on_operation(self):
        yield
        result = self.execution_context.result
        if not result or not result.errors:
            return
        for error in result.errors:
            original = getattr(error, "original_error", None)
            if isinstance(original, TaskBoardError):
                if error.extensions is None:
                    error.extensions = {}
                error.extensions.update(original.as_extensions())
                logger.info("GraphQL %s at %s: %s", original.code, error.path, original.message)
            elif original is not None:
                error.extensions = {**(error.extensions or {}), "code": "INTERNAL_ERROR"}
