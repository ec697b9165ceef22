import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from strawberry.fastapi import GraphQLRouter

from auth import TokenService
from config import Settings, get_settings
from database import DocumentStore
from errors import QueryError
from graph import schema
from graph.context import context_getter
from logging_config import generate_request_id, set_request_id, setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, store: Optional[DocumentStore] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    if store is None:
        store = DocumentStore(
            settings.DATABASE_URL,
            settings.DATABASE_NAME,
            timeout_ms=settings.DB_SERVER_SELECTION_TIMEOUT_MS,
        )
    tokens = TokenService(settings.JWT_SECRET, settings.JWT_ALGORITHM, settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not store.connect():
            logger.error("Starting without a database; it is retried on later requests")
        yield
        store.close()
        logger.info("Database connection closed")

    app = FastAPI(title=settings.APP_NAME, version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------- Request logging -------------------- #
    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or generate_request_id()
        set_request_id(request_id)
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        response.headers["X-Request-ID"] = request_id
        return response

    # -------------------- GraphQL -------------------- #
    graphql_app = GraphQLRouter(schema, context_getter=context_getter(store, settings, tokens))
    app.include_router(graphql_app, prefix="/graphql")

    # -------------------- Meta endpoints -------------------- #
    @app.get("/")
    def read_root():
        return {"message": f"{settings.APP_NAME} is running"}

    @app.get("/test")
    def test_database():
        response = {
            "backend": "✅ Running",
            "database": "❌ Not Available",
            "database_url": "✅ Set" if settings.DATABASE_URL else "❌ Not Set",
            "database_name": None,
            "connection_status": "Not Connected",
            "collections": [],
        }
        if not store.ensure_connected():
            return response
        response["database"] = "✅ Available"
        response["database_name"] = store.name
        response["connection_status"] = "Connected"
        try:
            response["collections"] = store.list_collection_names()[:50]
            response["database"] = "✅ Connected & Working"
        except QueryError as e:
            response["database"] = f"⚠️  Connected but Error: {str(e)[:80]}"
        return response

    return app


app = create_app()


# -------------------- Run -------------------- #

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
