from typing import Optional
from fastapi import FastAPI
from contextlib import asynccontextmanager
from loguru import logger
from app.core.config import settings
from app.core.errors import SnapshotError
from app.core.log_config import configure_logging
from app.core.remote_client import init_remote_client, close_remote_client
from app.api.v1.router import api_router
from app.services.context_store import ContextStore
from app.services.dispatcher import RequestDispatcher
from app.services.remote_entity import RemoteEntityClient

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handles startup and shutdown events for the FastAPI application.
    Builds the context store and dispatcher, restores persisted contexts and
    closes the remote client on the way out.
    """
    logger.info("MCP gateway starting up (Lifespan event)...")

    store: ContextStore = app.state.context_store
    snapshot_path = settings.CONTEXT_SNAPSHOT_PATH

    if snapshot_path:
        try:
            store.load_from_file(snapshot_path)
            logger.info(f"Context table restored from {snapshot_path}")
        except SnapshotError as e:
            # A missing file on first start is expected; the table stays empty
            logger.warning(f"Starting with an empty context table: {e}")

    remote_client = init_remote_client(app.state.remote_client)
    dispatcher = RequestDispatcher(context_store=store, entity_client=remote_client)
    for principal_id in settings.REGISTERED_PRINCIPALS:
        dispatcher.register_principal(principal_id)
    app.state.dispatcher = dispatcher

    yield # This line separates startup from shutdown

    logger.info("MCP gateway shutting down (Lifespan event)...")
    if snapshot_path:
        try:
            store.save_to_file(snapshot_path)
        except OSError as e:
            logger.error(f"Failed to persist context table to {snapshot_path}: {e}")
    await close_remote_client()


def create_app(
    context_store: Optional[ContextStore] = None,
    remote_client: Optional[RemoteEntityClient] = None,
) -> FastAPI:
    configure_logging()
    application = FastAPI(
        title="FR MCP Gateway",
        description="MCP tool gateway with a hierarchical context store in front of the manufacturing-data API.",
        version="1.0.0",
        lifespan=lifespan
    )
    application.state.context_store = context_store if context_store is not None else ContextStore()
    application.state.remote_client = remote_client
    application.include_router(api_router, prefix="/v1")
    return application


app = create_app()
