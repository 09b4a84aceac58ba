# app/api/deps.py
from fastapi import Request

from app.services.context_store import ContextStore
from app.services.dispatcher import RequestDispatcher


# The lifespan stores the shared instances on app.state; endpoints reach them here.
async def get_context_store(request: Request) -> ContextStore:
    return request.app.state.context_store


async def get_dispatcher(request: Request) -> RequestDispatcher:
    return request.app.state.dispatcher
