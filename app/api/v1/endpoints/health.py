# app/api/v1/endpoints/health.py
from fastapi import APIRouter, Depends

from app.api.deps import get_context_store
from app.services.context_store import ContextStore

router = APIRouter()

@router.get("/")
async def health(store: ContextStore = Depends(get_context_store)):
    return {"status": "ok", "contexts": len(store)}
