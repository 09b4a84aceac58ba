from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from app.api.deps import get_context_store
from app.schemas.context import ContextCreate, ContextUpdate, ContextLink, ContextResponse, InheritedContextResponse
from app.services.context_store import ContextStore

router = APIRouter()


@router.post("/", response_model=ContextResponse, status_code=status.HTTP_201_CREATED)
async def create_context(
    context_in: ContextCreate,
    store: ContextStore = Depends(get_context_store),
):
    """
    Create a context. An existing context with the same id is replaced.
    """
    logger.info(f"Attempting to create context '{context_in.id}'")
    ctx = store.create(
        context_in.id,
        data=context_in.data,
        metadata=context_in.metadata,
        source=context_in.source,
        expires_at=context_in.expires_at,
    )
    return ContextResponse.model_validate(ctx.model_dump())


@router.get("/", response_model=List[ContextResponse])
async def list_contexts_by_source(source: str, store: ContextStore = Depends(get_context_store)):
    """List every context created by `source`."""
    contexts = store.list_by_source(source)
    logger.info(f"Found {len(contexts)} contexts for source '{source}'")
    return [ContextResponse.model_validate(c.model_dump()) for c in contexts]


@router.get("/{context_id}", response_model=ContextResponse)
async def get_context(context_id: str, store: ContextStore = Depends(get_context_store)):
    ctx = store.get(context_id)
    if ctx is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Context not found")
    return ContextResponse.model_validate(ctx.model_dump())


@router.put("/{context_id}", response_model=ContextResponse)
async def update_context(
    context_id: str,
    context_update: ContextUpdate,
    store: ContextStore = Depends(get_context_store),
):
    """
    Replace the data and/or metadata of a context. Omitted fields are left as they are.
    """
    logger.info(f"Attempting to update context '{context_id}'")
    ctx = store.update(context_id, data=context_update.data, metadata=context_update.metadata)
    if ctx is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Context not found")
    return ContextResponse.model_validate(ctx.model_dump())


@router.delete("/{context_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_context(context_id: str, store: ContextStore = Depends(get_context_store)):
    """Delete a context. Its children keep pointing at the deleted id."""
    if not store.delete(context_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Context not found for deletion",
        )
    return


@router.post("/{context_id}/parent", response_model=ContextResponse)
async def link_parent_context(
    context_id: str,
    link: ContextLink,
    store: ContextStore = Depends(get_context_store),
):
    """Make `link.parent_id` the parent of this context."""
    ctx = store.link_parent_child(context_id, link.parent_id)
    if ctx is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Child or parent context not found",
        )
    return ContextResponse.model_validate(ctx.model_dump())


@router.get("/{context_id}/inherited", response_model=InheritedContextResponse)
async def get_inherited_context(context_id: str, store: ContextStore = Depends(get_context_store)):
    """Effective data of a context merged with its ancestors. Unknown ids give an empty mapping."""
    return InheritedContextResponse(id=context_id, context_data=store.resolve_inherited(context_id))
