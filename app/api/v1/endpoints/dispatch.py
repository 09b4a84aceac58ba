# app/api/v1/endpoints/dispatch.py

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from app.api.deps import get_dispatcher
from app.core.config import settings
from app.core.errors import UnauthorizedPrincipal
from app.models.dispatch import DispatchRequest, DispatchResult
from app.services.dispatcher import RequestDispatcher

router = APIRouter()


@router.post("/", response_model=DispatchResult, response_model_exclude_none=True, status_code=status.HTTP_200_OK)
async def dispatch_action(
    request: DispatchRequest,
    dispatcher: RequestDispatcher = Depends(get_dispatcher),
) -> DispatchResult:
    """
    Run an action on behalf of a registered principal.
    Business failures come back as `success: false` with a 200 status.
    """
    logger.info(f"Received '{request.action}' request from principal '{request.principal_id}'")
    try:
        return await dispatcher.dispatch(
            request.principal_id,
            request.action,
            context_id=request.context_id,
            params=request.params,
            timeout=settings.DISPATCH_TIMEOUT_SECONDS,
        )
    except UnauthorizedPrincipal as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
