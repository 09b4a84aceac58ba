from typing import List
from fastapi import APIRouter, Depends, status
from loguru import logger

from app.api.deps import get_dispatcher
from app.models.dispatch import PrincipalRegistration
from app.services.dispatcher import RequestDispatcher

router = APIRouter()


@router.post("/", response_model=PrincipalRegistration, status_code=status.HTTP_201_CREATED, summary="Register Principal")
async def register_principal(
    registration: PrincipalRegistration,
    dispatcher: RequestDispatcher = Depends(get_dispatcher),
):
    """Allow a principal to dispatch requests. Registering twice is harmless."""
    logger.info(f"Registering principal '{registration.principal_id}'")
    dispatcher.register_principal(registration.principal_id)
    return registration


@router.get("/", response_model=List[str], summary="List Registered Principals")
async def list_principals(dispatcher: RequestDispatcher = Depends(get_dispatcher)):
    return dispatcher.principals()
