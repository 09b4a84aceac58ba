# app/api/v1/router.py
from fastapi import APIRouter
from app.api.v1.endpoints import context, dispatch, principals
from app.api.v1.endpoints import health as health_endpoint


api_router = APIRouter()

api_router.include_router(
    dispatch.router,
    prefix="/dispatch",
    tags=["Dispatch"],
)
api_router.include_router(
    context.router,
    prefix="/context",
    tags=["Context"],
)
api_router.include_router(
    principals.router,
    prefix="/principals",
    tags=["Principals"],
)

api_router.include_router(health_endpoint.router, prefix="/health", tags=["Health"])
