from typing import Optional
from app.core.config import settings
from app.services.remote_entity import RemoteEntityClient
from loguru import logger

_remote_client: Optional[RemoteEntityClient] = None


def init_remote_client(client: Optional[RemoteEntityClient] = None) -> RemoteEntityClient:
    global _remote_client
    if client is not None:
        _remote_client = client
        logger.info("Remote entity client supplied by caller")
        return _remote_client
    _remote_client = RemoteEntityClient(
        base_url=settings.REMOTE_API_BASE_URL,
        api_token=settings.REMOTE_API_TOKEN,
        timeout=settings.REMOTE_API_TIMEOUT,
    )
    logger.info(f"Remote entity client initialized for {settings.REMOTE_API_BASE_URL}")
    return _remote_client


async def close_remote_client():
    global _remote_client
    if _remote_client:
        await _remote_client.close()
        _remote_client = None
        logger.info("Remote entity client closed")
