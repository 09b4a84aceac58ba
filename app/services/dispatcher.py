# app/services/dispatcher.py
import asyncio
import threading
from typing import Any, Dict, List, Optional

from loguru import logger

from app.core.errors import ActionValidationError, RemoteError, UnauthorizedPrincipal, UnknownAction
from app.models.dispatch import DispatchResult
from app.services.actions import ActionRegistry, default_actions
from app.services.context_store import ContextStore
from app.services.remote_entity import RemoteEntityClient


class RequestDispatcher:
    """
    Authorizes a principal, resolves its inherited context and routes the
    request to a named action.

    Only an unregistered principal is raised to the caller. Unknown actions,
    invalid parameters, remote failures and timeouts come back as failed
    DispatchResults so the transport can always answer with a well-formed body.
    """

    def __init__(
        self,
        context_store: ContextStore,
        entity_client: RemoteEntityClient,
        actions: Optional[ActionRegistry] = None,
    ):
        self.context_store = context_store
        self.entity_client = entity_client
        self.actions = actions if actions is not None else default_actions
        self._principals = set()
        # Independent of the context table's lock
        self._principals_lock = threading.Lock()

    def register_principal(self, principal_id: str) -> None:
        with self._principals_lock:
            if principal_id in self._principals:
                return
            self._principals.add(principal_id)
        logger.info(f"Registered principal '{principal_id}'")

    def is_registered(self, principal_id: str) -> bool:
        with self._principals_lock:
            return principal_id in self._principals

    def principals(self) -> List[str]:
        with self._principals_lock:
            return sorted(self._principals)

    async def dispatch(
        self,
        principal_id: str,
        action: str,
        context_id: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> DispatchResult:
        if not self.is_registered(principal_id):
            logger.warning(f"Rejected request from unregistered principal '{principal_id}'")
            raise UnauthorizedPrincipal(principal_id)

        resolved: Dict[str, Any] = {}
        if context_id:
            resolved = self.context_store.resolve_inherited(context_id)

        handler = self.actions.get(action)
        if handler is None:
            logger.info(f"Principal '{principal_id}' requested unknown action '{action}'")
            return DispatchResult.failed(str(UnknownAction(action)))

        logger.info(f"Dispatching '{action}' for principal '{principal_id}' (context={context_id!r})")
        try:
            # Cancelling this coroutine cancels the handler and its outbound call
            return await asyncio.wait_for(handler(self.entity_client, params or {}, resolved), timeout)
        except ActionValidationError as e:
            logger.info(f"Action '{action}' rejected parameter '{e.field}': {e}")
            return DispatchResult.failed(str(e))
        except RemoteError as e:
            logger.error(f"Action '{action}' failed remotely: {e}")
            return DispatchResult.failed(str(e))
        except asyncio.TimeoutError:
            logger.error(f"Action '{action}' timed out after {timeout}s")
            return DispatchResult.failed(f"action {action} timed out after {timeout}s")
