# app/services/actions.py
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Type

from loguru import logger

from app.core.errors import ActionValidationError
from app.models.dispatch import DispatchResult
from app.models.entity import EntityKind
from app.services.remote_entity import RemoteEntityClient

ActionHandler = Callable[[RemoteEntityClient, Dict[str, Any], Dict[str, Any]], Awaitable[DispatchResult]]

_TYPE_NAMES = {str: "a string", list: "an array", dict: "an object"}


def required_param(params: Dict[str, Any], name: str, expected: Type) -> Any:
    """Fetch a required parameter; missing, mistyped and empty values are rejected."""
    if name not in params or params[name] is None:
        raise ActionValidationError(name, f"{name} is required")
    value = params[name]
    if not isinstance(value, expected):
        raise ActionValidationError(name, f"{name} is required and must be {_TYPE_NAMES.get(expected, expected.__name__)}")
    if not value:
        raise ActionValidationError(name, f"{name} must not be empty")
    return value


def optional_param(params: Dict[str, Any], name: str, expected: Type, default: Any = None) -> Any:
    value = params.get(name)
    if value is None:
        return default
    if not isinstance(value, expected):
        raise ActionValidationError(name, f"{name} must be {_TYPE_NAMES.get(expected, expected.__name__)}")
    return value


def entity_kind_param(params: Dict[str, Any], context: Dict[str, Any], default: EntityKind) -> EntityKind:
    """Entity kind from params, else from the resolved context, else `default`."""
    raw = optional_param(params, "entity_kind", str)
    if raw is None and isinstance(context.get("entity_kind"), str):
        raw = context["entity_kind"]
    if raw is None:
        return default
    try:
        return EntityKind(raw)
    except ValueError:
        allowed = ", ".join(k.value for k in EntityKind)
        raise ActionValidationError("entity_kind", f"entity_kind must be one of: {allowed}")


class ActionRegistry:
    """Fixed table of named action handlers."""

    def __init__(self):
        self._handlers: Dict[str, ActionHandler] = {}

    def register(self, name: str) -> Callable[[ActionHandler], ActionHandler]:
        def decorator(handler: ActionHandler) -> ActionHandler:
            self._handlers[name] = handler
            return handler
        return decorator

    def get(self, name: str) -> Optional[ActionHandler]:
        return self._handlers.get(name)

    def names(self) -> Tuple[str, ...]:
        return tuple(sorted(self._handlers))


default_actions = ActionRegistry()


@default_actions.register("get-entity")
async def get_entity(client: RemoteEntityClient, params: Dict[str, Any], context: Dict[str, Any]) -> DispatchResult:
    entity_id = required_param(params, "entity_id", str)
    kind = entity_kind_param(params, context, EntityKind.PART)
    logger.info(f"Fetching {kind.value} '{entity_id}'")
    entity = await client.get(kind, entity_id)
    return DispatchResult.ok(kind=kind.value, entity=entity)


@default_actions.register("create-entity")
async def create_entity(client: RemoteEntityClient, params: Dict[str, Any], context: Dict[str, Any]) -> DispatchResult:
    """
    Create an entity from params["entity"]. `customer_id` and `items` are
    required; any other field is forwarded to the remote API untouched.
    """
    fields = required_param(params, "entity", dict)
    required_param(fields, "customer_id", str)
    required_param(fields, "items", list)
    kind = entity_kind_param(params, context, EntityKind.ORDER)

    payload = dict(fields)
    logger.info(f"Creating {kind.value} for customer '{payload['customer_id']}' with {len(payload['items'])} items")
    created = await client.create(kind, payload)
    return DispatchResult.ok(kind=kind.value, entity=created)
