# app/services/remote_entity.py
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from app.core.errors import RemoteError
from app.models.entity import ENTITY_SCHEMAS, EntityKind, EntitySchema


class RemoteEntityClient:
    """
    Async client for the remote manufacturing-data GraphQL API.

    Every failure, whether the transport broke, the API answered with a non-2xx
    status, returned GraphQL errors, or had no such entity, is raised as
    RemoteError. Cancelling the awaiting task aborts the in-flight request.
    """

    def __init__(self, base_url: str, api_token: str = "", timeout: float = 30.0,
                 http_client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self.api_token = api_token
        self._owns_client = http_client is None
        self.http_client = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)

    async def close(self):
        if self._owns_client:
            await self.http_client.aclose()

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    async def _execute(self, operation: str, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        logger.debug(f"GraphQL {operation} with variables {list(variables)}")
        try:
            response = await self.http_client.post(
                f"{self.base_url}/graphql",
                json={"query": query, "variables": variables},
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            logger.error(f"GraphQL {operation} transport failure: {e}")
            raise RemoteError(f"{operation} failed: {e}") from e

        if response.status_code < 200 or response.status_code >= 300:
            logger.error(f"GraphQL {operation} returned status {response.status_code}")
            raise RemoteError(f"{operation} failed", status_code=response.status_code, body=response.text)

        try:
            payload = response.json()
        except ValueError as e:
            raise RemoteError(f"{operation} returned invalid JSON", status_code=response.status_code,
                              body=response.text) from e

        if not isinstance(payload, dict):
            raise RemoteError(f"{operation} returned a malformed response", status_code=response.status_code,
                              body=response.text)

        errors = payload.get("errors") or []
        if errors:
            first = errors[0] if isinstance(errors, list) else errors
            message = first.get("message") if isinstance(first, dict) else first
            raise RemoteError(f"GraphQL error: {message or 'unknown error'}")

        data = payload.get("data") or {}
        if not isinstance(data, dict):
            raise RemoteError(f"{operation} returned a malformed response", status_code=response.status_code,
                              body=response.text)
        return data

    @staticmethod
    def _schema(kind: EntityKind) -> EntitySchema:
        return ENTITY_SCHEMAS[EntityKind(kind)]

    @staticmethod
    def _entity(data: Dict[str, Any], field: str, missing: str) -> Dict[str, Any]:
        entity = data.get(field)
        if entity is None:
            raise RemoteError(missing)
        if not isinstance(entity, dict):
            raise RemoteError(f"{field} in response is not an object: {entity!r}")
        return entity

    async def get(self, kind: EntityKind, entity_id: str) -> Dict[str, Any]:
        schema = self._schema(kind)
        query = (
            f"query Get{schema.type_name}($id: ID!) "
            f"{{ {schema.single}(id: $id) {{ {schema.selection} }} }}"
        )
        data = await self._execute(f"Get{schema.type_name}", query, {"id": entity_id})
        return self._entity(data, schema.single, f"{EntityKind(kind).value} {entity_id} not found")

    async def create(self, kind: EntityKind, payload: Dict[str, Any]) -> Dict[str, Any]:
        schema = self._schema(kind)
        query = (
            f"mutation Create{schema.type_name}($input: Create{schema.type_name}Input!) "
            f"{{ create{schema.type_name}(input: $input) {{ {schema.selection} }} }}"
        )
        data = await self._execute(f"Create{schema.type_name}", query, {"input": payload})
        return self._entity(data, f"create{schema.type_name}",
                            f"create {EntityKind(kind).value} returned no entity")

    async def update(self, kind: EntityKind, entity_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        schema = self._schema(kind)
        query = (
            f"mutation Update{schema.type_name}($id: ID!, $input: Update{schema.type_name}Input!) "
            f"{{ update{schema.type_name}(id: $id, input: $input) {{ {schema.selection} }} }}"
        )
        data = await self._execute(f"Update{schema.type_name}", query, {"id": entity_id, "input": payload})
        return self._entity(data, f"update{schema.type_name}", f"{EntityKind(kind).value} {entity_id} not found")

    async def list(self, kind: EntityKind, filters: Optional[Dict[str, Any]] = None,
                   page: int = 1, per_page: int = 30) -> List[Dict[str, Any]]:
        schema = self._schema(kind)
        variables: Dict[str, Any] = {k: v for k, v in (filters or {}).items() if v not in (None, "")}
        variables["page"] = page
        variables["perPage"] = per_page
        # Filters are sent as strings; page/perPage are the only typed arguments
        declared = ", ".join(
            f"${name}: Int" if name in ("page", "perPage") else f"${name}: String"
            for name in variables
        )
        arguments = ", ".join(f"{name}: ${name}" for name in variables)
        query = (
            f"query List{schema.type_name}s({declared}) "
            f"{{ {schema.plural}({arguments}) {{ {schema.selection} }} }}"
        )
        data = await self._execute(f"List{schema.type_name}s", query, variables)
        entities = data.get(schema.plural) or []
        if not isinstance(entities, list) or not all(isinstance(e, dict) for e in entities):
            raise RemoteError(f"{schema.plural} in response is not a list of objects")
        return entities
