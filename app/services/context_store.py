# app/services/context_store.py
import datetime
import json
import os
import tempfile
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from app.core.errors import SnapshotError
from app.core.locks import ReadWriteLock
from app.models.context import Context, utcnow

_table_adapter = TypeAdapter(Dict[str, Context])


class ContextStore:
    """
    Single authoritative, in-memory table of contexts.

    Reads (get, resolve_inherited, list_by_source, snapshot) share the lock;
    writes (create, update, delete, link_parent_child, restore) hold it alone.
    Concurrent updates of the same id are last-writer-wins: there is no version
    check, so one caller's update can silently replace another's.
    """

    def __init__(self):
        self._contexts: Dict[str, Context] = {}
        self._lock = ReadWriteLock()

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._contexts)

    def create(
        self,
        context_id: str,
        data: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, str]] = None,
        source: str = "",
        expires_at: Optional[datetime.datetime] = None,
    ) -> Context:
        """Create a context. An existing entry with the same id is overwritten."""
        now = utcnow()
        ctx = Context(
            id=context_id,
            data=data if data is not None else {},
            metadata=metadata if metadata is not None else {},
            created_at=now,
            updated_at=now,
            expires_at=expires_at,
            source=source,
        )
        with self._lock.write():
            if context_id in self._contexts:
                logger.warning(f"Context '{context_id}' already exists, overwriting it")
            self._contexts[context_id] = ctx
        logger.info(f"Created context '{context_id}' from source '{source}'")
        return ctx

    def get(self, context_id: str) -> Optional[Context]:
        """Return the live entry for `context_id`, not a copy."""
        with self._lock.read():
            return self._contexts.get(context_id)

    def update(
        self,
        context_id: str,
        data: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> Optional[Context]:
        """
        Replace `data` (when a non-empty mapping is given) and/or `metadata`
        (when not None) wholesale. Returns None, mutating nothing, if absent.
        """
        with self._lock.write():
            ctx = self._contexts.get(context_id)
            if ctx is None:
                logger.info(f"Update skipped, no context '{context_id}'")
                return None
            if data:
                ctx.data = data
            if metadata is not None:
                ctx.metadata = metadata
            now = utcnow()
            # updated_at must strictly advance even when the clock does not
            if now <= ctx.updated_at:
                now = ctx.updated_at + datetime.timedelta(microseconds=1)
            ctx.updated_at = now
        logger.debug(f"Updated context '{context_id}'")
        return ctx

    def delete(self, context_id: str) -> bool:
        """Remove the entry. Parent and children references elsewhere are left dangling."""
        with self._lock.write():
            if self._contexts.pop(context_id, None) is None:
                return False
        logger.info(f"Deleted context '{context_id}'")
        return True

    def list_by_source(self, source: str) -> List[Context]:
        with self._lock.read():
            return [ctx for ctx in self._contexts.values() if ctx.source == source]

    def link_parent_child(self, child_id: str, parent_id: str) -> Optional[Context]:
        """
        Make `parent_id` the parent of `child_id`. Both must exist.
        Returns the linked child, or None (mutating nothing) if either is absent.
        No cycle check is done here; resolve_inherited tolerates cycles.
        """
        with self._lock.write():
            child = self._contexts.get(child_id)
            parent = self._contexts.get(parent_id)
            if child is None or parent is None:
                logger.info(f"Link skipped, missing context (child='{child_id}', parent='{parent_id}')")
                return None
            child.parent_id = parent_id
            parent.children_ids.append(child_id)
        logger.info(f"Linked context '{child_id}' to parent '{parent_id}'")
        return child

    def resolve_inherited(self, context_id: str) -> Dict[str, Any]:
        """
        Effective data for `context_id`: its own data, then each ancestor's keys
        not already present, walking leaf to root. Empty dict if absent.
        """
        result: Dict[str, Any] = {}
        visited = set()
        with self._lock.read():
            current = self._contexts.get(context_id)
            while current is not None:
                if current.id in visited:
                    logger.warning(f"Cycle in parent chain of '{context_id}' at '{current.id}', stopping walk")
                    break
                visited.add(current.id)
                for key, value in current.data.items():
                    result.setdefault(key, value)
                if current.parent_id is None:
                    break
                # A dangling parent id ends the walk like a root would
                current = self._contexts.get(current.parent_id)
        return result

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """JSON-compatible image of the whole table, keyed by context id."""
        with self._lock.read():
            return {cid: ctx.model_dump(mode="json") for cid, ctx in self._contexts.items()}

    def restore(self, image: Dict[str, Any]) -> None:
        """
        Replace the whole table with `image`. The image is validated completely
        before the table is touched; on failure SnapshotError is raised and the
        current contents are kept.
        """
        try:
            restored = _table_adapter.validate_python(image)
        except ValidationError as e:
            logger.error(f"Rejected context snapshot: {e}")
            raise SnapshotError(f"invalid context snapshot: {e}") from e
        for key, ctx in restored.items():
            if key != ctx.id:
                raise SnapshotError(f"snapshot key '{key}' does not match context id '{ctx.id}'")
        with self._lock.write():
            self._contexts = restored
        logger.info(f"Restored {len(restored)} contexts from snapshot")

    def save_to_file(self, path: str) -> None:
        """Write the snapshot as indented JSON, replacing `path` atomically."""
        image = self.snapshot()
        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".contexts-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(image, fh, indent=2)
            os.replace(tmp_path, path)
        except Exception:
            os.unlink(tmp_path)
            raise
        logger.info(f"Saved {len(image)} contexts to {path}")

    def load_from_file(self, path: str) -> None:
        try:
            with open(path, "r", encoding="utf-8") as fh:
                image = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read context snapshot {path}: {e}")
            raise SnapshotError(f"cannot read context snapshot {path}: {e}") from e
        if not isinstance(image, dict):
            raise SnapshotError(f"context snapshot {path} is not a JSON object")
        self.restore(image)
