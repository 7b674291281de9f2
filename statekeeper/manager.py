"""Restore, advance and persist machine instances."""

from __future__ import annotations

import asyncio
import copy
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from .config import DEFAULT_TTL_SECONDS
from .contracts import Event, RunResult, Snapshot
from .exceptions import CallbackFailure, CorruptSnapshot
from .keys import instance_key
from .machine import ActionRegistry, MachineDefinition, advance
from .snapshot import SnapshotDeserializer, SnapshotSerializer, StoredSnapshot
from .stores import SnapshotStore, get_store

logger = logging.getLogger(__name__)

Hook = Callable[[Snapshot], Union[None, Awaitable[None]]]


class InstanceManager:
    """Run one event against one persisted machine instance.

    The manager holds no per-instance state: every call restores from the
    store, evaluates and writes back. Two concurrent calls for the same key
    may restore the same snapshot, and the later write wins; no locking is
    done between ``get`` and ``set``.
    """

    def __init__(
        self,
        store: SnapshotStore | None = None,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
    ) -> None:
        self._store = store or get_store()
        self._ttl = ttl_seconds

    @property
    def store(self) -> SnapshotStore:
        return self._store

    async def run(
        self,
        owner_id: int | str,
        workflow_name: str,
        definition: MachineDefinition,
        registry: ActionRegistry,
        initial_context: Optional[Dict[str, Any]],
        restore: bool,
        event: Event,
        on_change: Optional[Hook] = None,
        on_done: Optional[Hook] = None,
    ) -> RunResult:
        """Apply ``event`` to the instance identified by ``owner_id``/``workflow_name``.

        Args:
            initial_context: Overrides merged over the definition's default
                context when the instance starts fresh.
            restore: Load the stored snapshot first. A miss, a corrupt entry or
                a finished instance all fall back to a fresh start.
            on_change: Called with the new snapshot after it was saved.
            on_done: Called after ``on_change`` when a final state is reached.

        Returns:
            The resulting snapshot, whether it changed, and any hook failures.

        Raises:
            StoreUnavailable: The store failed on ``get`` or ``set``.
            DefinitionError: ``registry`` lacks an action ``definition`` names.
        """
        registry.validate_for(definition)
        key = instance_key(owner_id, workflow_name)

        stored: Optional[StoredSnapshot] = None
        if restore:
            stored = await self._restore(key, definition)

        restored = stored is not None
        if stored is None:
            snapshot = self._initial_snapshot(definition, initial_context)
            revision = 0
        else:
            snapshot = stored.snapshot
            revision = stored.meta.revision

        new_snapshot, changed = advance(definition, registry, snapshot, event)
        result = RunResult(
            key=key, snapshot=new_snapshot, changed=changed, restored=restored
        )
        if not changed:
            logger.debug(f"{key}: {event.type} ignored in {snapshot.state_id}")
            return result

        data = SnapshotSerializer.serialize(
            new_snapshot, event=event.type, revision=revision + 1
        )
        # Once started, the write completes even if the caller is cancelled.
        await asyncio.shield(self._store.set(key, data, self._ttl))
        logger.info(
            f"{key}: {snapshot.state_id} --{event.type}--> {new_snapshot.state_id}"
        )

        await self._call_hook("on_change", on_change, key, new_snapshot, result)
        if new_snapshot.done and on_done is not None:
            await self._call_hook("on_done", on_done, key, new_snapshot, result)
        return result

    async def peek(
        self, owner_id: int | str, workflow_name: str
    ) -> Optional[StoredSnapshot]:
        """Read the stored snapshot without evaluating anything.

        Returns ``None`` when nothing usable is stored.
        """
        key = instance_key(owner_id, workflow_name)
        raw = await self._store.get(key)
        if raw is None:
            return None
        try:
            stored = SnapshotDeserializer.deserialize(raw)
        except CorruptSnapshot as e:
            logger.warning(f"{key}: unreadable snapshot: {e}")
            return None
        return stored

    async def reset(self, owner_id: int | str, workflow_name: str) -> None:
        """Drop the stored snapshot so the next event starts fresh."""
        await self._store.delete(instance_key(owner_id, workflow_name))

    async def _restore(
        self, key: str, definition: MachineDefinition
    ) -> Optional[StoredSnapshot]:
        raw = await self._store.get(key)
        if raw is None:
            logger.debug(f"{key}: no stored snapshot")
            return None

        try:
            stored = SnapshotDeserializer.deserialize(raw)
        except CorruptSnapshot as e:
            logger.warning(f"{key}: discarding corrupt snapshot: {e}")
            return None

        state_id = stored.snapshot.state_id
        if state_id not in definition.known_states():
            logger.warning(
                f"{key}: discarding snapshot in unknown state '{state_id}'"
            )
            return None

        if definition.is_final(state_id) or stored.snapshot.done:
            logger.debug(f"{key}: stored snapshot is final, restarting")
            return None
        return stored

    @staticmethod
    def _initial_snapshot(
        definition: MachineDefinition, overrides: Optional[Dict[str, Any]]
    ) -> Snapshot:
        # Nested default values must not be shared between instances.
        context = copy.deepcopy(dict(definition.default_context))
        context.update(overrides or {})
        return Snapshot(
            state_id=definition.initial_state,
            context=context,
            done=definition.is_final(definition.initial_state),
        )

    @staticmethod
    async def _call_hook(
        name: str,
        hook: Optional[Hook],
        key: str,
        snapshot: Snapshot,
        result: RunResult,
    ) -> None:
        if hook is None:
            return
        try:
            outcome = hook(snapshot)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            logger.exception(f"{key}: {name} hook failed after state was saved")
            result.callback_errors.append(CallbackFailure(name, key, e))
