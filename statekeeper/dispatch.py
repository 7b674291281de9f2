"""Caller-facing entry points for a single workflow type."""

from __future__ import annotations

from typing import Any, Dict, Optional

from .contracts import Event, RunResult
from .machine import Workflow
from .manager import Hook, InstanceManager


class WorkflowDispatcher:
    """Route owner events for one workflow through an :class:`InstanceManager`."""

    def __init__(
        self,
        workflow: Workflow,
        manager: InstanceManager | None = None,
        on_change: Optional[Hook] = None,
        on_done: Optional[Hook] = None,
    ) -> None:
        self._workflow = workflow
        self._manager = manager or InstanceManager()
        self._on_change = on_change
        self._on_done = on_done

    @property
    def workflow(self) -> Workflow:
        return self._workflow

    @property
    def manager(self) -> InstanceManager:
        return self._manager

    def _build_event(
        self, owner_id: int | str, event: Event | str | None, payload: Dict[str, Any]
    ) -> Event:
        if isinstance(event, Event):
            if payload:
                raise TypeError("Payload fields cannot be combined with an Event instance")
            if str(event.owner_id) != str(owner_id):
                raise ValueError(
                    f"Event owner {event.owner_id!r} does not match {owner_id!r}"
                )
            return event
        event_type = event or self._workflow.start_event
        if not event_type:
            raise ValueError(
                f"Workflow '{self._workflow.name}' has no start event; pass one explicitly"
            )
        return Event(type=event_type, owner_id=owner_id, **payload)

    async def create_or_restart(
        self,
        owner_id: int | str,
        initial_context: Optional[Dict[str, Any]] = None,
        event: Event | str | None = None,
        **payload: Any,
    ) -> RunResult:
        """Start the workflow for ``owner_id`` from scratch.

        Any stored snapshot is ignored and overwritten once the start event is
        accepted.

        Args:
            owner_id: Entity that owns the instance.
            initial_context: Fields merged over the default context.
            event: Start event, or its type; defaults to the workflow's start event.
        """
        return await self._manager.run(
            owner_id,
            self._workflow.name,
            self._workflow.definition,
            self._workflow.actions,
            initial_context,
            False,
            self._build_event(owner_id, event, payload),
            on_change=self._on_change,
            on_done=self._on_done,
        )

    async def send_event(
        self, owner_id: int | str, event: Event | str, **payload: Any
    ) -> RunResult:
        """Restore the instance for ``owner_id`` and apply ``event``.

        ``result.changed`` is ``False`` when the current state ignored it.
        """
        return await self._manager.run(
            owner_id,
            self._workflow.name,
            self._workflow.definition,
            self._workflow.actions,
            None,
            True,
            self._build_event(owner_id, event, payload),
            on_change=self._on_change,
            on_done=self._on_done,
        )
