"""Pure transition function for machine definitions."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Tuple

from ..contracts import Event, Snapshot
from ..exceptions import ActionError
from .actions import ActionRegistry
from .definition import MachineDefinition

logger = logging.getLogger(__name__)


def advance(
    definition: MachineDefinition,
    registry: ActionRegistry,
    snapshot: Snapshot,
    event: Event,
) -> Tuple[Snapshot, bool]:
    """Apply ``event`` to ``snapshot``.

    Returns the next snapshot and whether it differs from the input. Events
    that the current state does not accept, and any event sent to a finished
    machine, leave the snapshot untouched.
    """
    if snapshot.done:
        logger.debug(
            f"{definition.name}: ignoring {event.type} in final state {snapshot.state_id}"
        )
        return snapshot, False

    transition = definition.transition_for(snapshot.state_id, event.type)
    if transition is None:
        logger.debug(
            f"{definition.name}: {event.type} not accepted in state {snapshot.state_id}"
        )
        return snapshot, False

    context = dict(snapshot.context)
    for name in transition.actions:
        update = registry.get(name)(MappingProxyType(dict(context)), event)
        if update is None:
            continue
        if not isinstance(update, Mapping):
            raise ActionError(
                f"Action '{name}' returned {type(update).__name__}, expected a mapping"
            )
        context.update(update)

    target = transition.target or snapshot.state_id
    next_snapshot = Snapshot(
        state_id=target, context=context, done=definition.is_final(target)
    )
    # Self-transitions, targeted or not, only count when the context moved.
    if next_snapshot == snapshot:
        return snapshot, False
    return next_snapshot, True
