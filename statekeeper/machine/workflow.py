"""Bundle a definition with its actions."""

from __future__ import annotations

from typing import Optional

from .actions import ActionRegistry
from .definition import MachineDefinition


class Workflow:
    """A machine definition paired with the actions it references.

    Construction validates that every action named by a transition has an
    implementation, so a broken workflow never reaches the first request.
    """

    def __init__(
        self,
        definition: MachineDefinition,
        actions: Optional[ActionRegistry] = None,
        start_event: Optional[str] = None,
    ) -> None:
        self.definition = definition
        self.actions = actions if actions is not None else ActionRegistry()
        self.actions.validate_for(definition)
        self.start_event = start_event

    @property
    def name(self) -> str:
        return self.definition.name

    def __repr__(self) -> str:
        return f"Workflow(name={self.name!r}, states={sorted(self.definition.known_states())})"
