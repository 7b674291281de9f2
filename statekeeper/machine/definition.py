"""Declarative machine definitions.

A definition is plain data: which states exist, which events each state
accepts, where those events lead and which named actions run on the way.
Behaviour is attached separately through an :class:`ActionRegistry`.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterator, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..exceptions import DefinitionError


class Transition(BaseModel):
    """Where an accepted event leads and which actions run.

    ``target=None`` is a self-transition: the state is kept and only the
    actions apply.
    """

    model_config = ConfigDict(frozen=True)

    target: Optional[str] = None
    actions: Tuple[str, ...] = ()

    @field_validator("actions", mode="before")
    @classmethod
    def _coerce_actions(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, str):
            return (v,)
        return v


class MachineDefinition(BaseModel):
    """Immutable description of one workflow type.

    After validation ``states``, each transition map and ``default_context``
    are read-only mappings.

    Transitions may be written in shorthand, ``{"CREATE": "created"}``, or in
    full, ``{"APPROVE": {"target": "approved", "actions": "setApprovalCode"}}``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    initial_state: str
    states: Dict[str, Dict[str, Transition]] = Field(default_factory=dict)
    final_states: FrozenSet[str] = frozenset()
    default_context: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("states", mode="before")
    @classmethod
    def _expand_shorthand(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        expanded: Dict[str, Dict[str, Any]] = {}
        for state, transitions in v.items():
            expanded[state] = {
                event: {"target": t} if isinstance(t, str) else t
                for event, t in (transitions or {}).items()
            }
        return expanded

    @model_validator(mode="after")
    def _check_references(self) -> "MachineDefinition":
        known = self.known_states()
        if self.initial_state not in known:
            raise DefinitionError(
                f"{self.name}: initial state '{self.initial_state}' is not defined"
            )
        for state in self.final_states:
            if self.states.get(state):
                raise DefinitionError(
                    f"{self.name}: final state '{state}' declares outgoing transitions"
                )
        for state, event, transition in self.iter_transitions():
            if transition.target is not None and transition.target not in known:
                raise DefinitionError(
                    f"{self.name}: {state} --{event}--> '{transition.target}' "
                    "targets an undefined state"
                )
        # Freeze nested containers; the model itself is already frozen.
        frozen_states = MappingProxyType(
            {state: MappingProxyType(dict(t)) for state, t in self.states.items()}
        )
        object.__setattr__(self, "states", frozen_states)
        object.__setattr__(
            self, "default_context", MappingProxyType(dict(self.default_context))
        )
        return self

    def known_states(self) -> FrozenSet[str]:
        return frozenset(self.states) | self.final_states

    def is_final(self, state_id: str) -> bool:
        return state_id in self.final_states

    def transition_for(self, state_id: str, event_type: str) -> Optional[Transition]:
        """Return the transition ``event_type`` triggers in ``state_id``, if any."""
        return self.states.get(state_id, {}).get(event_type)

    def iter_transitions(self) -> Iterator[Tuple[str, str, Transition]]:
        for state, transitions in self.states.items():
            for event, transition in transitions.items():
                yield state, event, transition

    def action_names(self) -> FrozenSet[str]:
        return frozenset(
            name for _, _, transition in self.iter_transitions() for name in transition.actions
        )

    def describe(self) -> Dict[str, Any]:
        """Plain-data view of the definition, suitable for display or export."""
        return {
            "name": self.name,
            "initial": self.initial_state,
            "final": sorted(self.final_states),
            "transitions": [
                {
                    "from": state,
                    "event": event,
                    "to": transition.target or state,
                    "actions": list(transition.actions),
                }
                for state, event, transition in self.iter_transitions()
            ],
        }
