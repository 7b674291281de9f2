"""Named context-update functions."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, Mapping, Optional

from ..contracts import Event
from ..exceptions import DefinitionError
from .definition import MachineDefinition

ContextUpdate = Mapping[str, Any]
Action = Callable[[Mapping[str, Any], Event], Optional[ContextUpdate]]


class ActionRegistry:
    """Map action names to pure ``(context, event) -> update`` functions.

    Actions must not perform I/O. They receive a read-only copy of the context
    and return only the fields they change; ``None`` means "no change".
    """

    def __init__(self, actions: Optional[Mapping[str, Action]] = None) -> None:
        self._actions: Dict[str, Action] = dict(actions or {})

    def register(self, name: str) -> Callable[[Action], Action]:
        """Decorator form of :meth:`add`."""

        def decorator(func: Action) -> Action:
            self.add(name, func)
            return func

        return decorator

    def add(self, name: str, func: Action) -> None:
        if name in self._actions:
            raise DefinitionError(f"Action '{name}' is already registered")
        self._actions[name] = func

    def get(self, name: str) -> Action:
        try:
            return self._actions[name]
        except KeyError:
            raise DefinitionError(
                f"No implementation registered for action '{name}'"
            ) from None

    def validate_for(self, definition: MachineDefinition) -> None:
        """Fail fast when ``definition`` names actions this registry lacks."""
        missing = sorted(definition.action_names() - set(self._actions))
        if missing:
            raise DefinitionError(
                f"{definition.name}: unregistered actions: {', '.join(missing)}"
            )

    def __contains__(self, name: object) -> bool:
        return name in self._actions

    def __iter__(self) -> Iterator[str]:
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)


def assign(**fields: Callable[[Mapping[str, Any], Event], Any]) -> Action:
    """Build an action that sets each field from its own ``(context, event)`` getter.

    ``assign(approvalCode=lambda ctx, ev: ev.get("approvalCode"))``
    """

    def action(context: Mapping[str, Any], event: Event) -> ContextUpdate:
        return {name: getter(context, event) for name, getter in fields.items()}

    return action
