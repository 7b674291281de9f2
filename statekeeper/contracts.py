"""Core data contracts shared by the evaluator, stores and manager."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import CallbackFailure


class Event(BaseModel):
    """A transient domain event.

    Payload fields specific to ``type`` are accepted as extra attributes,
    e.g. ``Event(type="APPROVE", owner_id=1, approvalCode="A1")``.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    type: str
    owner_id: int | str

    @property
    def payload(self) -> Dict[str, Any]:
        """Fields carried by the event besides ``type`` and ``owner_id``."""
        return dict(self.model_extra or {})

    def get(self, name: str, default: Any = None) -> Any:
        return self.payload.get(name, default)


class Snapshot(BaseModel):
    """Position of one instance in its workflow: the unit of persistence."""

    model_config = ConfigDict(frozen=True)

    state_id: str
    context: Dict[str, Any] = Field(default_factory=dict)
    done: bool = False


class RunResult(BaseModel):
    """Outcome of a single ``InstanceManager.run`` invocation."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    key: str
    snapshot: Snapshot
    changed: bool
    restored: bool = False
    callback_errors: List[CallbackFailure] = Field(default_factory=list)

    @property
    def ignored(self) -> bool:
        """``True`` when the event was not accepted in the current state."""
        return not self.changed

    @property
    def state_id(self) -> str:
        return self.snapshot.state_id

    @property
    def done(self) -> bool:
        return self.snapshot.done

    def error(self) -> Optional[CallbackFailure]:
        """First callback failure, if any."""
        return self.callback_errors[0] if self.callback_errors else None
