"""Statekeeper: persisted per-entity state machines over a key-value store."""

from .contracts import Event, RunResult, Snapshot
from .dispatch import WorkflowDispatcher
from .exceptions import (
    ActionError,
    CallbackFailure,
    CorruptSnapshot,
    DefinitionError,
    StatekeeperError,
    StoreUnavailable,
)
from .keys import instance_key
from .machine import ActionRegistry, MachineDefinition, Transition, Workflow, advance
from .manager import InstanceManager
from .registry import WORKFLOWS, register_workflow
from .stores import get_store

__version__ = "0.1.0"
__all__ = [
    "ActionError",
    "ActionRegistry",
    "CallbackFailure",
    "CorruptSnapshot",
    "DefinitionError",
    "Event",
    "InstanceManager",
    "MachineDefinition",
    "RunResult",
    "Snapshot",
    "StatekeeperError",
    "StoreUnavailable",
    "Transition",
    "WORKFLOWS",
    "Workflow",
    "WorkflowDispatcher",
    "advance",
    "get_store",
    "instance_key",
    "register_workflow",
]
