"""Process-wide registry of workflow types."""

from __future__ import annotations

from typing import Dict

from .exceptions import DefinitionError
from .machine import Workflow

# Workflows register themselves on import; see ``statekeeper.workflows``.
WORKFLOWS: Dict[str, Workflow] = {}


def register_workflow(workflow: Workflow) -> Workflow:
    """Add ``workflow`` to ``WORKFLOWS`` under its name.

    Re-registering the same object is a no-op; a different workflow under a
    taken name is rejected.
    """

    existing = WORKFLOWS.get(workflow.name)
    if existing is not None and existing is not workflow:
        raise DefinitionError(f"Workflow '{workflow.name}' is already registered")
    WORKFLOWS[workflow.name] = workflow
    return workflow


def get_workflow(name: str) -> Workflow:
    try:
        return WORKFLOWS[name]
    except KeyError:
        raise KeyError(f"Unknown workflow: {name}") from None


__all__ = ["WORKFLOWS", "register_workflow", "get_workflow"]
