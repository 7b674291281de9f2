"""Machine definitions, actions and the evaluator."""

from __future__ import annotations

from .actions import Action, ActionRegistry, assign
from .definition import MachineDefinition, Transition
from .evaluator import advance
from .workflow import Workflow

__all__ = [
    "Action",
    "ActionRegistry",
    "MachineDefinition",
    "Transition",
    "Workflow",
    "advance",
    "assign",
]
