"""Order lifecycle: create, then approve, or reject and cancel."""

from __future__ import annotations

import logging
from enum import Enum

from ..contracts import RunResult, Snapshot
from ..dispatch import WorkflowDispatcher
from ..machine import ActionRegistry, MachineDefinition, Workflow, assign
from ..manager import InstanceManager
from ..registry import register_workflow

logger = logging.getLogger(__name__)

WORKFLOW_NAME = "order"


class OrderState(str, Enum):
    IDLE = "idle"
    CREATED = "created"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class OrderAction(str, Enum):
    SET_APPROVAL_CODE = "setApprovalCode"
    SET_REASON_CANCELLED = "setReasonCancelled"


ORDER_DEFINITION = MachineDefinition(
    name=WORKFLOW_NAME,
    initial_state=OrderState.IDLE.value,
    states={
        OrderState.IDLE.value: {"CREATE": OrderState.CREATED.value},
        OrderState.CREATED.value: {
            "REJECT": OrderState.REJECTED.value,
            "APPROVE": {
                "target": OrderState.APPROVED.value,
                "actions": OrderAction.SET_APPROVAL_CODE.value,
            },
        },
        OrderState.REJECTED.value: {
            "CANCEL": {
                "target": OrderState.CANCELLED.value,
                "actions": OrderAction.SET_REASON_CANCELLED.value,
            },
        },
    },
    final_states={OrderState.APPROVED.value, OrderState.CANCELLED.value},
    default_context={"productCode": None, "approvalCode": None, "reasonCancelled": None},
)

ORDER_ACTIONS = ActionRegistry(
    {
        OrderAction.SET_APPROVAL_CODE.value: assign(
            approvalCode=lambda _, event: event.get("approvalCode")
        ),
        OrderAction.SET_REASON_CANCELLED.value: assign(
            reasonCancelled=lambda _, event: event.get("reasonCancelled")
        ),
    }
)

ORDER_WORKFLOW = register_workflow(
    Workflow(ORDER_DEFINITION, ORDER_ACTIONS, start_event="CREATE")
)


def log_order_change(snapshot: Snapshot) -> None:
    """Default change hook: report which state the order reached."""
    logger.info(f"Handle {snapshot.state_id}: {snapshot.context}")


class OrderService:
    """Order operations for one owner at a time."""

    def __init__(
        self,
        manager: InstanceManager | None = None,
        on_change=log_order_change,
        on_done=None,
    ) -> None:
        self._dispatcher = WorkflowDispatcher(
            ORDER_WORKFLOW, manager=manager, on_change=on_change, on_done=on_done
        )

    @property
    def dispatcher(self) -> WorkflowDispatcher:
        return self._dispatcher

    async def create(self, owner_id: int | str, product_code: str) -> RunResult:
        # Always starts over, even if an order is in progress.
        return await self._dispatcher.create_or_restart(
            owner_id,
            initial_context={"productCode": product_code},
            productCode=product_code,
        )

    async def approve(self, owner_id: int | str, approval_code: str) -> RunResult:
        return await self._dispatcher.send_event(
            owner_id, "APPROVE", approvalCode=approval_code
        )

    async def reject(self, owner_id: int | str) -> RunResult:
        return await self._dispatcher.send_event(owner_id, "REJECT")

    async def cancel(self, owner_id: int | str, reason_cancelled: str) -> RunResult:
        return await self._dispatcher.send_event(
            owner_id, "CANCEL", reasonCancelled=reason_cancelled
        )
