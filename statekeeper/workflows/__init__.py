"""Built-in workflows. Importing this package registers them."""

from __future__ import annotations

from .order import ORDER_WORKFLOW, OrderService, OrderState

__all__ = ["ORDER_WORKFLOW", "OrderService", "OrderState"]
