from typing import Any, Dict, Optional

import flatted

from ..contracts import Snapshot
from .models import FORMAT_VERSION, SnapshotMeta


def _canonical(value: Any, memo: Dict[int, Any]) -> Any:
    """Copy ``value`` with dict keys sorted, keeping shared and cyclic references."""
    if id(value) in memo:
        return memo[id(value)]
    if isinstance(value, dict):
        out: Dict[str, Any] = {}
        memo[id(value)] = out
        for k in sorted(value):
            out[k] = _canonical(value[k], memo)
        return out
    if isinstance(value, (list, tuple)):
        items: list = []
        memo[id(value)] = items
        items.extend(_canonical(v, memo) for v in value)
        return items
    return value


class SnapshotSerializer:
    """
    Encode a snapshot for the store.

    The envelope is written with ``flatted``, so contexts holding shared or
    self-referencing values survive a round trip. Keys are sorted first, so
    equal snapshots always produce identical bytes.
    """

    @staticmethod
    def serialize(
        snapshot: Snapshot, event: Optional[str] = None, revision: int = 0
    ) -> bytes:
        envelope = {
            "version": FORMAT_VERSION,
            "snapshot": {
                "state_id": snapshot.state_id,
                "context": snapshot.context,
                "done": snapshot.done,
            },
            "meta": SnapshotMeta(event=event, revision=revision).model_dump(),
        }
        try:
            text = flatted.stringify(
                _canonical(envelope, {}), separators=(",", ":"), ensure_ascii=False
            )
        except (TypeError, ValueError) as e:
            raise ValueError(
                f"Cannot serialize snapshot in state '{snapshot.state_id}': {e}"
            )
        return text.encode("utf-8")
