"""Instance key format.

``owner:<owner_id>:<workflow_name>:state``. Components may not contain the
separator, which keeps keys unambiguous across owners and workflow names.
"""

from __future__ import annotations

KEY_SEP = ":"
KEY_PREFIX = "owner"
KEY_SUFFIX = "state"


def _validate_component(value: str, name: str) -> None:
    if not value:
        raise ValueError(f"Instance key component {name!r} must not be empty")
    if KEY_SEP in value:
        raise ValueError(
            f"Instance key component {name!r} must not contain separator {KEY_SEP!r}"
        )


def instance_key(owner_id: int | str, workflow_name: str) -> str:
    """Return the store key for one owner's instance of ``workflow_name``."""
    owner = str(owner_id)
    _validate_component(owner, "owner_id")
    _validate_component(workflow_name, "workflow_name")
    return KEY_SEP.join((KEY_PREFIX, owner, workflow_name, KEY_SUFFIX))
