"""Evaluator tests."""

import pytest

from statekeeper.contracts import Event, Snapshot
from statekeeper.exceptions import ActionError
from statekeeper.machine import ActionRegistry, MachineDefinition, advance
from statekeeper.workflows.order import ORDER_ACTIONS, ORDER_DEFINITION

ALL_ORDER_EVENTS = ["CREATE", "APPROVE", "REJECT", "CANCEL", "UNKNOWN"]


def _order_snapshot(state_id, **context):
    base = dict(ORDER_DEFINITION.default_context)
    base.update(context)
    return Snapshot(
        state_id=state_id, context=base, done=ORDER_DEFINITION.is_final(state_id)
    )


@pytest.mark.parametrize("state_id", ["approved", "cancelled"])
@pytest.mark.parametrize("event_type", ALL_ORDER_EVENTS)
def test_final_snapshot_is_a_fixed_point(state_id, event_type):
    snapshot = _order_snapshot(state_id, productCode="P1")

    result, changed = advance(
        ORDER_DEFINITION, ORDER_ACTIONS, snapshot, Event(type=event_type, owner_id=1)
    )

    assert changed is False
    assert result is snapshot


def test_events_without_transition_are_ignored():
    for state_id in ORDER_DEFINITION.states:
        accepted = set(ORDER_DEFINITION.states[state_id])
        for event_type in ALL_ORDER_EVENTS:
            if event_type in accepted:
                continue
            snapshot = _order_snapshot(state_id)
            result, changed = advance(
                ORDER_DEFINITION,
                ORDER_ACTIONS,
                snapshot,
                Event(type=event_type, owner_id=1),
            )
            assert changed is False, (state_id, event_type)
            assert result == snapshot


def test_create_moves_idle_to_created():
    snapshot = _order_snapshot("idle", productCode="P1")

    result, changed = advance(
        ORDER_DEFINITION, ORDER_ACTIONS, snapshot, Event(type="CREATE", owner_id=1)
    )

    assert changed is True
    assert result.state_id == "created"
    assert result.done is False
    assert result.context == snapshot.context


def test_approve_runs_action_and_finishes():
    snapshot = _order_snapshot("created", productCode="P1")

    result, changed = advance(
        ORDER_DEFINITION,
        ORDER_ACTIONS,
        snapshot,
        Event(type="APPROVE", owner_id=1, approvalCode="A1"),
    )

    assert changed is True
    assert result.state_id == "approved"
    assert result.done is True
    assert result.context == {
        "productCode": "P1",
        "approvalCode": "A1",
        "reasonCancelled": None,
    }
    # input untouched
    assert snapshot.context["approvalCode"] is None


def test_reject_on_approved_order_is_ignored():
    approved = _order_snapshot("approved", productCode="P1", approvalCode="A1")

    result, changed = advance(
        ORDER_DEFINITION, ORDER_ACTIONS, approved, Event(type="REJECT", owner_id=1)
    )

    assert changed is False
    assert result.state_id == "approved"


def _counter_definition():
    return MachineDefinition(
        name="counter",
        initial_state="counting",
        states={
            "counting": {
                "ADD": {"actions": ["add", "label"]},
                "NOOP": {"actions": "noop"},
                "STOP": "stopped",
            }
        },
        final_states={"stopped"},
        default_context={"total": 0, "meta": {"a": 1}},
    )


def _counter_actions():
    registry = ActionRegistry()
    registry.add("add", lambda ctx, ev: {"total": ctx["total"] + ev.get("amount", 1)})
    registry.add("label", lambda ctx, ev: {"meta": {"last": ctx["total"]}})
    registry.add("noop", lambda ctx, ev: None)
    return registry


def test_actions_apply_in_order_with_shallow_merge():
    snapshot = Snapshot(state_id="counting", context={"total": 1, "meta": {"a": 1}})

    result, changed = advance(
        _counter_definition(),
        _counter_actions(),
        snapshot,
        Event(type="ADD", owner_id="x", amount=4),
    )

    assert changed is True
    assert result.state_id == "counting"
    # second action sees the first one's update; nested dicts are replaced, not merged
    assert result.context == {"total": 5, "meta": {"last": 5}}


def test_self_transition_without_context_change_is_not_a_change():
    snapshot = Snapshot(state_id="counting", context={"total": 1, "meta": {}})

    result, changed = advance(
        _counter_definition(), _counter_actions(), snapshot, Event(type="NOOP", owner_id="x")
    )

    assert changed is False
    assert result is snapshot


def test_action_cannot_mutate_context_in_place():
    registry = ActionRegistry()

    @registry.register("sneaky")
    def sneaky(context, event):
        context["total"] = 99
        return {}

    definition = MachineDefinition(
        name="m",
        initial_state="a",
        states={"a": {"GO": {"target": "b", "actions": "sneaky"}}, "b": {}},
        default_context={"total": 0},
    )

    with pytest.raises(TypeError):
        advance(definition, registry, Snapshot(state_id="a", context={"total": 0}), Event(type="GO", owner_id=1))


def test_action_returning_non_mapping_is_an_error():
    registry = ActionRegistry({"bad": lambda ctx, ev: ["not", "a", "mapping"]})
    definition = MachineDefinition(
        name="m",
        initial_state="a",
        states={"a": {"GO": {"target": "b", "actions": "bad"}}, "b": {}},
    )

    with pytest.raises(ActionError):
        advance(definition, registry, Snapshot(state_id="a"), Event(type="GO", owner_id=1))


@pytest.mark.parametrize("transition", ["a", {"target": "a", "actions": "noop"}])
def test_explicit_self_target_without_context_change_is_not_a_change(transition):
    definition = MachineDefinition(
        name="m",
        initial_state="a",
        states={"a": {"PING": transition, "STOP": "b"}, "b": {}},
        default_context={"total": 1},
    )
    registry = ActionRegistry({"noop": lambda ctx, ev: None})
    snapshot = Snapshot(state_id="a", context={"total": 1})

    result, changed = advance(definition, registry, snapshot, Event(type="PING", owner_id=1))

    assert changed is False
    assert result is snapshot


def test_explicit_self_target_with_context_change_is_a_change():
    registry = ActionRegistry({"bump": lambda ctx, ev: {"total": ctx["total"] + 1}})
    definition = MachineDefinition(
        name="m",
        initial_state="a",
        states={"a": {"PING": {"target": "a", "actions": "bump"}}},
    )

    result, changed = advance(
        definition, registry, Snapshot(state_id="a", context={"total": 1}),
        Event(type="PING", owner_id=1),
    )

    assert changed is True
    assert result.state_id == "a"
    assert result.context == {"total": 2}
