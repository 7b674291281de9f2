"""Command line interface for driving persisted workflows."""

from __future__ import annotations

import asyncio
import json

import typer

from statekeeper import InstanceManager, RunResult, get_store, instance_key
from statekeeper.config import load_config
from statekeeper.registry import WORKFLOWS, get_workflow
from statekeeper.snapshot import SnapshotSerializer
from statekeeper.stores import InMemorySnapshotStore
from statekeeper.workflows import OrderService

app = typer.Typer(
    help="CLI for statekeeper workflows. State only persists between commands "
    "with a shared store: set STATEKEEPER_STORE=redis."
)

# Command groups
order_app = typer.Typer(help="Commands for the order workflow")
workflow_app = typer.Typer(help="Commands for inspecting workflows")

app.add_typer(order_app, name="order")
app.add_typer(workflow_app, name="workflow")


@app.callback()
def main() -> None:
    """Statekeeper CLI entry point."""
    pass


def _manager() -> InstanceManager:
    config = load_config()
    store = get_store()
    if isinstance(store, InMemorySnapshotStore):
        typer.secho(
            "warning: using the in-memory store, state is lost when this command "
            "exits (set STATEKEEPER_STORE=redis to keep it)",
            fg=typer.colors.YELLOW,
            err=True,
        )
    return InstanceManager(store, ttl_seconds=config.store.ttl_seconds)


def _report(result: RunResult) -> None:
    if not result.changed:
        typer.echo(f"{result.key}: ignored (state {result.state_id})")
        return
    status = "done" if result.done else "active"
    typer.echo(f"{result.key}: {result.state_id} ({status})")
    for failure in result.callback_errors:
        typer.secho(f"warning: {failure}", fg=typer.colors.YELLOW)


@order_app.command("create")
def order_create(owner_id: str, product_code: str = typer.Option(..., "--product-code")) -> None:
    """
    Start a new order for OWNER_ID, discarding any order in progress.

    Example:
        statekeeper order create 1 --product-code P1
    """
    service = OrderService(_manager())
    _report(asyncio.run(service.create(owner_id, product_code)))


@order_app.command("approve")
def order_approve(
    owner_id: str, approval_code: str = typer.Option(..., "--approval-code")
) -> None:
    """Approve the order of OWNER_ID."""
    service = OrderService(_manager())
    _report(asyncio.run(service.approve(owner_id, approval_code)))


@order_app.command("reject")
def order_reject(owner_id: str) -> None:
    """Reject the order of OWNER_ID."""
    service = OrderService(_manager())
    _report(asyncio.run(service.reject(owner_id)))


@order_app.command("cancel")
def order_cancel(owner_id: str, reason: str = typer.Option(..., "--reason")) -> None:
    """Cancel the rejected order of OWNER_ID."""
    service = OrderService(_manager())
    _report(asyncio.run(service.cancel(owner_id, reason)))


@workflow_app.command("list")
def workflow_list() -> None:
    """List registered workflow types."""
    if not WORKFLOWS:
        typer.echo("No workflows registered")
        return
    for name, workflow in sorted(WORKFLOWS.items()):
        typer.echo(f"{name}\t{workflow.definition.initial_state}")


@workflow_app.command("describe")
def workflow_describe(name: str) -> None:
    """
    Print the transition table of a workflow type.

    Example:
        statekeeper workflow describe order
        # Output: idle --CREATE--> created
        #         created --APPROVE--> approved [setApprovalCode]
    """
    try:
        workflow = get_workflow(name)
    except KeyError as exc:
        typer.secho(str(exc.args[0]), fg=typer.colors.RED)
        raise typer.Exit(code=1)

    info = workflow.definition.describe()
    typer.echo(f"Workflow {info['name']} (initial: {info['initial']})")
    for t in info["transitions"]:
        actions = f" [{', '.join(t['actions'])}]" if t["actions"] else ""
        typer.echo(f"  {t['from']} --{t['event']}--> {t['to']}{actions}")
    typer.echo(f"Final: {', '.join(info['final'])}")


@workflow_app.command("show")
def workflow_show(owner_id: str, name: str, as_json: bool = typer.Option(False, "--json")) -> None:
    """
    Show the stored snapshot for OWNER_ID in workflow NAME.

    Example:
        statekeeper workflow show 1 order
        # Output: owner:1:order:state: created (revision 1, last event CREATE)
    """
    stored = asyncio.run(_manager().peek(owner_id, name))
    if stored is None:
        typer.echo("No stored state")
        raise typer.Exit(code=1)
    snapshot = stored.snapshot
    if as_json:
        try:
            payload = json.dumps(stored.model_dump(mode="json"), indent=2, sort_keys=True)
        except ValueError:
            # Self-referencing context values only have the flattened encoding.
            payload = SnapshotSerializer.serialize(
                snapshot, event=stored.meta.event, revision=stored.meta.revision
            ).decode("utf-8")
        typer.echo(payload)
        return
    typer.echo(
        f"{instance_key(owner_id, name)}: {snapshot.state_id} "
        f"(revision {stored.meta.revision}, last event {stored.meta.event})"
    )
    for field, value in snapshot.context.items():
        typer.echo(f"  {field} = {value!r}")
    if snapshot.done:
        typer.echo("  (done)")


@workflow_app.command("reset")
def workflow_reset(owner_id: str, name: str) -> None:
    """Delete the stored snapshot for OWNER_ID in workflow NAME."""
    asyncio.run(_manager().reset(owner_id, name))
    typer.echo("Reset")


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()
