#!/usr/bin/env python3
"""Programmatic usage example.

This demonstrates using the workflow components directly:

* load settings from `.env`
* create a definition (A -> B -> C) and an instance of it
* drive the instance to its final state, printing its history

The state directory is passed as an argument; pass `--memory` to keep
everything in process.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path

from workflow_engine.engine.config import EngineSettings
from workflow_engine.engine.logging import configure_logging
from workflow_engine.engine.workflow import (
    Action,
    CreateWorkflowDefinitionRequest,
    State,
    WorkflowError,
    WorkflowService,
    build_store,
)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a small workflow end to end.")
    parser.add_argument("--state-dir", default="workflow_state", help="JSON store directory")
    parser.add_argument("--memory", action="store_true", help="Use the in-memory store")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = EngineSettings()
    configure_logging(settings.log_level)

    store = build_store(backend="memory" if args.memory else "json", path=Path(args.state_dir))
    service = WorkflowService(store)

    definition = service.create_definition(
        CreateWorkflowDefinitionRequest(
            name="Document review",
            states=[
                State(id="draft", name="Draft", is_initial=True),
                State(id="review", name="In review"),
                State(id="published", name="Published", is_final=True),
            ],
            actions=[
                Action(id="submit", name="Submit", from_states=["draft"], to_state="review"),
                Action(id="reject", name="Reject", from_states=["review"], to_state="draft"),
                Action(
                    id="publish", name="Publish", from_states=["review"], to_state="published"
                ),
            ],
        )
    )
    instance = service.create_instance(definition.id)

    for action_id in ("submit", "reject", "submit", "publish"):
        instance = service.execute_action(instance.id, action_id)

    try:
        service.execute_action(instance.id, "reject")
    except WorkflowError as exc:
        print(f"Rejected as expected: {exc}")

    print(f"Instance {instance.id} is in '{instance.current_state_id}'")
    for entry in instance.history:
        print(
            f"  {entry.timestamp.isoformat()} {entry.action_id}: "
            f"{entry.from_state_id} -> {entry.to_state_id}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
