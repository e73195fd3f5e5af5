"""CLI entrypoint for the workflow engine.

Commands operate on the configured store (the JSON file store by default) and
print JSON to stdout. `serve` starts the REST API.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TypeVar

from pydantic import ValidationError

from workflow_engine import __version__
from workflow_engine.engine.config import EngineSettings
from workflow_engine.engine.logging import configure_logging
from workflow_engine.engine.workflow.errors import WorkflowError
from workflow_engine.engine.workflow.models import CreateWorkflowDefinitionRequest
from workflow_engine.engine.workflow.service import WorkflowService
from workflow_engine.engine.workflow.store import build_store

logger = logging.getLogger(__name__)

_S = TypeVar("_S", bound=EngineSettings)


def _emit(payload: object) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _load_definition_request(path: Path) -> CreateWorkflowDefinitionRequest:
    raw = path.read_text(encoding="utf-8")
    return CreateWorkflowDefinitionRequest.model_validate_json(raw)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workflow-engine",
        description="Define finite-state workflows and run instances of them",
    )
    parser.add_argument("--version", action="version", version=f"workflow-engine {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the REST API")
    serve.add_argument(
        "--host", default=None, help="Bind address (overrides WORKFLOW_SERVER_HOST)"
    )
    serve.add_argument(
        "--port", type=int, default=None, help="Bind port (overrides WORKFLOW_SERVER_PORT)"
    )

    create_definition = subparsers.add_parser(
        "create-definition", help="Validate and store a workflow definition from a JSON file"
    )
    create_definition.add_argument(
        "--file",
        dest="file",
        type=Path,
        required=True,
        help="JSON file with {name, states, actions, description}",
    )

    subparsers.add_parser("list-definitions", help="List stored workflow definitions")

    show_definition = subparsers.add_parser("show-definition", help="Print one definition")
    show_definition.add_argument("definition_id")
    show_definition.add_argument(
        "--graph",
        action="store_true",
        help="Print the reachability summary instead of the definition",
    )

    create_instance = subparsers.add_parser(
        "create-instance", help="Start a new instance at the definition's initial state"
    )
    create_instance.add_argument("definition_id")

    subparsers.add_parser("list-instances", help="List stored workflow instances")

    show_instance = subparsers.add_parser("show-instance", help="Print one instance")
    show_instance.add_argument("instance_id")

    execute = subparsers.add_parser("execute", help="Execute an action against an instance")
    execute.add_argument("instance_id")
    execute.add_argument("action_id")

    available = subparsers.add_parser(
        "available-actions", help="List actions executable from the instance's current state"
    )
    available.add_argument("instance_id")

    return parser


def _load_settings(settings_cls: type[_S]) -> _S | None:
    try:
        return settings_cls()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return None


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    from workflow_engine.server.app import create_app
    from workflow_engine.server.config import ServerSettings

    settings = _load_settings(ServerSettings)
    if settings is None:
        return 2

    configure_logging(settings.log_level)
    app = create_app(settings)
    uvicorn.run(
        app,
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        return _serve(args)

    settings = _load_settings(EngineSettings)
    if settings is None:
        return 2

    configure_logging(settings.log_level)
    service = WorkflowService(
        build_store(backend=settings.store_backend, path=settings.state_path)
    )

    try:
        if args.command == "create-definition":
            try:
                request = _load_definition_request(args.file)
            except (OSError, ValidationError) as e:
                print(f"Could not read definition file: {e}", file=sys.stderr)
                return 1
            definition = service.create_definition(request)
            _emit(definition.to_json())
            return 0

        if args.command == "list-definitions":
            _emit([d.to_json() for d in service.list_definitions()])
            return 0

        if args.command == "show-definition":
            if args.graph:
                _emit(service.describe_definition(args.definition_id).to_json())
                return 0
            found = service.get_definition(args.definition_id)
            if found is None:
                raise WorkflowError.not_found(
                    f"Workflow definition with ID '{args.definition_id}' not found"
                )
            _emit(found.to_json())
            return 0

        if args.command == "create-instance":
            instance = service.create_instance(args.definition_id)
            _emit(instance.to_json())
            return 0

        if args.command == "list-instances":
            _emit([i.to_json() for i in service.list_instances()])
            return 0

        if args.command == "show-instance":
            found_instance = service.get_instance(args.instance_id)
            if found_instance is None:
                raise WorkflowError.not_found(
                    f"Workflow instance with ID '{args.instance_id}' not found"
                )
            _emit(found_instance.to_json())
            return 0

        if args.command == "execute":
            updated = service.execute_action(args.instance_id, args.action_id)
            _emit(updated.to_json())
            return 0

        if args.command == "available-actions":
            _emit([a.to_json() for a in service.available_actions(args.instance_id)])
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except WorkflowError as e:
        print(str(e), file=sys.stderr)
        # Exit codes are designed to be CI-friendly.
        return 1 if e.is_client_error else 2

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
