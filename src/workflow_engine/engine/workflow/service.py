"""Workflow service: validator + transition engine + store, one call per request."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from .analysis import DefinitionGraph, analyze_definition
from .errors import WorkflowError
from .models import (
    Action,
    CreateWorkflowDefinitionRequest,
    WorkflowDefinition,
    WorkflowInstance,
)
from .store import WorkflowStore
from .transitions import available_actions, execute_action, new_instance
from .validator import validate_definition

logger = logging.getLogger(__name__)


class _InstanceLock:
    """A lock plus the number of callers holding or waiting on it."""

    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.holders = 0


class WorkflowService:
    """High-level, testable workflow orchestration.

    All checks run against copies fetched from the store; a rejected operation
    never reaches a save call.
    """

    def __init__(self, store: WorkflowStore) -> None:
        self._store = store
        self._locks_guard = threading.Lock()
        self._instance_locks: dict[str, _InstanceLock] = {}

    @contextmanager
    def _instance_lock(self, instance_id: str) -> Iterator[None]:
        # Entries live only while someone holds or waits on them.
        with self._locks_guard:
            entry = self._instance_locks.get(instance_id)
            if entry is None:
                entry = self._instance_locks[instance_id] = _InstanceLock()
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._locks_guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._instance_locks[instance_id]

    def create_definition(self, request: CreateWorkflowDefinitionRequest) -> WorkflowDefinition:
        try:
            definition = validate_definition(request)
        except WorkflowError as e:
            logger.info("Workflow definition rejected", extra={"reason": e.message})
            raise

        self._store.save_definition(definition)
        logger.info(
            "Workflow definition created",
            extra={
                "definition_id": definition.id,
                "states": len(definition.states),
                "actions": len(definition.actions),
            },
        )
        return definition

    def get_definition(self, definition_id: str) -> WorkflowDefinition | None:
        return self._store.get_definition(definition_id)

    def list_definitions(self) -> list[WorkflowDefinition]:
        return self._store.list_definitions()

    def describe_definition(self, definition_id: str) -> DefinitionGraph:
        definition = self._store.get_definition(definition_id)
        if definition is None:
            raise WorkflowError.not_found(
                f"Workflow definition with ID '{definition_id}' not found"
            )
        return analyze_definition(definition)

    def create_instance(self, definition_id: str) -> WorkflowInstance:
        definition = self._store.get_definition(definition_id)
        if definition is None:
            raise WorkflowError.validation(
                f"Workflow definition with ID '{definition_id}' not found"
            )

        instance = new_instance(definition)
        self._store.save_instance(instance)
        logger.info(
            "Workflow instance created",
            extra={
                "instance_id": instance.id,
                "definition_id": definition.id,
                "state": instance.current_state_id,
            },
        )
        return instance

    def get_instance(self, instance_id: str) -> WorkflowInstance | None:
        return self._store.get_instance(instance_id)

    def list_instances(self) -> list[WorkflowInstance]:
        return self._store.list_instances()

    def execute_action(self, instance_id: str, action_id: str) -> WorkflowInstance:
        """Execute one action against a stored instance and persist the result.

        Concurrent calls for the same instance run one after another, so each
        sees the history written by the previous one.
        """

        with self._instance_lock(instance_id):
            instance = self._store.get_instance(instance_id)
            definition = (
                self._store.get_definition(instance.definition_id)
                if instance is not None
                else None
            )

            try:
                updated = execute_action(
                    instance, definition, action_id, instance_id=instance_id
                )
            except WorkflowError as e:
                log = logger.info if e.is_client_error else logger.error
                log(
                    "Workflow action rejected",
                    extra={
                        "instance_id": instance_id,
                        "action_id": action_id,
                        "kind": e.kind.value,
                        "reason": e.message,
                    },
                )
                raise

            self._store.save_instance(updated)

        entry = updated.history[-1]
        logger.info(
            "Workflow action executed",
            extra={
                "instance_id": updated.id,
                "action_id": action_id,
                "from_state": entry.from_state_id,
                "to_state": entry.to_state_id,
            },
        )
        return updated

    def available_actions(self, instance_id: str) -> list[Action]:
        instance = self._store.get_instance(instance_id)
        if instance is None:
            raise WorkflowError.not_found(f"Workflow instance with ID '{instance_id}' not found")
        definition = self._store.get_definition(instance.definition_id)
        if definition is None:
            raise WorkflowError.consistency(
                f"Workflow definition with ID '{instance.definition_id}' not found"
            )
        return available_actions(instance, definition)
