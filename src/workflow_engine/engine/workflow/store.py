"""Persistence for workflow definitions and instances.

Stores upsert by id and list in insertion order. Every save is atomic with
respect to readers: a reader sees either the previous or the new version of an
entity, never a mix. Entities handed out are copies, so mutating a returned
object never changes what is stored.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import WorkflowError
from .models import WorkflowDefinition, WorkflowInstance

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)


class WorkflowStore(Protocol):
    def get_definition(self, definition_id: str) -> WorkflowDefinition | None: ...

    def list_definitions(self) -> list[WorkflowDefinition]: ...

    def save_definition(self, definition: WorkflowDefinition) -> None: ...

    def get_instance(self, instance_id: str) -> WorkflowInstance | None: ...

    def list_instances(self) -> list[WorkflowInstance]: ...

    def save_instance(self, instance: WorkflowInstance) -> None: ...


class InMemoryWorkflowStore:
    """Process-local store. Contents are lost when the process exits."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._definitions: dict[str, WorkflowDefinition] = {}
        self._instances: dict[str, WorkflowInstance] = {}

    def get_definition(self, definition_id: str) -> WorkflowDefinition | None:
        with self._lock:
            found = self._definitions.get(definition_id)
            return found.model_copy(deep=True) if found is not None else None

    def list_definitions(self) -> list[WorkflowDefinition]:
        with self._lock:
            return [d.model_copy(deep=True) for d in self._definitions.values()]

    def save_definition(self, definition: WorkflowDefinition) -> None:
        snapshot = definition.model_copy(deep=True)
        with self._lock:
            self._definitions[snapshot.id] = snapshot

    def get_instance(self, instance_id: str) -> WorkflowInstance | None:
        with self._lock:
            found = self._instances.get(instance_id)
            return found.model_copy(deep=True) if found is not None else None

    def list_instances(self) -> list[WorkflowInstance]:
        with self._lock:
            return [i.model_copy(deep=True) for i in self._instances.values()]

    def save_instance(self, instance: WorkflowInstance) -> None:
        snapshot = instance.model_copy(deep=True)
        with self._lock:
            self._instances[snapshot.id] = snapshot


def _load_json_models(path: Path, model: type[_M], *, strict: bool = False) -> list[_M]:
    """Load a JSON list of `model` records from `path`.

    Read paths tolerate damage: an unreadable file or record is logged and
    skipped. With `strict=True` (used before rewriting the file) any damage raises
    instead, since writing the filtered list back would delete the damaged records.
    """

    if not path.exists():
        return []

    def _damaged(reason: str) -> None:
        if strict:
            raise WorkflowError.consistency(
                f"Refusing to overwrite state file '{path}': {reason}"
            )
        logger.warning(f"State file {reason}; skipping", extra={"path": str(path)})

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        _damaged("is not valid JSON")
        return []
    if not isinstance(raw, list):
        _damaged("has unexpected shape")
        return []

    items: list[_M] = []
    for idx, item in enumerate(raw):
        try:
            items.append(model.model_validate(item))
        except ValidationError:
            _damaged(f"has an unreadable {model.__name__} record at index {idx}")
    return items


def _write_json_models(path: Path, items: Sequence[BaseModel]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = [m.model_dump(mode="json", by_alias=True) for m in items]
    text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"

    # Write beside the target then rename, so readers never see a half-written file.
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _upsert(items: list[_M], item: _M, *, key: str) -> list[_M]:
    item_key = getattr(item, key)
    for idx, existing in enumerate(items):
        if getattr(existing, key) == item_key:
            items[idx] = item
            return items
    items.append(item)
    return items


@dataclass
class JsonFileWorkflowStore:
    """JSON-file backed store.

    Definitions and instances live in two files under `path`. Safe for
    concurrent use within one process; not coordinated across processes.
    """

    path: Path

    def __post_init__(self) -> None:
        self._lock = threading.Lock()

    @property
    def definitions_file(self) -> Path:
        return self.path / "definitions.json"

    @property
    def instances_file(self) -> Path:
        return self.path / "instances.json"

    def get_definition(self, definition_id: str) -> WorkflowDefinition | None:
        with self._lock:
            for definition in _load_json_models(self.definitions_file, WorkflowDefinition):
                if definition.id == definition_id:
                    return definition
            return None

    def list_definitions(self) -> list[WorkflowDefinition]:
        with self._lock:
            return _load_json_models(self.definitions_file, WorkflowDefinition)

    def save_definition(self, definition: WorkflowDefinition) -> None:
        with self._lock:
            items = _load_json_models(self.definitions_file, WorkflowDefinition, strict=True)
            _write_json_models(self.definitions_file, _upsert(items, definition, key="id"))

    def get_instance(self, instance_id: str) -> WorkflowInstance | None:
        with self._lock:
            for instance in _load_json_models(self.instances_file, WorkflowInstance):
                if instance.id == instance_id:
                    return instance
            return None

    def list_instances(self) -> list[WorkflowInstance]:
        with self._lock:
            return _load_json_models(self.instances_file, WorkflowInstance)

    def save_instance(self, instance: WorkflowInstance) -> None:
        with self._lock:
            items = _load_json_models(self.instances_file, WorkflowInstance, strict=True)
            _write_json_models(self.instances_file, _upsert(items, instance, key="id"))


def build_store(*, backend: str, path: Path) -> WorkflowStore:
    if backend == "memory":
        return InMemoryWorkflowStore()
    if backend == "json":
        return JsonFileWorkflowStore(path)
    raise ValueError(f"Unknown store backend: {backend!r}")
