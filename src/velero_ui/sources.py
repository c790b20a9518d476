"""
Item sources: turn external command output into selectable items.

Three parsing strategies are provided:
- lines: one entity per line of output
- structured: a JSON list of objects carrying a name field
- resources: tabular `kubectl get` output filtered by resource type prefix
"""

import json
import re
from typing import Any, Iterable, Optional

from .core.logging import get_logger
from .errors import ParseError
from .executor import CommandExecutor
from .models import SelectableItem


def parse_lines(output: str) -> list[SelectableItem]:
    """
    Map each line of trimmed output to an item.

    Empty output yields no items.
    """
    text = output.strip()
    if not text:
        return []
    return [SelectableItem(title=line) for line in text.split("\n")]


def _lookup(entity: Any, field_path: str) -> Optional[str]:
    """Follow a dotted path through nested dicts."""
    value = entity
    for key in field_path.split("."):
        if not isinstance(value, dict) or key not in value:
            return None
        value = value[key]
    return value if isinstance(value, str) else None


def parse_named_list(output: str, name_field: str = "metadata.name", command: str = "") -> list[SelectableItem]:
    """
    Decode a serialized list of entities and title items by their name field.

    Accepts a top-level JSON array, a Kubernetes-style list object with an
    `items` array, or a single object.

    Raises:
        ParseError: If the output is not valid JSON or has no entity list
    """
    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        raise ParseError(command, str(e)) from e

    if isinstance(data, dict):
        entities = data["items"] if isinstance(data.get("items"), list) else [data]
    elif isinstance(data, list):
        entities = data
    else:
        raise ParseError(command, f"expected a list of objects, got {type(data).__name__}")

    items = []
    for entity in entities:
        name = _lookup(entity, name_field)
        if name is None:
            raise ParseError(command, f"entity without '{name_field}' field")
        items.append(SelectableItem(title=name))
    return items


def resource_pattern(prefixes: Iterable[str]) -> re.Pattern:
    """Build the pattern matching an allowed `type/name` token at line start."""
    alternatives = "|".join(re.escape(prefix) for prefix in prefixes)
    return re.compile(rf"^(?:{alternatives})\S+")


def parse_resources(output: str, prefixes: Iterable[str]) -> list[SelectableItem]:
    """
    Collect allowed `type/name` tokens, one per line, first-seen order.

    Lines starting with any other resource type are skipped.
    """
    prefixes = list(prefixes)
    if not prefixes:
        return []
    pattern = resource_pattern(prefixes)
    seen: set[str] = set()
    items = []
    for line in output.splitlines():
        match = pattern.match(line)
        if not match:
            continue
        resource = match.group(0)
        if resource in seen:
            continue
        seen.add(resource)
        items.append(SelectableItem(title=resource))
    return items


class ItemSource:
    """Runs listing commands and parses their output into items."""

    def __init__(self, executor: CommandExecutor, logger: Optional[Any] = None):
        self.executor = executor
        self._logger = logger or get_logger(__name__)

    def lines(self, command: str) -> list[SelectableItem]:
        """Items from line-oriented output."""
        items = parse_lines(self.executor.run(command))
        self._logger.debug("Fetched items", command=command, count=len(items))
        return items

    def structured(self, command: str, name_field: str = "metadata.name") -> list[SelectableItem]:
        """Items from a JSON list of named entities."""
        items = parse_named_list(self.executor.run(command), name_field, command=command)
        self._logger.debug("Fetched items", command=command, count=len(items))
        return items

    def resources(self, command: str, prefixes: Iterable[str]) -> list[SelectableItem]:
        """Items from tabular resource listings."""
        items = parse_resources(self.executor.run(command), prefixes)
        self._logger.debug("Fetched resources", command=command, count=len(items))
        return items
