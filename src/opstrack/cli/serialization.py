"""Textual (JSON) representation of entities at the command boundary."""

import json
from dataclasses import asdict
from typing import Any

from opstrack.domain.entities import Operation, Tag, TagRule


def operation_to_dict(operation: Operation) -> dict[str, Any]:
    """Serialize an operation; tag ids are sorted for stable output."""
    data = asdict(operation)
    data["state"] = operation.state.to_storage()
    data["tags_ids"] = sorted(operation.tags_ids)
    return data


def tag_rule_to_dict(rule: TagRule) -> dict[str, Any]:
    data = asdict(rule)
    data["kind"] = rule.kind.value
    return data


def tag_to_dict(tag: Tag) -> dict[str, Any]:
    return asdict(tag)


def dumps(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)
