"""
Theme (de)serialization and merge helpers.

Themes serialize to plain dicts (JSON-compatible, ISO-8601 timestamps) and
are rebuilt from dicts by walking dataclass type hints. The merge helpers
apply a mapping of changes onto an existing theme: mappings addressed to a
nested group merge field-wise into that group, anything else replaces the
field value.
"""

import dataclasses
import json
import logging
import typing
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Tuple, Type, TypeVar

from pyqt_formtheme.theming.models import Theme
from pyqt_formtheme.theming.validation import ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@lru_cache(maxsize=None)
def _field_types(cls: type) -> Dict[str, Any]:
    return typing.get_type_hints(cls)


def _unwrap_optional(tp: Any) -> Any:
    if typing.get_origin(tp) is typing.Union:
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def _dataclass_type(tp: Any):
    tp = _unwrap_optional(tp)
    return tp if isinstance(tp, type) and dataclasses.is_dataclass(tp) else None


def _is_datetime(tp: Any) -> bool:
    return _unwrap_optional(tp) is datetime


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 string (or pass through a datetime) as an aware UTC datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Expected ISO-8601 timestamp, got {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ========== SERIALIZATION ==========

def to_dict(instance: Any) -> Any:
    """Convert a dataclass tree to JSON-compatible primitives."""
    if dataclasses.is_dataclass(instance):
        return {f.name: to_dict(getattr(instance, f.name)) for f in dataclasses.fields(instance)}
    if isinstance(instance, datetime):
        return instance.isoformat()
    if isinstance(instance, (list, tuple)):
        return [to_dict(v) for v in instance]
    if isinstance(instance, dict):
        return {k: to_dict(v) for k, v in instance.items()}
    return instance


def theme_to_dict(theme: Theme) -> Dict[str, Any]:
    return to_dict(theme)


def from_dict(cls: Type[T], data: Mapping[str, Any]) -> T:
    """
    Build a dataclass of type ``cls`` from a mapping.

    Missing keys take the field default; unknown keys are ignored. Raises
    ValueError when a nested group is not a mapping or a timestamp cannot
    be parsed.
    """
    if not isinstance(data, Mapping):
        raise ValueError(f"{cls.__name__} payload must be a mapping, got {type(data).__name__}")

    hints = _field_types(cls)
    kwargs = {}
    for f in dataclasses.fields(cls):
        if f.name not in data:
            continue
        value = data[f.name]
        tp = hints[f.name]
        nested = _dataclass_type(tp)
        if nested is not None:
            if value is None and _unwrap_optional(tp) is tp:
                raise ValueError(f"{cls.__name__}.{f.name} must not be null")
            kwargs[f.name] = None if value is None else from_dict(nested, value)
        elif _is_datetime(tp):
            kwargs[f.name] = parse_timestamp(value)
        elif typing.get_origin(tp) is list:
            if not isinstance(value, list):
                raise ValueError(f"{cls.__name__}.{f.name} must be a list")
            kwargs[f.name] = list(value)
        else:
            kwargs[f.name] = value
    return cls(**kwargs)


def theme_from_dict(data: Mapping[str, Any]) -> Theme:
    return from_dict(Theme, data)


def theme_to_json(theme: Theme, indent: int = 2) -> str:
    return json.dumps(theme_to_dict(theme), indent=indent)


def theme_from_json(text: str) -> Theme:
    """Parse JSON text into a Theme. Raises ValueError on malformed input."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Malformed theme JSON: {e}") from e
    return theme_from_dict(data)


# ========== MERGING ==========

def merge_changes(instance: T, changes: Mapping[str, Any], path: str = "") -> Tuple[T, List[ValidationError]]:
    """
    Apply ``changes`` onto a dataclass instance without mutating it.

    Returns the merged copy and a list of structural errors (unknown fields,
    non-mapping payloads for nested groups). Value-level problems are left
    for the validator.
    """
    errors: List[ValidationError] = []
    if not isinstance(changes, Mapping):
        errors.append(ValidationError(path or "<root>", "Changes must be a mapping", changes))
        return instance, errors

    hints = _field_types(type(instance))
    field_names = {f.name for f in dataclasses.fields(instance)}
    replacements = {}

    for key, value in changes.items():
        field_path = f"{path}.{key}" if path else key
        if key not in field_names:
            errors.append(ValidationError(field_path, f"Unknown field: {key}", value))
            continue

        tp = hints[key]
        nested = _dataclass_type(tp)
        if nested is not None and isinstance(value, Mapping):
            current = getattr(instance, key)
            if current is None:
                current = nested()
            merged, nested_errors = merge_changes(current, value, field_path)
            errors.extend(nested_errors)
            replacements[key] = merged
        elif nested is not None and not isinstance(value, nested) and not (
                value is None and _unwrap_optional(tp) is not tp):
            errors.append(ValidationError(field_path, f"{key} must be a mapping", value))
        elif _is_datetime(tp):
            try:
                replacements[key] = parse_timestamp(value)
            except ValueError as e:
                errors.append(ValidationError(field_path, str(e), value))
        else:
            replacements[key] = value

    return dataclasses.replace(instance, **replacements), errors
