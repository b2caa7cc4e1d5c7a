from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable

from kegtrack.time_utils import parse_iso_datetime


Path = tuple


@dataclass(frozen=True)
class FieldError:
    path: Path
    message: str

    def to_dict(self) -> dict:
        return {"path": list(self.path), "message": self.message}


class ValidationError(ValueError):
    """400-level input problem, with per-field detail."""

    def __init__(self, message: str, errors: list[FieldError] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "errors": [e.to_dict() for e in self.errors],
        }


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate keg id)."""


class _FieldInvalid(Exception):
    def __init__(self, message: str, path: Path = ()):
        super().__init__(message)
        self.message = message
        self.path = path


@dataclass(frozen=True)
class FieldSpec:
    """
    One writable field of an entity input:
    - key: JSON (camelCase) name
    - attr: dataclass attribute the value lands in
    - kind: coercion to apply (see COERCERS)
    """
    key: str
    attr: str
    kind: str = "string"
    nullable: bool = True
    max_length: int | None = None
    choices: tuple[str, ...] | None = None
    min_value: int | None = None
    max_value: int | None = None
    item: Callable[[Any], Any] | None = None
    max_items: int | None = None


@dataclass(frozen=True)
class EntitySchema:
    """
    Central policy for one entity input:
    - fields: what clients are allowed to set
    - required_on_create: JSON keys required for POST
    - rules: cross-field checks run on the cleaned patch, returning FieldErrors
    """
    name: str
    fields: tuple[FieldSpec, ...]
    required_on_create: frozenset[str] = frozenset()
    rules: tuple[Callable[[dict], list[FieldError]], ...] = ()

    def by_key(self) -> dict[str, FieldSpec]:
        return {f.key: f for f in self.fields}


@dataclass
class ValidationResult:
    """Tagged outcome of validating one payload."""
    value: dict | None = None
    errors: list[FieldError] = field(default_factory=list)
    message: str = "Invalid data"

    @property
    def ok(self) -> bool:
        return not self.errors

    def unwrap(self) -> dict:
        if self.errors:
            raise ValidationError(self.message, self.errors)
        return self.value or {}


def _coerce_string(spec: FieldSpec, value: Any):
    if isinstance(value, (dict, list, bool)):
        raise _FieldInvalid(f"{spec.key} must be a string")
    val = str(value).strip()
    if spec.max_length and len(val) > spec.max_length:
        raise _FieldInvalid(f"{spec.key} exceeds max length {spec.max_length}")
    return val


def _coerce_enum(spec: FieldSpec, value: Any):
    val = _coerce_string(spec, value)
    if spec.choices and val not in spec.choices:
        raise _FieldInvalid(
            f"{spec.key} must be one of: {', '.join(spec.choices)}"
        )
    return val


def _coerce_int(spec: FieldSpec, value: Any):
    # Strict validation to reject floats and scientific notation
    if isinstance(value, bool):
        raise _FieldInvalid(f"{spec.key} must be an integer")
    if isinstance(value, int):
        result = value
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped or "e" in stripped.lower() or "." in stripped:
            raise _FieldInvalid(f"{spec.key} must be an integer")
        try:
            result = int(stripped)
        except ValueError:
            raise _FieldInvalid(f"{spec.key} must be an integer")
    elif isinstance(value, float) and value.is_integer():
        result = int(value)
    else:
        raise _FieldInvalid(f"{spec.key} must be an integer")

    if spec.min_value is not None and result < spec.min_value:
        raise _FieldInvalid(f"{spec.key} must be >= {spec.min_value}")
    if spec.max_value is not None and result > spec.max_value:
        raise _FieldInvalid(f"{spec.key} must be <= {spec.max_value}")
    return result


def _coerce_decimal(spec: FieldSpec, value: Any):
    if isinstance(value, bool) or isinstance(value, (dict, list)):
        raise _FieldInvalid(f"{spec.key} must be a number")
    text = str(value).strip()
    if not text:
        raise _FieldInvalid(f"{spec.key} must be a number")
    try:
        result = Decimal(text)
    except InvalidOperation:
        raise _FieldInvalid(f"{spec.key} must be a number")
    if not result.is_finite():
        raise _FieldInvalid(f"{spec.key} must be a number")
    if spec.min_value is not None and result < spec.min_value:
        raise _FieldInvalid(f"{spec.key} must be >= {spec.min_value}")
    if spec.max_value is not None and result > spec.max_value:
        raise _FieldInvalid(f"{spec.key} must be <= {spec.max_value}")
    return result


def _coerce_bool(spec: FieldSpec, value: Any):
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise _FieldInvalid(f"{spec.key} must be a boolean")


def _coerce_datetime(spec: FieldSpec, value: Any):
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            dt = parse_iso_datetime(value)
        except ValueError:
            raise _FieldInvalid(f"{spec.key} must be an ISO-8601 datetime")
        if dt is None:
            raise _FieldInvalid(f"{spec.key} must be an ISO-8601 datetime")
        return dt
    raise _FieldInvalid(f"{spec.key} must be an ISO-8601 datetime")


def _coerce_list(spec: FieldSpec, value: Any):
    if not isinstance(value, list):
        raise _FieldInvalid(f"{spec.key} must be a list")
    if spec.max_items is not None and len(value) > spec.max_items:
        raise _FieldInvalid(f"{spec.key} accepts at most {spec.max_items} entries")
    items = []
    for index, raw in enumerate(value):
        if spec.item is None:
            items.append(raw)
            continue
        try:
            items.append(spec.item(raw))
        except _FieldInvalid as exc:
            raise _FieldInvalid(exc.message, (index,) + exc.path)
    return items


COERCERS: dict[str, Callable[[FieldSpec, Any], Any]] = {
    "string": _coerce_string,
    "enum": _coerce_enum,
    "int": _coerce_int,
    "decimal": _coerce_decimal,
    "bool": _coerce_bool,
    "datetime": _coerce_datetime,
    "list": _coerce_list,
}


def item_record(raw: Any) -> dict:
    """
    List entries arrive as objects, or as JSON-encoded strings from older
    clients that stored them that way.
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            raise _FieldInvalid("entry must be an object")
    if not isinstance(raw, dict):
        raise _FieldInvalid("entry must be an object")
    return raw


def item_value(spec: FieldSpec, raw: dict, *, required: bool = True) -> Any:
    """Coerce one member of a list entry, reporting the path relative to the entry."""
    value = raw.get(spec.key)
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise _FieldInvalid(f"{spec.key} is required", (spec.key,))
        return None
    try:
        return COERCERS[spec.kind](spec, value)
    except _FieldInvalid as exc:
        raise _FieldInvalid(exc.message, (spec.key,) + exc.path)


def item_datetime(raw: Any) -> datetime:
    spec = FieldSpec(key="date", attr="date", kind="datetime")
    try:
        return _coerce_datetime(spec, raw)
    except _FieldInvalid:
        raise _FieldInvalid("entry must be an ISO-8601 date")


def validate_payload(
    *,
    schema: EntitySchema,
    payload: Any,
    partial: bool,
) -> ValidationResult:
    """
    Validates + normalizes incoming JSON against the entity schema.
    Returns a result whose value is a cleaned patch keyed by attribute name.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    message = f"Invalid {schema.name} data"
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        return ValidationResult(errors=[FieldError((), "Invalid JSON payload")], message=message)

    specs = schema.by_key()
    errors: list[FieldError] = []

    if not partial:
        for key in sorted(schema.required_on_create):
            raw = payload.get(key)
            if raw is None or (isinstance(raw, str) and not raw.strip()):
                errors.append(FieldError((key,), f"{key} is required"))

    # Reject unknown fields
    for key in payload.keys():
        if key not in specs:
            errors.append(FieldError((key,), f"Unknown field: {key}"))

    patch: dict = {}
    for key, raw in payload.items():
        spec = specs.get(key)
        if spec is None:
            continue

        # NULL handling
        if raw is None:
            if not spec.nullable:
                if partial or key not in schema.required_on_create:
                    errors.append(FieldError((key,), f"{key} cannot be null"))
                continue
            patch[spec.attr] = None
            continue

        try:
            val = COERCERS[spec.kind](spec, raw)
        except _FieldInvalid as exc:
            errors.append(FieldError((key,) + exc.path, exc.message))
            continue

        # Blank string check
        if isinstance(val, str) and val == "":
            if not spec.nullable:
                if partial or key not in schema.required_on_create:
                    errors.append(FieldError((key,), f"{key} cannot be blank"))
                continue
            val = None

        patch[spec.attr] = val

    if not errors:
        for rule in schema.rules:
            errors.extend(rule(patch))

    if errors:
        return ValidationResult(errors=errors, message=message)
    return ValidationResult(value=patch, message=message)
