"""
Schema adapter.

Decouples the pipeline from pydantic behind two operations:
validate (never raises for a validation failure) and cast.
"""

from functools import lru_cache
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from .exceptions import SchemaValidationError


class ValidationOptions(BaseModel):
    """
    Options for the validation pass.

    Unknown fields are dropped (pydantic's default ``extra="ignore"``) and
    nested models are always validated. Every violation is collected unless
    ``abort_early`` is set.
    """

    model_config = ConfigDict(frozen=True)

    strict: Optional[bool] = None
    from_attributes: Optional[bool] = None
    abort_early: bool = False
    context: Optional[Dict[str, Any]] = None


class CastOptions(BaseModel):
    """Options for the coercion pass."""

    model_config = ConfigDict(frozen=True)

    strict: Optional[bool] = None
    from_attributes: Optional[bool] = None
    context: Optional[Dict[str, Any]] = None


@lru_cache(maxsize=256)
def _cached_adapter(schema: Any) -> TypeAdapter:
    return TypeAdapter(schema)


def get_type_adapter(schema: Any) -> TypeAdapter:
    """Return a (cached) TypeAdapter for any schema pydantic understands."""
    if isinstance(schema, TypeAdapter):
        return schema
    try:
        hash(schema)
    except TypeError:
        return TypeAdapter(schema)
    return _cached_adapter(schema)


def violations_from_pydantic(exc: ValidationError) -> List[Dict[str, str]]:
    violations = []
    for error in exc.errors(include_url=False, include_context=False, include_input=False):
        violations.append(
            {
                "path": ".".join(str(part) for part in error["loc"]),
                "type": error["type"],
                "message": error["msg"],
            }
        )
    return violations


def validate_schema(
    value: Any, schema: Any, options: Optional[ValidationOptions] = None
) -> Union[Literal[True], SchemaValidationError]:
    """
    Validate a value against a schema.

    Args:
        value: raw input (session, params, query or body)
        schema: pydantic model, dataclass, TypedDict, type or TypeAdapter
        options: validation options

    Returns:
        True on success, SchemaValidationError on failure

    Note:
        Only pydantic.ValidationError is converted. Any other exception is an
        engine or schema defect and propagates unchanged.
    """
    if schema is None:
        return True

    options = options or ValidationOptions()
    adapter = get_type_adapter(schema)
    try:
        adapter.validate_python(
            value,
            strict=options.strict,
            from_attributes=options.from_attributes,
            context=options.context,
        )
    except ValidationError as e:
        violations = violations_from_pydantic(e)
        if options.abort_early:
            violations = violations[:1]
        return SchemaValidationError(violations)

    return True


def cast_schema(value: Any, schema: Any, options: Optional[CastOptions] = None) -> Any:
    """Coerce an already validated value into the schema's typed form."""
    if schema is None:
        return value

    options = options or CastOptions()
    return get_type_adapter(schema).validate_python(
        value,
        strict=options.strict,
        from_attributes=options.from_attributes,
        context=options.context,
    )
