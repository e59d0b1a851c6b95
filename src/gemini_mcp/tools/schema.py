"""Argument validation stage run before every tool handler."""

from __future__ import annotations

import logging
from typing import Any

from jsonschema import Draft7Validator, ValidationError

from gemini_mcp.tools.types import (
    ToolDescriptor,
    ValidArguments,
    ValidationFailure,
    ValidationOutcome,
)

logger = logging.getLogger(__name__)


def validate_arguments(descriptor: ToolDescriptor, arguments: Any) -> ValidationOutcome:
    """
    Check tool arguments against the descriptor's input schema.

    Missing arguments are treated as an empty object. Never raises for
    bad input; every violation is reported in the returned failure.

    Args:
        descriptor: The tool being called.
        arguments: The ``arguments`` value of a ``tools/call`` request.

    Returns:
        ValidArguments, or ValidationFailure listing each problem.
    """
    if arguments is None:
        arguments = {}

    errors = sorted(descriptor.validator.iter_errors(arguments), key=_error_path)
    if not errors:
        return ValidArguments(arguments=arguments)

    messages = [_describe(error) for error in errors]
    logger.debug(f"Arguments for {descriptor.name} rejected: {messages}")
    return ValidationFailure(errors=messages)


def check_descriptor(descriptor: ToolDescriptor) -> None:
    """
    Fail fast on a malformed input schema.

    Raises:
        jsonschema.SchemaError: If the derived schema is not valid Draft 7.
    """
    Draft7Validator.check_schema(descriptor.input_schema)


def _error_path(error: ValidationError) -> str:
    return "/".join(str(p) for p in error.absolute_path)


def _describe(error: ValidationError) -> str:
    """Readable message for one violation."""
    if error.validator == "oneOf":
        names = [name for clause in error.validator_value for name in clause.get("required", [])]
        if names:
            return f"exactly one of {', '.join(names)} must be provided"

    path = _error_path(error)
    if path:
        return f"{path}: {error.message}"
    return error.message
