"""Shared pydantic base for the camelCase JSON wire format."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case attributes in Python, camelCase keys on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def first_error_message(errors: list[dict]) -> str:
    """Return a readable message for the first pydantic error.

    Errors raised by our own validators carry the original ``ValueError`` in
    ``ctx``; use its text so clients see e.g. "Problem description must be at
    least 10 characters" instead of pydantic's "Value error, ..." prefix.
    """
    if not errors:
        return "Invalid request data"
    first = errors[0]
    ctx = first.get("ctx") or {}
    error = ctx.get("error")
    if error is not None:
        return str(error)
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    message = first.get("msg", "Invalid value")
    if loc:
        return f"{'.'.join(loc)}: {message}"
    return message
