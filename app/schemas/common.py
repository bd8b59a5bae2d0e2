"""
Error envelope shared by every router's `responses=` table.

Every 4xx/5xx body is {code, message, details?}. Validation failures, for a
request body or for analytics rows, list their failing fields under
`details.errors` as ErrorDetail entries.
"""
from typing import Any, Iterable, Optional

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """One failing field; `field` is the dotted location, list indices included."""
    field: str
    message: str
    type: str


def error_details(errors: Iterable[dict[str, Any]], skip: tuple = ("body",)) -> list[ErrorDetail]:
    """Flatten pydantic `errors()` output into ErrorDetail entries."""
    return [
        ErrorDetail(
            field=".".join(str(loc) for loc in err["loc"] if loc not in skip),
            message=err["msg"],
            type=err["type"],
        )
        for err in errors
    ]


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: Optional[dict[str, Any]] = None
