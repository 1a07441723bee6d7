"""
Mapping from service outcomes to the JSON envelope every endpoint returns.

    {success, message?, errors?, data?, count?, error?}

Ok and Err are the only two shapes a handler can produce; to_envelope() turns
each core.models outcome into one of them.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from fastapi.responses import JSONResponse

from api.schemas import Envelope
from core.models import Created, Deleted, Found, Listed, NotFound, Rejected, Updated

logger = logging.getLogger(__name__)


@dataclass
class Ok:
    status: int = 200
    data: Any = None
    count: Optional[int] = None
    message: Optional[str] = None

    def render(self) -> JSONResponse:
        body = Envelope(success=True, message=self.message, data=self.data, count=self.count)
        return JSONResponse(status_code=self.status, content=body.model_dump(exclude_none=True))


@dataclass
class Err:
    status: int
    message: str
    errors: Optional[List[str]] = None
    error: Optional[str] = None

    def render(self) -> JSONResponse:
        body = Envelope(success=False, message=self.message, errors=self.errors, error=self.error)
        return JSONResponse(status_code=self.status, content=body.model_dump(exclude_none=True))


Result = Union[Ok, Err]


def to_envelope(outcome, message: Optional[str] = None) -> Result:
    """`message` is attached to successful outcomes only"""
    if isinstance(outcome, Created):
        return Ok(status=201, data=outcome.record, message=message)
    if isinstance(outcome, Found):
        return Ok(data=outcome.record, message=message)
    if isinstance(outcome, Listed):
        return Ok(data=outcome.records, count=len(outcome.records), message=message)
    if isinstance(outcome, Updated):
        return Ok(data=outcome.record, message=message)
    if isinstance(outcome, Deleted):
        return Ok(message=message or "Deleted successfully")
    if isinstance(outcome, Rejected):
        return Err(status=400, message="Validation failed", errors=outcome.errors)
    if isinstance(outcome, NotFound):
        return Err(status=404, message=outcome.message)
    raise TypeError(f"Unhandled service outcome: {outcome!r}")


def storage_failure(message: str, exc: Exception) -> Err:
    logger.error(f"{message}: {exc}")
    return Err(status=500, message=message, error=str(exc))
