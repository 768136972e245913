"""Translate core error kinds into HTTP responses."""

from contextlib import contextmanager

from fastapi import HTTPException
from protean.exceptions import ObjectNotFoundError, ValidationError

from shared.errors import DuplicateItem, StoreUnavailable

_STATUS_BY_ERROR = (
    (DuplicateItem, 409),
    (ObjectNotFoundError, 404),
    (ValidationError, 422),
    (StoreUnavailable, 503),
)


@contextmanager
def domain_errors():
    try:
        yield
    except (ObjectNotFoundError, ValidationError, StoreUnavailable) as exc:
        status_code = next(code for error_cls, code in _STATUS_BY_ERROR if isinstance(exc, error_cls))
        raise HTTPException(
            status_code=status_code,
            detail={"code": getattr(exc, "code", "invalid"), "errors": getattr(exc, "messages", str(exc))},
        ) from exc
