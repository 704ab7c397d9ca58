"""
API helper functions shared across route modules.
Maps tagged results from the order services onto HTTP errors.
"""
from typing import Any, Optional

from fastapi import HTTPException, status

from supply_orders.models import SheetResult

ERROR_STATUS = {
    'validation': status.HTTP_400_BAD_REQUEST,
    'not_found': status.HTTP_404_NOT_FOUND,
    'nothing_changed': status.HTTP_409_CONFLICT,
    'in_flight': status.HTTP_409_CONFLICT,
    'render': status.HTTP_500_INTERNAL_SERVER_ERROR,
    'transport': status.HTTP_502_BAD_GATEWAY,
    'partial_append': status.HTTP_502_BAD_GATEWAY,
}


def raise_for_error(error_type: str, message: str, detail: Optional[Any] = None):
    """Raise the HTTPException matching a result's ``error_type``."""
    code = ERROR_STATUS.get(error_type, status.HTTP_500_INTERNAL_SERVER_ERROR)
    raise HTTPException(status_code=code, detail=detail if detail is not None else message)


def unwrap(result: SheetResult):
    """Return ``result.data`` or raise the matching HTTP error."""
    if not result.success:
        raise_for_error(result.error_type, result.message)
    return result.data
