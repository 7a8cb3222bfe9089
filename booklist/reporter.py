"""
Maps pipeline results to the response sent back to the caller.
"""

from typing import Any, Dict

from booklist.exceptions import MutationRejected
from booklist.models import ErrorResponse, Outcome
from store.base import StoreError

UPSTREAM_FAILURE_STATUS = 502


def report_success(ack: Dict[str, Any]) -> Outcome:
    return Outcome(status_code=200, body=ack)


def report_rejection(rejection: MutationRejected) -> Outcome:
    return Outcome(
        status_code=rejection.status_code,
        body=ErrorResponse(
            error=rejection.reason,
            detail=rejection.detail,
            status_code=rejection.status_code
        ).model_dump(),
    )


def report_store_error(error: StoreError) -> Outcome:
    """Use the store's status code and body when it gave them."""
    status_code = error.status_code or UPSTREAM_FAILURE_STATUS
    body = error.body
    if body is None:
        body = ErrorResponse(
            error=error.message,
            status_code=status_code
        ).model_dump()
    return Outcome(status_code=status_code, body=body)
