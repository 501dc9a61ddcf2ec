from fastapi import HTTPException

from skillswap.exceptions import (
    MessagingError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)


def to_http_exception(error: MessagingError) -> HTTPException:
    """Map a messaging error to the HTTP status the API reports for it."""
    if isinstance(error, ValidationError):
        return HTTPException(
            status_code=422, detail={"message": str(error), "errors": error.errors}
        )
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, StoreUnavailableError):
        return HTTPException(status_code=503, detail="Message store unavailable")
    return HTTPException(status_code=500, detail="Internal server error")
