"""Error taxonomy for the messaging core."""

from typing import Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError


class MessagingError(Exception):
    """Base class for all messaging errors."""


class ValidationError(MessagingError):
    """One or more message fields failed validation.

    ``errors`` enumerates every failing field as ``{"field", "message", "type"}``.
    """

    def __init__(self, errors: List[Dict[str, str]]):
        self.errors = errors
        fields = ", ".join(error["field"] for error in errors)
        super().__init__(f"Message validation failed: {fields}")

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        """Build from a pydantic error, keeping one entry per failing field."""
        errors = []
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"]) or "message"
            errors.append(
                {"field": field, "message": error["msg"], "type": error["type"]}
            )
        return cls(errors)

    @classmethod
    def for_field(
        cls, field: str, message: str, error_type: Optional[str] = None
    ) -> "ValidationError":
        return cls([{"field": field, "message": message, "type": error_type or "invalid"}])


class NotFoundError(MessagingError):
    """The referenced message does not exist."""


class StoreUnavailableError(MessagingError):
    """The backing store could not be reached or a write failed."""
