from pydantic import BaseModel, ConfigDict, Field

from portal.schemas.validation import FieldErrors

# Failure kinds; routers map these onto HTTP status codes.
VALIDATION = "validation"
CONFLICT = "conflict"
NOT_FOUND = "not_found"
UPSTREAM = "upstream"


class SubmissionResult(BaseModel):
    """Uniform outcome of a submission: ``{success, message, errors?, ...}``."""

    model_config = ConfigDict(extra="allow")

    success: bool
    message: str
    errors: FieldErrors | None = None
    failure: str | None = Field(default=None, exclude=True)

    @classmethod
    def ok(cls, message: str, **extra) -> "SubmissionResult":
        return cls(success=True, message=message, **extra)

    @classmethod
    def invalid(cls, message: str, errors: FieldErrors) -> "SubmissionResult":
        return cls(success=False, message=message, errors=errors, failure=VALIDATION)

    @classmethod
    def failed(cls, message: str, failure: str = UPSTREAM) -> "SubmissionResult":
        return cls(success=False, message=message, failure=failure)

    def payload(self) -> dict:
        return self.model_dump(exclude_none=True)
