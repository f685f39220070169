from typing import Annotated

from pydantic import Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from portal.schemas.staff import EmployeeId
from portal.schemas.validation import (
    FormModel,
    OptionalNumber,
    at_least,
    greater_than,
    min_length,
)

Kilometres = Annotated[OptionalNumber, at_least(0, "KM reading cannot be negative.")]


class DsrSubmission(FormModel):
    employee_id: EmployeeId
    employee_name: str
    description: Annotated[str, min_length(10, "Please provide a detailed description of your work.")]
    has_travelled: bool = False
    opening_km: Kilometres = Field(default=None, validate_default=True)
    closing_km: Kilometres = Field(default=None, validate_default=True)

    @field_validator("opening_km")
    @classmethod
    def _opening_required_when_travelled(cls, value, info: ValidationInfo):
        if info.data.get("has_travelled") and value is None:
            raise PydanticCustomError("rule_failed", "Opening KM is required when you have travelled.")
        return value

    @field_validator("closing_km")
    @classmethod
    def _closing_after_opening(cls, value, info: ValidationInfo):
        if not info.data.get("has_travelled"):
            return value
        if value is None:
            raise PydanticCustomError("rule_failed", "Closing KM is required when you have travelled.")
        opening = info.data.get("opening_km")
        if opening is not None and value <= opening:
            raise PydanticCustomError("rule_failed", "Closing KM must be greater than Opening KM.")
        return value

    def to_document(self, **extra) -> dict:
        doc = super().to_document(**extra)
        if not self.has_travelled:
            doc.pop("openingKm", None)
            doc.pop("closingKm", None)
        return doc


class CallLogSubmission(FormModel):
    employee_id: EmployeeId
    employee_name: str
    client_name: Annotated[str, min_length(2, "Client name is required.")]
    client_mobile: Annotated[str, min_length(10, "A valid mobile number is required.")]
    topic: Annotated[str, min_length(5, "Topic must be at least 5 characters.")]
    duration: Annotated[float, at_least(1, "Duration must be at least 1 minute.")]


class EarningLine(FormModel):
    description: Annotated[str, min_length(3, "Description must be at least 3 characters.")]
    amount: Annotated[float, greater_than(0, "Amount must be greater than 0.")]


class EarningsSubmission(FormModel):
    employee_id: EmployeeId
    employee_name: str
    earnings: Annotated[list[EarningLine], min_length(1, "Please add at least one earning.")]
