from typing import Annotated, Literal

from portal.config import settings
from portal.schemas.validation import (
    FormModel,
    OptionalText,
    email_address,
    ends_with,
    exact_length,
    max_length,
    min_length,
    not_blank,
)

_DOMAIN = settings.employee_id_domain
_MOBILE = "A valid 10-digit mobile number is required."

EmployeeId = Annotated[str, not_blank("Employee ID is required.")]


class EmployeeRegistration(FormModel):
    full_name: Annotated[str, min_length(3, "Full name must be at least 3 characters.")]
    mobile: Annotated[str, min_length(10, _MOBILE), max_length(10, _MOBILE)]
    personal_email: Annotated[str, email_address("Please enter a valid personal email.")]
    user_id: Annotated[
        str,
        min_length(3, "User ID is required."),
        ends_with(_DOMAIN, f"User ID must end with {_DOMAIN}"),
    ]
    password: Annotated[str, min_length(6, "Password must be at least 6 characters.")]
    district: Annotated[str, min_length(2, "District is required.")]
    state: Annotated[str, min_length(2, "State is required.")]
    pincode: Annotated[str, exact_length(6, "Pincode must be 6 digits.")]


class TaskAssignment(FormModel):
    title: Annotated[str, not_blank("Title is required.")]
    description: Annotated[str, not_blank("Description is required.")]
    priority: Literal["Low", "Medium", "High"] = "Medium"


class AttendanceMark(FormModel):
    employee_id: EmployeeId
    employee_name: str
    status: Literal["working", "leave"]
    tasks: OptionalText = None
