from typing import Annotated, Literal

from pydantic import Field

from portal.schemas.validation import (
    FormModel,
    OptionalNumber,
    OptionalText,
    at_least,
    email_address,
    min_length,
    must_be_true,
    not_blank,
)

NonNegative = Annotated[OptionalNumber, at_least(0, "Must be zero or more.")]
YesNo = Literal["yes", "no"]


class JobPosting(FormModel):
    title: Annotated[str, min_length(3, "Title is required.")]
    company: Annotated[str, min_length(2, "Company name is required.")]
    location: Annotated[str, min_length(2, "Location is required.")]
    type: Annotated[str, min_length(1, "Job type is required.")]
    work_mode: Annotated[str, min_length(1, "Work mode is required.")]
    experience_min: NonNegative = None
    experience_max: NonNegative = None
    salary_min: NonNegative = None
    salary_max: NonNegative = None
    department: Annotated[str, min_length(1, "Department is required.")]
    company_type: Annotated[str, min_length(1, "Company type is required.")]
    role_category: Annotated[str, min_length(1, "Role category is required.")]
    education: Annotated[str, min_length(1, "Education is required.")]
    industry: Annotated[str, min_length(1, "Industry is required.")]
    description: Annotated[str, min_length(10, "Description is required.")]
    tags: OptionalText = None

    def tag_list(self) -> list[str]:
        if not self.tags:
            return []
        return [t.strip() for t in self.tags.split(",") if t.strip()]


class ApplicationForm(FormModel):
    job_id: Annotated[str, not_blank("Job ID is required.")]

    # Personal
    full_name: Annotated[str, min_length(2, "Full name is required.")]
    dob: OptionalText = None
    gender: OptionalText = None
    mobile: Annotated[str, min_length(10, "A valid mobile number is required.")]
    email: Annotated[str, email_address("A valid email address is required.")]
    whatsapp: OptionalText = None
    permanent_address: OptionalText = None
    current_address: OptionalText = None
    city: OptionalText = None
    state: OptionalText = None
    pincode: OptionalText = None

    # Education
    highest_qualification: OptionalText = None
    year_of_passing: OptionalText = None
    university: OptionalText = None
    specialization: OptionalText = None

    # Experience
    has_experience: YesNo
    previous_company: OptionalText = None
    designation: OptionalText = None
    years_of_experience: NonNegative = None
    linkedin: OptionalText = None

    # Skills and preferences
    technical_skills: OptionalText = None
    soft_skills: OptionalText = None
    certifications: OptionalText = None
    languages: list[str] = []
    preferred_role: OptionalText = None
    preferred_location: OptionalText = None
    expected_salary: OptionalText = None
    notice_period: OptionalText = None
    ready_to_relocate: YesNo
    why_should_we_hire_you: OptionalText = None

    confirm_info: Annotated[bool, must_be_true("You must confirm the information is true.")] = Field(
        default=False, validate_default=True
    )
    agree_terms: Annotated[bool, must_be_true("You must agree to the terms.")] = Field(
        default=False, validate_default=True
    )
