from typing import Annotated

from portal.schemas.validation import FormModel, email_address, max_length, min_length


class NewsletterSignup(FormModel):
    email: Annotated[str, email_address("Please enter a valid email address.")]


class MembershipApplication(FormModel):
    name: Annotated[str, min_length(2, "Name is required.")]
    email: Annotated[str, email_address("A valid email is required.")]
    phone: Annotated[
        str,
        min_length(10, "A valid 10-digit phone number is required."),
        max_length(13, "Phone number is too long."),
    ]
    district: Annotated[str, min_length(2, "District is required.")]
    state: Annotated[str, min_length(2, "State is required.")]
    utr: Annotated[str, min_length(10, "A valid UTR/Transaction ID is required.")]


class ContactMessage(FormModel):
    name: Annotated[str, min_length(2, "Name must be at least 2 characters.")]
    email: Annotated[str, email_address("Invalid email address.")]
    subject: Annotated[str, min_length(5, "Subject must be at least 5 characters.")]
    message: Annotated[str, min_length(10, "Message must be at least 10 characters.")]
