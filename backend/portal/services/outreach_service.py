import logging
from collections.abc import Mapping

from portal.exceptions import StoreError
from portal.schemas.outreach import ContactMessage, NewsletterSignup
from portal.schemas.result import SubmissionResult
from portal.schemas.validation import validate
from portal.services.document_store import DocumentStore
from portal.services.listing_cache import listing_cache

logger = logging.getLogger("portal")

NEWSLETTER_LISTING = "/admin/newsletter"


def subscribe_to_newsletter(store: DocumentStore, raw: Mapping) -> SubmissionResult:
    """Add a subscriber unless the email is already on the list."""
    signup, errors = validate(NewsletterSignup, raw)
    if signup is None:
        return SubmissionResult.invalid("Invalid email address.", errors)

    email = signup.email.strip().lower()
    try:
        if store.exists("newsletterSubscribers", {"email": email}):
            return SubmissionResult.ok("You are already subscribed!")
        store.add("newsletterSubscribers", {"email": email}, timestamp_field="subscribedAt")
    except StoreError:
        logger.exception("Error subscribing %s to the newsletter", email)
        return SubmissionResult.failed("Something went wrong. Please try again later.")

    listing_cache.invalidate(NEWSLETTER_LISTING)
    return SubmissionResult.ok("Thank you for subscribing!")


def list_subscribers(store: DocumentStore) -> list[dict]:
    return listing_cache.get_or_load(
        NEWSLETTER_LISTING, lambda: store.query("newsletterSubscribers", order_by="subscribedAt")
    )


def submit_contact_message(raw: Mapping) -> SubmissionResult:
    message, errors = validate(ContactMessage, raw)
    if message is None:
        return SubmissionResult.invalid("Invalid form data.", errors)
    logger.info("Contact message from %s <%s>: %s", message.name, message.email, message.subject)
    return SubmissionResult.ok("Thank you for your message! We will get back to you soon.")
