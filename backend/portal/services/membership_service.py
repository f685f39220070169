import logging
from collections.abc import Mapping

from portal.exceptions import DocumentNotFound, IdentityError, StoreError
from portal.schemas.outreach import MembershipApplication
from portal.schemas.result import NOT_FOUND, SubmissionResult
from portal.schemas.validation import validate
from portal.services.document_store import DocumentStore
from portal.services.identity_service import IdentityBridge
from portal.services.listing_cache import listing_cache
from portal.utils.timestamps import utc_now

logger = logging.getLogger("portal")

MEMBERSHIPS_LISTING = "/admin/memberships"
PENDING = "pending"
VERIFIED = "verified"


def apply_for_membership(store: DocumentStore, raw: Mapping) -> SubmissionResult:
    application, errors = validate(MembershipApplication, raw)
    if application is None:
        return SubmissionResult.invalid("Invalid data. Please check all fields.", errors)

    try:
        membership_id = store.add(
            "memberships", application.to_document(status=PENDING), timestamp_field="submittedAt"
        )
    except StoreError:
        logger.exception("Error submitting membership application")
        return SubmissionResult.failed("Failed to submit application. Please try again.")

    listing_cache.invalidate(MEMBERSHIPS_LISTING)
    return SubmissionResult.ok("Application submitted successfully!", membershipId=membership_id)


def _mark_verified(store: DocumentStore, membership: dict):
    # Status only moves forward; keep the first verification time.
    if membership.get("status") == VERIFIED:
        return
    store.update("memberships", membership["id"], {"status": VERIFIED, "verifiedAt": utc_now()})
    listing_cache.invalidate(MEMBERSHIPS_LISTING)


def verify_membership(store: DocumentStore, identities: IdentityBridge, membership_id: str) -> SubmissionResult:
    """Create the member's login (email, phone as password) and mark them verified.

    An existing login for the email is not an error: the membership is
    still marked verified, so repeating the call is safe.
    """
    try:
        membership = store.require("memberships", membership_id)
    except DocumentNotFound:
        return SubmissionResult.failed("Membership application not found.", failure=NOT_FOUND)
    except StoreError:
        logger.exception("Error loading membership %s", membership_id)
        return SubmissionResult.failed("Failed to verify membership.")

    message = "Membership verified and user created."
    try:
        identities.create_account(membership["email"], membership["phone"])
    except IdentityError as exc:
        if exc.code == IdentityError.WEAK_CREDENTIAL:
            return SubmissionResult.failed("The applicant's phone number is too short to use as a password.")
        if exc.code != IdentityError.ALREADY_EXISTS:
            logger.warning("Could not create member account for %s: %s", membership["email"], exc)
            return SubmissionResult.failed("Failed to verify membership.")
        message = "User already exists. Membership marked as verified."

    try:
        _mark_verified(store, membership)
    except StoreError:
        logger.exception("Error marking membership %s verified", membership_id)
        return SubmissionResult.failed("Failed to verify membership.")

    logger.info("Verified membership %s", membership_id)
    return SubmissionResult.ok(message, status=VERIFIED)


def list_memberships(store: DocumentStore) -> list[dict]:
    return listing_cache.get_or_load(MEMBERSHIPS_LISTING, lambda: snapshot_memberships(store))


def snapshot_memberships(store: DocumentStore) -> list[dict]:
    return store.query("memberships", order_by="submittedAt")
