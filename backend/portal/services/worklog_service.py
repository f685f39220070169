import asyncio
import logging
from collections.abc import Mapping

from portal.exceptions import StoreError
from portal.schemas.result import SubmissionResult
from portal.schemas.validation import FormModel, validate
from portal.schemas.worklog import CallLogSubmission, DsrSubmission, EarningsSubmission
from portal.services.document_store import DocumentStore
from portal.services.listing_cache import listing_cache
from portal.services.report_service import travel_distance

logger = logging.getLogger("portal")


def worklog_listing(employee_id: str, collection: str) -> str:
    return f"/staff/{employee_id}/{collection}"


def _write_through(store: DocumentStore, collection: str, employee_id: str, document: dict) -> str:
    """Add ``document``, keeping the employee's cached list in step.

    The entry shows up in the cached list before the write; it is swapped
    for the stored document on success and removed again on failure. Once
    the add has committed the submission counts as written, even if the
    stored copy cannot be read back.
    """
    path = worklog_listing(employee_id, collection)
    token = listing_cache.apply_tentative(path, document)
    try:
        doc_id = store.add(collection, document, timestamp_field="date")
    except StoreError:
        listing_cache.rollback(path, token)
        raise
    try:
        stored = store.get(collection, doc_id)
    except StoreError:
        logger.warning("Could not read back %s/%s; reloading %s", collection, doc_id, path)
        stored = None
    if stored is None:
        listing_cache.invalidate(path)
    else:
        listing_cache.reconcile(path, token, stored)
    return doc_id


def _submit_single(
    store: DocumentStore,
    model: type[FormModel],
    collection: str,
    raw: Mapping,
    done: str,
    failed: str,
) -> SubmissionResult:
    record, errors = validate(model, raw)
    if record is None:
        return SubmissionResult.invalid("Invalid data.", errors)
    try:
        doc_id = _write_through(store, collection, record.employee_id, record.to_document())
    except StoreError:
        logger.exception("Error writing %s for %s", collection, record.employee_id)
        return SubmissionResult.failed(failed)
    return SubmissionResult.ok(done, id=doc_id)


def submit_dsr(store: DocumentStore, raw: Mapping) -> SubmissionResult:
    return _submit_single(
        store, DsrSubmission, "dsr", raw,
        "DSR submitted successfully.", "Failed to submit DSR.",
    )


def log_call(store: DocumentStore, raw: Mapping) -> SubmissionResult:
    return _submit_single(
        store, CallLogSubmission, "callLogs", raw,
        "Call logged successfully.", "Failed to log call.",
    )


async def submit_earnings(store: DocumentStore, raw: Mapping) -> SubmissionResult:
    """Store each line item as its own earnings document.

    Items are written concurrently and every write is awaited before the
    outcome is decided. Any failed item fails the whole submission; items
    that did get written are left in place.
    """
    submission, errors = validate(EarningsSubmission, raw)
    if submission is None:
        return SubmissionResult.invalid("Invalid data.", errors)

    owner = {"employeeId": submission.employee_id, "employeeName": submission.employee_name}
    writes = [
        asyncio.to_thread(_write_through, store, "earnings", submission.employee_id, {**line.to_document(), **owner})
        for line in submission.earnings
    ]
    outcomes = await asyncio.gather(*writes, return_exceptions=True)

    failures = [o for o in outcomes if isinstance(o, BaseException)]
    unexpected = [f for f in failures if not isinstance(f, StoreError)]
    if unexpected:
        raise unexpected[0]
    for failure in failures:
        logger.error("Earning line for %s failed: %r", submission.employee_id, failure)
    if failures:
        return SubmissionResult.failed("Failed to submit earnings.")
    return SubmissionResult.ok("Earnings submitted successfully.", count=len(outcomes))


def _cached_list(store: DocumentStore, collection: str, employee_id: str) -> list[dict]:
    return listing_cache.get_or_load(
        worklog_listing(employee_id, collection),
        lambda: store.query(collection, {"employeeId": employee_id}, order_by="date"),
    )


def list_dsr(store: DocumentStore, employee_id: str) -> list[dict]:
    return [{**entry, "distance": travel_distance(entry)} for entry in _cached_list(store, "dsr", employee_id)]


def list_calls(store: DocumentStore, employee_id: str) -> list[dict]:
    return _cached_list(store, "callLogs", employee_id)


def list_earnings(store: DocumentStore, employee_id: str) -> list[dict]:
    return _cached_list(store, "earnings", employee_id)
