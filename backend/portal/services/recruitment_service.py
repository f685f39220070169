import logging
from collections.abc import Mapping

from portal.exceptions import ContentStoreError, StoreError
from portal.schemas.job import ApplicationForm, JobPosting
from portal.schemas.result import SubmissionResult
from portal.schemas.validation import validate
from portal.services.content_store import Attachment, ContentStore, resume_path
from portal.services.document_store import DocumentStore
from portal.services.listing_cache import listing_cache

logger = logging.getLogger("portal")

JOBS_LISTING = "/jobs"
ADMIN_JOBS_LISTING = "/admin/jobs"


def add_job(store: DocumentStore, raw: Mapping) -> SubmissionResult:
    posting, errors = validate(JobPosting, raw)
    if posting is None:
        logger.info("Rejected job posting: %s", sorted(errors))
        return SubmissionResult.invalid("Invalid job data. Please check all fields.", errors)

    try:
        job_id = store.add("jobs", posting.to_document(tags=posting.tag_list()), timestamp_field="postedAt")
    except StoreError:
        logger.exception("Error adding job")
        return SubmissionResult.failed("Failed to add job. Please try again.")

    listing_cache.invalidate(JOBS_LISTING, ADMIN_JOBS_LISTING)
    logger.info("Posted job %s (%s)", job_id, posting.title)
    return SubmissionResult.ok("Job added successfully!", jobId=job_id)


def apply_for_job(
    store: DocumentStore,
    content: ContentStore,
    raw: Mapping,
    resume: Attachment | None = None,
) -> SubmissionResult:
    """Validate an application, upload the resume if one was given, then store it.

    A supplied resume must upload before the application is written; if the
    upload fails nothing is stored.
    """
    application, errors = validate(ApplicationForm, raw)
    if application is None:
        logger.info("Rejected application: %s", sorted(errors))
        return SubmissionResult.invalid("Invalid application data. Please check all fields.", errors)

    document = application.to_document()
    if resume is not None and resume.content:
        try:
            document["resumeUrl"] = content.upload(
                resume_path(application.job_id, resume.filename), resume.content
            )
        except ContentStoreError:
            logger.exception("Error uploading resume for job %s", application.job_id)
            return SubmissionResult.failed("Failed to submit application. Please try again.")

    try:
        application_id = store.add("applications", document, timestamp_field="submittedAt")
    except StoreError:
        logger.exception("Error submitting application for job %s", application.job_id)
        return SubmissionResult.failed("Failed to submit application. Please try again.")

    listing_cache.invalidate(ADMIN_JOBS_LISTING)
    return SubmissionResult.ok(
        "Application submitted successfully! We will get back to you soon.",
        applicationId=application_id,
    )


def list_jobs(store: DocumentStore) -> list[dict]:
    return listing_cache.get_or_load(JOBS_LISTING, lambda: store.query("jobs", order_by="postedAt"))


def list_jobs_with_applicants(store: DocumentStore) -> list[dict]:
    """Admin overview: every job with its application count."""

    def load() -> list[dict]:
        jobs = store.query("jobs", order_by="postedAt")
        return [
            {**job, "applicationCount": store.count("applications", {"jobId": job["id"]})}
            for job in jobs
        ]

    return listing_cache.get_or_load(ADMIN_JOBS_LISTING, load)


def list_applications(store: DocumentStore, job_id: str | None = None) -> list[dict]:
    where = {"jobId": job_id} if job_id else None
    return store.query("applications", where, order_by="submittedAt")
