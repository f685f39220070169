from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request
from starlette.datastructures import UploadFile

from portal.config import settings
from portal.dependencies import get_content_store, get_store, require_admin
from portal.services.content_store import Attachment, ContentStore
from portal.services.document_store import DocumentStore
from portal.services.recruitment_service import (
    add_job,
    apply_for_job,
    list_applications,
    list_jobs,
    list_jobs_with_applicants,
)
from portal.utils.responses import submission_response

router = APIRouter(prefix="/jobs", tags=["jobs"])

admin_router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


async def _read_resume(upload: UploadFile) -> Attachment:
    max_bytes = settings.max_upload_bytes
    size = 0
    chunks: list[bytes] = []
    while True:
        chunk = await upload.read(1024 * 1024)
        if not chunk:
            break
        size += len(chunk)
        if size > max_bytes:
            raise HTTPException(status_code=413, detail=f"File too large (max {max_bytes} bytes)")
        chunks.append(chunk)
    return Attachment(upload.filename or "resume", b"".join(chunks), upload.content_type)


@router.get("")
async def get_jobs(store: DocumentStore = Depends(get_store)):
    return list_jobs(store)


@router.get("/{job_id}")
async def get_job(job_id: str, store: DocumentStore = Depends(get_store)):
    return store.require("jobs", job_id)


@router.post("/{job_id}/apply")
async def apply(
    job_id: str,
    request: Request,
    store: DocumentStore = Depends(get_store),
    content: ContentStore = Depends(get_content_store),
):
    form = await request.form()
    raw: dict[str, Any] = {k: v for k, v in form.items() if not isinstance(v, UploadFile)}
    raw["jobId"] = job_id
    raw["languages"] = [v for v in form.getlist("languages") if isinstance(v, str)]

    resume = None
    upload = form.get("resume")
    if isinstance(upload, UploadFile):
        resume = await _read_resume(upload)

    result = apply_for_job(store, content, raw, resume)
    return submission_response(result, success_status=201)


@admin_router.post("/jobs")
async def post_job(payload: dict[str, Any] = Body(...), store: DocumentStore = Depends(get_store)):
    return submission_response(add_job(store, payload), success_status=201)


@admin_router.get("/jobs")
async def admin_jobs(store: DocumentStore = Depends(get_store)):
    return list_jobs_with_applicants(store)


@admin_router.get("/applications")
async def get_applications(
    job_id: str | None = Query(None, alias="jobId"),
    store: DocumentStore = Depends(get_store),
):
    return list_applications(store, job_id)


@admin_router.get("/applications/{application_id}")
async def get_application(application_id: str, store: DocumentStore = Depends(get_store)):
    return store.require("applications", application_id)
