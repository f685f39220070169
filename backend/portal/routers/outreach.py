from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import FileResponse

from portal.dependencies import get_content_store, get_store, require_admin
from portal.services.content_store import ContentStore
from portal.services.document_store import DocumentStore
from portal.services.outreach_service import list_subscribers, submit_contact_message, subscribe_to_newsletter
from portal.services.report_service import recent_activity
from portal.utils.responses import submission_response

router = APIRouter(tags=["outreach"])

admin_router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.post("/newsletter")
async def subscribe(payload: dict[str, Any] = Body(...), store: DocumentStore = Depends(get_store)):
    return submission_response(subscribe_to_newsletter(store, payload))


@router.post("/contact")
async def contact(payload: dict[str, Any] = Body(...)):
    return submission_response(submit_contact_message(payload))


@router.get("/files/{path:path}")
async def download_file(path: str, content: ContentStore = Depends(get_content_store)):
    full_path = content.open_path(path)
    if full_path is None:
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(path=str(full_path), filename=full_path.name)


@admin_router.get("/newsletter")
async def get_subscribers(store: DocumentStore = Depends(get_store)):
    return list_subscribers(store)


@admin_router.get("/logs")
async def get_logs(store: DocumentStore = Depends(get_store)):
    return recent_activity(store)
