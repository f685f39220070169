from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import StreamingResponse

from portal.dependencies import get_identity_bridge, get_store, require_admin
from portal.services.change_feed import change_feed
from portal.services.document_store import DocumentStore
from portal.services.identity_service import IdentityBridge
from portal.services.membership_service import (
    apply_for_membership,
    list_memberships,
    snapshot_memberships,
    verify_membership,
)
from portal.utils.responses import sse_events, submission_response

router = APIRouter(prefix="/memberships", tags=["memberships"])

admin_router = APIRouter(
    prefix="/admin/memberships",
    tags=["memberships"],
    dependencies=[Depends(require_admin)],
)


@router.post("")
async def apply(payload: dict[str, Any] = Body(...), store: DocumentStore = Depends(get_store)):
    return submission_response(apply_for_membership(store, payload), success_status=201)


@admin_router.get("")
async def get_memberships(store: DocumentStore = Depends(get_store)):
    return list_memberships(store)


@admin_router.get("/stream")
async def stream_memberships(store: DocumentStore = Depends(get_store)):
    async def events():
        async with change_feed.subscribe("memberships", lambda: snapshot_memberships(store)) as sub:
            async for event in sse_events(sub.snapshots()):
                yield event

    return StreamingResponse(events(), media_type="text/event-stream")


@admin_router.post("/{membership_id}/verify")
async def verify(
    membership_id: str,
    store: DocumentStore = Depends(get_store),
    identities: IdentityBridge = Depends(get_identity_bridge),
):
    return submission_response(verify_membership(store, identities, membership_id))
