from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import Response, StreamingResponse

from portal.dependencies import get_identity_bridge, get_store, require_admin
from portal.schemas.report import EmployeeReport
from portal.services.change_feed import change_feed
from portal.services.document_store import DocumentStore
from portal.services.identity_service import IdentityBridge
from portal.services.pdf_service import generate_employee_report_pdf
from portal.services.report_service import employee_report
from portal.services.staff_service import assign_task, list_attendance, list_employees, register_employee
from portal.utils.filesystem import sanitize_filename
from portal.utils.responses import sse_events, submission_response

router = APIRouter(
    prefix="/admin",
    tags=["employees"],
    dependencies=[Depends(require_admin)],
)


@router.post("/employees")
async def register(
    payload: dict[str, Any] = Body(...),
    store: DocumentStore = Depends(get_store),
    identities: IdentityBridge = Depends(get_identity_bridge),
):
    return submission_response(register_employee(store, identities, payload), success_status=201)


@router.get("/employees")
async def get_employees(store: DocumentStore = Depends(get_store)):
    return list_employees(store)


@router.get("/employees/stream")
async def stream_employees(store: DocumentStore = Depends(get_store)):
    """Server-sent events: the full employee list now and after every change."""

    async def events():
        async with change_feed.subscribe("employees", lambda: store.query("employees", order_by="createdAt")) as sub:
            async for event in sse_events(sub.snapshots()):
                yield event

    return StreamingResponse(events(), media_type="text/event-stream")


@router.post("/employees/{employee_id}/tasks")
async def send_work(
    employee_id: str,
    payload: dict[str, Any] = Body(...),
    store: DocumentStore = Depends(get_store),
):
    return submission_response(assign_task(store, employee_id, payload), success_status=201)


@router.get("/employees/{employee_id}/report", response_model=EmployeeReport)
async def get_report(employee_id: str, store: DocumentStore = Depends(get_store)):
    return await employee_report(store, employee_id)


@router.get("/employees/{employee_id}/report.pdf")
async def get_report_pdf(employee_id: str, store: DocumentStore = Depends(get_store)):
    report = await employee_report(store, employee_id)
    name = sanitize_filename(report.employee.get("name") or employee_id)
    return Response(
        content=generate_employee_report_pdf(report),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{name}_report.pdf"'},
    )


@router.get("/attendance")
async def get_attendance(store: DocumentStore = Depends(get_store)):
    return list_attendance(store)
