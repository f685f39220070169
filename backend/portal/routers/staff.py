from typing import Any

from fastapi import APIRouter, Body, Depends

from portal.dependencies import get_store
from portal.schemas.report import DashboardStats
from portal.services.document_store import DocumentStore
from portal.services.report_service import dashboard_stats
from portal.services.staff_service import list_attendance, mark_attendance, pending_tasks
from portal.services.worklog_service import (
    list_calls,
    list_dsr,
    list_earnings,
    log_call,
    submit_dsr,
    submit_earnings,
)
from portal.utils.responses import submission_response

# Employee self-service. The employee id in the path and ``employeeName`` in
# the body identify the caller; nothing is read from an ambient session.
router = APIRouter(prefix="/staff/{employee_id}", tags=["staff"])


def _owned(employee_id: str, payload: dict[str, Any]) -> dict[str, Any]:
    return {**payload, "employeeId": employee_id}


@router.get("/dashboard", response_model=DashboardStats)
async def dashboard(employee_id: str, store: DocumentStore = Depends(get_store)):
    return await dashboard_stats(store, employee_id)


@router.get("/tasks")
async def get_pending_tasks(employee_id: str, store: DocumentStore = Depends(get_store)):
    return pending_tasks(store, employee_id)


@router.post("/attendance")
async def post_attendance(employee_id: str, payload: dict[str, Any] = Body(...), store: DocumentStore = Depends(get_store)):
    return submission_response(mark_attendance(store, _owned(employee_id, payload)), success_status=201)


@router.get("/attendance")
async def get_attendance(employee_id: str, store: DocumentStore = Depends(get_store)):
    return list_attendance(store, employee_id)


@router.post("/dsr")
async def post_dsr(employee_id: str, payload: dict[str, Any] = Body(...), store: DocumentStore = Depends(get_store)):
    return submission_response(submit_dsr(store, _owned(employee_id, payload)), success_status=201)


@router.get("/dsr")
async def get_dsr(employee_id: str, store: DocumentStore = Depends(get_store)):
    return list_dsr(store, employee_id)


@router.post("/calls")
async def post_call(employee_id: str, payload: dict[str, Any] = Body(...), store: DocumentStore = Depends(get_store)):
    return submission_response(log_call(store, _owned(employee_id, payload)), success_status=201)


@router.get("/calls")
async def get_calls(employee_id: str, store: DocumentStore = Depends(get_store)):
    return list_calls(store, employee_id)


@router.post("/earnings")
async def post_earnings(employee_id: str, payload: dict[str, Any] = Body(...), store: DocumentStore = Depends(get_store)):
    return submission_response(await submit_earnings(store, _owned(employee_id, payload)), success_status=201)


@router.get("/earnings")
async def get_earnings(employee_id: str, store: DocumentStore = Depends(get_store)):
    return list_earnings(store, employee_id)
