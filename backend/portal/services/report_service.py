"""Summaries computed on read from the employee-owned collections."""
import asyncio

from portal.config import settings
from portal.schemas.report import DashboardStats, EmployeeReport, ReportTotals
from portal.services.document_store import DocumentStore

REPORT_COLLECTIONS = ("dsr", "callLogs", "earnings")


def travel_distance(dsr: dict) -> float | None:
    """closingKm - openingKm for a travelled day; None when not applicable."""
    if not dsr.get("hasTravelled"):
        return None
    opening, closing = dsr.get("openingKm"), dsr.get("closingKm")
    if opening is None or closing is None:
        return None
    return closing - opening


def count_documents(store: DocumentStore, collection: str, **equals) -> int:
    return store.count(collection, equals)


def sum_amounts(earnings: list[dict]) -> float:
    total = 0
    for earning in earnings:
        total += earning.get("amount") or 0
    return total


def total_earnings(store: DocumentStore, employee_id: str) -> float:
    return sum_amounts(store.query("earnings", {"employeeId": employee_id}))


async def dashboard_stats(store: DocumentStore, employee_id: str) -> DashboardStats:
    dsr_count, call_count, earned, pending = await asyncio.gather(
        asyncio.to_thread(count_documents, store, "dsr", employeeId=employee_id),
        asyncio.to_thread(count_documents, store, "callLogs", employeeId=employee_id),
        asyncio.to_thread(total_earnings, store, employee_id),
        asyncio.to_thread(count_documents, store, "tasks", employeeId=employee_id, status="pending"),
    )
    return DashboardStats(
        dsr_count=dsr_count,
        call_count=call_count,
        total_earnings=earned,
        pending_tasks=pending,
    )


async def employee_report(store: DocumentStore, employee_id: str) -> EmployeeReport:
    """Employee record plus their DSRs, calls and earnings, newest first.

    Raises DocumentNotFound for an unknown employee and StoreError if any
    of the collection fetches fails; a partial report is never returned.
    """
    employee, dsr, calls, earnings = await asyncio.gather(
        asyncio.to_thread(store.require, "employees", employee_id),
        *(
            asyncio.to_thread(store.query, collection, {"employeeId": employee_id}, "date")
            for collection in REPORT_COLLECTIONS
        ),
    )

    dsr = [{**entry, "distance": travel_distance(entry)} for entry in dsr]
    totals = ReportTotals(
        dsr_count=len(dsr),
        call_count=len(calls),
        earning_count=len(earnings),
        total_earnings=sum_amounts(earnings),
        total_distance=sum(entry["distance"] for entry in dsr if entry["distance"] is not None),
    )
    return EmployeeReport(employee=employee, dsr=dsr, calls=calls, earnings=earnings, totals=totals)


def recent_activity(store: DocumentStore, limit: int | None = None) -> list[dict]:
    return store.query("activityLogs", order_by="timestamp", limit=limit or settings.activity_log_limit)
