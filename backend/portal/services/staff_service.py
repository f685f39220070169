import logging
from collections.abc import Mapping

from portal.exceptions import IdentityError, StoreError
from portal.schemas.result import CONFLICT, NOT_FOUND, SubmissionResult
from portal.schemas.staff import AttendanceMark, EmployeeRegistration, TaskAssignment
from portal.schemas.validation import validate
from portal.services.document_store import DocumentStore
from portal.services.identity_service import Account, IdentityBridge
from portal.services.listing_cache import listing_cache
from portal.utils.timestamps import utc_today

logger = logging.getLogger("portal")

EMPLOYEES_LISTING = "/admin/employees"

_REGISTRATION_FAILED = "Failed to register employee. Please try again."
_ID_TAKEN = "This User ID is already taken. Please try with a different User ID."
_WEAK_PASSWORD = "The password is too weak. It must be at least 6 characters long."


def _discard_account(identities: IdentityBridge, account: Account):
    try:
        identities.delete_account(account.uid)
        logger.warning("Removed account %s after failed employee write", account.login_id)
    except IdentityError:
        logger.exception(
            "Could not remove account %s after failed employee write; remove it manually",
            account.login_id,
        )


def register_employee(store: DocumentStore, identities: IdentityBridge, raw: Mapping) -> SubmissionResult:
    """Create the login account, then the employee record keyed by its uid.

    If the record cannot be written the account is deleted again, so a
    retry with the same User ID is not blocked by an orphaned login.
    """
    registration, errors = validate(EmployeeRegistration, raw)
    if registration is None:
        return SubmissionResult.invalid("Invalid registration data. Please check all fields.", errors)

    try:
        account = identities.create_account(registration.user_id, registration.password)
    except IdentityError as exc:
        logger.warning("Could not create account for %s: %s", registration.user_id, exc.code)
        if exc.code == IdentityError.ALREADY_EXISTS:
            return SubmissionResult.failed(_ID_TAKEN, failure=CONFLICT)
        if exc.code == IdentityError.WEAK_CREDENTIAL:
            return SubmissionResult.invalid(_WEAK_PASSWORD, {"password": [_WEAK_PASSWORD]})
        return SubmissionResult.failed(_REGISTRATION_FAILED)

    employee = registration.to_document()
    employee.pop("password")
    employee["name"] = employee.pop("fullName")
    employee["status"] = "active"
    try:
        store.set("employees", account.uid, employee, timestamp_field="createdAt")
    except StoreError:
        logger.exception("Error saving employee %s", registration.user_id)
        _discard_account(identities, account)
        return SubmissionResult.failed(_REGISTRATION_FAILED)

    listing_cache.invalidate(EMPLOYEES_LISTING)
    logger.info("Registered employee %s as %s", registration.user_id, account.uid)
    return SubmissionResult.ok(
        "Employee registered successfully!",
        userId=registration.user_id,
        employeeId=account.uid,
    )


def assign_task(store: DocumentStore, employee_id: str, raw: Mapping) -> SubmissionResult:
    task, errors = validate(TaskAssignment, raw)
    if task is None:
        return SubmissionResult.invalid("Title and description are required.", errors)

    try:
        employee = store.get("employees", employee_id)
        if employee is None:
            return SubmissionResult.failed("Employee not found.", failure=NOT_FOUND)
        task_id = store.add(
            "tasks",
            task.to_document(employeeId=employee_id, employeeName=employee.get("name", ""), status="pending"),
            timestamp_field="assignedAt",
        )
    except StoreError:
        logger.exception("Error assigning task to %s", employee_id)
        return SubmissionResult.failed("Failed to assign task.")

    return SubmissionResult.ok(f"Task assigned to {employee.get('name', employee_id)}", taskId=task_id)


def mark_attendance(store: DocumentStore, raw: Mapping) -> SubmissionResult:
    """Record today's attendance; one record per employee per UTC day."""
    mark, errors = validate(AttendanceMark, raw)
    if mark is None:
        return SubmissionResult.invalid("Invalid data.", errors)

    today = utc_today()
    try:
        if store.exists("attendance", {"employeeId": mark.employee_id, "day": today}):
            return SubmissionResult.failed("Attendance already marked for today.", failure=CONFLICT)
        store.add("attendance", mark.to_document(day=today), timestamp_field="date")
    except StoreError:
        logger.exception("Error marking attendance for %s", mark.employee_id)
        return SubmissionResult.failed("Failed to mark attendance.")

    return SubmissionResult.ok("Attendance marked successfully.")


def list_employees(store: DocumentStore) -> list[dict]:
    return listing_cache.get_or_load(EMPLOYEES_LISTING, lambda: store.query("employees", order_by="createdAt"))


def list_attendance(store: DocumentStore, employee_id: str | None = None) -> list[dict]:
    where = {"employeeId": employee_id} if employee_id else None
    return store.query("attendance", where, order_by="date")


def pending_tasks(store: DocumentStore, employee_id: str) -> list[dict]:
    return store.query("tasks", {"employeeId": employee_id, "status": "pending"}, order_by="assignedAt")
