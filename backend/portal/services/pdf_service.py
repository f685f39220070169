from fpdf import FPDF

from portal.schemas.report import EmployeeReport


def _latin1(text: str) -> str:
    """Encode to latin-1, replacing unsupported chars; fpdf built-in fonts are latin-1 only."""
    return text.encode("latin-1", errors="replace").decode("latin-1")


def _day(timestamp: str | None) -> str:
    return (timestamp or "")[:10]


def _line(pdf: FPDF, text: str, height: float = 6):
    pdf.cell(0, height, _latin1(text), new_x="LMARGIN", new_y="NEXT")


def _section(pdf: FPDF, title: str):
    pdf.ln(4)
    pdf.set_font("Helvetica", "B", 13)
    pdf.set_text_color(0, 0, 0)
    _line(pdf, title, 8)
    pdf.set_draw_color(200, 200, 200)
    pdf.line(20, pdf.get_y(), 190, pdf.get_y())
    pdf.ln(2)
    pdf.set_font("Helvetica", "", 10)


def generate_employee_report_pdf(report: EmployeeReport) -> bytes:
    """Render an employee's work report (DSRs, calls, earnings) as a PDF."""
    employee = report.employee
    totals = report.totals

    pdf = FPDF()
    pdf.set_margins(20, 20, 20)
    pdf.add_page()

    pdf.set_font("Helvetica", "B", 18)
    pdf.multi_cell(0, 10, _latin1(employee.get("name") or "Employee Report"), align="L")
    pdf.ln(2)

    pdf.set_font("Helvetica", "", 11)
    pdf.set_text_color(80, 80, 80)
    _line(pdf, f"User ID: {employee.get('userId', '')}", 7)
    if employee.get("personalEmail"):
        _line(pdf, f"Email: {employee['personalEmail']}", 7)
    _line(pdf, f"Status: {employee.get('status', 'active')}", 7)
    _line(pdf, f"Joined: {_day(employee.get('createdAt'))}", 7)

    _section(pdf, "Summary")
    _line(pdf, f"Daily reports: {totals.dsr_count}")
    _line(pdf, f"Calls logged: {totals.call_count}")
    _line(pdf, f"Total earnings: {totals.total_earnings:,.2f}")
    _line(pdf, f"Distance travelled: {totals.total_distance:,.1f} km")

    _section(pdf, "Daily status reports")
    if not report.dsr:
        _line(pdf, "No reports submitted.")
    for entry in report.dsr:
        travel = f" ({entry['distance']:,.1f} km)" if entry.get("distance") is not None else ""
        pdf.multi_cell(0, 5, _latin1(f"{_day(entry.get('date'))}{travel}: {entry.get('description', '')}"))
        pdf.ln(1)

    _section(pdf, "Calls")
    if not report.calls:
        _line(pdf, "No calls logged.")
    for call in report.calls:
        _line(pdf, (
            f"{_day(call.get('date'))}  {call.get('clientName', '')} ({call.get('clientMobile', '')})"
            f"  {call.get('duration', 0):g} min  {call.get('topic', '')}"
        )[:110])

    _section(pdf, "Earnings")
    if not report.earnings:
        _line(pdf, "No earnings recorded.")
    for earning in report.earnings:
        _line(pdf, f"{_day(earning.get('date'))}  {earning.get('amount', 0):,.2f}  {earning.get('description', '')}"[:110])

    return bytes(pdf.output())
