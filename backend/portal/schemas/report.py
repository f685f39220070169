from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ReportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DashboardStats(ReportModel):
    dsr_count: int
    call_count: int
    total_earnings: float
    pending_tasks: int


class ReportTotals(ReportModel):
    dsr_count: int
    call_count: int
    earning_count: int
    total_earnings: float
    total_distance: float


class EmployeeReport(ReportModel):
    employee: dict
    dsr: list[dict]
    calls: list[dict]
    earnings: list[dict]
    totals: ReportTotals
