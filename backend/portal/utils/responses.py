import json
from collections.abc import AsyncIterator

from fastapi.responses import JSONResponse

from portal.schemas.result import CONFLICT, NOT_FOUND, UPSTREAM, VALIDATION, SubmissionResult

_FAILURE_STATUS = {
    VALIDATION: 422,
    CONFLICT: 409,
    NOT_FOUND: 404,
    UPSTREAM: 502,
}


def submission_response(result: SubmissionResult, success_status: int = 200) -> JSONResponse:
    status = success_status if result.success else _FAILURE_STATUS.get(result.failure, 400)
    return JSONResponse(status_code=status, content=result.payload())


async def sse_events(snapshots: AsyncIterator[list[dict]]) -> AsyncIterator[str]:
    async for items in snapshots:
        yield f"data: {json.dumps(items)}\n\n"
