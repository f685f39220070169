import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portal.config import settings
from portal.exceptions import DocumentNotFound, StoreError
from portal.routers import employees, jobs, memberships, outreach, staff

logger = logging.getLogger("portal")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    from portal.database import init_db
    init_db()
    logger.info("Document store ready at %s", settings.db_path)
    yield
    from portal.services.listing_cache import listing_cache
    listing_cache.clear()


app = FastAPI(
    title="Zensolve Portal",
    description="Recruiting, membership and employee-operations backend",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://127.0.0.1:3000",
        "http://localhost:3000",
    ],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DocumentNotFound)
async def document_not_found(request: Request, exc: DocumentNotFound):
    return JSONResponse(status_code=404, content={"detail": f"{exc.collection} entry not found"})


@app.exception_handler(StoreError)
async def store_unavailable(request: Request, exc: StoreError):
    logger.error("Store read failed for %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": "Failed to load data. Please try again."})


app.include_router(jobs.router, prefix=settings.api_prefix)
app.include_router(jobs.admin_router, prefix=settings.api_prefix)
app.include_router(employees.router, prefix=settings.api_prefix)
app.include_router(memberships.router, prefix=settings.api_prefix)
app.include_router(memberships.admin_router, prefix=settings.api_prefix)
app.include_router(staff.router, prefix=settings.api_prefix)
app.include_router(outreach.router, prefix=settings.api_prefix)
app.include_router(outreach.admin_router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}
