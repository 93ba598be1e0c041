import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fleetdesk.api import (
    dispatcher_routes,
    division_routes,
    driver_routes,
    equipment_routes,
    report_routes,
    route_routes,
    route_status_routes,
    user_routes,
    weekly_route_routes,
    zip_code_routes,
)
from fleetdesk.core.config import get_settings
from fleetdesk.core.errors import DispatchError
from fleetdesk.crud.route_status import seed_default_statuses
from fleetdesk.db import async_session, create_db_and_tables

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

app = FastAPI(
    title="FleetDesk API",
    version="1.0.0",
    description="Dispatch back office: routes, weekly schedules, drivers and reference data.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------- error bodies: {"error": "..."} ----------
@app.exception_handler(DispatchError)
async def dispatch_error_handler(request: Request, exc: DispatchError):
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part != "body")
        problems.append(f"{location}: {error['msg']}" if location else error["msg"])
    return JSONResponse(status_code=400, content={"error": "; ".join(problems)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception("%s %s raised", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc)})


# ---------- routers ----------
prefix = settings.api_prefix
app.include_router(route_routes.router, prefix=f"{prefix}/routes", tags=["Routes"])
app.include_router(weekly_route_routes.router, prefix=f"{prefix}/weekly-routes", tags=["Weekly Routes"])
app.include_router(route_status_routes.router, prefix=f"{prefix}/route-statuses", tags=["Route Statuses"])
app.include_router(zip_code_routes.router, prefix=prefix, tags=["ZIP Codes"])
app.include_router(driver_routes.router, prefix=f"{prefix}/drivers", tags=["Drivers"])
app.include_router(dispatcher_routes.router, prefix=f"{prefix}/dispatchers", tags=["Dispatchers"])
app.include_router(equipment_routes.truck_router, prefix=f"{prefix}/trucks", tags=["Trucks"])
app.include_router(equipment_routes.trailer_router, prefix=f"{prefix}/trailers", tags=["Trailers"])
app.include_router(division_routes.router, prefix=f"{prefix}/divisions", tags=["Divisions"])
app.include_router(user_routes.user_router, prefix=f"{prefix}/users", tags=["Users"])
app.include_router(user_routes.permission_router, prefix=f"{prefix}/user-permissions", tags=["Users"])
app.include_router(report_routes.router, prefix=f"{prefix}/reports", tags=["Reports"])


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.on_event("startup")
async def on_startup():
    if not settings.auto_create_tables:
        return
    log.info("creating tables and seeding route statuses")
    await create_db_and_tables()
    async with async_session() as db:
        added = await seed_default_statuses(db)
    log.info("startup complete, %s route statuses seeded", added)
