### baytkom/main.py
import asyncio
import logging
import time

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.sessions import SessionMiddleware

from baytkom.core.config import settings
from baytkom.core.constants import UPLOAD_DIR, UPLOAD_URL_PREFIX
from baytkom.crud.user import ensure_default_admin
from baytkom.db import async_session, create_db_and_tables
from baytkom.services.cleanup import cleanup_loop
from baytkom.auth import routes as auth_routes
from baytkom.api import (
    catalog_routes,
    housekeeping_routes,
    laundry_routes,
    meal_routes,
    notification_routes,
    order_routes,
    report_routes,
    shortage_routes,
    technician_routes,
    trip_routes,
    upload_routes,
    user_routes,
)
import baytkom.models  # registers all models via models/__init__.py
from sqlalchemy.orm import configure_mappers
configure_mappers()

load_dotenv()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("baytkom")


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if not request.url.path.startswith("/api"):
            return await call_next(request)
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        log.info("%s %s %s in %.0fms", request.method, request.url.path, response.status_code, elapsed_ms)
        return response


# Create the FastAPI app
app = FastAPI(title="Baytkom API", version="1.0.0")

# ✅ Cookie sessions (login state)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    max_age=settings.session_max_age,
    same_site="lax",
)

# ✅ Request line logging for /api
app.add_middleware(RequestLogMiddleware)

# ✅ Allow frontend dev (CORS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ Uploaded images
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=UPLOAD_DIR), name="uploads")


# ---------- Error bodies: {"message": ...} ----------
@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"message": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = next((str(p) for p in reversed(first.get("loc", ())) if not isinstance(p, int)), None)
        message = f"{field}: {first['msg']}" if field and field != "body" else first["msg"]
    return JSONResponse({"message": message}, status_code=400)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"message": "Internal server error"}, status_code=500)


@app.on_event("startup")
async def on_startup():
    log.info("🔧 Starting DB setup...")
    await create_db_and_tables()
    log.info("✅ DB schema ready.")

    async with async_session() as db:
        await ensure_default_admin(db, settings.admin_username, settings.admin_password)

    if settings.cleanup_interval_minutes > 0:
        app.state.cleanup_task = asyncio.create_task(cleanup_loop(settings.cleanup_interval_minutes))


@app.on_event("shutdown")
async def on_shutdown():
    task = getattr(app.state, "cleanup_task", None)
    if task:
        task.cancel()


@app.get("/api/health")
async def health():
    return {"status": "ok"}


# ✅ Auth
app.include_router(auth_routes.router, prefix="/api/auth", tags=["auth"])

# ✅ Core app routers
app.include_router(user_routes.router, prefix="/api", tags=["users"])
app.include_router(catalog_routes.router, prefix="/api", tags=["catalog"])
app.include_router(order_routes.router, prefix="/api", tags=["orders"])
app.include_router(trip_routes.router, prefix="/api", tags=["logistics"])
app.include_router(technician_routes.router, prefix="/api", tags=["logistics"])
app.include_router(housekeeping_routes.router, prefix="/api", tags=["housekeeping"])
app.include_router(laundry_routes.router, prefix="/api", tags=["housekeeping"])
app.include_router(meal_routes.router, prefix="/api", tags=["meals"])
app.include_router(shortage_routes.router, prefix="/api", tags=["groceries"])
app.include_router(notification_routes.router, prefix="/api", tags=["notifications"])
app.include_router(upload_routes.router, prefix="/api", tags=["uploads"])
app.include_router(report_routes.router, prefix="/api", tags=["reports"])
