# flashfix/main.py

import logging
from datetime import datetime
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.trustedhost import TrustedHostMiddleware

from flashfix import middleware
from flashfix.config import settings
from flashfix.routers import auth, orders, services, users
from flashfix.utils.response import error_response

logger = logging.getLogger("uvicorn.error")

API_VERSION = "1.0.0"

app = FastAPI(
    title="XGX Flash Fix API",
    version=API_VERSION,
    description="Device repair marketplace: repair orders, technicians and service catalog",
)

# รวม router ทั้งหมดภายใต้ /api/v1
app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(orders.router, prefix=settings.API_PREFIX)
app.include_router(services.router, prefix=settings.API_PREFIX)
app.include_router(users.router, prefix=settings.API_PREFIX)

# CORS middleware สำหรับ frontend SPA
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# middleware ต่างๆ
app.add_middleware(middleware.RequestLoggingMiddleware)
app.add_middleware(TrustedHostMiddleware, allowed_hosts=["*"])


@app.get("/health", tags=["Health"])
def health_check():
    return {
        "success": True,
        "message": "XGX Flash Fix API is running",
        "timestamp": datetime.utcnow().isoformat(),
        "version": API_VERSION,
    }

# ---------------------------------------------------------------------
# Error handlers: ทุก error ออกเป็น {success: false, message, error}
# ---------------------------------------------------------------------
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    if exc.status_code == 404 and message == "Not Found":
        message = f"Route {request.url.path} not found"
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        # ตัด "body" / "query" ออกจาก path ของฟิลด์
        field = ".".join(str(part) for part in err.get("loc", ())[1:])
        problems.append(f"{field}: {err.get('msg')}" if field else err.get("msg"))
    return error_response(400, "Validation failed", "; ".join(problems))

@app.exception_handler(IntegrityError)
async def integrity_exception_handler(request: Request, exc: IntegrityError):
    logger.warning(f"🚨 Integrity error: {request.method} {request.url.path} | {exc.orig}")
    return error_response(409, "Request conflicts with existing data")

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"🔥 Unhandled Exception: {request.method} {request.url.path}")
    return error_response(500, "Internal server error")
