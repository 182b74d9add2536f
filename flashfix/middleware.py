# flashfix/middleware.py

import logging
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from flashfix.config import settings

# ตั้งค่า Logger
logger = logging.getLogger("uvicorn.error")
logger.setLevel(settings.LOG_LEVEL)

# Middleware สำหรับ log ทุก request ให้กระชับ บรรทัดเดียวต่อ request
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        client = request.client.host if request.client else "-"
        line = f"{client} | {request.method} {request.url.path} | {response.status_code} | {elapsed_ms:.1f}ms"
        if response.status_code >= 500:
            logger.error(f"🔥 {line}")
        elif response.status_code >= 400:
            logger.warning(f"🚨 {line}")
        else:
            logger.info(f"➡️ {line}")
        return response
