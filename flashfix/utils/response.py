# flashfix/utils/response.py

import math
from typing import Any, Optional
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

# ข้อความ error มาตรฐานตาม status code
ERROR_LABELS = {
    400: "Validation failed",
    401: "Authentication required",
    403: "Insufficient permissions",
    404: "The requested resource was not found",
    405: "Method not allowed",
    409: "The resource already exists or conflicts with existing data",
    500: "Internal server error",
}

def success_response(message: str, data: Any = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"success": True, "message": message, "data": data}),
    )

def paginated_response(message: str, data: list, page: int, limit: int, total: int) -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content=jsonable_encoder({
            "success": True,
            "message": message,
            "data": data,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": math.ceil(total / limit) if limit else 0,
            },
        }),
    )

def error_response(status_code: int, message: str, error: Optional[str] = None, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "error": error or ERROR_LABELS.get(status_code, "Request failed"),
        },
        headers=headers,
    )
