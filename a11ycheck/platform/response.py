from typing import Any, Dict, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def envelope(data: Any, message: str, status_code: int) -> Dict[str, Any]:
    """`status` is "success" below 400 and "error" otherwise."""
    return {
        "status_code": status_code,
        "status": "error" if status_code >= 400 else "success",
        "message": message,
        "data": {} if data is None else jsonable_encoder(data),
    }


def api_response(
    *,
    data: Optional[Any] = None,
    message: str = "Operation successful",
    status_code: int = status.HTTP_200_OK,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Every route and exception handler answers through this envelope."""
    return JSONResponse(
        status_code=status_code,
        content=envelope(data, message, status_code),
        headers=headers,
    )
