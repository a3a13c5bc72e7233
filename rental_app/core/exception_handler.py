from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


def _field_path(loc) -> str:
    # Drop the "body"/"query"/"path" source marker.
    parts = [str(p) for p in (loc or ())][1:]
    return ".".join(parts) or "request"


class ValidationErrorHandler:
    async def __call__(self, request: Request, exc: RequestValidationError):
        details = [
            {"field": _field_path(err.get("loc")), "message": str(err.get("msg"))}
            for err in exc.errors()
        ]

        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "error": "Validation failed",
                "details": details,
            },
        )


class HTTPErrorHandler:
    async def __call__(self, request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.detail},
            headers=getattr(exc, "headers", None),
        )
