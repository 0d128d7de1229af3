"""
HTTP adapter for action results.

Routes call the service and hand the ActionResult here; the body is always
the envelope, the status code comes from the error code.
"""
from fastapi import status
from fastapi.responses import JSONResponse

from app.core.exceptions import ErrorCode
from app.schemas.common import ActionResult

ERROR_STATUS = {
    ErrorCode.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CONFLICT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DATABASE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.UNEXPECTED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(result: ActionResult, success_status: int = status.HTTP_200_OK) -> int:
    if result.success:
        return success_status
    return ERROR_STATUS.get(result.code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def envelope_response(result: ActionResult, success_status: int = status.HTTP_200_OK) -> JSONResponse:
    headers = None
    if result.code == ErrorCode.UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=status_for(result, success_status),
        content=result.to_envelope(),
        headers=headers,
    )
