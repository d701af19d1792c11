"""
통합 에러 처리
도메인 예외 -> HTTP 상태 코드 변환 및 요청 로깅
"""
import logging
import traceback
import uuid
from typing import Callable

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from traveled.exceptions import TraveledError

logger = logging.getLogger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """요청 ID 부여, 요청/응답 로깅, 처리되지 않은 예외 -> 500"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # 요청 ID 생성 (추적용)
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        logger.info(
            f"Request [{request_id}] {request.method} {request.url.path} "
            f"from {request.client.host if request.client else 'unknown'}"
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            return self._handle_unexpected_error(request, exc, request_id)

        logger.info(f"Response [{request_id}] {response.status_code}")
        response.headers["X-Request-ID"] = request_id
        return response

    def _handle_unexpected_error(
        self, request: Request, exc: Exception, request_id: str
    ) -> JSONResponse:
        """예상치 못한 오류 처리 (스택 트레이스는 로그에만 기록)"""
        logger.critical(
            f"Unexpected Error [{request_id}] {request.method} {request.url.path}: "
            f"{type(exc).__name__}: {exc}\n{traceback.format_exc()}"
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
            headers={"X-Request-ID": request_id},
        )


async def traveled_error_handler(request: Request, exc: TraveledError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}", exc_info=exc)
    else:
        logger.warning(f"{request.method} {request.url.path}: {exc.status_code} - {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 검증 오류 -> 400 (필드별 상세 정보 포함)"""
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error["loc"] if part not in ("body", "query", "path")]
        errors.append({
            "field": ".".join(loc) or None,
            "message": error["msg"],
        })

    logger.warning(f"Validation Error {request.method} {request.url.path}: {errors}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request data", "details": errors},
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        f"Database Error {request.method} {request.url.path}: {type(exc).__name__}: {exc}"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Database error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TraveledError, traveled_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
