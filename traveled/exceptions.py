"""
도메인 예외 정의

서비스 계층은 아래 예외를 발생시키고, main.py 에 등록된 핸들러가
카테고리별 HTTP 상태 코드로 변환합니다.
"""

import enum


class TraveledError(Exception):
    """모든 도메인 예외의 기본 클래스"""

    status_code = 500

    def __init__(self, message: str, headers: dict | None = None):
        super().__init__(message)
        self.message = message
        self.headers = headers

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationFailedError(TraveledError):
    """입력 형식/범위 오류 (400)"""

    status_code = 400

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.errors:
            body["details"] = self.errors
        return body


class AuthenticationError(TraveledError):
    """세션 누락/무효 (401)"""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class NotFoundError(TraveledError):
    status_code = 404


class ConflictError(TraveledError):
    """중복 활성 공유, 유니크 제약 위반 등 (409)"""

    status_code = 409


class PayloadTooLargeError(TraveledError):
    status_code = 413


class StorageError(TraveledError):
    """Blob 스토리지 호출 실패"""

    status_code = 500


class ExportErrorType(str, enum.Enum):
    """지도 이미지 내보내기 실패 유형"""

    ELEMENT_NOT_FOUND = "ELEMENT_NOT_FOUND"
    CANVAS_CONTEXT_FAILED = "CANVAS_CONTEXT_FAILED"
    IMAGE_LOAD_FAILED = "IMAGE_LOAD_FAILED"
    SVG_SERIALIZATION_FAILED = "SVG_SERIALIZATION_FAILED"
    CAPTURE_FAILED = "CAPTURE_FAILED"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    RENDERER_UNAVAILABLE = "RENDERER_UNAVAILABLE"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ExportError(TraveledError):
    """내보내기 파이프라인 오류 (유형 포함)"""

    def __init__(
        self,
        error_type: ExportErrorType,
        message: str,
        original_error: Exception | None = None,
    ):
        super().__init__(message)
        self.error_type = error_type
        self.original_error = original_error

    @property
    def status_code(self) -> int:
        if self.error_type == ExportErrorType.FILE_TOO_LARGE:
            return 413
        return 500

    def to_dict(self) -> dict:
        return {"error": self.message, "type": self.error_type.value}
