"""
미들웨어 패키지
에러 처리, 보안 헤더, Rate limit 미들웨어 통합
"""

from .error_handling import ErrorHandlingMiddleware, register_exception_handlers
from .rate_limiter import (
    RateLimit,
    RateLimitExceeded,
    RateLimitMiddleware,
    api_general_limit,
    share_creation_limit,
    share_view_limit,
)
from .security import SecurityHeadersMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "register_exception_handlers",
    "RateLimit",
    "RateLimitExceeded",
    "RateLimitMiddleware",
    "api_general_limit",
    "share_creation_limit",
    "share_view_limit",
    "SecurityHeadersMiddleware",
]
