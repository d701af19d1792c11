"""
Rate Limiting 미들웨어
고정 윈도우 방식으로 클라이언트(IP 또는 사용자)별 요청 수를 제한
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

import redis
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from jose import JWTError, jwt
from starlette.middleware.base import BaseHTTPMiddleware

from traveled.config import settings
from traveled.exceptions import TraveledError

logger = logging.getLogger(__name__)


@dataclass
class RateLimitResult:
    """Rate limit 판정 결과"""

    success: bool
    remaining: int
    reset_time: float  # epoch seconds
    limit: int

    def headers(self) -> dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": datetime.fromtimestamp(self.reset_time, UTC).isoformat(),
        }


class RateLimitExceeded(TraveledError):
    """Rate limit 초과 예외"""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, message: str, result: RateLimitResult):
        retry_after = max(1, int(result.reset_time - time.time()))
        super().__init__(message, headers={**result.headers(), "Retry-After": str(retry_after)})
        self.result = result


class InMemoryRateLimiter:
    """
    메모리 기반 고정 윈도우 Rate Limiter

    프로세스 로컬 상태이므로 재시작/다중 인스턴스 환경에서는 공유되지 않음.
    만료된 엔트리는 같은 키로 다음 요청이 들어올 때 제거됨.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self.store: dict[str, dict[str, float]] = {}
        self._clock = clock

    async def hit(self, key: str, max_requests: int, window_seconds: int) -> RateLimitResult:
        now = self._clock()

        entry = self.store.get(key)
        if entry and entry["reset_time"] <= now:
            del self.store[key]
            entry = None

        if entry is None:
            entry = {"count": 0, "reset_time": now + window_seconds}
            self.store[key] = entry

        entry["count"] += 1

        return RateLimitResult(
            success=entry["count"] <= max_requests,
            remaining=max(0, max_requests - int(entry["count"])),
            reset_time=entry["reset_time"],
            limit=max_requests,
        )

    def reset(self, prefix: str | None = None):
        if prefix is None:
            self.store.clear()
            return
        for key in [k for k in self.store if k.startswith(prefix)]:
            del self.store[key]


class RedisRateLimiter:
    """Redis 기반 고정 윈도우 Rate Limiter (분산 환경용)"""

    def __init__(self, redis_client: redis.Redis, clock: Callable[[], float] = time.time):
        self.redis = redis_client
        self._clock = clock

    async def hit(self, key: str, max_requests: int, window_seconds: int) -> RateLimitResult:
        redis_key = f"ratelimit:{key}"

        pipe = self.redis.pipeline()
        pipe.incr(redis_key)
        pipe.pttl(redis_key)
        count, ttl_ms = pipe.execute()

        # 새 윈도우 시작 시 만료 시간 설정
        if ttl_ms is None or ttl_ms < 0:
            ttl_ms = window_seconds * 1000
            self.redis.pexpire(redis_key, ttl_ms)

        return RateLimitResult(
            success=count <= max_requests,
            remaining=max(0, max_requests - count),
            reset_time=self._clock() + ttl_ms / 1000,
            limit=max_requests,
        )

    def reset(self, prefix: str | None = None):
        pattern = f"ratelimit:{prefix or ''}*"
        for key in self.redis.scan_iter(pattern):
            self.redis.delete(key)


_backend = None


def get_rate_limit_backend():
    """설정에 따라 Rate limit 저장소 선택 (최초 호출 시 생성)"""
    global _backend
    if _backend is not None:
        return _backend

    if settings.rate_limit_backend == "redis" and settings.redis_url:
        try:
            client = redis.from_url(settings.redis_url)
            client.ping()
            logger.info("Redis 기반 rate limiter 사용")
            _backend = RedisRateLimiter(client)
            return _backend
        except redis.RedisError as e:
            logger.warning(f"Redis 연결 실패, 메모리 기반 rate limiter 사용: {e}")

    _backend = InMemoryRateLimiter()
    return _backend


def get_client_ip(request: Request) -> str:
    """프록시 헤더에서 클라이언트 IP 추출 (없으면 "unknown")"""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
        if ip:
            return ip
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return "unknown"


def ip_key(request: Request) -> str:
    return f"ip:{get_client_ip(request)}"


def user_or_ip_key(request: Request) -> str:
    """Bearer 토큰의 sub 클레임이 있으면 사용자 기준, 없으면 IP 기준"""
    auth_header = request.headers.get("authorization")
    if auth_header and auth_header.lower().startswith("bearer "):
        token = auth_header[7:].strip()
        try:
            claims = jwt.get_unverified_claims(token)
            if claims.get("sub"):
                return f"user:{claims['sub']}"
        except JWTError:
            pass  # IP 기준으로 대체
    return ip_key(request)


class RateLimit:
    """
    라우트 단위 Rate limit 의존성

    사용 예::

        @router.post("", dependencies=[Depends(share_creation_limit)])
    """

    def __init__(
        self,
        name: str,
        max_requests: int,
        window_seconds: int,
        key_func: Callable[[Request], str] = ip_key,
        message: str = "Too many requests. Please try again later.",
        backend=None,
    ):
        self.name = name
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.key_func = key_func
        self.message = message
        self._backend = backend

    @property
    def backend(self):
        return self._backend or get_rate_limit_backend()

    async def check(self, request: Request) -> RateLimitResult:
        key = f"{self.name}:{self.key_func(request)}"
        try:
            return await self.backend.hit(key, self.max_requests, self.window_seconds)
        except redis.RedisError as e:
            # 저장소 장애 시 요청 허용
            logger.warning(f"Rate limit 저장소 오류 [{self.name}], 요청 허용: {e}")
            return RateLimitResult(
                success=True,
                remaining=self.max_requests,
                reset_time=time.time() + self.window_seconds,
                limit=self.max_requests,
            )

    async def __call__(self, request: Request, response: Response) -> RateLimitResult:
        result = await self.check(request)
        if not result.success:
            logger.warning(f"Rate limit exceeded [{self.name}] {self.key_func(request)}")
            raise RateLimitExceeded(self.message, result)

        response.headers.update(result.headers())
        return result

    def reset(self):
        self.backend.reset(prefix=f"{self.name}:")


# 사전 구성된 limiter
share_creation_limit = RateLimit(
    "share_create",
    max_requests=10,
    window_seconds=24 * 60 * 60,  # 하루 10회
    key_func=user_or_ip_key,
    message="Too many shares created. Please try again later.",
)

share_view_limit = RateLimit("share_view", max_requests=60, window_seconds=60)

api_general_limit = RateLimit("api", max_requests=100, window_seconds=15 * 60)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """/api 경로 전체에 일반 Rate limit 적용"""

    def __init__(
        self,
        app,
        limit: RateLimit = api_general_limit,
        exclude_paths: list[str] | None = None,
    ):
        super().__init__(app)
        self.limit = limit
        self.exclude_paths = exclude_paths or ["/api/health", "/docs", "/redoc", "/openapi.json"]

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if (
            not settings.api_rate_limit_enabled
            or not path.startswith("/api/")
            or any(path.startswith(p) for p in self.exclude_paths)
        ):
            return await call_next(request)

        result = await self.limit.check(request)
        if not result.success:
            exc = RateLimitExceeded(self.limit.message, result)
            return JSONResponse(
                status_code=exc.status_code,
                content=exc.to_dict(),
                headers=exc.headers,
            )

        response = await call_next(request)
        for name, value in result.headers().items():
            response.headers.setdefault(name, value)
        return response
