"""
지도 공유 유틸리티
"""

import re
import secrets

from traveled.config import settings

# 혼동되는 문자(0, O, I, 1) 제외, 대문자 L 은 허용
SHARE_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
SHARE_CODE_LENGTH = 8

_SHARE_CODE_PATTERN = re.compile(rf"^[{SHARE_CODE_ALPHABET}]{{{SHARE_CODE_LENGTH}}}$")


def generate_share_code() -> str:
    """8자리 공유 코드 생성"""
    return "".join(secrets.choice(SHARE_CODE_ALPHABET) for _ in range(SHARE_CODE_LENGTH))


def validate_share_code(code) -> bool:
    if not isinstance(code, str):
        return False
    return bool(_SHARE_CODE_PATTERN.fullmatch(code))


def get_share_url(share_code: str, base_url: str | None = None) -> str:
    base = (base_url or settings.public_base_url).rstrip("/")
    return f"{base}/share/{share_code}"


def generate_storage_path(user_id: str, share_code: str) -> str:
    """스토리지 경로: <userId>/<shareCode>.png"""
    return f"{user_id}/{share_code}.png"
