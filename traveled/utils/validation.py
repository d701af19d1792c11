"""
방문 데이터 검증 유틸리티
"""

from datetime import datetime

from traveled.data.ratings import MAX_RATING, MIN_RATING

MIN_VISIT_YEAR = 1900
MAX_NOTES_LENGTH = 10_000


def max_visit_year() -> int:
    return datetime.now().year + 10


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_visit_data(rating, visit_year, notes: str | None = None) -> list[dict]:
    """방문 데이터 검증 - 오류 목록 반환 (빈 목록이면 통과)"""
    errors = []

    if not _is_int(rating) or not MIN_RATING <= rating <= MAX_RATING:
        errors.append({
            "field": "rating",
            "message": "Rating must be an integer between 0 and 5",
        })

    upper = max_visit_year()
    if not _is_int(visit_year) or not MIN_VISIT_YEAR <= visit_year <= upper:
        errors.append({
            "field": "visit_year",
            "message": f"Year must be between {MIN_VISIT_YEAR} and {upper}",
        })

    # 대용량 문자열로 인한 DoS 방지
    if notes and len(notes) > MAX_NOTES_LENGTH:
        errors.append({
            "field": "notes",
            "message": "Notes must be less than 10,000 characters",
        })

    return errors


def validate_prefecture_rating(rating) -> list[dict]:
    errors = []
    if not _is_int(rating) or not MIN_RATING <= rating <= MAX_RATING:
        errors.append({
            "field": "rating",
            "message": "Prefecture rating must be an integer between 0 and 5",
        })
    return errors
