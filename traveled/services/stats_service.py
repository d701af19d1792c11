"""
방문 통계 집계

방문 기록 목록만을 입력으로 받는 순수 함수 모음입니다.
방문 기록은 region_id, rating, visit_year 속성을 가진 객체(ORM Visit 등)입니다.
"""

import math

from ..data.japan import (
    MACRO_REGION_NAMES,
    MACRO_REGIONS,
    PREFECTURES,
    REGION_TO_MACRO_REGION,
    TOTAL_PREFECTURES,
    get_prefecture,
)
from ..data.ratings import RATING_COLORS, RATING_LABELS


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _percentage(part: int, total: int) -> int:
    if total <= 0:
        return 0
    return _round_half_up(part / total * 100)


def highest_rating_by_region(visits) -> dict[str, int]:
    """지역별 최고 방문 유형"""
    highest: dict[str, int] = {}
    for visit in visits:
        current = highest.get(visit.region_id)
        if current is None or visit.rating > current:
            highest[visit.region_id] = visit.rating
    return highest


def compute_visit_stats(
    visits, country_id: str = "japan", total_regions: int = TOTAL_PREFECTURES
) -> dict:
    """
    요약 통계 계산

    - visited_regions: rating > 0 인 기록이 있는 서로 다른 지역 수
    - rating_breakdown: 기록된 지역마다 최고 방문 유형으로 한 번씩 집계
    - last_visit: rating > 0 인 기록 중 가장 최근 연도
    """
    country_visits = [v for v in visits if getattr(v, "country_id", country_id) == country_id]
    actual_visits = [v for v in country_visits if v.rating > 0]

    visited_regions = len({v.region_id for v in actual_visits})

    rating_breakdown = {rating: 0 for rating in RATING_LABELS}
    for rating in highest_rating_by_region(country_visits).values():
        rating_breakdown[rating] += 1

    years = [v.visit_year for v in actual_visits if v.visit_year]

    return {
        "total_regions": total_regions,
        "visited_regions": visited_regions,
        "percentage_visited": _percentage(visited_regions, total_regions),
        "rating_breakdown": rating_breakdown,
        "last_visit": max(years) if years else None,
    }


def compute_rating_distribution(rating_breakdown: dict[int, int]) -> list[dict]:
    return [
        {
            "rating": rating,
            "label": label,
            "color": RATING_COLORS[rating],
            "count": rating_breakdown.get(rating, 0),
        }
        for rating, label in RATING_LABELS.items()
    ]


def compute_yearly_data(visits) -> list[dict]:
    """연도별 방문 횟수와 처음 방문한 도도부현 수 (연도 오름차순)"""
    actual_visits = sorted(
        (v for v in visits if v.rating > 0), key=lambda v: v.visit_year
    )

    by_year: dict[int, dict] = {}
    first_seen: set[str] = set()
    for visit in actual_visits:
        entry = by_year.setdefault(
            visit.visit_year, {"year": visit.visit_year, "visits": 0, "new_prefectures": 0}
        )
        entry["visits"] += 1
        if visit.region_id not in first_seen:
            first_seen.add(visit.region_id)
            entry["new_prefectures"] += 1

    return [by_year[year] for year in sorted(by_year)]


def compute_cumulative_data(yearly_data: list[dict]) -> list[dict]:
    cumulative = []
    running_total = 0
    for entry in yearly_data:
        running_total += entry["new_prefectures"]
        cumulative.append({"year": entry["year"], "total": running_total})
    return cumulative


def compute_macro_region_completion(visits) -> list[dict]:
    """광역 지방별 방문 완료율"""
    totals = {macro: 0 for macro in MACRO_REGIONS}
    for prefecture in PREFECTURES:
        totals[prefecture["macro_region"]] += 1

    visited = {macro: set() for macro in MACRO_REGIONS}
    for visit in visits:
        macro = REGION_TO_MACRO_REGION.get(visit.region_id)
        if macro and visit.rating > 0:
            visited[macro].add(visit.region_id)

    return [
        {
            "macro_region": macro,
            "name": MACRO_REGION_NAMES[macro],
            "visited": len(visited[macro]),
            "total": totals[macro],
            "percentage": _percentage(len(visited[macro]), totals[macro]),
        }
        for macro in MACRO_REGIONS
    ]


def compute_score(visits) -> dict:
    """총점과 방문당 평균 (rating > 0 기록만)"""
    actual_visits = [v for v in visits if v.rating > 0]
    total_score = sum(v.rating for v in actual_visits)
    average = total_score / len(actual_visits) if actual_visits else 0.0
    return {
        "total_score": total_score,
        "average_rating": round(average, 1),
        "total_visits": len(actual_visits),
    }


def summarize_prefectures(visits, ratings=()) -> list[dict]:
    """도도부현별 요약 행 (기록이 있는 지역만, 도도부현 코드 순)"""
    star_ratings = {r.region_id: r.star_rating for r in ratings}

    grouped: dict[str, list] = {}
    for visit in visits:
        grouped.setdefault(visit.region_id, []).append(visit)

    rows = []
    for region_id, region_visits in grouped.items():
        prefecture = get_prefecture(region_id)
        if prefecture is None:
            continue

        most_recent = max(region_visits, key=lambda v: v.visit_year)
        actual_years = [v.visit_year for v in region_visits if v.rating > 0]
        rows.append({
            "region_id": region_id,
            "name": prefecture["name"],
            "name_local": prefecture["name_local"],
            "macro_region": prefecture["macro_region"],
            "most_recent_rating": most_recent.rating,
            "most_recent_year": most_recent.visit_year,
            "highest_rating": max(v.rating for v in region_visits),
            "first_visit_year": min(actual_years) if actual_years else None,
            "visit_count": len(region_visits),
            "star_rating": star_ratings.get(region_id),
        })

    rows.sort(key=lambda row: get_prefecture(row["region_id"])["code"])
    return rows


def build_dashboard(visits, country_id: str = "japan") -> dict:
    """통계 대시보드 전체 데이터"""
    country_visits = [v for v in visits if v.country_id == country_id]
    stats = compute_visit_stats(country_visits, country_id)
    yearly = compute_yearly_data(country_visits)

    return {
        "stats": stats,
        "score": compute_score(country_visits),
        "rating_distribution": compute_rating_distribution(stats["rating_breakdown"]),
        "yearly": yearly,
        "cumulative": compute_cumulative_data(yearly),
        "macro_regions": compute_macro_region_completion(country_visits),
    }
