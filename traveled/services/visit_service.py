"""
방문 기록 / 도도부현 별점 데이터 접근 서비스

모든 조회와 변경은 인증된 사용자 범위로 제한됩니다.
"""

import logging

from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..exceptions import NotFoundError, ValidationFailedError
from ..models import PrefectureRating, Region, Visit
from ..schemas.visit_schemas import VisitCreate, VisitUpdate
from ..utils.validation import validate_prefecture_rating, validate_visit_data

logger = logging.getLogger(__name__)


class VisitService:
    """방문 기록 관리 서비스"""

    def __init__(self, db: Session, user_id: str):
        self.db = db
        self.user_id = user_id

    def _ensure_region(self, region_id: str, country_id: str) -> Region | None:
        return (
            self.db.query(Region)
            .filter(Region.id == region_id, Region.country_id == country_id)
            .first()
        )

    # ===== 방문 기록 =====

    def get_visits(self, country_id: str | None = None) -> list[Visit]:
        """사용자의 방문 기록 목록 (최근 연도 순)"""
        query = self.db.query(Visit).filter(Visit.user_id == self.user_id)
        if country_id:
            query = query.filter(Visit.country_id == country_id)
        return query.order_by(desc(Visit.visit_year), desc(Visit.created_at)).all()

    def get_visit(self, visit_id: str) -> Visit:
        visit = (
            self.db.query(Visit)
            .filter(Visit.id == visit_id, Visit.user_id == self.user_id)
            .first()
        )
        if visit is None:
            raise NotFoundError("Visit not found")
        return visit

    def get_visit_by_region(
        self, region_id: str, year: int | None = None, country_id: str = "japan"
    ) -> Visit | None:
        """
        지역별 방문 기록 조회

        year 가 주어지면 해당 연도의 기록을, 없으면 가장 최근 기록을 반환합니다.
        """
        query = self.db.query(Visit).filter(
            Visit.user_id == self.user_id,
            Visit.region_id == region_id,
            Visit.country_id == country_id,
        )
        if year is not None:
            query = query.filter(Visit.visit_year == year)
        return query.order_by(desc(Visit.visit_year), desc(Visit.created_at)).first()

    def add_visit(self, visit_create: VisitCreate) -> Visit:
        """방문 기록 추가"""
        errors = validate_visit_data(
            visit_create.rating, visit_create.visit_year, visit_create.notes
        )
        if errors:
            raise ValidationFailedError("Invalid visit data", errors)

        if self._ensure_region(visit_create.region_id, visit_create.country_id) is None:
            raise ValidationFailedError(
                "Unknown region",
                [{"field": "region_id", "message": f"Unknown region: {visit_create.region_id}"}],
            )

        visit = Visit(
            user_id=self.user_id,
            region_id=visit_create.region_id,
            country_id=visit_create.country_id,
            rating=visit_create.rating,
            visit_year=visit_create.visit_year,
            notes=visit_create.notes,
        )
        try:
            self.db.add(visit)
            self.db.commit()
            self.db.refresh(visit)
        except Exception as e:
            logger.error(f"방문 기록 생성 실패 (user: {self.user_id}): {e}")
            self.db.rollback()
            raise

        logger.info(f"방문 기록 생성: {self.user_id} / {visit.region_id} ({visit.visit_year})")
        return visit

    def update_visit(self, visit_id: str, visit_update: VisitUpdate) -> Visit:
        """방문 기록 부분 수정"""
        visit = self.get_visit(visit_id)
        update_data = visit_update.model_dump(exclude_unset=True)

        rating = update_data.get("rating", visit.rating)
        visit_year = update_data.get("visit_year", visit.visit_year)
        if rating is None or visit_year is None:
            raise ValidationFailedError("Rating and year cannot be null")

        errors = validate_visit_data(rating, visit_year, update_data.get("notes"))
        if errors:
            raise ValidationFailedError("Invalid visit data", errors)

        for field, value in update_data.items():
            setattr(visit, field, value)

        try:
            self.db.commit()
            self.db.refresh(visit)
        except Exception as e:
            logger.error(f"방문 기록 수정 실패 (ID: {visit_id}): {e}")
            self.db.rollback()
            raise
        return visit

    def delete_visit(self, visit_id: str) -> None:
        visit = self.get_visit(visit_id)
        try:
            self.db.delete(visit)
            self.db.commit()
        except Exception as e:
            logger.error(f"방문 기록 삭제 실패 (ID: {visit_id}): {e}")
            self.db.rollback()
            raise
        logger.info(f"방문 기록 삭제: {visit_id}")

    # ===== 도도부현 별점 =====

    def get_prefecture_ratings(self, country_id: str = "japan") -> list[PrefectureRating]:
        return (
            self.db.query(PrefectureRating)
            .filter(
                PrefectureRating.user_id == self.user_id,
                PrefectureRating.country_id == country_id,
            )
            .order_by(PrefectureRating.region_id)
            .all()
        )

    def get_prefecture_rating(
        self, region_id: str, country_id: str = "japan"
    ) -> PrefectureRating | None:
        return (
            self.db.query(PrefectureRating)
            .filter(
                PrefectureRating.user_id == self.user_id,
                PrefectureRating.region_id == region_id,
                PrefectureRating.country_id == country_id,
            )
            .first()
        )

    def upsert_prefecture_rating(
        self, region_id: str, star_rating: int, country_id: str = "japan"
    ) -> PrefectureRating:
        """별점 기록 - (user, region, country) 당 하나만 유지"""
        errors = validate_prefecture_rating(star_rating)
        if errors:
            raise ValidationFailedError("Invalid prefecture rating", errors)

        if self._ensure_region(region_id, country_id) is None:
            raise NotFoundError("Region not found")

        rating = self.get_prefecture_rating(region_id, country_id)
        if rating is None:
            rating = PrefectureRating(
                user_id=self.user_id,
                region_id=region_id,
                country_id=country_id,
                star_rating=star_rating,
            )
            self.db.add(rating)
        else:
            rating.star_rating = star_rating

        try:
            self.db.commit()
        except IntegrityError:
            # 동시 삽입과 경합한 경우 기존 행을 갱신
            self.db.rollback()
            rating = self.get_prefecture_rating(region_id, country_id)
            if rating is None:
                raise
            rating.star_rating = star_rating
            self.db.commit()

        self.db.refresh(rating)
        return rating

    def delete_prefecture_rating(self, region_id: str, country_id: str = "japan") -> None:
        rating = self.get_prefecture_rating(region_id, country_id)
        if rating is None:
            raise NotFoundError("Prefecture rating not found")
        try:
            self.db.delete(rating)
            self.db.commit()
        except Exception as e:
            logger.error(f"별점 삭제 실패 ({self.user_id} / {region_id}): {e}")
            self.db.rollback()
            raise
