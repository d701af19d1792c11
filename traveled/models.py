"""
데이터베이스 모델 정의

호스팅 Postgres 스키마와 1:1 로 대응하는 SQLAlchemy ORM 모델들.
사용자 계정은 외부 ID 제공자가 관리하므로 user_id 는 불투명한 문자열입니다.
"""

from __future__ import annotations

import enum
import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from traveled.database import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


class ShareState(enum.Enum):
    """공유 지도 라이프사이클 상태"""

    NO_SHARE = "no-share"
    GENERATING = "generating"
    ACTIVE = "active"
    DELETING = "deleting"


class Country(Base):
    """국가 기준 데이터"""

    __tablename__ = "countries"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    code = Column(String(2), nullable=False, unique=True)
    created_at = Column(DateTime, server_default=func.now())

    regions = relationship("Region", back_populates="country")


class Region(Base):
    """
    지역(도도부현) 기준 데이터
    설명: 한 번 적재된 뒤 변경되지 않음
    """

    __tablename__ = "regions"

    id = Column(String, primary_key=True)
    country_id = Column(String, ForeignKey("countries.id"), nullable=False, index=True)
    name = Column(String, nullable=False, index=True)
    name_local = Column(String, nullable=True)  # 일본어 표기
    region_code = Column(String, nullable=True)  # JIS 코드 (01~47)
    macro_region = Column(String, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    country = relationship("Country", back_populates="regions")


class Visit(Base):
    """
    방문 기록
    설명: 한 지역에 여러 해의 방문이 있을 수 있음
    """

    __tablename__ = "visits"
    __table_args__ = (
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_visits_rating_range"),
        Index("idx_visits_user_country", "user_id", "country_id"),
        Index("idx_visits_user_region", "user_id", "region_id"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String, nullable=False)
    region_id = Column(String, ForeignKey("regions.id"), nullable=False)
    country_id = Column(String, ForeignKey("countries.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    visit_year = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class PrefectureRating(Base):
    """
    도도부현 별점 (방문 유형과 별개의 전체 인상 점수)
    설명: (user, region, country) 당 하나 - upsert 로만 기록
    """

    __tablename__ = "prefecture_ratings"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "region_id", "country_id", name="uq_prefecture_rating_user_region"
        ),
        CheckConstraint(
            "star_rating >= 0 AND star_rating <= 5", name="ck_prefecture_rating_range"
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String, nullable=False, index=True)
    region_id = Column(String, ForeignKey("regions.id"), nullable=False)
    country_id = Column(String, ForeignKey("countries.id"), nullable=False)
    star_rating = Column(Integer, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class SharedMap(Base):
    """
    공개 공유 지도 스냅샷
    설명: 사용자당 활성 공유는 최대 하나 (부분 유니크 인덱스로 강제)
    """

    __tablename__ = "shared_maps"
    __table_args__ = (
        Index(
            "uq_shared_maps_active_user",
            "user_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String, nullable=False, index=True)
    share_code = Column(String(8), nullable=False, unique=True, index=True)
    image_url = Column(String, nullable=False)
    title = Column(String(100), nullable=False, default="My Travel Map")
    description = Column(String(500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    view_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
