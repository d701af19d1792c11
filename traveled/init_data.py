from sqlalchemy.orm import Session

from traveled.data.japan import JAPAN_COUNTRY, PREFECTURES
from traveled.database import SessionLocal, engine
from traveled.models import Base, Country, Region


def create_tables():
    """데이터베이스 테이블 생성 (이미 있는 테이블은 건너뜀)"""
    Base.metadata.create_all(bind=engine)
    print("✅ 데이터베이스 테이블 확인 완료")


def seed_reference_data(db: Session) -> int:
    """
    국가 / 도도부현 기준 데이터 적재

    이미 존재하는 행은 건드리지 않으며, 새로 추가된 지역 수를 반환합니다.
    """
    if db.get(Country, JAPAN_COUNTRY["id"]) is None:
        db.add(Country(**JAPAN_COUNTRY))
        db.flush()

    existing = {region_id for (region_id,) in db.query(Region.id).all()}
    added = 0
    for prefecture in PREFECTURES:
        if prefecture["id"] in existing:
            continue
        db.add(
            Region(
                id=prefecture["id"],
                country_id=JAPAN_COUNTRY["id"],
                name=prefecture["name"],
                name_local=prefecture["name_local"],
                region_code=prefecture["code"],
                macro_region=prefecture["macro_region"],
            )
        )
        added += 1

    db.commit()
    return added


def init_database():
    """데이터베이스 초기화"""
    print("🚀 데이터베이스 초기화를 시작합니다...")

    db: Session = SessionLocal()
    try:
        create_tables()
        added = seed_reference_data(db)
        if added:
            print(f"✅ 도도부현 {added}개를 추가했습니다.")
        else:
            print("ℹ️  기준 데이터가 이미 존재합니다.")
        print("✅ 데이터베이스 초기화가 완료되었습니다.")
    except Exception as e:
        print(f"❌ 데이터베이스 초기화 중 오류 발생: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    init_database()
