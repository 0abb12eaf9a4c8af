"""
예정 산책 샘플 데이터 삭제 스크립트

완료/취소된 산책은 남기고 예정(scheduled) 산책만 지웁니다.

사용법:
    python scripts/delete_sample_walks.py <walker_id> [시작 날짜] [-y]

예시:
    python scripts/delete_sample_walks.py 1
    python scripts/delete_sample_walks.py 1 2025-01-10 -y
    # walker_id=1의 2025-01-10 이후 예정 산책을 확인 없이 삭제
"""
import sys
import os
from collections import Counter
from datetime import datetime

sys.path.insert(0, os.path.abspath(os.path.dirname(os.path.dirname(__file__))))

from walktrack.db import SessionLocal
from walktrack.models.walk import Walk, WalkStatus
from walktrack.models import Walker  # 전체 모델 로딩 (FK 대상 테이블 등록)


def scheduled_walks_query(db, walker_id: int, from_date: str = None):
    query = db.query(Walk).filter(
        Walk.walker_id == walker_id,
        Walk.status == WalkStatus.SCHEDULED,
    )
    if from_date:
        # YYYY-MM-DD 문자열이라 사전순 비교 = 날짜 비교
        query = query.filter(Walk.date >= from_date)
    return query


def delete_walks(walker_id: int, from_date: str = None, confirm: bool = False):
    db = SessionLocal()

    try:
        if db.get(Walker, walker_id) is None:
            print(f"[오류] walker_id={walker_id}인 워커를 찾을 수 없습니다.")
            return False

        query = scheduled_walks_query(db, walker_id, from_date)
        per_date = Counter(date for (date,) in query.with_entities(Walk.date))
        total = sum(per_date.values())

        if total == 0:
            print(f"[OK] walker_id={walker_id}의 예정 산책이 없습니다.")
            return True

        print(f"walker_id={walker_id} 예정 산책:")
        for date in sorted(per_date):
            print(f"  {date}: {per_date[date]}건")

        if not confirm:
            answer = input(f"총 {total}건을 삭제할까요? (yes/no): ").strip().lower()
            if answer not in ("yes", "y"):
                print("[취소] 삭제하지 않았습니다.")
                return False

        deleted = query.delete(synchronize_session=False)
        db.commit()
        print(f"[성공] {deleted}개의 예정 산책이 삭제되었습니다.")
        return True

    except Exception as e:
        db.rollback()
        print(f"[오류] 삭제 중 오류 발생: {e}")
        import traceback
        traceback.print_exc()
        return False
    finally:
        db.close()


if __name__ == "__main__":
    args = [a for a in sys.argv[1:] if a != "-y"]
    confirm = "-y" in sys.argv[1:]

    if not args:
        print("사용법: python scripts/delete_sample_walks.py <walker_id> [시작 날짜 YYYY-MM-DD] [-y]")
        sys.exit(1)

    try:
        walker_id = int(args[0])
        from_date = args[1] if len(args) > 1 else None
        if from_date:
            datetime.strptime(from_date, "%Y-%m-%d")
    except ValueError:
        print("[오류] walker_id는 숫자, 시작 날짜는 YYYY-MM-DD 형식이어야 합니다.")
        sys.exit(1)

    success = delete_walks(walker_id, from_date=from_date, confirm=confirm)
    sys.exit(0 if success else 1)
