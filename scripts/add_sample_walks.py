"""
예약 산책 샘플 데이터 추가 스크립트

평가 승인된 강아지들로 워커의 예정 산책을 만듭니다.
같은 날짜/시간에 여러 마리를 배정하므로 그룹 산책 세션도 함께 생깁니다.

사용법:
    python scripts/add_sample_walks.py <walker_id> [날짜 범위]

예시:
    python scripts/add_sample_walks.py 1 7
    # walker_id=1에 대해 오늘부터 7일간의 예정 산책 추가
"""
import sys
import os
from datetime import datetime, timedelta
import random

# 프로젝트 루트를 Python path에 추가
sys.path.insert(0, os.path.abspath(os.path.dirname(os.path.dirname(__file__))))

from walktrack.db import SessionLocal
from walktrack.models.walk import Walk, WalkStatus
from walktrack.models import Walker, Dog  # 전체 모델 로딩 (FK 대상 테이블 등록)
from walktrack.models.assessment import Assessment, AssessmentStatus, AssessmentResult
from walktrack.domains.walk.service.walk_service import time_slot_for

# 오전/오후 대표 시간대
START_TIMES = ["08:00", "09:00", "10:30", "13:00", "15:00", "17:30"]


def get_bookable_dogs(db):
    """평가(completed + approved)가 끝난 강아지 목록"""
    return (
        db.query(Dog)
        .join(Assessment, Assessment.dog_id == Dog.dog_id)
        .filter(
            Assessment.status == AssessmentStatus.COMPLETED,
            Assessment.result == AssessmentResult.APPROVED,
        )
        .distinct()
        .all()
    )


def add_sample_walks(walker_id: int, num_days: int = 7):
    """샘플 예정 산책 추가

    Args:
        walker_id: 워커 ID
        num_days: 생성할 날짜 범위 (오늘부터 N일)
    """
    db = SessionLocal()

    try:
        walker = db.get(Walker, walker_id)
        if not walker:
            print(f"[오류] walker_id={walker_id}인 워커를 찾을 수 없습니다.")
            return False

        dogs = get_bookable_dogs(db)
        if not dogs:
            print("[오류] 평가 승인된 강아지가 없습니다.")
            return False

        max_group = max(1, min(walker.max_dogs or 1, len(dogs)))
        print(f"[OK] 워커: walker_id={walker_id} (최대 {max_group}마리)")
        print(f"[OK] 예약 가능한 강아지: {len(dogs)}마리")
        print(f"[추가] 오늘부터 {num_days}일간의 예정 산책을 생성합니다...\n")

        walks_created = 0

        for day_offset in range(num_days):
            date_str = (datetime.now() + timedelta(days=day_offset)).strftime("%Y-%m-%d")

            # 하루 1~2개 시간대
            for start_time in sorted(random.sample(START_TIMES, random.randint(1, 2))):
                # 시간대별 1마리 ~ max_group 마리 (2마리 이상이면 그룹 산책)
                group = random.sample(dogs, random.randint(1, max_group))

                for dog in group:
                    walk = Walk(
                        dog_id=dog.dog_id,
                        walker_id=walker_id,
                        date=date_str,
                        start_time=start_time,
                        time_slot=time_slot_for(start_time),
                        duration=random.choice([30, 45, 60]),
                        status=WalkStatus.SCHEDULED,
                        route_coordinates=[],
                        is_tracking_active=False,
                    )
                    db.add(walk)
                    walks_created += 1

                label = "그룹" if len(group) > 1 else "단독"
                names = ", ".join(d.name for d in group)
                print(f"  {date_str} {start_time} [{label}] {names}")

        # 데이터베이스에 커밋
        db.commit()
        print(f"\n[성공] 총 {walks_created}개의 예정 산책이 추가되었습니다!")
        return True

    except Exception as e:
        db.rollback()
        print(f"[오류] 오류 발생: {e}")
        import traceback
        traceback.print_exc()
        return False
    finally:
        db.close()


def list_available_walkers():
    """등록된 워커 목록 출력"""
    db = SessionLocal()
    try:
        walkers = db.query(Walker).all()
        if not walkers:
            print("등록된 워커가 없습니다.")
            return

        print("\n등록된 워커 목록:")
        print("-" * 60)
        for walker in walkers:
            print(f"  walker_id={walker.walker_id:2d} | user_id={walker.user_id} | max_dogs={walker.max_dogs}")
        print("-" * 60)
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("사용법: python scripts/add_sample_walks.py <walker_id> [날짜 범위]")
        print("\n예시:")
        print("  python scripts/add_sample_walks.py 1      # 오늘부터 7일간 (기본값)")
        print("  python scripts/add_sample_walks.py 1 14   # 오늘부터 14일간")
        print("\n사용 가능한 워커 목록:")
        list_available_walkers()
        sys.exit(1)

    try:
        walker_id = int(sys.argv[1])
        num_days = int(sys.argv[2]) if len(sys.argv) > 2 else 7
    except ValueError:
        print("[오류] walker_id, 날짜 범위는 숫자여야 합니다.")
        sys.exit(1)

    success = add_sample_walks(walker_id, num_days)
    sys.exit(0 if success else 1)
