"""
预订存储 - CRUD 与房间重叠查询
"""
import logging
from datetime import date
from typing import List, Optional
from sqlalchemy import func, select
from sqlalchemy.orm import Session
from dhhotel.errors import ValidationError
from dhhotel.models.ontology import Reservation, ReservationStatus

logger = logging.getLogger(__name__)


def validate_stay_range(room_id: Optional[int], start_date: Optional[date],
                        end_date: Optional[date]) -> None:
    """校验房间与日期参数，缺失或离店早于入住时抛出校验错误"""
    if room_id is None:
        raise ValidationError("房间ID不能为空", code="room_required")
    if start_date is None:
        raise ValidationError("入住日期不能为空", code="dates_required")
    if end_date is None:
        raise ValidationError("离店日期不能为空", code="dates_required")
    if end_date < start_date:
        raise ValidationError("离店日期不能早于入住日期", code="reversed_dates")


class ReservationStore:
    """预订存储"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, reservation_id: int) -> Optional[Reservation]:
        return self.db.get(Reservation, reservation_id)

    def lock_statement(self, reservation_id: int):
        return select(Reservation).where(Reservation.id == reservation_id).with_for_update()

    def get_for_update(self, reservation_id: int) -> Optional[Reservation]:
        """
        读取并锁定预订行，直到当前事务结束

        同一预订的支付对账在此处串行。
        """
        return self.db.execute(
            self.lock_statement(reservation_id).execution_options(populate_existing=True)
        ).scalars().first()

    def list_all(self) -> List[Reservation]:
        return self.db.query(Reservation).order_by(Reservation.id).all()

    def list_by_client(self, client_id: int) -> List[Reservation]:
        """获取客户的全部预订"""
        return self.db.query(Reservation).filter(
            Reservation.client_id == client_id
        ).order_by(Reservation.id).all()

    def insert(self, reservation: Reservation) -> int:
        self.db.add(reservation)
        self.db.flush()
        return reservation.id

    def update(self, reservation: Reservation) -> int:
        """写回预订变更，返回受影响行数"""
        if reservation.id is None:
            return 0
        self.db.add(reservation)
        self.db.flush()
        return 1

    def overlap_count_statement(self, room_id: int, start_date: date, end_date: date,
                                exclude_reservation_id: Optional[int] = None):
        # 闭区间重叠判断：other.start <= end AND other.end >= start
        stmt = select(func.count(Reservation.id)).where(
            Reservation.room_id == room_id,
            Reservation.status != ReservationStatus.CANCELED,
            Reservation.start_date <= end_date,
            Reservation.end_date >= start_date,
        )
        if exclude_reservation_id is not None:
            stmt = stmt.where(Reservation.id != exclude_reservation_id)
        return stmt

    def is_room_available(self, room_id: Optional[int], start_date: Optional[date],
                          end_date: Optional[date],
                          exclude_reservation_id: Optional[int] = None) -> bool:
        """房间在日期范围内是否没有未取消的重叠预订"""
        validate_stay_range(room_id, start_date, end_date)
        count = self.db.execute(
            self.overlap_count_statement(room_id, start_date, end_date, exclude_reservation_id)
        ).scalar()
        return not count
