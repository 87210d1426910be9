"""
可用性服务 - 判断房间在日期范围内能否预订
"""
import logging
from datetime import date
from typing import Optional
from sqlalchemy.orm import Session
from dhhotel.models.ontology import RoomStatus
from dhhotel.stores.reservation_store import ReservationStore, validate_stay_range
from dhhotel.stores.room_store import RoomStore

logger = logging.getLogger(__name__)


class AvailabilityService:
    """可用性服务"""

    def __init__(self, db: Session):
        self.db = db
        self.rooms = RoomStore(db)
        self.reservations = ReservationStore(db)

    def is_available(self, room_id: Optional[int], start_date: Optional[date],
                     end_date: Optional[date],
                     exclude_reservation_id: Optional[int] = None) -> bool:
        """
        房间是否可预订

        存在未取消的重叠预订，或房间处于维修中时不可预订。

        Args:
            exclude_reservation_id: 修改预订时排除其自身

        Raises:
            ValidationError: 参数缺失或离店早于入住
        """
        validate_stay_range(room_id, start_date, end_date)

        room = self.rooms.get(room_id)
        if room is not None and room.status == RoomStatus.MAINTENANCE:
            logger.info(f"Room {room_id} is under maintenance")
            return False

        return self.reservations.is_room_available(
            room_id, start_date, end_date, exclude_reservation_id
        )
