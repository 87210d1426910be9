"""
预订服务 - 预订生命周期
负责创建、修改、取消预订；修改改变总价时按已付总额重新推导
PENDING/CONFIRMED 状态
"""
import logging
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session

from dhhotel.database import unit_of_work
from dhhotel.domain.reservation_states import (
    CANCEL, apply_trigger, can_cancel, status_after_payment_amended
)
from dhhotel.errors import (
    BusinessRuleError, NotFoundError, PricingError, PricingFailure, ValidationError
)
from dhhotel.models.ontology import Reservation, ReservationStatus, RoomStatus
from dhhotel.models.schemas import PriceQuote, ReservationCreate, ReservationUpdate
from dhhotel.security.identity import Identity
from dhhotel.security.policies import ReservationAccessPolicy
from dhhotel.services.availability_service import AvailabilityService
from dhhotel.services.price_service import PriceService
from dhhotel.stores import ClientStore, PaymentStore, ReservationStore, RoomStore

logger = logging.getLogger(__name__)


class ReservationService:
    """预订服务"""

    def __init__(self, db: Session):
        self.db = db
        self.rooms = RoomStore(db)
        self.reservations = ReservationStore(db)
        self.payments = PaymentStore(db)
        self.price_service = PriceService(db)
        self.availability = AvailabilityService(db)
        self.policy = ReservationAccessPolicy(ClientStore(db))

    # ============== 查询 ==============

    def get_reservation(self, reservation_id: int) -> Optional[Reservation]:
        """获取单个预订"""
        return self.reservations.get(reservation_id)

    def list_reservations(self) -> List[Reservation]:
        """获取全部预订"""
        return self.reservations.list_all()

    def list_reservations_for(self, identity: Identity) -> List[Reservation]:
        """客户只看到自己的预订，管理员看到全部"""
        client_id = self.policy.client_scope(identity)
        if client_id is None:
            return self.reservations.list_all()
        return self.reservations.list_by_client(client_id)

    def estimate_price(self, start_date: Optional[date], end_date: Optional[date],
                       room_id: Optional[int]) -> PriceQuote:
        """估价，不产生任何写入"""
        return self.price_service.quote(start_date, end_date, room_id)

    # ============== 变更 ==============

    def create_reservation(self, data: ReservationCreate, identity: Identity) -> int:
        """
        创建预订

        Returns:
            新预订ID

        Raises:
            BusinessRuleError: 房间在该日期不可用或处于维修中
            ValidationError: 日期缺失、同一天、离店早于入住、无法计算总价
            NotFoundError: 客户身份没有对应的客户记录
        """
        with unit_of_work(self.db):
            # 锁定房间行，同一房间的并发预订在此串行
            self.rooms.lock(data.room_id)

            if not self.availability.is_available(data.room_id, data.start_date, data.end_date):
                logger.warning(
                    f"Room {data.room_id} not available for {data.start_date} - {data.end_date}"
                )
                raise BusinessRuleError("房间在所选日期不可用", code="room_unavailable")

            total_price = self._price_for_new_stay(data)

            room = self.rooms.get(data.room_id)
            if room.status == RoomStatus.MAINTENANCE:
                raise BusinessRuleError("不能预订维修中的房间", code="room_in_maintenance")

            client_id = self.policy.owner_for_new_reservation(identity, data.client_id)

            reservation = Reservation(
                client_id=client_id,
                room_id=data.room_id,
                start_date=data.start_date,
                end_date=data.end_date,
                total_price=total_price,
                status=ReservationStatus.PENDING,
            )
            reservation_id = self.reservations.insert(reservation)

        logger.info(
            f"Reservation {reservation_id} created for room {data.room_id}, total {total_price}"
        )
        return reservation_id

    def _price_for_new_stay(self, data: ReservationCreate):
        try:
            return self.price_service.calculate_total(data.start_date, data.end_date, data.room_id)
        except PricingError as e:
            if e.reason == PricingFailure.SAME_DAY:
                raise ValidationError(
                    "入住和离店不能是同一天，至少需要住一晚", code="same_day_stay"
                ) from e
            if e.reason == PricingFailure.REVERSED_DATES:
                raise ValidationError("离店日期不能早于入住日期", code="reversed_dates") from e
            raise ValidationError(
                "计算预订总价失败，请检查日期、房间价格以及房间是否存在",
                code="price_calculation_failed"
            ) from e

    def update_reservation(self, reservation_id: int, data: ReservationUpdate,
                           identity: Identity) -> Reservation:
        """
        修改预订的房间与日期，并重新计算总价

        未传 room_id 时保留原房间；日期必须同时提供。

        Raises:
            IntegrityViolationError: 已付总额超过新的总价（整体回滚）
        """
        with unit_of_work(self.db):
            reservation = self.reservations.get_for_update(reservation_id)
            if reservation is None:
                raise NotFoundError("预订不存在", code="reservation_not_found")

            self.policy.authorize_modify(identity, reservation)

            if data.start_date is None or data.end_date is None:
                raise ValidationError("必须提供预订的入住和离店日期", code="dates_required")

            room_id = data.room_id if data.room_id is not None else reservation.room_id
            self.rooms.lock(reservation.room_id, room_id)

            try:
                total_price = self.price_service.calculate_total(
                    data.start_date, data.end_date, room_id
                )
            except PricingError as e:
                raise ValidationError(
                    "预订的入住和离店日期有误", code="invalid_reservation_dates"
                ) from e

            # 已取消的预订不占用房间，无需检查重叠
            if reservation.status != ReservationStatus.CANCELED and not self.availability.is_available(
                room_id, data.start_date, data.end_date, exclude_reservation_id=reservation.id
            ):
                raise BusinessRuleError("房间在所选日期不可用", code="room_unavailable")

            reservation.room_id = room_id
            reservation.start_date = data.start_date
            reservation.end_date = data.end_date
            reservation.total_price = total_price

            # 总价变化后按已付总额重新推导状态，已付超过新总价时整体回滚
            if reservation.status != ReservationStatus.CANCELED:
                paid_total = self.payments.total_paid(reservation.id)
                new_status = status_after_payment_amended(
                    reservation.status, paid_total, total_price
                )
                if new_status != reservation.status:
                    logger.info(
                        f"Reservation {reservation_id} status "
                        f"{reservation.status.value} -> {new_status.value} after repricing"
                    )
                    reservation.status = new_status

            updated_rows = self.reservations.update(reservation)

        logger.debug(f"Reservation {reservation_id} updated, rows affected: {updated_rows}")
        self.db.refresh(reservation)
        return reservation

    def cancel_reservation(self, reservation_id: int,
                           identity: Optional[Identity] = None) -> Reservation:
        """取消预订；已确认的预订不能取消，取消不会触发退款"""
        with unit_of_work(self.db):
            reservation = self.reservations.get_for_update(reservation_id)
            if reservation is None:
                raise NotFoundError("预订不存在", code="reservation_not_found")

            self.policy.authorize_cancel(identity, reservation)

            if reservation.status != ReservationStatus.CANCELED:
                if not can_cancel(reservation.status):
                    raise BusinessRuleError("不能取消已确认的预订", code="cannot_cancel_confirmed")
                reservation.status = apply_trigger(reservation.status, CANCEL)
                self.reservations.update(reservation)
                logger.info(f"Reservation {reservation_id} canceled")

        self.db.refresh(reservation)
        return reservation
