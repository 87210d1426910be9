"""
支付服务 - 支付对账
管理 Payment 对象，每次支付变更后根据已付总额重新推导预订状态
"""
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from dhhotel.database import unit_of_work
from dhhotel.domain.reservation_states import (
    status_after_payment_added,
    status_after_payment_amended,
    status_after_payment_removed,
)
from dhhotel.errors import BusinessRuleError, NotFoundError, ValidationError
from dhhotel.models.ontology import Payment, Reservation, ReservationStatus
from dhhotel.models.schemas import PaymentCreate, PaymentUpdate, ReservationBalance
from dhhotel.security.identity import Identity
from dhhotel.security.policies import ReservationAccessPolicy
from dhhotel.stores import ClientStore, PaymentStore, ReservationStore

logger = logging.getLogger(__name__)


class PaymentService:
    """支付服务"""

    def __init__(self, db: Session):
        self.db = db
        self.payments = PaymentStore(db)
        self.reservations = ReservationStore(db)
        self.policy = ReservationAccessPolicy(ClientStore(db))

    # ============== 查询 ==============

    def get_payment(self, payment_id: int) -> Optional[Payment]:
        """获取单个支付"""
        return self.payments.get(payment_id)

    def list_payments(self) -> List[Payment]:
        return self.payments.list_all()

    def list_payments_by_reservation(self, reservation_id: int) -> List[Payment]:
        """获取预订下的支付记录"""
        return self.payments.list_by_reservation(reservation_id)

    def list_payments_by_client(self, client_id: int) -> List[Payment]:
        return self.payments.list_by_client(client_id)

    def list_payments_for(self, identity: Identity) -> List[Payment]:
        """客户只看到自己的支付，管理员看到全部"""
        client_id = self.policy.client_scope(identity)
        if client_id is None:
            return self.payments.list_all()
        return self.payments.list_by_client(client_id)

    def get_total_paid(self, reservation_id: int) -> Decimal:
        return self.payments.total_paid(reservation_id)

    def get_balance(self, reservation_id: int) -> ReservationBalance:
        """获取预订的总价、已付与待付金额"""
        reservation = self.reservations.get(reservation_id)
        if reservation is None:
            raise NotFoundError("预订不存在", code="reservation_not_found")

        paid_total = self.payments.total_paid(reservation_id)
        return ReservationBalance(
            reservation_id=reservation.id,
            status=reservation.status,
            total_price=reservation.total_price,
            paid_total=paid_total,
            remaining=reservation.total_price - paid_total,
        )

    # ============== 变更 ==============

    def _lock_reservation(self, reservation_id: int) -> Reservation:
        # 锁定预订行，同一预订的 读已付 -> 写支付 -> 推导状态 在此串行
        reservation = self.reservations.get_for_update(reservation_id)
        if reservation is None:
            raise NotFoundError("预订不存在", code="reservation_not_found")
        return reservation

    def _apply_status(self, reservation: Reservation, new_status: ReservationStatus) -> None:
        if new_status == reservation.status:
            return
        logger.info(
            f"Reservation {reservation.id} status {reservation.status.value} -> {new_status.value}"
        )
        reservation.status = new_status
        self.reservations.update(reservation)

    def _require_payment(self, payment_id: int) -> Payment:
        payment = self.payments.get(payment_id)
        if payment is None:
            raise NotFoundError("支付记录不存在", code="payment_not_found")
        return payment

    def _lock_payment(self, payment_id: int) -> Tuple[Payment, Reservation]:
        """
        锁定支付所属的预订，再重新读取支付

        等待锁期间支付可能已被其他事务修改或删除。
        """
        reservation = self._lock_reservation(self._require_payment(payment_id).reservation_id)
        payment = self.payments.reload(payment_id)
        if payment is None:
            raise NotFoundError("支付记录不存在", code="payment_not_found")
        return payment, reservation

    def create_payment(self, data: PaymentCreate, reservation_id: int,
                       identity: Identity) -> int:
        """
        为预订登记支付

        Returns:
            新支付ID

        Raises:
            NotFoundError: 预订不存在
            ForbiddenError: 客户为他人的预订付款
            BusinessRuleError: 预订已取消；金额超过待付余额
        """
        with unit_of_work(self.db):
            reservation = self._lock_reservation(reservation_id)

            self.policy.authorize_payment(identity, reservation)

            if reservation.status == ReservationStatus.CANCELED:
                raise BusinessRuleError("已取消的预订不能登记支付", code="reservation_canceled")

            paid_total = self.payments.total_paid(reservation_id)
            remaining = reservation.total_price - paid_total

            if data.amount > remaining and reservation.status == ReservationStatus.CONFIRMED:
                logger.warning(f"Payment rejected: reservation {reservation_id} already confirmed")
                raise BusinessRuleError(
                    "预订已付清并确认，本次支付未登记",
                    code="already_paid_and_confirmed"
                )
            if data.amount > remaining:
                logger.warning(
                    f"Payment rejected: amount {data.amount} exceeds remaining {remaining}"
                )
                raise BusinessRuleError("支付金额超过待付余额", code="payment_exceeds_balance")

            payment = Payment(
                reservation_id=reservation_id,
                amount=data.amount,
                payment_date=data.payment_date or date.today(),
                method=data.method,
            )
            payment_id = self.payments.insert(payment)

            self._apply_status(
                reservation,
                status_after_payment_added(
                    reservation.status, paid_total + data.amount, reservation.total_price
                )
            )

        logger.info(f"Payment {payment_id} of {data.amount} registered for reservation {reservation_id}")
        return payment_id

    def update_payment(self, payment_id: int, data: PaymentUpdate,
                       identity: Optional[Identity] = None) -> Payment:
        """
        修改支付

        只写入传入的字段；修改了金额时重新推导预订状态，
        已付总额超过总价时抛出一致性错误并回滚整个操作。
        """
        self.policy.authorize_payment_correction(identity)

        with unit_of_work(self.db):
            payment, reservation = self._lock_payment(payment_id)

            if data.amount is None and data.payment_date is None and data.method is None:
                raise ValidationError("必须指定要修改的字段", code="no_fields_to_update")

            if data.amount is not None:
                payment.amount = data.amount
            if data.payment_date is not None:
                payment.payment_date = data.payment_date
            if data.method is not None:
                payment.method = data.method

            rows = self.payments.update(payment, payment_id)

            if data.amount is not None:
                paid_total = self.payments.total_paid(reservation.id)
                self._apply_status(
                    reservation,
                    status_after_payment_amended(
                        reservation.status, paid_total, reservation.total_price
                    )
                )

        logger.debug(f"Payment {payment_id} updated, rows affected: {rows}")
        self.db.refresh(payment)
        return payment

    def delete_payment(self, payment_id: int, identity: Optional[Identity] = None) -> int:
        """删除支付；已付不足时预订降级为 PENDING，从不升级"""
        self.policy.authorize_payment_correction(identity)

        with unit_of_work(self.db):
            _, reservation = self._lock_payment(payment_id)

            rows = self.payments.delete(payment_id)

            paid_total = self.payments.total_paid(reservation.id)
            self._apply_status(
                reservation,
                status_after_payment_removed(
                    reservation.status, paid_total, reservation.total_price
                )
            )

        logger.info(f"Payment {payment_id} deleted from reservation {reservation.id}")
        return rows
