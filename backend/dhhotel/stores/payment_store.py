"""
支付存储 - CRUD 与已付总额聚合
"""
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import func, select
from sqlalchemy.orm import Session
from dhhotel.models.ontology import Payment, Reservation


class PaymentStore:
    """支付存储"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, payment_id: int) -> Optional[Payment]:
        return self.db.get(Payment, payment_id)

    def reload(self, payment_id: int) -> Optional[Payment]:
        """重新读取支付，覆盖会话中已加载的旧值（在锁定所属预订之后调用）"""
        return self.db.execute(
            select(Payment).where(Payment.id == payment_id)
            .execution_options(populate_existing=True)
        ).scalars().first()

    def list_all(self) -> List[Payment]:
        return self.db.query(Payment).order_by(Payment.id).all()

    def list_by_reservation(self, reservation_id: int) -> List[Payment]:
        return self.db.query(Payment).filter(
            Payment.reservation_id == reservation_id
        ).order_by(Payment.id).all()

    def list_by_client(self, client_id: int) -> List[Payment]:
        """获取客户所有预订下的支付"""
        return self.db.query(Payment).join(Reservation).filter(
            Reservation.client_id == client_id
        ).order_by(Payment.id).all()

    def insert(self, payment: Payment) -> int:
        self.db.add(payment)
        self.db.flush()
        return payment.id

    def update(self, payment: Payment, payment_id: int) -> int:
        """写回支付变更，返回受影响行数"""
        if payment.id != payment_id:
            return 0
        self.db.add(payment)
        self.db.flush()
        return 1

    def delete(self, payment_id: int) -> int:
        payment = self.get(payment_id)
        if payment is None:
            return 0
        self.db.delete(payment)
        self.db.flush()
        return 1

    def total_paid(self, reservation_id: int) -> Decimal:
        """预订的已付总额，无支付时为 0"""
        total = self.db.execute(
            select(func.coalesce(func.sum(Payment.amount), 0)).where(
                Payment.reservation_id == reservation_id
            )
        ).scalar()
        return Decimal(str(total)) if total is not None else Decimal("0")
