"""
权限策略 - 集中处理按角色的授权决策

每个业务操作调用这里的一个方法，不在服务内部各自比较角色。
"""
import logging
from typing import Optional

from dhhotel.errors import BusinessRuleError, ForbiddenError, NotFoundError
from dhhotel.models.ontology import Client, Reservation, ReservationStatus
from dhhotel.security.identity import Identity, Role
from dhhotel.stores.client_store import ClientStore

logger = logging.getLogger(__name__)


class ReservationAccessPolicy:
    """预订与支付的访问策略"""

    def __init__(self, clients: ClientStore):
        self.clients = clients

    def resolve_client(self, identity: Identity) -> Client:
        """把客户身份解析为 Client 记录"""
        client = self.clients.get_by_user_id(identity.user_id)
        if client is None:
            raise NotFoundError("当前用户对应的客户不存在", code="client_not_found")
        return client

    def client_scope(self, identity: Identity) -> Optional[int]:
        """
        列表查询的范围

        Returns:
            客户身份返回其 client_id，管理员返回 None（不限制）
        """
        if identity.is_client():
            return self.resolve_client(identity).id
        return None

    def owner_for_new_reservation(self, identity: Identity,
                                  requested_client_id: Optional[int]) -> Optional[int]:
        """新预订的归属客户：客户身份强制为自己，管理员传入值原样采用"""
        if identity.is_client():
            return self.resolve_client(identity).id
        return requested_client_id

    def _ensure_owner(self, identity: Identity, reservation: Reservation) -> None:
        client = self.resolve_client(identity)
        if reservation.client_id != client.id:
            logger.warning(
                f"Forbidden: user {identity.user_id} is not the owner of reservation {reservation.id}"
            )
            raise ForbiddenError("无权操作该预订")

    def authorize_modify(self, identity: Identity, reservation: Reservation) -> None:
        """修改预订：客户只能改自己的、待确认的预订"""
        if not identity.is_client():
            return
        self._ensure_owner(identity, reservation)
        if reservation.status != ReservationStatus.PENDING:
            raise BusinessRuleError(
                "客户不能修改已取消或已确认的预订",
                code="reservation_not_modifiable"
            )

    def authorize_cancel(self, identity: Optional[Identity], reservation: Reservation) -> None:
        """取消预订：客户只能取消自己的预订"""
        if identity is None or not identity.is_client():
            return
        self._ensure_owner(identity, reservation)

    def authorize_payment(self, identity: Identity, reservation: Reservation) -> None:
        """登记支付：客户只能为自己的预订付款"""
        if identity.is_client():
            self._ensure_owner(identity, reservation)

    def authorize_payment_correction(self, identity: Optional[Identity]) -> None:
        """修改/删除支付仅限超级管理员"""
        if identity is None:
            return
        if not identity.has_role(Role.SUPERADMIN):
            logger.warning(f"Forbidden: {identity!r} attempted a payment correction")
            raise ForbiddenError("只有超级管理员可以修改或删除支付")
