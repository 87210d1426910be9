"""
dhhotel/domain/reservation_states.py

预订状态机与结算规则

状态：
- PENDING   → CONFIRMED  (settle，已付总额达到总价，仅由支付对账触发)
- CONFIRMED → PENDING    (reopen，已付总额低于总价，仅由支付对账触发)
- PENDING   → CANCELED   (cancel，终态)

预订状态是已付总额的推导结果，每次支付变更后都通过下面的
status_after_* 函数重新计算，不作为独立的事实来源。
"""
from decimal import Decimal
import logging

from dhhotel.engine.state_machine import StateMachine, StateMachineConfig, StateTransition
from dhhotel.errors import IntegrityViolationError
from dhhotel.models.ontology import ReservationStatus

logger = logging.getLogger(__name__)

SETTLE = "settle"
REOPEN = "reopen"
CANCEL = "cancel"

PENDING = ReservationStatus.PENDING.value
CONFIRMED = ReservationStatus.CONFIRMED.value
CANCELED = ReservationStatus.CANCELED.value


reservation_state_machine = StateMachine(StateMachineConfig(
    name="Reservation",
    states=[PENDING, CONFIRMED, CANCELED],
    transitions=[
        StateTransition(PENDING, CONFIRMED, SETTLE),
        StateTransition(CONFIRMED, PENDING, REOPEN),
        StateTransition(PENDING, CANCELED, CANCEL),
    ],
    initial_state=PENDING,
))


def apply_trigger(current: ReservationStatus, trigger: str) -> ReservationStatus:
    """按触发动作转换状态，非法转换抛出 InvalidTransitionError"""
    return ReservationStatus(reservation_state_machine.fire(current.value, trigger))


def _settled(current: ReservationStatus) -> ReservationStatus:
    if current == ReservationStatus.PENDING:
        return apply_trigger(current, SETTLE)
    return current


def _reopened(current: ReservationStatus) -> ReservationStatus:
    if current == ReservationStatus.CONFIRMED:
        return apply_trigger(current, REOPEN)
    return current


def status_after_payment_added(current: ReservationStatus, paid_total: Decimal,
                               total_price: Decimal) -> ReservationStatus:
    """新增支付后：付清则确认，否则保持不变"""
    if current == ReservationStatus.CANCELED:
        return current
    if paid_total >= total_price:
        return _settled(current)
    return current


def status_after_payment_amended(current: ReservationStatus, paid_total: Decimal,
                                 total_price: Decimal) -> ReservationStatus:
    """
    修改支付金额后重新推导状态

    已付 < 总价 → PENDING；已付 == 总价 → CONFIRMED；
    已付 > 总价 → 数据一致性错误，不做截断。
    """
    if paid_total > total_price:
        logger.error(f"Paid total {paid_total} exceeds total price {total_price}")
        raise IntegrityViolationError(
            "支付金额超过了预订的总价",
            code="paid_total_exceeds_price"
        )
    if current == ReservationStatus.CANCELED:
        return current
    if paid_total == total_price:
        return _settled(current)
    return _reopened(current)


def status_after_payment_removed(current: ReservationStatus, paid_total: Decimal,
                                 total_price: Decimal) -> ReservationStatus:
    """删除支付后只会降级为 PENDING，从不升级"""
    if paid_total < total_price:
        return _reopened(current)
    return current


def can_cancel(current: ReservationStatus) -> bool:
    return reservation_state_machine.can_fire(current.value, CANCEL)
