"""
dhhotel/domain - 预订领域规则
"""
from dhhotel.domain.reservation_states import (
    reservation_state_machine,
    apply_trigger,
    can_cancel,
    status_after_payment_added,
    status_after_payment_amended,
    status_after_payment_removed,
    SETTLE,
    REOPEN,
    CANCEL,
)

__all__ = [
    "reservation_state_machine",
    "apply_trigger",
    "can_cancel",
    "status_after_payment_added",
    "status_after_payment_amended",
    "status_after_payment_removed",
    "SETTLE",
    "REOPEN",
    "CANCEL",
]
