"""
dhhotel/engine - 通用引擎组件

- state_machine: 状态机（状态转换校验）
"""
from dhhotel.engine.state_machine import (
    StateTransition,
    StateMachineConfig,
    StateMachine,
    InvalidTransitionError,
)

__all__ = [
    "StateTransition",
    "StateMachineConfig",
    "StateMachine",
    "InvalidTransitionError",
]
