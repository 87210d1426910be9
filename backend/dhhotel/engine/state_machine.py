"""
dhhotel/engine/state_machine.py

状态机引擎 - 校验实体状态转换
实体状态保存在数据库中，状态机本身不持有当前状态，
每次按 (当前状态, 触发动作) 查找转换。
"""
from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StateTransition:
    """
    状态转换定义

    Attributes:
        from_state: 源状态
        to_state: 目标状态
        trigger: 触发动作
        condition: 可选的转换条件
    """

    from_state: str
    to_state: str
    trigger: str
    condition: Optional[Callable[[Dict[str, Any]], bool]] = None

    def is_allowed(self, context: Dict[str, Any]) -> bool:
        """检查转换是否被允许"""
        if self.condition is None:
            return True
        return bool(self.condition(context))


@dataclass
class StateMachineConfig:
    """
    状态机配置

    Attributes:
        name: 状态机名称
        states: 所有状态的列表
        transitions: 转换列表
        initial_state: 初始状态
    """

    name: str
    states: List[str]
    transitions: List[StateTransition]
    initial_state: str


class InvalidTransitionError(Exception):
    """不存在或不被允许的状态转换"""

    def __init__(self, machine: str, from_state: str, trigger: str):
        super().__init__(f"{machine}: no transition from {from_state} on {trigger}")
        self.machine = machine
        self.from_state = from_state
        self.trigger = trigger


class StateMachine:
    """
    状态机

    Example:
        >>> machine = StateMachine(StateMachineConfig(
        ...     name="Reservation",
        ...     states=["PENDING", "CONFIRMED"],
        ...     transitions=[StateTransition("PENDING", "CONFIRMED", "settle")],
        ...     initial_state="PENDING",
        ... ))
        >>> machine.fire("PENDING", "settle")
        'CONFIRMED'
    """

    def __init__(self, config: StateMachineConfig):
        self._config = config
        self._transition_map: Dict[str, Dict[str, StateTransition]] = {}

        # 构建转换映射: from_state -> trigger -> transition
        for t in config.transitions:
            if t.from_state not in config.states or t.to_state not in config.states:
                raise ValueError(f"Unknown state in transition {t.from_state} -> {t.to_state}")
            self._transition_map.setdefault(t.from_state, {})[t.trigger] = t

    @property
    def config(self) -> StateMachineConfig:
        """获取状态机配置"""
        return self._config

    @property
    def initial_state(self) -> str:
        return self._config.initial_state

    def is_terminal(self, state: str) -> bool:
        """没有任何出边的状态为终态"""
        return not self._transition_map.get(state)

    def can_fire(self, current_state: str, trigger: str,
                 context: Optional[Dict[str, Any]] = None) -> bool:
        """检查当前状态下触发动作是否可用"""
        transition = self._transition_map.get(current_state, {}).get(trigger)
        return transition is not None and transition.is_allowed(context or {})

    def fire(self, current_state: str, trigger: str,
             context: Optional[Dict[str, Any]] = None) -> str:
        """
        执行状态转换

        Returns:
            目标状态

        Raises:
            InvalidTransitionError: 转换不存在或条件不满足
        """
        if not self.can_fire(current_state, trigger, context):
            logger.warning(
                f"Invalid transition: {self._config.name} {current_state} (trigger: {trigger})"
            )
            raise InvalidTransitionError(self._config.name, current_state, trigger)

        target_state = self._transition_map[current_state][trigger].to_state
        logger.info(f"State transition: {current_state} -> {target_state} (trigger: {trigger})")
        return target_state


__all__ = [
    "StateTransition",
    "StateMachineConfig",
    "StateMachine",
    "InvalidTransitionError",
]
