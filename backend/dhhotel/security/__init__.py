"""
安全模块：调用方身份与授权策略
"""
from dhhotel.security.identity import Identity, Role
from dhhotel.security.policies import ReservationAccessPolicy

__all__ = ["Identity", "Role", "ReservationAccessPolicy"]
