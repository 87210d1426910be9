"""
调用方身份

传输层完成认证后，把调用方表示为 Identity 传入每个业务操作。
"""
from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    """账户角色"""
    CLIENT = "CLIENT"            # 客户
    ADMIN = "ADMIN"              # 管理员
    SUPERADMIN = "SUPERADMIN"    # 超级管理员


@dataclass(frozen=True)
class Identity:
    """
    调用方身份

    Attributes:
        user_id: 账户ID（客户身份通过它关联 Client 记录）
        role: 角色
    """

    user_id: int
    role: Role

    def is_client(self) -> bool:
        """是否为客户身份"""
        return self.role == Role.CLIENT

    def has_role(self, role: Role) -> bool:
        return self.role == role

    def __repr__(self) -> str:
        return f"Identity(user_id={self.user_id}, role={self.role.value})"
