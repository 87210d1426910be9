"""
错误分类

业务错误统一继承 HotelError，每个错误带稳定的 code，
调用方（传输层）据此映射响应，消息文本仅供展示。
存储层故障使用 StoreError，与业务错误分开。
"""
from enum import Enum
from typing import Optional


class HotelError(Exception):
    """业务错误基类"""

    default_code = "hotel_error"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class NotFoundError(HotelError):
    """引用的预订/支付/房间/客户不存在"""

    default_code = "not_found"


class ValidationError(HotelError):
    """输入缺失或自相矛盾"""

    default_code = "validation_error"


class BusinessRuleError(HotelError):
    """违反业务规则（冲突）"""

    default_code = "business_rule"


class ForbiddenError(HotelError):
    """客户身份操作不属于自己的记录"""

    default_code = "forbidden"


class IntegrityViolationError(BusinessRuleError):
    """数据一致性被破坏，需要人工排查"""

    default_code = "integrity_violation"


class PricingFailure(str, Enum):
    """价格计算失败原因"""
    MISSING_DATES = "missing_dates"      # 缺少日期
    SAME_DAY = "same_day"                # 入住与离店同一天
    REVERSED_DATES = "reversed_dates"    # 离店早于入住
    ROOM_NOT_FOUND = "room_not_found"    # 房间不存在
    INVALID_PRICE = "invalid_price"      # 每晚价格非正数


class PricingError(ValidationError):
    """价格计算结果无效"""

    default_code = "pricing_error"

    def __init__(self, reason: PricingFailure, message: Optional[str] = None):
        super().__init__(message or f"无法计算总价: {reason.value}", code=reason.value)
        self.reason = reason


class StoreError(Exception):
    """存储层故障（连接、事务中止等），不属于业务错误"""
