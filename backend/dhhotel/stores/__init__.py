"""
dhhotel/stores - 存储层

引擎通过这些窄接口访问持久化数据：
- RoomStore: 房间读取与加锁
- ClientStore: 客户读取
- ReservationStore: 预订 CRUD 与重叠查询
- PaymentStore: 支付 CRUD 与已付总额
"""
from dhhotel.stores.room_store import RoomStore
from dhhotel.stores.client_store import ClientStore
from dhhotel.stores.reservation_store import ReservationStore, validate_stay_range
from dhhotel.stores.payment_store import PaymentStore

__all__ = [
    "RoomStore",
    "ClientStore",
    "ReservationStore",
    "PaymentStore",
    "validate_stay_range",
]
