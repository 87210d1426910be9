"""
价格服务 - 计算住宿总价
只读操作，可单独用于校验和估价展示
"""
from datetime import date
from decimal import Decimal
from typing import Optional
from sqlalchemy.orm import Session
from dhhotel.errors import PricingError, PricingFailure
from dhhotel.models.schemas import PriceQuote
from dhhotel.stores.room_store import RoomStore


class PriceService:
    """价格服务"""

    def __init__(self, db: Session):
        self.db = db
        self.rooms = RoomStore(db)

    def quote(self, start_date: Optional[date], end_date: Optional[date],
              room_id: Optional[int]) -> PriceQuote:
        """
        计算住宿报价

        Raises:
            PricingError: 日期缺失、同一天、离店早于入住、房间不存在或每晚价格非正数
        """
        if start_date is None or end_date is None:
            raise PricingError(PricingFailure.MISSING_DATES, "必须提供入住和离店日期")

        if end_date == start_date:
            raise PricingError(PricingFailure.SAME_DAY, "入住和离店不能是同一天，至少需要住一晚")

        if end_date < start_date:
            raise PricingError(PricingFailure.REVERSED_DATES, "离店日期不能早于入住日期")

        room = self.rooms.get(room_id)
        if room is None:
            raise PricingError(PricingFailure.ROOM_NOT_FOUND, "房间不存在")

        price_per_night = Decimal(room.price_per_night or 0)
        if price_per_night <= 0:
            raise PricingError(PricingFailure.INVALID_PRICE, "房间每晚价格无效")

        nights = (end_date - start_date).days
        return PriceQuote(
            room_id=room.id,
            start_date=start_date,
            end_date=end_date,
            nights=nights,
            price_per_night=price_per_night,
            total_price=price_per_night * nights,
        )

    def calculate_total(self, start_date: Optional[date], end_date: Optional[date],
                        room_id: Optional[int]) -> Decimal:
        """计算总价 = 晚数 * 每晚价格"""
        return self.quote(start_date, end_date, room_id).total_price
