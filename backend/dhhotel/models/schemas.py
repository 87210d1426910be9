"""
Pydantic 模式定义
用于操作输入校验与估价/余额结果
"""
from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field
from dhhotel.models.ontology import ReservationStatus, PaymentMethod


# ============== 预订 Schemas ==============

class ReservationCreate(BaseModel):
    # 日期与房间缺失由可用性检查报告为校验错误
    room_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    # 仅管理员传入时生效，客户身份下会被覆盖
    client_id: Optional[int] = None


class ReservationUpdate(BaseModel):
    room_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class PriceQuote(BaseModel):
    room_id: int
    start_date: date
    end_date: date
    nights: int
    price_per_night: Decimal
    total_price: Decimal


# ============== 支付 Schemas ==============

class PaymentCreate(BaseModel):
    amount: Decimal = Field(..., gt=0)
    method: PaymentMethod
    payment_date: Optional[date] = None


class PaymentUpdate(BaseModel):
    amount: Optional[Decimal] = Field(None, gt=0)
    payment_date: Optional[date] = None
    method: Optional[PaymentMethod] = None


class ReservationBalance(BaseModel):
    reservation_id: int
    status: ReservationStatus
    total_price: Decimal
    paid_total: Decimal
    remaining: Decimal
