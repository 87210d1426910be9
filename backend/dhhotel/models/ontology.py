"""
实体定义
房间、客户、预订、支付四类持久化对象
"""
from datetime import date
from enum import Enum
from sqlalchemy import (
    Column, Integer, String, Date, ForeignKey, Enum as SQLEnum, Numeric
)
from sqlalchemy.orm import relationship
from dhhotel.database import Base


# ============== 枚举定义 ==============

class RoomType(str, Enum):
    """房型"""
    SINGLE = "SINGLE"
    DOUBLE = "DOUBLE"
    SUITE = "SUITE"


class RoomStatus(str, Enum):
    """房间状态"""
    AVAILABLE = "AVAILABLE"        # 可用
    OCCUPIED = "OCCUPIED"          # 入住中
    MAINTENANCE = "MAINTENANCE"    # 维修中


class ReservationStatus(str, Enum):
    """预订状态"""
    PENDING = "PENDING"        # 待确认（未付清）
    CONFIRMED = "CONFIRMED"    # 已确认（已付清）
    CANCELED = "CANCELED"      # 已取消（终态）


class PaymentMethod(str, Enum):
    """支付方式"""
    CARD = "CARD"              # 刷卡
    CASH = "CASH"              # 现金
    TRANSFER = "TRANSFER"      # 转账


# ============== 实体定义 ==============

class Room(Base):
    """
    房间对象
    引擎只读取价格与状态，房间管理不在引擎内
    """
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    room_number = Column(String(10), unique=True, nullable=False)  # 房间号
    type = Column(SQLEnum(RoomType), nullable=False)
    price_per_night = Column(Numeric(10, 2), nullable=False)       # 每晚价格
    status = Column(SQLEnum(RoomStatus), default=RoomStatus.AVAILABLE, nullable=False)

    reservations = relationship("Reservation", back_populates="room")


class Client(Base):
    """客户对象，与账户身份一对一"""
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(20))

    reservations = relationship("Reservation", back_populates="client")


class Reservation(Base):
    """
    预订对象 - 生命周期引擎的聚合根
    total_price 由定价计算得出，status 随支付重新推导
    """
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False, index=True)
    total_price = Column(Numeric(10, 2), nullable=False)
    start_date = Column(Date, nullable=False)   # 入住日期
    end_date = Column(Date, nullable=False)     # 离店日期（不含当晚）
    status = Column(SQLEnum(ReservationStatus), default=ReservationStatus.PENDING, nullable=False)

    room = relationship("Room", back_populates="reservations")
    client = relationship("Client", back_populates="reservations")
    payments = relationship("Payment", back_populates="reservation")

    @property
    def nights(self) -> int:
        return (self.end_date - self.start_date).days


class Payment(Base):
    """支付记录，只通过支付对账服务增删改"""
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    reservation_id = Column(Integer, ForeignKey("reservations.id"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_date = Column(Date, default=date.today, nullable=False)
    method = Column(SQLEnum(PaymentMethod), nullable=False)

    reservation = relationship("Reservation", back_populates="payments")
