"""
业务服务
"""
from dhhotel.services.price_service import PriceService
from dhhotel.services.availability_service import AvailabilityService
from dhhotel.services.reservation_service import ReservationService
from dhhotel.services.payment_service import PaymentService

__all__ = [
    "PriceService",
    "AvailabilityService",
    "ReservationService",
    "PaymentService",
]
