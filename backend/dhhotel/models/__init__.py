# Entities
from dhhotel.models.ontology import (
    Room, Client, Reservation, Payment,
    RoomType, RoomStatus, ReservationStatus, PaymentMethod
)

__all__ = [
    'Room', 'Client', 'Reservation', 'Payment',
    'RoomType', 'RoomStatus', 'ReservationStatus', 'PaymentMethod'
]
