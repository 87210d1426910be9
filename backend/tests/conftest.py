"""
Pytest 配置和共享 fixtures
"""
import pytest
from datetime import date
from decimal import Decimal
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dhhotel.database import Base, create_db_engine
from dhhotel.models import ontology  # noqa
from dhhotel.models.ontology import Client, Room, RoomStatus, RoomType
from dhhotel.models.schemas import ReservationCreate
from dhhotel.security.identity import Identity, Role
from dhhotel.services.payment_service import PaymentService
from dhhotel.services.reservation_service import ReservationService


CHECK_IN = date(2030, 3, 10)


@pytest.fixture(scope="function")
def db_engine():
    """创建内存数据库引擎"""
    engine = create_db_engine("sqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    """创建数据库会话"""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    yield session
    session.close()


# ============== 实体相关 Fixtures ==============

@pytest.fixture
def make_room(db_session):
    """房间工厂"""
    counter = {"n": 100}

    def _make(price="120.00", status=RoomStatus.AVAILABLE, room_type=RoomType.DOUBLE):
        counter["n"] += 1
        room = Room(
            room_number=str(counter["n"]),
            type=room_type,
            price_per_night=Decimal(price),
            status=status,
        )
        db_session.add(room)
        db_session.commit()
        db_session.refresh(room)
        return room

    return _make


@pytest.fixture
def sample_room(make_room):
    """120.00/晚的可用房间"""
    return make_room("120.00")


@pytest.fixture
def maintenance_room(make_room):
    return make_room("90.00", status=RoomStatus.MAINTENANCE)


@pytest.fixture
def sample_client(db_session):
    """账户 10 对应的客户"""
    client = Client(user_id=10, first_name="Ana", last_name="Lopez", phone="600111222")
    db_session.add(client)
    db_session.commit()
    db_session.refresh(client)
    return client


@pytest.fixture
def other_client(db_session):
    """账户 20 对应的客户"""
    client = Client(user_id=20, first_name="Luis", last_name="Perez", phone="600333444")
    db_session.add(client)
    db_session.commit()
    db_session.refresh(client)
    return client


# ============== 身份 Fixtures ==============

@pytest.fixture
def client_identity(sample_client):
    return Identity(user_id=sample_client.user_id, role=Role.CLIENT)


@pytest.fixture
def other_client_identity(other_client):
    return Identity(user_id=other_client.user_id, role=Role.CLIENT)


@pytest.fixture
def admin_identity():
    return Identity(user_id=1, role=Role.ADMIN)


@pytest.fixture
def superadmin_identity():
    return Identity(user_id=2, role=Role.SUPERADMIN)


# ============== 服务 Fixtures ==============

@pytest.fixture
def reservation_service(db_session):
    return ReservationService(db_session)


@pytest.fixture
def payment_service(db_session):
    return PaymentService(db_session)


@pytest.fixture
def pending_reservation(reservation_service, sample_room, client_identity):
    """客户在 sample_room 上的 3 晚预订，总价 360.00"""
    reservation_id = reservation_service.create_reservation(
        ReservationCreate(
            room_id=sample_room.id,
            start_date=CHECK_IN,
            end_date=date(2030, 3, 13),
        ),
        client_identity,
    )
    return reservation_service.get_reservation(reservation_id)
