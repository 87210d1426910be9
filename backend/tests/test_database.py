"""
Tests for dhhotel/database.py and dhhotel/config.py
"""
import pytest
from decimal import Decimal
import logging
from sqlalchemy import event, inspect, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool

from dhhotel.config import Settings, setup_logging
from dhhotel.database import create_db_engine, init_db, unit_of_work
from dhhotel.errors import HotelError, NotFoundError, StoreError
from dhhotel.models.ontology import Room, RoomStatus, RoomType


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        settings = Settings(_env_file=None)
        assert settings.APP_NAME == "DHHotel"
        assert settings.DATABASE_URL.startswith("sqlite")
        assert settings.SQLITE_IMMEDIATE_TRANSACTIONS is True
        assert settings.LOG_LEVEL == "INFO"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://hotel@localhost/hotel")
        monkeypatch.setenv("DB_ECHO", "true")
        settings = Settings(_env_file=None)
        assert settings.DATABASE_URL == "postgresql://hotel@localhost/hotel"
        assert settings.DB_ECHO is True

    def test_setup_logging(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
        setup_logging("debug")
        assert calls["level"] == logging.DEBUG
        assert "%(levelname)s" in calls["format"]


class TestUnitOfWork:

    def _room(self, number="501"):
        return Room(
            room_number=number,
            type=RoomType.SINGLE,
            price_per_night=Decimal("80.00"),
            status=RoomStatus.AVAILABLE,
        )

    def test_commit_on_success(self, db_session):
        with unit_of_work(db_session):
            db_session.add(self._room())
        assert db_session.query(Room).count() == 1

    def test_rollback_on_business_error(self, db_session):
        with pytest.raises(NotFoundError):
            with unit_of_work(db_session):
                db_session.add(self._room())
                db_session.flush()
                raise NotFoundError("missing")
        assert db_session.query(Room).count() == 0

    def test_store_failure_wrapped(self, db_session):
        """唯一约束冲突被包装为 StoreError 且整体回滚"""
        with unit_of_work(db_session):
            db_session.add(self._room("601"))

        with pytest.raises(StoreError) as exc_info:
            with unit_of_work(db_session):
                db_session.add(self._room("602"))
                db_session.add(self._room("601"))
        assert not isinstance(exc_info.value, HotelError)
        assert db_session.query(Room).count() == 1


class TestEngineFactory:

    def test_sqlite_begins_immediate(self, db_engine):
        """SQLite 事务以 BEGIN IMMEDIATE 开始，写锁在事务开始时获取"""
        statements = []

        @event.listens_for(db_engine, "before_cursor_execute")
        def _capture(conn, cursor, statement, parameters, context, executemany):
            statements.append(statement)

        with db_engine.begin() as conn:
            conn.execute(text("SELECT 1"))
        assert statements[0] == "BEGIN IMMEDIATE"
        assert "SELECT 1" in statements

    def test_init_db_creates_tables(self):
        engine = create_db_engine("sqlite:///:memory:", poolclass=StaticPool)
        init_db(bind=engine)
        assert {"rooms", "clients", "reservations", "payments"} <= set(inspect(engine).get_table_names())
        engine.dispose()

    def test_missing_database_raises(self, tmp_path):
        engine = create_db_engine(f"sqlite:///{tmp_path}/missing/dir/hotel.db")
        with pytest.raises(OperationalError):
            engine.connect()
        engine.dispose()
