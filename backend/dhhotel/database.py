"""
数据库配置 - SQLAlchemy 持久化层
每个业务操作在一个事务（unit_of_work）内完成：读取当前状态、加锁、写回
"""
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from dhhotel.config import settings
from dhhotel.errors import StoreError

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_db_engine(url: str, echo: bool = False,
                     immediate_transactions: bool = True, **kwargs) -> Engine:
    """
    创建数据库引擎

    SQLite 会忽略 SELECT ... FOR UPDATE，因此对 SQLite 关闭驱动自带的
    事务管理，改为每个事务以 BEGIN IMMEDIATE 开始，写事务在库级别串行。
    """
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        kwargs["connect_args"] = connect_args

    engine = create_engine(url, echo=echo, **kwargs)

    if is_sqlite and immediate_transactions:
        @event.listens_for(engine, "connect")
        def _disable_driver_begin(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(engine, "begin")
        def _begin_immediate(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


engine = create_db_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO,
    immediate_transactions=settings.SQLITE_IMMEDIATE_TRANSACTIONS,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    """获取数据库会话"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = None) -> None:
    """初始化数据库表"""
    from dhhotel.models import ontology  # noqa
    Base.metadata.create_all(bind=bind or engine)


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """
    事务边界：成功提交，任何异常回滚

    SQLAlchemy 异常包装为 StoreError 抛出，业务错误原样抛出。
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Store failure, transaction rolled back: {e}")
        raise StoreError(str(e)) from e
    except Exception:
        db.rollback()
        raise
