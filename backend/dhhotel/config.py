"""
应用配置
从环境变量（或 .env 文件）读取配置
"""
import logging
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """应用设置"""

    # 应用基础配置
    APP_NAME: str = "DHHotel"
    DEBUG: bool = False

    # 数据库配置
    DATABASE_URL: str = "sqlite:///./dhhotel.db"
    DB_ECHO: bool = False

    # SQLite 不支持 SELECT ... FOR UPDATE，事务以 BEGIN IMMEDIATE 开始以串行化写入
    SQLITE_IMMEDIATE_TRANSACTIONS: bool = True

    # 日志配置
    LOG_LEVEL: str = "INFO"

    model_config = ConfigDict(env_file=".env", case_sensitive=True)


def setup_logging(level: str = None) -> None:
    """配置日志输出"""
    level = level or settings.LOG_LEVEL
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


# 全局设置实例
settings = Settings()
