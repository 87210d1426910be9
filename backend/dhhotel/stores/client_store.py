"""
客户存储
"""
from typing import Optional
from sqlalchemy.orm import Session
from dhhotel.models.ontology import Client


class ClientStore:
    """客户查询"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, client_id: int) -> Optional[Client]:
        return self.db.get(Client, client_id)

    def get_by_user_id(self, user_id: int) -> Optional[Client]:
        """根据账户ID获取客户"""
        return self.db.query(Client).filter(Client.user_id == user_id).first()
