"""
房间存储 - 引擎只需按 ID 读取
"""
from typing import Iterable, List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session
from dhhotel.models.ontology import Room


class RoomStore:
    """房间查询"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, room_id: Optional[int]) -> Optional[Room]:
        if room_id is None:
            return None
        return self.db.get(Room, room_id)

    def lock_statement(self, room_ids: Iterable[int]):
        """按 ID 升序加行锁的查询，固定加锁顺序避免死锁"""
        ids = sorted(set(room_ids))
        return (
            select(Room)
            .where(Room.id.in_(ids))
            .order_by(Room.id)
            .with_for_update()
        )

    def lock(self, *room_ids: Optional[int]) -> List[Room]:
        """
        锁定房间行，直到当前事务结束

        同一房间的预订创建/修改在此处串行。
        """
        ids = [room_id for room_id in room_ids if room_id is not None]
        if not ids:
            return []
        return list(self.db.execute(self.lock_statement(ids)).scalars().all())
