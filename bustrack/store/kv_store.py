import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bustrack.exceptions import StoreError
from bustrack.models import KVEntry

logger = logging.getLogger(__name__)

class KeyValueStore:
    """Generic key-value storage on top of the kv_store table.
    
    Values are JSON documents. Only exact-key lookups and prefix scans are
    supported. Every write method commits its own transaction, so `mset`
    and `mdelete` are all-or-nothing for the keys they touch.
    """
    
    def __init__(self, db: Session):
        self.db = db
    
    def get(self, key: str) -> Optional[Any]:
        """Get value by key, None when absent"""
        try:
            entry = self.db.get(KVEntry, key)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to read key {key}", str(e)) from e
        return entry.value if entry else None
    
    def mget(self, keys: List[str]) -> List[Optional[Any]]:
        """Get values for several keys, preserving the order of `keys`"""
        if not keys:
            return []
        try:
            entries = self.db.query(KVEntry).filter(KVEntry.key.in_(keys)).all()
        except SQLAlchemyError as e:
            raise StoreError("Failed to read keys", str(e)) from e
        by_key = {entry.key: entry.value for entry in entries}
        return [by_key.get(key) for key in keys]
    
    def get_by_prefix(self, prefix: str) -> Dict[str, Any]:
        """Get every key starting with `prefix`"""
        try:
            entries = (
                self.db.query(KVEntry)
                .filter(KVEntry.key.startswith(prefix, autoescape=True))
                .order_by(KVEntry.key)
                .all()
            )
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to scan prefix {prefix}", str(e)) from e
        return {entry.key: entry.value for entry in entries}
    
    def set(self, key: str, value: Any):
        self.mset({key: value})
    
    def mset(self, items: Dict[str, Any]):
        """Write several keys in a single transaction"""
        try:
            for key, value in items.items():
                entry = self.db.get(KVEntry, key)
                if entry is None:
                    self.db.add(KVEntry(key=key, value=value))
                else:
                    entry.value = value
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Write of %d key(s) rolled back", len(items))
            raise StoreError("Failed to write to store", str(e)) from e
    
    def delete(self, key: str):
        self.mdelete([key])
    
    def mdelete(self, keys: List[str]):
        """Delete several keys in a single transaction"""
        try:
            self.db.query(KVEntry).filter(KVEntry.key.in_(keys)).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Delete of %d key(s) rolled back", len(keys))
            raise StoreError("Failed to delete from store", str(e)) from e
