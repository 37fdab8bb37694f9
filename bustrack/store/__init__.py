from .kv_store import KeyValueStore

__all__ = ["KeyValueStore"]
