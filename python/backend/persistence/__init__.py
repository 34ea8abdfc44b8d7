from backend.persistence.fs import atomic_write_bytes

__all__ = ["atomic_write_bytes"]
