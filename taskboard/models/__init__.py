from .storage_entry import StorageEntry

# Export all models for easy importing
__all__ = ["StorageEntry"]
