from alchemy_provider.listeners.soft_deletes import SoftDeletableListener
from alchemy_provider.listeners.table_prefix import TablePrefix

__all__ = ["SoftDeletableListener", "TablePrefix"]
