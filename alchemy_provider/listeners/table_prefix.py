import logging

from alchemy_provider.orm.events import LoadClassMetadataEventArgs

logger = logging.getLogger("alchemy-provider")


class TablePrefix:
    """Prepend the connection's table prefix to every entity table.

    Classes that share their parent's table through single table
    inheritance are left alone.
    """

    def __init__(self, prefix: str):
        self.prefix = str(prefix)

    def load_class_metadata(self, args: LoadClassMetadataEventArgs) -> None:
        metadata = args.class_metadata
        if metadata.table_name is None:
            return
        metadata.table_name = f"{self.prefix}{metadata.table_name}"
        logger.debug(f"Prefixed table of {metadata.name}: '{metadata.table_name}'")
