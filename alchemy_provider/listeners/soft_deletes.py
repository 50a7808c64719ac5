import logging

from alchemy_provider.orm.events import OnFlushEventArgs
from alchemy_provider.orm.mixins import SoftDeletes, utcnow

logger = logging.getLogger("alchemy-provider")


class SoftDeletableListener:
    """Turn deletions of ``SoftDeletes`` entities into ``deleted_at`` updates.

    An entity whose ``deleted_at`` is already set is deleted for real.
    """

    def on_flush(self, args: OnFlushEventArgs) -> None:
        session = args.session
        for entity in args.scheduled_deletions:
            if not isinstance(entity, SoftDeletes) or entity.deleted_at is not None:
                continue
            entity.deleted_at = utcnow()
            # re-adding a persistent object cancels its pending deletion
            session.add(entity)
            logger.debug(f"Soft deleted {entity!r}")
