import logging
from collections.abc import Mapping
from typing import Any

from hydra.utils import get_class

from alchemy_provider.framework.contracts import Authenticatable, Hasher
from alchemy_provider.orm.entity_manager import EntityManager
from alchemy_provider.orm.repository import EntityRepository

logger = logging.getLogger("alchemy-provider")


class EntityUserProvider:
    """Retrieve and validate users stored as entities.

    Args:
        hasher: Checks plain passwords against stored hashes.
        entity_manager: Entity manager holding the user entity.
        entity_class: User entity class, or its dotted path.
    """

    def __init__(self, hasher: Hasher, entity_manager: EntityManager, entity_class: type | str):
        self.hasher = hasher
        self.entity_manager = entity_manager
        self.entity_class = get_class(entity_class) if isinstance(entity_class, str) else entity_class

    @property
    def repository(self) -> EntityRepository:
        return self.entity_manager.get_repository(self.entity_class)

    def _prototype(self) -> Authenticatable:
        # field names come from the entity's own accessors
        return self.entity_class.__new__(self.entity_class)

    def retrieve_by_id(self, identifier: Any) -> Authenticatable | None:
        return self.repository.find(identifier)

    def retrieve_by_token(self, identifier: Any, token: str) -> Authenticatable | None:
        prototype = self._prototype()
        return self.repository.find_one_by(
            {prototype.get_auth_identifier_name(): identifier, prototype.get_remember_token_name(): token}
        )

    def update_remember_token(self, user: Authenticatable, token: str) -> None:
        user.set_remember_token(token)
        self.entity_manager.persist(user)
        self.entity_manager.flush()

    def retrieve_by_credentials(self, credentials: Mapping[str, Any]) -> Authenticatable | None:
        criteria = {key: value for key, value in credentials.items() if "password" not in key}
        if not criteria:
            return None
        return self.repository.find_one_by(criteria)

    def validate_credentials(self, user: Authenticatable, credentials: Mapping[str, Any]) -> bool:
        return self.hasher.check(credentials.get("password", ""), user.get_auth_password())
