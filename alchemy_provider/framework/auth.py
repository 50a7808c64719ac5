"""Authentication manager with pluggable user-provider drivers."""

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from typing_extensions import Self

from alchemy_provider.exceptions import UnsupportedAuthDriverError
from alchemy_provider.framework.contracts import Authenticatable, UserProvider

if TYPE_CHECKING:
    from alchemy_provider.framework.application import Application

logger = logging.getLogger("alchemy-provider")

UserProviderCreator = Callable[["Application"], UserProvider]


class AuthManager:
    """Create user providers by driver name.

    Drivers are added with :meth:`extend`; the driver used when none is
    given is read from the ``auth.driver`` configuration key.
    """

    def __init__(self, app: "Application"):
        self.app = app
        self._creators: dict[str, UserProviderCreator] = {}

    def extend(self, driver: str, creator: UserProviderCreator) -> Self:
        self._creators[driver] = creator
        logger.debug(f"Registered auth user provider driver '{driver}'")
        return self

    @property
    def drivers(self) -> list[str]:
        return list(self._creators)

    def create_user_provider(self, driver: str | None = None) -> UserProvider:
        """Build the user provider of a driver.

        Raises:
            UnsupportedAuthDriverError: If the driver was never registered.
        """
        driver = driver or self.app.config.get("auth.driver")
        creator = self._creators.get(driver)
        if creator is None:
            raise UnsupportedAuthDriverError(driver)
        return creator(self.app)

    def attempt(self, credentials: Mapping[str, Any], driver: str | None = None) -> Authenticatable | None:
        """Return the user matching ``credentials`` if the password checks out."""
        provider = self.create_user_provider(driver)
        user = provider.retrieve_by_credentials(credentials)
        if user is None or not provider.validate_credentials(user, credentials):
            return None
        return user
