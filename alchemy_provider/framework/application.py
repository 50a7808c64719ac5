"""Application container with configuration and a provider lifecycle."""

import logging
from pathlib import Path
from typing import Any

from hydra.utils import get_class

from alchemy_provider.framework.auth import AuthManager
from alchemy_provider.framework.config import ConfigRepository
from alchemy_provider.framework.container import Container
from alchemy_provider.framework.contracts import Hasher
from alchemy_provider.framework.hashing import ScryptHasher
from alchemy_provider.framework.provider import ServiceProvider

logger = logging.getLogger("alchemy-provider")


class Application(Container):
    """Container that owns the configuration and the registered service providers.

    Args:
        base_path: Application root. Defaults to the working directory.
        config: Configuration repository. Defaults to an empty one.
        config_dir: Directory config files are read from and published to.
            Defaults to ``<base_path>/config``.
    """

    def __init__(
        self,
        base_path: str | Path | None = None,
        config: ConfigRepository | None = None,
        config_dir: str | Path | None = None,
    ):
        super().__init__()
        self.base_path = Path(base_path) if base_path is not None else Path.cwd()
        self.config_dir = Path(config_dir) if config_dir is not None else self.base_path / "config"
        self.config = config if config is not None else ConfigRepository()
        self.commands: list[Any] = []
        self._providers: list[ServiceProvider] = []
        self._deferred: dict[Any, ServiceProvider] = {}
        self._booted = False
        self._register_base_bindings()

    @classmethod
    def from_config_dir(cls, config_dir: str | Path, base_path: str | Path | None = None) -> "Application":
        """Load the config directory and register the providers listed in ``app.providers``."""
        app = cls(base_path, ConfigRepository.from_directory(config_dir), config_dir)
        for provider in app.config.get("app.providers", []) or []:
            app.register(get_class(provider))
        return app

    def _register_base_bindings(self) -> None:
        self.instance("app", self)
        self.instance(Container, self)
        self.instance(Application, self)
        self.instance(ConfigRepository, self.config)
        self.alias(ConfigRepository, "config")
        self.singleton(Hasher, lambda app: ScryptHasher())
        self.alias(Hasher, "hash")
        self.singleton(AuthManager, lambda app: AuthManager(app))
        self.alias(AuthManager, "auth")

    @property
    def is_booted(self) -> bool:
        return self._booted

    @property
    def providers(self) -> list[ServiceProvider]:
        return list(self._providers)

    def config_path(self, name: str = "") -> Path:
        return self.config_dir / name if name else self.config_dir

    def running_in_debug(self) -> bool:
        return bool(self.config.get("app.debug", False))

    def get_provider(self, provider: type[ServiceProvider]) -> ServiceProvider | None:
        for registered in [*self._providers, *self._deferred.values()]:
            if type(registered) is provider:
                return registered
        return None

    def register(self, provider: ServiceProvider | type[ServiceProvider]) -> ServiceProvider:
        """Register a provider once; boot it immediately if the application already booted."""
        provider_class = provider if isinstance(provider, type) else type(provider)
        existing = self.get_provider(provider_class)
        if existing is not None:
            return existing

        if isinstance(provider, type):
            provider = provider(self)

        if provider.defer:
            for service in provider.provides():
                self._deferred[service] = provider
            logger.debug(f"Deferred provider {provider_class.__name__} until one of its services is requested")
            return provider

        provider.register()
        self._providers.append(provider)
        logger.debug(f"Registered provider {provider_class.__name__}")
        if self._booted:
            provider.boot()
        return provider

    def boot(self) -> None:
        if self._booted:
            return
        for provider in self._providers:
            provider.boot()
        self._booted = True

    def register_commands(self, commands: Any) -> None:
        self.commands.extend(command for command in commands if command not in self.commands)

    def make(self, abstract: Any) -> Any:
        key = self.get_alias(abstract)
        if key in self._deferred:
            self._load_deferred_provider(key)
        return super().make(abstract)

    def _load_deferred_provider(self, service: Any) -> None:
        provider = self._deferred[service]
        for key in [key for key, value in self._deferred.items() if value is provider]:
            del self._deferred[key]
        provider.register()
        self._providers.append(provider)
        logger.debug(f"Loaded deferred provider {type(provider).__name__} for '{service}'")
        if self._booted:
            provider.boot()
