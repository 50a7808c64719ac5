"""Service provider base class."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from omegaconf import DictConfig, OmegaConf

if TYPE_CHECKING:
    from alchemy_provider.framework.application import Application

logger = logging.getLogger("alchemy-provider")


class ServiceProvider(ABC):
    """Register services into an application and boot them.

    ``register`` only binds things into the container. ``boot`` runs once every
    provider is registered, so it may resolve services other providers bind.
    """

    defer: ClassVar[bool] = False

    # provider class -> group -> {source: destination}
    _publishes: ClassVar[dict[type, dict[str | None, dict[Path, Path]]]] = {}

    def __init__(self, app: "Application"):
        self.app = app

    @abstractmethod
    def register(self) -> None: ...

    def boot(self) -> None:  # noqa: B027
        pass

    def provides(self) -> list[Any]:
        """Services this provider binds, used to load deferred providers."""
        return []

    def merge_config_from(self, path: str | Path, key: str) -> None:
        """Merge a YAML defaults file under ``key``; values the application set win."""
        defaults = OmegaConf.load(path)
        if not isinstance(defaults, DictConfig):
            raise TypeError(f"Expected a mapping in {path}, got {type(defaults).__name__}")  # noqa: TRY003
        self.app.config.merge_defaults(key, defaults)

    def publishes(self, paths: Mapping[str | Path, str | Path], group: str | None = None) -> None:
        """Declare files the application may copy into its own tree."""
        groups = ServiceProvider._publishes.setdefault(type(self), {})
        groups.setdefault(group, {}).update({Path(src): Path(dst) for src, dst in paths.items()})

    @classmethod
    def paths_to_publish(cls, provider: type | None = None, group: str | None = None) -> dict[Path, Path]:
        """Return ``{source: destination}`` for one provider and/or group, or for everything."""
        providers = [provider] if provider is not None else list(ServiceProvider._publishes)
        paths: dict[Path, Path] = {}
        for provider_class in providers:
            for group_name, group_paths in ServiceProvider._publishes.get(provider_class, {}).items():
                if group is None or group_name == group:
                    paths.update(group_paths)
        return paths

    def commands(self, *commands: Any) -> None:
        """Register CLI sub-applications contributed by this provider."""
        self.app.register_commands(commands)
