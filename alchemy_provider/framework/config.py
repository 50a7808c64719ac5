"""Dotted-key configuration repository backed by OmegaConf."""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from omegaconf import DictConfig, ListConfig, OmegaConf

logger = logging.getLogger("alchemy-provider")

_MISSING = object()


class ConfigRepository:
    """Application configuration addressed by dotted keys.

    Each top-level key usually corresponds to one YAML file of the config
    directory, so ``database.connections.sqlite.driver`` reads the
    ``connections.sqlite.driver`` path of ``database.yaml``.
    """

    def __init__(self, items: Mapping[str, Any] | DictConfig | None = None):
        self._config: DictConfig = OmegaConf.create({}, flags={"allow_objects": True})
        if items:
            self._config.merge_with(items)

    @classmethod
    def from_directory(cls, config_dir: str | Path) -> "ConfigRepository":
        """Load every YAML file of a directory under a key named after the file.

        Args:
            config_dir: Directory containing ``*.yaml`` / ``*.yml`` files.

        Returns:
            Repository holding the loaded configuration.

        Raises:
            FileNotFoundError: If the directory does not exist.
            TypeError: If a file does not contain a mapping at its top level.
        """
        config_dir = Path(config_dir)
        if not config_dir.is_dir():
            raise FileNotFoundError(f"Config directory not found: {config_dir}")  # noqa: TRY003

        repository = cls()
        for path in sorted([*config_dir.glob("*.yaml"), *config_dir.glob("*.yml")]):
            loaded = OmegaConf.load(path)
            if not isinstance(loaded, DictConfig):
                raise TypeError(f"Expected a mapping in {path}, got {type(loaded).__name__}")  # noqa: TRY003
            repository.set(path.stem, loaded)
            logger.debug(f"Loaded configuration '{path.stem}' from {path}")
        return repository

    def has(self, key: str) -> bool:
        return OmegaConf.select(self._config, key, default=_MISSING) is not _MISSING

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value at a dotted key.

        Mappings and lists come back as plain ``dict`` / ``list`` with
        interpolations resolved.
        """
        value = OmegaConf.select(self._config, key, default=_MISSING)
        if value is _MISSING:
            return default
        if isinstance(value, (DictConfig, ListConfig)):
            return OmegaConf.to_container(value, resolve=True)
        return value

    def set(self, key: str, value: Any) -> None:
        OmegaConf.update(self._config, key, value, merge=False)

    def merge_defaults(self, key: str, defaults: Mapping[str, Any] | DictConfig) -> None:
        """Merge ``defaults`` under ``key`` without overriding values already set."""
        merged = OmegaConf.create(defaults, flags={"allow_objects": True})
        current = OmegaConf.select(self._config, key, default=None)
        if current is not None:
            merged.merge_with(current)
        self.set(key, merged)

    def all(self) -> dict[str, Any]:
        return OmegaConf.to_container(self._config, resolve=True)

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: str) -> bool:
        return self.has(key)
