"""Registry for auto-discovering and managing report sources."""

from typing import Type
from .base import BaseDataSource
from core.container import Container


class SourceRegistry:
    """Registry for report source classes."""

    def __init__(self):
        self._sources: dict[str, Type[BaseDataSource]] = {}

    def register(self, source_class: Type[BaseDataSource]) -> Type[BaseDataSource]:
        """Register a source class. Can be used as a decorator.

        Args:
            source_class: The source class to register.

        Returns:
            The same class (for decorator usage).

        Raises:
            ValueError: If another class already uses the same name.
        """
        existing = self._sources.get(source_class.name)
        if existing is not None and existing is not source_class:
            raise ValueError(
                f"Report source name '{source_class.name}' is already used by {existing.__name__}"
            )
        self._sources[source_class.name] = source_class
        return source_class

    def __contains__(self, name: str) -> bool:
        return name in self._sources

    def names(self) -> list[str]:
        """Registered source names, sorted."""
        return sorted(self._sources)

    def get_all(self) -> dict[str, Type[BaseDataSource]]:
        """Get all registered source classes."""
        return self._sources.copy()

    def create_source(self, name: str, container: Container) -> BaseDataSource:
        """Create an instance of a source.

        Args:
            name: Name of the source.
            container: Dependency injection container.

        Returns:
            Instantiated source.

        Raises:
            KeyError: If source name is not registered.
        """
        source_class = self._sources.get(name)
        if source_class is None:
            raise KeyError(f"Report source '{name}' not found in registry")
        return source_class(container)

    def create_enabled_sources(self, container: Container) -> list[BaseDataSource]:
        """Create instances of all enabled sources.

        Args:
            container: Dependency injection container.

        Returns:
            List of instantiated enabled sources.
        """
        enabled_names = container.get_config().get_enabled_sources()
        sources = []

        for name in enabled_names:
            if name in self._sources:
                sources.append(self.create_source(name, container))

        return sources


# Global registry instance
_registry = SourceRegistry()


def get_registry() -> SourceRegistry:
    """Get the global source registry."""
    return _registry


def register(source_class: Type[BaseDataSource]) -> Type[BaseDataSource]:
    """Decorator to register a source class."""
    return _registry.register(source_class)
