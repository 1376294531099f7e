"""Dependency injection container."""

import inspect
import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional, Type, TypeVar

from ..config import Config, ConfigManager
from ..core.interfaces import (
    ILLMService,
    IMediaRequestHandler,
    IRadarrService,
    ISessionStore,
    ISonarrService,
)
from ..utils import ConfigurationError

T = TypeVar("T")


class Container:
    """Dependency injection container using registry pattern."""

    def __init__(self, config_manager: Optional[ConfigManager] = None) -> None:
        """Initialize container.

        Args:
            config_manager: Configuration manager instance. If None, creates default.
        """
        self._services: Dict[Type, Any] = {}
        self._singletons: Dict[Type, Any] = {}
        self._config_manager = config_manager or ConfigManager()
        self._logger = logging.getLogger(__name__)

    def register_singleton(self, interface: Type[T], implementation: Type[Any]) -> None:
        """Register a singleton service.

        Args:
            interface: Interface type.
            implementation: Implementation type.
        """
        self._services[interface] = implementation
        self._logger.debug(
            f"Registered singleton: {interface.__name__} -> {implementation.__name__}"
        )

    def register_instance(self, interface: Type[T], instance: T) -> None:
        """Register a specific instance."""
        self._singletons[interface] = instance
        self._logger.debug(f"Registered instance: {interface.__name__}")

    def is_registered(self, interface: Type) -> bool:
        return interface in self._services or interface in self._singletons

    def get(self, interface: Type[T]) -> T:
        """Get service instance.

        Args:
            interface: Interface type to resolve.

        Returns:
            Service instance.

        Raises:
            ValueError: If service is not registered.
        """
        if interface in self._singletons:
            return self._singletons[interface]  # type: ignore

        if interface in self._services:
            implementation = self._services[interface]
            instance = self._create_instance(implementation)
            self._singletons[interface] = instance
            return instance  # type: ignore

        raise ValueError(f"Service not registered: {interface.__name__}")

    def _create_instance(self, implementation: Type[T]) -> T:
        """Create instance with constructor dependencies resolved by annotation."""
        sig = inspect.signature(implementation.__init__)
        kwargs = {}

        for param_name, param in sig.parameters.items():
            if param_name == "self":
                continue

            if param.annotation == Config:
                kwargs[param_name] = self.get_config()
            elif hasattr(param.annotation, "__origin__"):
                # Optional/generic parameters are left to their defaults
                continue
            elif self.is_registered(param.annotation):
                kwargs[param_name] = self.get(param.annotation)
            elif param.default is not inspect.Parameter.empty:
                continue
            else:
                self._logger.warning(
                    f"Cannot resolve dependency: {param_name} of type {param.annotation}"
                )

        return implementation(**kwargs)

    @lru_cache(maxsize=1)
    def get_config(self) -> Config:
        """Get configuration instance."""
        return self._config_manager.get_config()

    def configure_default_services(self) -> None:
        """Configure default service registrations."""
        from ..core.services import (
            AnthropicLLMService,
            InMemorySessionStore,
            OpenAILLMService,
            RadarrService,
            RequestParser,
            SonarrService,
            TopicContinuityGate,
        )
        from ..core.services.request_handler import MediaRequestHandler
        from ..core.strategies import (
            DownloadStatusStrategy,
            MediaBrowsingStrategy,
            MovieDeleteStrategy,
            MovieDownloadStrategy,
            SeriesDeleteStrategy,
            SeriesDownloadStrategy,
        )

        config = self.get_config()

        if config.llm.provider == "openai":
            self.register_singleton(ILLMService, OpenAILLMService)  # type: ignore
        elif config.llm.provider == "anthropic":
            self.register_singleton(ILLMService, AnthropicLLMService)  # type: ignore
        else:
            raise ConfigurationError(f"Unsupported LLM provider: {config.llm.provider}")

        self.register_singleton(IRadarrService, RadarrService)  # type: ignore
        self.register_singleton(ISonarrService, SonarrService)  # type: ignore
        self.register_singleton(ISessionStore, InMemorySessionStore)  # type: ignore
        self.register_singleton(RequestParser, RequestParser)
        self.register_singleton(TopicContinuityGate, TopicContinuityGate)

        for strategy in (
            MovieDownloadStrategy,
            SeriesDownloadStrategy,
            MovieDeleteStrategy,
            SeriesDeleteStrategy,
            MediaBrowsingStrategy,
            DownloadStatusStrategy,
        ):
            self.register_singleton(strategy, strategy)

        self.register_singleton(IMediaRequestHandler, MediaRequestHandler)  # type: ignore

        self._logger.info("Default services configured")

    async def close(self) -> None:
        """Close services that hold network sessions."""
        closed: List[str] = []
        for instance in list(self._singletons.values()):
            close = getattr(instance, "close", None)
            if close is not None and inspect.iscoroutinefunction(close):
                await close()
                closed.append(type(instance).__name__)
        if closed:
            self._logger.debug(f"Closed services: {', '.join(closed)}")

    def reset(self) -> None:
        """Reset container state."""
        self._services.clear()
        self._singletons.clear()
        self.get_config.cache_clear()
        self._logger.debug("Container reset")
