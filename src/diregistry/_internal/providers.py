from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

from typing_extensions import Self

from diregistry._internal.arguments import ContainerAwareMixin
from diregistry._internal.type_checks import qualified_name
from diregistry.exceptions import DIRegistryContainerError, DIRegistryInvalidArgumentError

if TYPE_CHECKING:
    from diregistry._internal.container import Container

logger = logging.getLogger(__name__)


@runtime_checkable
class Provider(Protocol):
    """A unit that lazily registers a known set of definitions.

    The container calls ``register()`` the first time any identifier the
    provider claims through ``can_provide`` is looked up, and never again.
    """

    @property
    def identifier(self) -> str: ...

    def can_provide(self, identifier: str) -> bool: ...

    def register(self) -> None: ...

    def set_container(self, container: Container) -> Self: ...


class AbstractProvider(ContainerAwareMixin, ABC):
    """Base class for service providers.

    Subclasses implement ``register`` and either list the identifiers they
    provide in ``provides`` or override ``can_provide``.

    .. code-block:: python

        class MailProvider(AbstractProvider):
            provides = ("mailer", "mail.transport")

            def register(self) -> None:
                container = self.get_container()
                container.add("mail.transport", SmtpTransport)
                container.add_shared("mailer", Mailer).add_argument("mail.transport")

    """

    provides: ClassVar[tuple[str, ...]] = ()

    _identifier: str | None = None

    @property
    def identifier(self) -> str:
        if self._identifier is None:
            self._identifier = qualified_name(type(self))
        return self._identifier

    @identifier.setter
    def identifier(self, value: str) -> None:
        self._identifier = value

    def can_provide(self, identifier: str) -> bool:
        return identifier in self.provides

    @abstractmethod
    def register(self) -> None:
        """Add a definition to the container for every identifier this provider claims."""


class ProviderAggregate:
    """Ordered, append-only collection of providers with run-once registration.

    Providers are de-duplicated by ``identifier``. The iteration order is the
    insertion order, and positions never change once assigned.
    """

    def __init__(self) -> None:
        self._providers: list[Provider] = []
        self._registered: set[str] = set()
        self._container: Container | None = None

    def set_container(self, container: Container) -> Self:
        self._container = container
        return self

    def add(self, provider: Provider) -> Self:
        """Append ``provider`` unless one with the same identifier is held.

        Raises:
            DIRegistryInvalidArgumentError: If ``provider`` does not implement
                the provider interface.

        """
        if not isinstance(provider, Provider):
            msg = f"Expected a service provider, got {type(provider).__qualname__}."
            raise DIRegistryInvalidArgumentError(msg)

        if self.exists(provider):
            logger.debug("Provider %s already added, skipping", provider.identifier)
            return self

        if self._container is not None:
            provider.set_container(self._container)
        self._providers.append(provider)
        return self

    def can_provide(self, identifier: str) -> bool:
        return any(provider.can_provide(identifier) for provider in self._providers)

    def count_providers(self) -> int:
        return len(self._providers)

    def exists(self, provider: Provider) -> bool:
        return self.index_of(provider) is not None

    def index_of(self, provider: Provider) -> int | None:
        """Return the position of the held provider sharing ``provider``'s identifier."""
        for index, held in enumerate(self._providers):
            if held.identifier == provider.identifier:
                return index
        return None

    def is_registered(self, provider: Provider) -> bool:
        return provider.identifier in self._registered

    def register(self, identifier: str) -> None:
        """Run ``register()`` on every pending provider that claims ``identifier``.

        Raises:
            DIRegistryContainerError: If no provider claims ``identifier``.

        """
        if not self.can_provide(identifier):
            msg = f"Service ({identifier}) is not provided by any provider."
            raise DIRegistryContainerError(msg)

        for provider in self._providers:
            if provider.identifier in self._registered:
                continue
            if provider.can_provide(identifier):
                logger.debug("Registering provider %s for %s", provider.identifier, identifier)
                self._registered.add(provider.identifier)
                provider.register()

    def __iter__(self) -> Iterator[Provider]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)
