from __future__ import annotations


class DIRegistryError(Exception):
    """Represent a base class for all diregistry-specific failures.

    Catch this type when you want to handle any container error path without
    matching each concrete exception class individually.
    """


class DIRegistryNotFoundError(DIRegistryError):
    """Signal that an identifier cannot be located by any resolution source.

    Raised by ``Container.get``/``Container.resolve`` when the identifier is
    absent from the definitions, no provider claims it and no delegate has it.
    Also raised by ``Container.modify`` for identifiers that were never added
    explicitly, by ``ParameterResolver.get`` for unknown keys, by
    ``AutowireResolver.get`` for names that are not loadable classes, and by
    dynamic calls whose signature no longer locates a target.

    Treat this error as "try a different source": it never indicates a broken
    configuration on its own.
    """


class DIRegistryContainerError(DIRegistryError):
    """Signal a configuration or contract violation inside the container.

    Raised when a provider does not register what it claims to provide, when
    an unknown signature is injected, when a dynamic call name is unbound, when
    a class cannot be instantiated (for example an abstract class), and when a
    dependency cycle is detected.

    Treat this error as misconfiguration. Retrying the same call will fail the
    same way.
    """


class DIRegistryProviderLiedError(DIRegistryContainerError):
    """Signal that a provider claimed an identifier but did not register it.

    ``Provider.can_provide`` returned ``True`` for the identifier, the
    provider's ``register()`` ran, and the identifier is still missing from the
    definitions afterwards.

    Definitions the provider did register before the failure stay registered.
    """


class DIRegistryInvalidSignatureError(DIRegistryContainerError):
    """Signal use of a signature token that the container never issued.

    Raised by ``Container.inject``, ``Container.inject_instance`` and
    ``Container.inject_method``. Tokens are returned by ``add_delegate`` and
    ``add_provider`` when called with ``sign=True``.
    """


class DIRegistryNotInjectedError(DIRegistryContainerError, AttributeError):
    """Signal a dynamic call to a name that has no injection binding.

    Raised by ``Container.invoke`` and by attribute access on the container for
    public names that were never bound with ``inject``. The class also derives
    from ``AttributeError`` so ``hasattr``/``getattr`` with a default keep
    working on container instances.
    """


class DIRegistryCircularDependencyError(DIRegistryContainerError):
    """Signal that resolving an identifier re-entered itself.

    The message lists the identifiers on the resolution stack, outermost
    first, ending with the identifier that closed the cycle.

    Disable detection with ``Container(detect_cycles=False)`` to fall back to
    plain recursion.
    """

    def __init__(self, chain: tuple[str, ...]) -> None:
        self.chain = chain
        super().__init__(f"Circular dependency detected: {' -> '.join(chain)}")


class DIRegistryInvalidArgumentError(DIRegistryError):
    """Signal an argument the container cannot turn into a value.

    Raised when a definition argument is neither an identifier nor an
    ``Argument`` object, when an identifier is empty or not a string/class,
    and when a registered delegate or provider does not implement the expected
    interface.
    """


class DIRegistryUnresolvableParameterError(DIRegistryInvalidArgumentError):
    """Signal that autowiring found no value for a constructor parameter.

    None of the fallback rules applied: no override by name, no container
    registration or instantiable class for its annotation, no ``None`` for an
    optional annotation and no default value.

    Typical fixes include registering the parameter's type, giving the
    parameter a default, or passing ``overrides`` to ``AutowireResolver.get``.
    """

    def __init__(self, owner: str, parameter: str) -> None:
        self.owner = owner
        self.parameter = parameter
        super().__init__(f"Cannot resolve the dependency '{parameter}' of {owner}")
