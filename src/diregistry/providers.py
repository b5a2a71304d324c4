from diregistry._internal.providers import AbstractProvider, Provider, ProviderAggregate

__all__ = ["AbstractProvider", "Provider", "ProviderAggregate"]
