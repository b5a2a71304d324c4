from diregistry._internal.autowire import AutowireResolver
from diregistry._internal.delegates import Delegate, ParameterResolver

__all__ = ["AutowireResolver", "Delegate", "ParameterResolver"]
