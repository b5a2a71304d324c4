from diregistry._internal.arguments import Argument, ValueArgument
from diregistry._internal.definitions import Definition, DefinitionAggregate

__all__ = ["Argument", "Definition", "DefinitionAggregate", "ValueArgument"]
