"""Provide insights about Python objects."""

import inspect
from typing import Any


def get_qualname(obj: Any) -> str:
    """Get the qualified name of the given object.

    Will return the name of the object and the
    name of the module and class it belongs to.

    For functions or methods, this will return
    something like `module.class.method` or
    `module.function`. Builtins are reported by their
    plain name, as everyone knows where ``max`` comes from.

    >>> class TestClass:
    ...   def method(self, arg):
    ...     pass
    >>> get_qualname(TestClass.method)
    'tablesubset.utils.inspect.TestClass.method'
    >>> get_qualname(max)
    'max'
    >>> get_qualname(lambda values: any(values))
    'tablesubset.utils.inspect.<lambda>'
    """
    if inspect.isbuiltin(obj) and getattr(obj, "__module__", None) == "builtins":
        return obj.__name__

    module = inspect.getmodule(obj)
    module_name = module.__name__ if module is not None else "<unknown>"
    if inspect.ismethod(obj):
        class_name = obj.__self__.__class__.__name__
        return f"{module_name}.{class_name}.{obj.__name__}"
    elif inspect.isfunction(obj) or inspect.isbuiltin(obj):
        if obj.__name__ == "<lambda>":
            return f"{module_name}.<lambda>"
        return f"{module_name}.{obj.__qualname__}"
    elif inspect.isclass(obj):
        return f"{module_name}.{obj.__name__}"
    elif inspect.ismodule(obj):
        return obj.__name__
    return f"{module_name}.{obj.__class__.__name__}"
