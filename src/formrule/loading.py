"""Resolve rule classes and callbacks from dotted import paths."""

import importlib
from typing import Any


def import_object(path: str) -> Any:
    """Import ``package.module:attr`` or ``package.module.attr``.

    Raises:
        ImportError: If the module cannot be imported or has no such attribute
    """
    if ":" in path:
        module_name, _, attr = path.partition(":")
    else:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        raise ImportError(f"'{path}' is not a dotted import path")

    module = importlib.import_module(module_name)
    target: Any = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise ImportError(f"'{module_name}' has no attribute '{attr}'") from None
    return target
