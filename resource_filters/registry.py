from __future__ import annotations

import logging
from importlib import import_module
from typing import Dict, Iterable, Optional

from resource_filters.resources import Resource

log = logging.getLogger(__name__)


_REGISTRY: Dict[str, Resource] = {}


def register(resource_cls: type[Resource]) -> type[Resource]:
    """Register a :class:`Resource` subclass under its uri key.

    Usable as a class decorator::

        @register
        class ProductResource(Resource):
            model = Product
    """
    if getattr(resource_cls, "model", None) is None:
        raise ValueError(f"Resource {resource_cls.__name__} must declare a model")
    uri_key = resource_cls.get_uri_key()
    if uri_key in _REGISTRY:
        raise ValueError(f"Duplicate resource uri_key: {uri_key}")
    _REGISTRY[uri_key] = resource_cls()
    log.debug("Registered resource %s as '%s'", resource_cls.__name__, uri_key)
    return resource_cls


def unregister(uri_key: str) -> None:
    _REGISTRY.pop(uri_key, None)


def get_resource(uri_key: str) -> Optional[Resource]:
    return _REGISTRY.get(uri_key)


def get_registry() -> Dict[str, Resource]:
    return dict(_REGISTRY)


def load_resources(entries: Iterable[str]) -> None:
    """Import ``"module"`` entries and call ``"module:callable"`` entries."""
    for entry in entries:
        try:
            module_path, callable_name = entry.split(":", 1)
        except ValueError:
            import_module(entry)
        else:
            module = import_module(module_path)
            registrar = getattr(module, callable_name)
            registrar()
