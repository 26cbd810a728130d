"""Model class lookup by wire name.

Decoding a `__model` tag needs the class it names. Every Model subclass
registers itself here when it is defined. The table only ever holds
classes; store handles are always injected, never looked up globally.
"""

from __future__ import annotations

import logging

from doc_query.core.exceptions import UnknownModelError

logger = logging.getLogger(__name__)

_MODELS: dict[str, type] = {}


def register_model(model_class: type) -> None:
    """Register `model_class` under its `__model_name__`.

    A later class with the same name replaces the earlier one.
    """
    name: str = model_class.__model_name__  # type: ignore[attr-defined]
    existing = _MODELS.get(name)
    if existing is not None and existing is not model_class:
        logger.debug(
            "Model name '%s' rebound from %s to %s",
            name,
            existing.__module__,
            model_class.__module__,
        )
    _MODELS[name] = model_class


def lookup_model(name: str) -> type:
    """Return the model class registered as `name`.

    Raises:
        UnknownModelError: If nothing is registered under that name.
    """
    try:
        return _MODELS[name]
    except KeyError:
        raise UnknownModelError(name) from None
