"""Screening strategy registry.

Usage:
    @register_strategy("my_screen")
    class MyScreen:
        ...

    strategy = create_strategy("my_screen", threshold=25)
    names = list_strategies()
"""

import inspect
import logging
from typing import Any

from equity_signals.errors import UnknownStrategyError

logger = logging.getLogger(__name__)

# strategy_name -> strategy_class
_REGISTRY: dict[str, type] = {}


def register_strategy(name: str):
    """Decorator to register a screening strategy class under ``name``.

    Raises:
        ValueError: If a strategy with the same name is already registered.
    """

    def decorator(cls):
        if name in _REGISTRY:
            raise ValueError(
                f"Strategy '{name}' is already registered by {_REGISTRY[name].__name__}"
            )
        _REGISTRY[name] = cls
        logger.debug("Registered strategy: %s -> %s", name, cls.__name__)
        return cls

    return decorator


def get_strategy_class(name: str) -> type:
    """Get the strategy class registered under ``name``.

    Raises:
        UnknownStrategyError: If no strategy is registered under the name.
    """
    cls = _REGISTRY.get(name)
    if cls is None:
        raise UnknownStrategyError(name, list_strategies())
    return cls


def create_strategy(name: str, **kwargs: Any):
    """Instantiate the strategy registered under ``name`` with ``kwargs``.

    Raises:
        UnknownStrategyError: If no strategy is registered under the name.
    """
    return get_strategy_class(name)(**kwargs)


def strategy_parameters(name: str) -> set[str] | None:
    """Keyword arguments the strategy registered under ``name`` accepts.

    Returns ``None`` when the constructor takes arbitrary ``**kwargs``.

    Raises:
        UnknownStrategyError: If no strategy is registered under the name.
    """
    init = get_strategy_class(name).__init__
    if init is object.__init__:
        return set()

    accepted = set()
    for param in list(inspect.signature(init).parameters.values())[1:]:
        if param.kind is inspect.Parameter.VAR_KEYWORD:
            return None
        if param.kind in (
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.KEYWORD_ONLY,
        ):
            accepted.add(param.name)
    return accepted


def list_strategies() -> list[str]:
    """Return a sorted list of registered strategy names."""
    return sorted(_REGISTRY.keys())
