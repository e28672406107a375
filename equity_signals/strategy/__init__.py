"""Strategy screener.

Public API:
- screen_by_strategy: Run a named screen across a universe
- build_snapshot / build_snapshots: Prepare screener input from price history
- register_strategy: Decorator to register a screen class
- create_strategy / get_strategy_class / list_strategies / strategy_parameters:
  Registry lookups

Importing this package registers the built-in screens.
"""

from equity_signals.strategy.protocol import (
    InstrumentSnapshot,
    ScreenMatch,
    ScreenResult,
    ScreenStrategy,
)
from equity_signals.strategy.registry import (
    create_strategy,
    get_strategy_class,
    list_strategies,
    register_strategy,
    strategy_parameters,
)
from equity_signals.strategy.screener import (
    build_snapshot,
    build_snapshots,
    screen_by_strategy,
)

# Import built-in screens to trigger registration
import equity_signals.strategy.screens  # noqa: F401,E402

__all__ = [
    "InstrumentSnapshot",
    "ScreenMatch",
    "ScreenResult",
    "ScreenStrategy",
    "create_strategy",
    "get_strategy_class",
    "list_strategies",
    "register_strategy",
    "strategy_parameters",
    "build_snapshot",
    "build_snapshots",
    "screen_by_strategy",
]
