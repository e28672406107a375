"""Exception types raised by the engine."""


class IndicatorError(Exception):
    """Base class for engine errors tied to one instrument's computation."""


class MalformedInputError(IndicatorError, ValueError):
    """Input history violates the engine's contract (order, symbol, values)."""


class InsufficientHistoryError(IndicatorError):
    """Not enough rows to compute a record.

    The engine normally reports this by returning ``None``; the exception is
    only raised by callers that explicitly require a record.
    """

    def __init__(self, symbol: str, rows: int, required: int):
        self.symbol = symbol
        self.rows = rows
        self.required = required
        super().__init__(
            f"{symbol}: {rows} rows of history, at least {required} required"
        )


class UnknownStrategyError(IndicatorError, KeyError):
    """A screen was requested for a strategy name that is not registered."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        super().__init__(
            f"Unknown strategy '{name}'. Available: {', '.join(available) or '(none)'}"
        )

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]
