"""Configuration and option exceptions."""

from typing import Any, Iterable

from .base import ViewlintError


class ConfigurationError(ViewlintError):
    """Base class for configuration-related errors."""

    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class InvalidOptionError(ConfigurationError):
    """Raised when an operation receives an option outside its allowed set."""

    def __init__(self, option: str, value: Any, allowed: Iterable[str]):
        self.allowed = sorted(allowed)
        super().__init__(
            f"Invalid {option}: {value!r}",
            details={"option": option, "value": str(value), "allowed": ", ".join(self.allowed)},
        )
        self.option = option
        self.value = value


class InvalidOptimizationFocusError(InvalidOptionError):
    """Raised when suggest_optimizations gets an unknown focus."""

    def __init__(self, value: Any, allowed: Iterable[str]):
        super().__init__("optimization_focus", value, allowed)
