"""Exceptions raised by root-Nyquist filter design."""

from typing import Any


class FilterDesignError(ValueError):
    """Base exception for invalid filter design parameters.

    Attributes
    ----------
    parameter : str
        Name of the offending parameter.
    value : Any
        The rejected value.
    constraint : str
        Human-readable description of the violated constraint.
    """

    def __init__(self, parameter: str, value: Any, constraint: str, context: str = ""):
        self.parameter = parameter
        self.value = value
        self.constraint = constraint
        prefix = f"{context}: " if context else ""
        super().__init__(f"{prefix}{parameter}={value!r} violates {constraint}")


class InvalidOversamplingError(FilterDesignError):
    """Raised when the samples-per-symbol factor is below the required minimum."""

    def __init__(self, value: Any, minimum: int, context: str = ""):
        self.minimum = minimum
        super().__init__("sps", value, f"sps >= {minimum}", context)


class InvalidDelayError(FilterDesignError):
    """Raised when the filter delay (span in symbols) is less than one."""

    def __init__(self, value: Any, context: str = ""):
        super().__init__("span", value, "span >= 1", context)


class InvalidExcessBandwidthError(FilterDesignError):
    """Raised when the roll-off lies outside the range allowed by the caller.

    Filter design entry points require the open interval (0, 1); the
    standalone rho approximation and the low-level design accept [0, 1].
    """

    def __init__(self, value: Any, open_interval: bool, context: str = ""):
        self.open_interval = open_interval
        constraint = "0 < rolloff < 1" if open_interval else "0 <= rolloff <= 1"
        super().__init__("rolloff", value, constraint, context)


class InvalidFractionalDelayError(FilterDesignError):
    """Raised when the fractional sample delay lies outside [-1, 1]."""

    def __init__(self, value: Any, context: str = ""):
        super().__init__("frac_delay", value, "-1 <= frac_delay <= 1", context)
