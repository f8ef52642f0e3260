"""
PulseTools: root-Nyquist pulse-shaping filter design.

This package provides tools for:
- Designing root-Nyquist filters from a Kaiser-windowed sinc prototype.
- Estimating and refining the bandwidth-correction factor (rho).
- Measuring the residual inter-symbol interference of matched-filter pairs.
"""

from .config import FilterSpec, SearchConfig
from .exceptions import (
    FilterDesignError,
    InvalidDelayError,
    InvalidExcessBandwidthError,
    InvalidFractionalDelayError,
    InvalidOversamplingError,
)
from .logger import set_log_level
from .metrics import ISIMetric, filter_isi
from .optimize import SearchResult, SearchStep, parabolic_search
from .rkaiser import (
    ISIObjective,
    RKaiserDesign,
    approximate_rho,
    arkaiser_taps,
    design_rkaiser,
    rkaiser_taps,
    rkaiser_taps_with_rho,
)

__all__ = [
    "FilterSpec",
    "SearchConfig",
    "FilterDesignError",
    "InvalidOversamplingError",
    "InvalidDelayError",
    "InvalidExcessBandwidthError",
    "InvalidFractionalDelayError",
    "ISIMetric",
    "filter_isi",
    "SearchStep",
    "SearchResult",
    "parabolic_search",
    "ISIObjective",
    "RKaiserDesign",
    "approximate_rho",
    "arkaiser_taps",
    "design_rkaiser",
    "rkaiser_taps",
    "rkaiser_taps_with_rho",
    "set_log_level",
]
