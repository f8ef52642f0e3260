"""
Inter-symbol interference metrics for pulse-shaping filters.

For a root-Nyquist filter `h` the matched-filter pair response is the
autocorrelation of `h`; at symbol-spaced lags it should vanish. The residual
values, relative to the zero-lag peak, quantify the ISI of the design.

Functions
---------
filter_autocorr :
    Autocorrelation of a tap vector at a single lag.
filter_isi :
    RMS and peak ISI of the matched-filter pair built from a tap vector.
"""

from typing import NamedTuple

import numpy as np

from .logger import logger


class ISIMetric(NamedTuple):
    """Residual inter-symbol interference of a filter.

    Attributes
    ----------
    mse : float
        Root-mean-square ISI over the symbol-spaced lags.
    max : float
        Peak ISI over the same lags.
    """

    mse: float
    max: float

    @property
    def mse_db(self) -> float:
        """RMS ISI in dB."""
        with np.errstate(divide="ignore"):
            return float(20.0 * np.log10(self.mse))


def filter_autocorr(taps: np.ndarray, lag: int) -> float:
    """
    Autocorrelation of a real tap vector at integer lag.

    Lags at or beyond the filter length give 0.
    """
    taps = np.asarray(taps, dtype=float)
    lag = abs(int(lag))
    if lag >= taps.size:
        return 0.0
    return float(np.dot(taps[: taps.size - lag], taps[lag:]))


def filter_isi(taps: np.ndarray, sps: int, span: int) -> ISIMetric:
    """
    Measures the ISI of the matched-filter pair built from `taps`.

    The pair response is sampled at lags ``i * sps`` for ``i = 1 .. 2*span``
    and normalized to the zero-lag value.

    Parameters
    ----------
    taps : array_like
        Filter taps of length ``2*sps*span + 1``.
    sps : int
        Samples per symbol.
    span : int
        Filter delay in symbols.

    Returns
    -------
    ISIMetric
        RMS and peak ISI.
    """
    taps = np.asarray(taps, dtype=float)
    expected = 2 * sps * span + 1
    if taps.ndim != 1 or taps.size != expected:
        raise ValueError(
            f"Expected {expected} taps for sps={sps}, span={span}, got shape {taps.shape}"
        )

    rxx0 = filter_autocorr(taps, 0)
    if rxx0 == 0:
        raise ValueError("Filter taps have zero energy")

    lags = sps * np.arange(1, 2 * span + 1)
    e = np.abs(np.array([filter_autocorr(taps, lag) for lag in lags]) / rxx0)

    metric = ISIMetric(mse=float(np.sqrt(np.mean(e**2))), max=float(np.max(e)))
    logger.debug(f"Filter ISI: rms={metric.mse:.3e}, max={metric.max:.3e}.")
    return metric
