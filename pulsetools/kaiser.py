"""
Kaiser-windowed sinc prototype design.

This module generates the low-pass prototype from which root-Nyquist Kaiser
filters are built. The window can be evaluated at fractionally shifted
positions so the whole prototype is delayed by a fraction of a sample.

Functions
---------
kaiser_beta :
    Kaiser shape parameter for a target stopband attenuation.
kaiser_window :
    Kaiser window with an optional fractional sample shift.
kaiser_taps :
    Kaiser-windowed sinc low-pass taps.
"""

from typing import Optional

import numpy as np
from scipy import signal, special

from .logger import logger


def kaiser_beta(attenuation_db: float) -> float:
    """
    Kaiser shape parameter for a desired stopband attenuation.

    Parameters
    ----------
    attenuation_db : float
        Stopband attenuation in dB. The sign is ignored.

    Returns
    -------
    float
        Window shape parameter; 0 (rectangular) for attenuations up to 21 dB.
    """
    return float(signal.kaiser_beta(abs(attenuation_db)))


def kaiser_window(num_taps: int, beta: float, frac_delay: float = 0.0) -> np.ndarray:
    """
    Kaiser window evaluated at positions shifted by a fractional delay.

    Sample ``i`` is taken at ``t = i - (num_taps - 1) / 2 + frac_delay`` and
    weighted by $I_0(\\beta \\sqrt{1 - r^2}) / I_0(\\beta)$ with
    ``r = 2 t / num_taps``.

    Parameters
    ----------
    num_taps : int
        Window length.
    beta : float
        Shape parameter (see `kaiser_beta`).
    frac_delay : float, default 0.0
        Shift of the window center, in samples.

    Returns
    -------
    ndarray
        Window of shape ``(num_taps,)``.
    """
    if num_taps < 1:
        raise ValueError(f"num_taps must be at least 1, got {num_taps}")

    t = np.arange(num_taps) - (num_taps - 1) / 2 + frac_delay
    r = 2.0 * t / num_taps
    # shifted edge samples can land just outside the window support
    arg = np.sqrt(np.clip(1.0 - r**2, 0.0, None))
    return special.i0(beta * arg) / special.i0(beta)


def kaiser_taps(
    num_taps: int,
    cutoff: float,
    attenuation_db: float,
    frac_delay: float = 0.0,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Generates Kaiser-windowed sinc low-pass filter taps.

    The prototype is ``sinc(cutoff * t)`` (normalized sinc), so ``cutoff = 1/sps``
    yields the Nyquist pulse for a symbol period of ``sps`` samples.

    Parameters
    ----------
    num_taps : int
        Number of coefficients.
    cutoff : float
        Sinc bandwidth, relative to the sampling rate.
    attenuation_db : float
        Target stopband attenuation in dB, used to shape the window.
    frac_delay : float, default 0.0
        Fractional sample delay applied to both sinc and window.
    out : ndarray, optional
        Buffer of shape ``(num_taps,)`` to write the taps into.

    Returns
    -------
    ndarray
        Filter taps (``out`` if it was given). Not normalized.
    """
    if out is not None and out.shape != (num_taps,):
        raise ValueError(
            f"Output buffer has shape {out.shape}, expected ({num_taps},)"
        )

    beta = kaiser_beta(attenuation_db)
    logger.debug(
        f"Kaiser taps: n={num_taps}, cutoff={cutoff:.6f}, "
        f"As={attenuation_db:.2f} dB, beta={beta:.4f}, dt={frac_delay}."
    )

    t = np.arange(num_taps) - (num_taps - 1) / 2 + frac_delay
    window = kaiser_window(num_taps, beta, frac_delay)

    return np.multiply(np.sinc(cutoff * t), window, out=out)
