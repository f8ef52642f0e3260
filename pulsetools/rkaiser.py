"""
Root-Nyquist Kaiser filter design.

A root-Nyquist Kaiser filter is a Kaiser-windowed sinc whose cutoff is shifted
by ``gamma = rho * rolloff`` so that the matched-filter pair approximately
satisfies the Nyquist zero-ISI criterion. The bandwidth-correction factor
``rho`` is either taken from an empirical fit (`arkaiser_taps`) or refined by
a parabolic search on the measured ISI (`rkaiser_taps`).

Functions
---------
approximate_rho :
    Closed-form estimate of rho from filter delay and roll-off.
design_rkaiser :
    Low-level exact design returning taps, rho and ISI (``sps >= 1``).
rkaiser_taps :
    Exact root-Nyquist Kaiser taps.
rkaiser_taps_with_rho :
    Exact root-Nyquist Kaiser taps and the rho used to build them.
arkaiser_taps :
    Root-Nyquist Kaiser taps using the approximate rho only.

References
----------
P. P. Vaidyanathan, "Multirate Systems and Filter Banks," Prentice Hall,
1993, Section 3.2.1.
"""

from typing import Callable, NamedTuple, Optional, Tuple

import numpy as np

from .config import FilterSpec, SearchConfig
from .exceptions import InvalidDelayError, InvalidExcessBandwidthError
from .kaiser import kaiser_taps
from .logger import logger
from .metrics import ISIMetric, filter_isi
from .optimize import SearchStep, parabolic_search

# Fitted (c0, c1, c2) for rho_hat = c0 + c1*ln(rolloff - c2), span 1..6
_RHO_COEFFS = {
    1: (0.78583556, 0.05439958, 0.37818679),
    2: (0.82194722, 0.06170731, 0.16362774),
    3: (0.84686762, 0.07475776, 0.05263769),
    4: (0.86538726, 0.07374587, 0.03491642),
    5: (0.87861007, 0.06981039, 0.03553645),
    6: (0.88901162, 0.06708569, 0.03459680),
}


class RKaiserDesign(NamedTuple):
    """Result of an exact root-Nyquist Kaiser design."""

    taps: np.ndarray
    rho: float
    isi: ISIMetric


def _rho_coefficients(span: int) -> Tuple[float, float, float]:
    if span in _RHO_COEFFS:
        return _RHO_COEFFS[span]

    c0 = 0.057918 * np.log(span) + 0.784313
    if span <= 3:
        c1 = 0.0099427 * span + 0.0447250
    else:
        c1 = -0.0026685 * span + 0.0835030
    c2 = 0.03373 + np.exp(-0.30382 * span * span - 0.19451 * span - 0.56171)
    return float(c0), float(c1), float(c2)


def approximate_rho(span: int, rolloff: float) -> float:
    """
    Estimates the bandwidth-correction factor rho.

    Uses tabulated curve-fit coefficients for ``span <= 6`` and continuous
    empirical formulas beyond that.

    Parameters
    ----------
    span : int
        Filter delay in symbols, at least 1.
    rolloff : float
        Excess bandwidth factor in [0, 1].

    Returns
    -------
    float
        Estimate of rho in [0, 1].

    Raises
    ------
    InvalidDelayError
        If ``span < 1``.
    InvalidExcessBandwidthError
        If ``rolloff`` is outside [0, 1].
    """
    if span < 1:
        raise InvalidDelayError(span, "approximate_rho")
    if not 0.0 <= rolloff <= 1.0:
        raise InvalidExcessBandwidthError(rolloff, False, "approximate_rho")

    c0, c1, c2 = _rho_coefficients(int(span))

    # keep the log argument positive
    if c2 >= rolloff:
        c2 = 0.999 * rolloff

    # rolloff == 0 gives log(0) = -inf, which the clip maps to a bound
    with np.errstate(divide="ignore"):
        rho_hat = c0 + c1 * np.log(rolloff - c2)

    return float(np.clip(rho_hat, 0.0, 1.0))


def normalize_energy(taps: np.ndarray, sps: int) -> np.ndarray:
    """Scales taps so that sum(taps**2) == sps (unit average power at sps samples/symbol)."""
    return taps * np.sqrt(sps / np.sum(taps**2))


class ISIObjective:
    """
    ISI of a root-Nyquist Kaiser filter as a function of rho.

    Calling the objective synthesizes taps for the candidate rho into a
    private scratch buffer and returns the RMS ISI of the result. The scratch
    buffer is overwritten on every call and never handed out; use `taps` to
    obtain an independent copy.

    Parameters
    ----------
    spec : FilterSpec
        Filter parameters.
    synthesizer : callable, default `kaiser_taps`
        ``synthesizer(num_taps, cutoff, attenuation_db, frac_delay, out=buf)``.
    evaluator : callable, default `filter_isi`
        ``evaluator(taps, sps, span) -> ISIMetric``.
    """

    def __init__(
        self,
        spec: FilterSpec,
        synthesizer: Callable[..., np.ndarray] = kaiser_taps,
        evaluator: Callable[[np.ndarray, int, int], ISIMetric] = filter_isi,
    ):
        self.spec = spec
        self._synthesize = synthesizer
        self._evaluate = evaluator
        self._scratch = np.empty(spec.num_taps)
        self.evaluations = 0

    def prototype(self, rho: float) -> Tuple[float, float]:
        """
        Sinc cutoff and Kaiser attenuation for a candidate rho.

        Returns
        -------
        tuple of float
            ``(cutoff, attenuation_db)``.
        """
        spec = self.spec
        gamma = rho * spec.rolloff
        delta = gamma / spec.sps
        attenuation = 14.26 * delta * spec.num_taps + 7.95
        cutoff = (1.0 + spec.rolloff - gamma) / spec.sps
        return cutoff, attenuation

    def taps(self, rho: float) -> np.ndarray:
        """Un-normalized taps for `rho`, in a newly allocated array."""
        cutoff, attenuation = self.prototype(rho)
        return self._synthesize(
            self.spec.num_taps,
            cutoff,
            attenuation,
            self.spec.frac_delay,
            out=np.empty(self.spec.num_taps),
        )

    def metric(self, rho: float) -> ISIMetric:
        """RMS and peak ISI of the filter designed with `rho`."""
        cutoff, attenuation = self.prototype(rho)
        h = self._synthesize(
            self.spec.num_taps,
            cutoff,
            attenuation,
            self.spec.frac_delay,
            out=self._scratch,
        )
        self.evaluations += 1
        return self._evaluate(h, self.spec.sps, self.spec.span)

    def __call__(self, rho: float) -> float:
        return self.metric(rho).mse


def design_rkaiser(
    spec: FilterSpec,
    search: Optional[SearchConfig] = None,
    callback: Optional[Callable[[SearchStep], None]] = None,
    synthesizer: Callable[..., np.ndarray] = kaiser_taps,
    evaluator: Callable[[np.ndarray, int, int], ISIMetric] = filter_isi,
) -> RKaiserDesign:
    """
    Designs a root-Nyquist Kaiser filter with a searched rho.

    This is the low-level variant behind `rkaiser_taps`: it accepts
    ``sps >= 1`` and a roll-off in the closed interval [0, 1].

    The search vertex is clamped to [0, 1] and compared with the initial
    estimate; whichever gives the lower ISI is used, so the result is never
    worse than `arkaiser_taps` for the same parameters.

    Parameters
    ----------
    spec : FilterSpec
        Filter parameters.
    search : SearchConfig, optional
        Parabolic search settings.
    callback : callable, optional
        Per-iteration trace, see `parabolic_search`.
    synthesizer, evaluator : callable, optional
        Replacements for the tap generator and ISI measurement.

    Returns
    -------
    RKaiserDesign
        Energy-normalized taps (``sum(taps**2) == sps``), the rho used to
        generate them and their ISI.
    """
    spec.validate_for(min_sps=1, open_rolloff=False, context="design_rkaiser")

    rho_hat = approximate_rho(spec.span, spec.rolloff)
    objective = ISIObjective(spec, synthesizer, evaluator)

    result = parabolic_search(objective, rho_hat, search, callback)
    rho = float(np.clip(result.rho, 0.0, 1.0))

    if objective(rho_hat) < objective(rho):
        logger.debug(
            f"Search result rho={rho:.8f} measures worse than estimate "
            f"rho_hat={rho_hat:.8f}, keeping the estimate."
        )
        rho = rho_hat

    taps = objective.taps(rho)
    isi = evaluator(taps, spec.sps, spec.span)
    taps = normalize_energy(taps, spec.sps)

    logger.debug(
        f"rkaiser design (sps={spec.sps}, span={spec.span}, rolloff={spec.rolloff}, "
        f"dt={spec.frac_delay}): rho_hat={rho_hat:.8f}, rho={rho:.8f}, "
        f"isi={isi.mse_db:.2f} dB after {objective.evaluations} evaluations."
    )
    return RKaiserDesign(taps, rho, isi)


def rkaiser_taps_with_rho(
    sps: int,
    span: int,
    rolloff: float,
    frac_delay: float = 0.0,
    search: Optional[SearchConfig] = None,
    callback: Optional[Callable[[SearchStep], None]] = None,
) -> Tuple[np.ndarray, float]:
    """
    Generates root-Nyquist Kaiser taps and returns the rho used.

    Parameters
    ----------
    sps : int
        Samples per symbol, at least 2.
    span : int
        Filter delay in symbols, at least 1.
    rolloff : float
        Excess bandwidth factor in (0, 1).
    frac_delay : float, default 0.0
        Fractional sample delay in [-1, 1].
    search : SearchConfig, optional
        Parabolic search settings.
    callback : callable, optional
        Per-iteration trace, see `parabolic_search`.

    Returns
    -------
    taps : ndarray
        ``2*sps*span + 1`` taps with ``sum(taps**2) == sps``.
    rho : float
        Bandwidth-correction factor in [0, 1].
    """
    spec = FilterSpec(sps=sps, span=span, rolloff=rolloff, frac_delay=frac_delay)
    spec.validate_for(min_sps=2, open_rolloff=True, context="rkaiser_taps")

    design = design_rkaiser(spec, search=search, callback=callback)
    return design.taps, design.rho


def rkaiser_taps(
    sps: int,
    span: int,
    rolloff: float,
    frac_delay: float = 0.0,
    search: Optional[SearchConfig] = None,
    callback: Optional[Callable[[SearchStep], None]] = None,
) -> np.ndarray:
    """
    Generates root-Nyquist Kaiser filter taps with a searched rho.

    See `rkaiser_taps_with_rho` for the parameters.
    """
    taps, _ = rkaiser_taps_with_rho(sps, span, rolloff, frac_delay, search, callback)
    return taps


def arkaiser_taps(
    sps: int, span: int, rolloff: float, frac_delay: float = 0.0
) -> np.ndarray:
    """
    Generates root-Nyquist Kaiser filter taps using the approximate rho.

    Cheaper than `rkaiser_taps` (a single synthesis, no search) at the cost
    of slightly higher residual ISI.

    Args:
        sps: Samples per symbol, at least 2.
        span: Filter delay in symbols, at least 1.
        rolloff: Excess bandwidth factor in (0, 1).
        frac_delay: Fractional sample delay in [-1, 1].

    Returns:
        2*sps*span + 1 taps with sum(taps**2) == sps.
    """
    spec = FilterSpec(sps=sps, span=span, rolloff=rolloff, frac_delay=frac_delay)
    spec.validate_for(min_sps=2, open_rolloff=True, context="arkaiser_taps")

    rho_hat = approximate_rho(spec.span, spec.rolloff)
    taps = ISIObjective(spec).taps(rho_hat)

    logger.debug(
        f"arkaiser design (sps={sps}, span={span}, rolloff={rolloff}, "
        f"dt={frac_delay}): rho_hat={rho_hat:.8f}."
    )
    return normalize_energy(taps, spec.sps)
