"""
Parabolic line search over the bandwidth-correction factor rho.

The ISI of a root-Nyquist Kaiser filter is a smooth, locally unimodal but not
analytically differentiable function of rho. `parabolic_search` refines an
initial estimate by repeatedly fitting a parabola through three bracket points
and moving one bracket end to the midpoint, on the side opposite the vertex.

Termination is by iteration budget or by a vanishing fit denominator; there is
no tolerance-based stop on the bracket width.
"""

from typing import Callable, NamedTuple, Optional

from .config import SearchConfig
from .logger import logger


class SearchStep(NamedTuple):
    """Trace record emitted after each completed search iteration."""

    iteration: int
    rho: float
    isi: float


class SearchResult(NamedTuple):
    """Outcome of a parabolic search.

    Attributes
    ----------
    rho : float
        Last computed parabola vertex, or the initial estimate if no vertex
        was computed. Not clamped.
    iterations : int
        Number of iterations that produced a vertex.
    evaluations : int
        Number of objective calls made by the search itself (trace
        evaluations excluded).
    stopped_early : bool
        True if the fit denominator vanished before the budget ran out.
    """

    rho: float
    iterations: int
    evaluations: int
    stopped_early: bool


def parabola_vertex(x0, y0, x1, y1, x2, y2):
    """
    Vertex abscissa of the parabola through three points.

    Returns
    -------
    tuple of float
        ``(numerator, denominator)``; the vertex is ``0.5 * num / den``.
        They are returned separately so callers can test the denominator.
    """
    num = y0 * (x1 * x1 - x2 * x2) + y1 * (x2 * x2 - x0 * x0) + y2 * (x0 * x0 - x1 * x1)
    den = y0 * (x1 - x2) + y1 * (x2 - x0) + y2 * (x0 - x1)
    return num, den


def parabolic_search(
    objective: Callable[[float], float],
    rho_hat: float,
    config: Optional[SearchConfig] = None,
    callback: Optional[Callable[[SearchStep], None]] = None,
) -> SearchResult:
    """
    Minimizes `objective` near `rho_hat` by inverse parabolic interpolation.

    The bracket starts at ``rho_hat * (1 -/+ bracket_width)``. Each iteration
    evaluates the bracket midpoint, fits a parabola through the three points
    and replaces the lower end with the midpoint if the vertex lies above it,
    otherwise the upper end.

    Parameters
    ----------
    objective : callable
        Maps a candidate rho to a scalar to minimize.
    rho_hat : float
        Initial estimate.
    config : SearchConfig, optional
        Iteration budget, bracket width and flatness tolerance.
    callback : callable, optional
        Called with a `SearchStep` after every iteration that computed a
        vertex. Providing it costs one extra objective evaluation per step.

    Returns
    -------
    SearchResult
        The search outcome. If the fit denominator vanishes the last computed
        vertex is kept (``rho_hat`` if none was computed).
    """
    if config is None:
        config = SearchConfig()

    x0 = rho_hat * (1.0 - config.bracket_width)
    x2 = rho_hat * (1.0 + config.bracket_width)
    y0 = objective(x0)
    y2 = objective(x2)
    evaluations = 2

    x_hat = rho_hat
    iterations = 0
    stopped_early = False

    for p in range(config.max_iterations):
        x1 = 0.5 * (x0 + x2)
        y1 = objective(x1)
        evaluations += 1

        num, den = parabola_vertex(x0, y0, x1, y1, x2, y2)

        if abs(den) < config.flat_tolerance:
            logger.debug(
                f"Parabolic search: fit denominator {den:.3e} below tolerance "
                f"after {p} iterations, keeping rho={x_hat:.8f}."
            )
            stopped_early = True
            break

        x_hat = 0.5 * num / den
        iterations += 1

        if x_hat > x1:
            x0, y0 = x1, y1
        else:
            x2, y2 = x1, y1

        logger.debug(
            f"Parabolic search {iterations:2d}: rho={x_hat:.8f}, "
            f"bracket=[{x0:.8f}, {x2:.8f}]."
        )

        if callback is not None:
            callback(SearchStep(iterations, x_hat, objective(x_hat)))

    return SearchResult(x_hat, iterations, evaluations, stopped_early)
