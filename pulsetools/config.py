"""Parameter models for root-Nyquist Kaiser filter design.

`FilterSpec` carries the four design parameters and is immutable once
constructed. Range checks depend on the calling context (public design entry
points are stricter than the low-level design), so they live in
`FilterSpec.validate_for` rather than in field constraints.
"""

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import (
    InvalidDelayError,
    InvalidExcessBandwidthError,
    InvalidFractionalDelayError,
    InvalidOversamplingError,
)


class FilterSpec(BaseModel):
    """Design parameters of a root-Nyquist Kaiser filter."""

    model_config = ConfigDict(frozen=True)

    sps: int = Field(..., description="Oversampling factor (samples per symbol)")
    span: int = Field(..., description="Filter delay in symbols")
    rolloff: float = Field(..., description="Excess bandwidth factor")
    frac_delay: float = Field(0.0, description="Fractional sample delay")

    @property
    def num_taps(self) -> int:
        """Filter length, always odd: 2*sps*span + 1."""
        return 2 * self.sps * self.span + 1

    def validate_for(
        self, min_sps: int = 2, open_rolloff: bool = True, context: str = ""
    ) -> "FilterSpec":
        """Check the parameters against the ranges of a design entry point.

        Parameters
        ----------
        min_sps : int, default 2
            Smallest accepted oversampling factor.
        open_rolloff : bool, default True
            If True the roll-off must lie in (0, 1), otherwise in [0, 1].
        context : str, optional
            Name of the calling operation, prefixed to error messages.

        Returns
        -------
        FilterSpec
            ``self``, to allow chaining.

        Raises
        ------
        InvalidOversamplingError, InvalidDelayError,
        InvalidExcessBandwidthError, InvalidFractionalDelayError
        """
        if self.sps < min_sps:
            raise InvalidOversamplingError(self.sps, min_sps, context)
        if self.span < 1:
            raise InvalidDelayError(self.span, context)
        if open_rolloff:
            if not 0.0 < self.rolloff < 1.0:
                raise InvalidExcessBandwidthError(self.rolloff, True, context)
        elif not 0.0 <= self.rolloff <= 1.0:
            raise InvalidExcessBandwidthError(self.rolloff, False, context)
        if not -1.0 <= self.frac_delay <= 1.0:
            raise InvalidFractionalDelayError(self.frac_delay, context)
        return self


class SearchConfig(BaseModel):
    """Settings of the parabolic rho search."""

    model_config = ConfigDict(frozen=True)

    max_iterations: int = Field(10, ge=1, description="Iteration budget")
    bracket_width: float = Field(
        0.1,
        gt=0,
        lt=1,
        description="Relative half-width of the initial bracket around rho_hat",
    )
    flat_tolerance: float = Field(
        1e-9,
        gt=0,
        description="Parabola-fit denominator magnitude below which the search stops",
    )
