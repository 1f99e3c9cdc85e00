"""Bootstrap Monte Carlo resampling of historical R-multiples."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np
import structlog

from trade_journal.config import Settings
from trade_journal.errors import InsufficientDataError, ValidationError
from trade_journal.models.metrics import Histogram, SimulationResult

logger = structlog.get_logger()

START_EQUITY = 1.0


class MonteCarloSimulator:
    """
    Illustrative risk simulation, not a calibrated model:
    each path starts at 1.0 and for every period draws one historical
    R-multiple uniformly with replacement, adding r * risk_fraction.
    """

    def __init__(self, settings: Settings | None = None, rng: np.random.Generator | None = None) -> None:
        self.settings = settings or Settings()
        self.rng = rng if rng is not None else np.random.default_rng()

    def run(
        self,
        r_multiples: Iterable[float],
        simulations: int | None = None,
        periods: int | None = None,
        risk_fraction: float | None = None,
    ) -> np.ndarray:
        """Return the final equity of each simulated path."""
        values = np.asarray(list(r_multiples), dtype=float)
        required = self.settings.MIN_SIMULATION_TRADES
        if values.size < required:
            logger.warning("simulation_insufficient_data", required=required, available=values.size)
            raise InsufficientDataError(required, int(values.size))

        n = self.settings.MONTE_CARLO_SIMULATIONS if simulations is None else simulations
        p = self.settings.MONTE_CARLO_PERIODS if periods is None else periods
        f = self.settings.MONTE_CARLO_RISK_FRACTION if risk_fraction is None else risk_fraction
        if n <= 0 or p <= 0:
            raise ValidationError(f"simulations and periods must be > 0, got {n} and {p}")

        draws = self.rng.choice(values, size=(n, p), replace=True)
        return START_EQUITY + (draws * f).sum(axis=1)

    def histogram(self, final_equities: np.ndarray, bins: int | None = None) -> Histogram:
        """Linear bins from the observed min to max."""
        values = np.asarray(final_equities, dtype=float)
        if values.size == 0:
            raise ValidationError("cannot bin an empty simulation result")
        bin_count = self.settings.HISTOGRAM_BINS if bins is None else bins
        if bin_count <= 0:
            raise ValidationError(f"bins must be > 0, got {bin_count}")

        counts, edges = np.histogram(values, bins=bin_count, range=(values.min(), values.max()))
        return Histogram(counts=counts.tolist(), edges=edges.tolist())

    def simulate(
        self,
        r_multiples: Iterable[float],
        simulations: int | None = None,
        periods: int | None = None,
        risk_fraction: float | None = None,
        bins: int | None = None,
    ) -> SimulationResult:
        finals = self.run(r_multiples, simulations, periods, risk_fraction)
        return SimulationResult(
            simulations=int(finals.size),
            periods=self.settings.MONTE_CARLO_PERIODS if periods is None else periods,
            risk_fraction=(
                self.settings.MONTE_CARLO_RISK_FRACTION if risk_fraction is None else risk_fraction
            ),
            final_equities=finals.tolist(),
            histogram=self.histogram(finals, bins),
            mean=float(np.mean(finals)),
            median=float(np.median(finals)),
            p5=float(np.percentile(finals, 5)),
            p95=float(np.percentile(finals, 95)),
            min=float(finals.min()),
            max=float(finals.max()),
            loss_probability=float(np.mean(finals < START_EQUITY)),
        )
