# src/automatic_sub_aligner/optimization/optimizer.py

import logging
import time
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial

import numpy as np

from ..config import DEFAULT_CONFIG, WORKERS, OptimizerConfig
from ..core.models import (
    REFERENCE_PARAMETERS,
    FrequencyResponse,
    OptimizationResult,
    OptimizedSub,
    SubParameters,
)
from ..errors import InconsistentFrequencyGridError, InvalidInputError
from .combiner import apply_parameters, combine_responses
from .grid import count_combinations, generate_test_params
from .scoring import efficiency_ratio
from .weighting import calculate_frequency_weights

logger = logging.getLogger(__name__)

# Frequency grids of two subs are compared at this precision (1/1000 Hz)
GRID_PRECISION = 1e3


@dataclass(frozen=True)
class Candidate:
    """One evaluated grid point: the parameters, their score and the combined response."""

    params: SubParameters
    score: float
    response: FrequencyResponse


class MultiSubOptimizer:
    """
    Aligns N subwoofers measured at one listening position.

    The first sub is the reference and keeps ``delay=0, gain=0, polarity=+1``.
    Every other sub, in input order, is tried at each point of the parameter
    grid combined with the running sum of the subs already placed; the best
    scoring candidate is kept and its combined response becomes the running
    sum for the next sub. The search is greedy, so the result depends on the
    order of the input measurements.
    """

    def __init__(self, sub_measurements, config=DEFAULT_CONFIG, workers=WORKERS):
        self.sub_measurements = self.validate_measurements(sub_measurements)
        if isinstance(config, Mapping):
            config = OptimizerConfig.from_dict(config)
        self.config = config
        self.workers = max(1, int(workers or 1))

        self.prepared_subs = None
        self.optimized_subs = ()
        self.frequency_weights = None
        self.theoretical_max_response = None
        self.log_text = "\n"

    # --- Validation and preparation ---

    @staticmethod
    def validate_measurements(sub_measurements):
        """Coerce to a tuple of ``FrequencyResponse`` and check what the search relies on."""
        if not sub_measurements or len(sub_measurements) < 2:
            raise InvalidInputError("At least 2 subwoofer measurements required")

        responses = []
        for measurement in sub_measurements:
            if isinstance(measurement, Mapping):
                measurement = FrequencyResponse.from_dict(measurement)
            if len(measurement.freqs) != len(measurement.magnitude_db):
                raise InvalidInputError("Frequency and magnitude arrays must have the same length")
            if not measurement.measurement_id:
                raise InvalidInputError("Measurement id is required")
            responses.append(measurement)
        return tuple(responses)

    def prepare_measurements(self):
        """Cut every sub to the configured band and check they all share one frequency grid."""
        band = self.config.frequency
        prepared = tuple(sub.filter_band(band.min, band.max) for sub in self.sub_measurements)

        first_freqs = prepared[0].freqs
        if not len(first_freqs):
            raise InvalidInputError(f"No frequency points between {band.min} and {band.max} Hz")

        rounded_first = np.floor(first_freqs * GRID_PRECISION) / GRID_PRECISION
        for index, sub in enumerate(prepared[1:], start=1):
            if len(sub.freqs) != len(first_freqs):
                raise InconsistentFrequencyGridError(
                    f"Sub {sub.label} has a different number of frequency points than the first sub "
                    f"({len(sub.freqs)} vs {len(first_freqs)})")
            rounded = np.floor(sub.freqs * GRID_PRECISION) / GRID_PRECISION
            mismatch = np.flatnonzero(rounded != rounded_first)
            if mismatch.size:
                raise InconsistentFrequencyGridError(
                    f"Sub {sub.label} has a different frequency point at index {mismatch[0]} "
                    f"than the first sub")

        return prepared

    # --- Logging ---

    def append_log_text(self, text, level=logging.INFO):
        self.log_text += text + "\n"
        logger.log(level, text)

    def log_results(self, execution_time, optimized_subs):
        self.append_log_text("Optimized parameters:")
        for sub in optimized_subs:
            params = sub.params
            self.append_log_text(
                f"{sub.name} inverted: {params.inverted} delay: {params.delay_ms:.2f}ms "
                f"gain: {params.gain:.2f}dB {params.all_pass.describe()}")
        best_score = optimized_subs[-1].score if optimized_subs else 0.0
        self.append_log_text(f"Execution time: {execution_time:.3f}s")
        self.append_log_text(f"Best score: {best_score:.2f}")

    # --- Search ---

    def count_all_possible_combinations(self):
        return count_combinations(self.config)

    def optimize_subwoofers(self):
        """
        Run the full greedy search.

        Returns:
            An ``OptimizationResult`` with one ``OptimizedSub`` per non-reference
            sub and the final running sum.
        """
        start = time.perf_counter()

        prepared = self.prepare_measurements()
        self.prepared_subs = prepared
        self.frequency_weights = calculate_frequency_weights(prepared[0].freqs)
        self.theoretical_max_response = combine_responses(prepared, ignore_phase=True)

        test_params = generate_test_params(self.config)
        self.append_log_text(
            f"Optimizing with {len(test_params)} test parameters per sub "
            f"({len(prepared[0])} frequency points)")

        # The running sum starts as the reference sub on its own
        running_sum = prepared[0]
        optimized = []
        for sub in prepared[1:]:
            best = self.optimize_single_sub(sub, running_sum, test_params)
            running_sum = best.response
            optimized_sub = OptimizedSub(response=sub, params=best.params, score=best.score)
            optimized.append(optimized_sub)
            self.check_delay_boundaries(optimized_sub)

        self.optimized_subs = tuple(optimized)
        execution_time = time.perf_counter() - start
        self.log_results(execution_time, self.optimized_subs)

        return OptimizationResult(
            optimized_subs=self.optimized_subs,
            best_sum=running_sum,
            theoretical_max=self.theoretical_max_response,
            execution_time=execution_time,
        )

    def evaluate_parameters(self, sub, running_sum, params):
        """Score ``sub`` under ``params`` combined with the current running sum."""
        modified = apply_parameters(sub, params)
        combined = combine_responses([modified, running_sum])
        score = efficiency_ratio(combined, self.theoretical_max_response, self.frequency_weights)
        return Candidate(params=params, score=score, response=combined)

    def _evaluate_all(self, sub, running_sum, test_params):
        evaluate = partial(self.evaluate_parameters, sub, running_sum)
        if self.workers == 1:
            yield from map(evaluate, test_params)
            return
        # executor.map yields in submission order, which keeps the tie-break deterministic
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            yield from executor.map(evaluate, test_params)

    def optimize_single_sub(self, sub, running_sum, test_params):
        """
        Best candidate for one sub against ``running_sum``.

        Candidates with and without an all-pass filter are ranked separately;
        the all-pass one only wins if it beats the plain one by more than the
        configured significant improvement.
        """
        if self.theoretical_max_response is None or self.frequency_weights is None:
            raise InvalidInputError("Theoretical maximum and weights must be computed first")

        best_plain = None
        best_all_pass = None
        for candidate in self._evaluate_all(sub, running_sum, test_params):
            if candidate.params.all_pass.enabled:
                if best_all_pass is None or candidate.score > best_all_pass.score:
                    best_all_pass = candidate
            elif best_plain is None or candidate.score > best_plain.score:
                best_plain = candidate

        if best_plain is None:
            raise InvalidInputError("Parameter grid is empty")
        if best_all_pass is None:
            return best_plain

        improvement = self.calculate_improvement_percentage(best_all_pass.score, best_plain.score)
        self.append_log_text(
            f"Sub {sub.label} optimization results: "
            f"best without all-pass {best_plain.score:.2f}, "
            f"best with all-pass {best_all_pass.score:.2f}, "
            f"improvement with all-pass: {improvement}")

        threshold = 1 + self.config.significant_improvement / 100
        if best_all_pass.score > best_plain.score * threshold:
            self.append_log_text("Using all-pass filter for significant improvement")
            return best_all_pass
        return best_plain

    @staticmethod
    def calculate_improvement_percentage(score_with_all_pass, score_without_all_pass):
        if score_with_all_pass > 0 and score_without_all_pass > 0:
            improvement = (score_with_all_pass - score_without_all_pass) / score_without_all_pass
            return f"{improvement * 100:.2f}%"
        return "N/A"

    def check_delay_boundaries(self, optimized_sub):
        """Warn when the chosen delay sits on the edge of the search range. Returns True if it does."""
        delay = optimized_sub.params.delay
        if delay >= self.config.delay.max or delay <= self.config.delay.min:
            self.append_log_text(
                f"WARNING: Optimal delay for {optimized_sub.name} is at the edge: "
                f"{optimized_sub.params.delay_ms:.2f}ms. "
                f"This may indicate that the delay range is too narrow.",
                level=logging.WARNING)
            return True
        return False

    # --- Final result ---

    def get_final_sum(self):
        """
        Recombine every sub under its final parameters.

        The reference and any sub without an optimization result use the
        neutral parameters. This does not reuse the running sums of the
        search, so it is the same whatever path the search took.
        """
        prepared = self.prepared_subs
        if prepared is None:
            prepared = self.prepare_measurements()

        chosen = {sub.measurement_id: sub.params for sub in self.optimized_subs}
        responses = [
            apply_parameters(sub, chosen.get(sub.measurement_id, REFERENCE_PARAMETERS))
            for sub in prepared
        ]
        return combine_responses(responses)
