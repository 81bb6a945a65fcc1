# src/automatic_sub_aligner/optimization/combiner.py

import numpy as np

from ..core.models import FrequencyResponse
from ..core.polar import Polar
from ..errors import InvalidInputError
from .allpass import allpass_phase_degrees


def combine_responses(responses, ignore_phase=False):
    """
    Sum responses bin by bin as phasors.

    With ``ignore_phase`` every term is taken at zero phase, which gives the
    theoretical maximum: the level the subs would reach if they were perfectly
    phase aligned. It is only ever used as a scoring reference.
    """
    if not responses:
        raise InvalidInputError("No measurements provided")

    first = responses[0]
    for response in responses[1:]:
        if len(response) != len(first):
            raise InvalidInputError(
                "All measurements must have the same number of frequency points")

    polar_sum = None
    for response in responses:
        phase = np.zeros(len(response)) if ignore_phase else response.phase_deg
        polar = Polar.from_db(response.magnitude_db, phase)
        polar_sum = polar if polar_sum is None else polar_sum.add(polar)

    return FrequencyResponse(
        freqs=first.freqs,
        magnitude_db=polar_sum.magnitude_db,
        phase_deg=polar_sum.phase_degrees,
        freq_step=first.freq_step,
    )


def apply_parameters(response, params):
    """
    Return ``response`` as it would be measured with ``params`` applied.

    Per bin: gain, then the time delay at that bin's frequency, then the
    optional all-pass phase, then polarity inversion.
    """
    polar = response.to_polar().scale_db(params.gain).delay(params.delay, response.freqs)

    if params.all_pass.enabled:
        polar = polar.add_phase_degrees(
            allpass_phase_degrees(response.freqs, params.all_pass.frequency, params.all_pass.q))

    if params.polarity == -1:
        polar = polar.invert_polarity()

    return response.with_polar(polar)
