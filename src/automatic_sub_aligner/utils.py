# src/automatic_sub_aligner/utils.py

"""
Utility functions for moving frequency responses and results in and out of
text files.
"""

import csv
from pathlib import Path

import numpy as np

from .core.models import FrequencyResponse
from .errors import InvalidInputError

TEXT_HEADER = "* Freq(Hz) SPL(dB) Phase(degrees)"


def load_response_text(path, measurement_id=None, name=None):
    """
    Load a measurement exported as text (REW style).

    Each data line holds ``freq magnitude [phase]``, separated by whitespace or
    commas. Lines starting with ``*`` or ``#`` are comments. A missing phase
    column is read as zero phase.

    Args:
        path: File to read.
        measurement_id: Identifier of the measurement, defaults to the file stem.
        name: Display name, defaults to the file stem.

    Returns:
        A ``FrequencyResponse``.

    Raises:
        InvalidInputError: The file holds no data or a line is not numeric.
        OSError: The file cannot be read.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as handle:
        lines = [line.replace(",", " ") for line in handle]

    try:
        data = np.loadtxt(lines, comments=("*", "#"), ndmin=2)
    except ValueError as e:
        raise InvalidInputError(f"Could not parse '{path}': {e}") from e
    if data.size == 0:
        raise InvalidInputError(f"No frequency response data in '{path}'")
    if data.shape[1] < 2:
        raise InvalidInputError(f"Expected at least frequency and magnitude columns in '{path}'")

    phase = data[:, 2] if data.shape[1] > 2 else np.zeros(len(data))
    freqs = data[:, 0]
    steps = np.diff(freqs)
    freq_step = float(steps[0]) if len(steps) and np.allclose(steps, steps[0]) else None

    return FrequencyResponse(
        freqs=freqs,
        magnitude_db=data[:, 1],
        phase_deg=phase,
        measurement_id=measurement_id or path.stem,
        name=name or path.stem,
        freq_step=freq_step,
    )


def format_response(response):
    """One ``freq  magnitude phase`` line per bin."""
    if not len(response):
        return ""
    return "\n".join(
        f"{freq:.6f}  {magnitude:.3f} {phase:.4f}"
        for freq, magnitude, phase in zip(response.freqs, response.magnitude_db, response.phase_deg)
    )


def save_response_text(response, filename):
    with open(filename, "w", encoding="utf-8") as handle:
        handle.write(TEXT_HEADER + "\n")
        handle.write(format_response(response))
        handle.write("\n")
    print(f"Frequency response saved to '{filename}'")


def save_results_csv(result, filename):
    """Write the chosen parameters of every optimized sub to a CSV file."""
    with open(filename, "w", newline="") as csvfile:
        csv_writer = csv.writer(csvfile)
        csv_writer.writerow(
            ["measurement", "name", "delay_ms", "gain_db", "polarity", "allpass", "score"])
        for sub in result.optimized_subs:
            params = sub.params
            csv_writer.writerow([
                sub.measurement_id,
                sub.name,
                f"{params.delay_ms:.3f}",
                f"{params.gain:.2f}",
                params.polarity,
                params.all_pass.describe(),
                f"{sub.score:.2f}",
            ])
    print(f"Optimization results saved to '{filename}'")
