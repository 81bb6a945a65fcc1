# tests/test_utils.py

import csv

import matplotlib.pyplot as plt
import numpy as np
import pytest

from automatic_sub_aligner.config import OptimizerConfig, RangeConfig
from automatic_sub_aligner.errors import InvalidInputError
from automatic_sub_aligner.optimization.optimizer import MultiSubOptimizer
from automatic_sub_aligner.ui.plotter import plot_alignment
from automatic_sub_aligner.utils import (
    TEXT_HEADER,
    format_response,
    load_response_text,
    save_response_text,
    save_results_csv,
)

from conftest import make_response, wrap_degrees


@pytest.fixture
def rew_export(tmp_path):
    """A small measurement file as exported by a measurement tool."""
    path = tmp_path / "front_left.txt"
    path.write_text(
        "* Measurement data measured by REW\n"
        "* Freq(Hz) SPL(dB) Phase(degrees)\n"
        "20.000000, 78.125, -12.5000\n"
        "25.000000, 80.250, -40.0000\n"
        "30.000000, 81.000, -75.2500\n"
    )
    return path


@pytest.fixture
def result_and_optimizer(sub_a):
    sub_b = make_response(sub_a.freqs, sub_a.magnitude_db, wrap_degrees(sub_a.phase_deg + 180), "sub-b")
    config = OptimizerConfig(delay=RangeConfig(-0.001, 0.001, 0.0005))
    optimizer = MultiSubOptimizer([sub_a, sub_b], config)
    return optimizer.optimize_subwoofers(), optimizer


class TestLoadResponseText:

    def test_comma_separated_with_comments(self, rew_export):
        response = load_response_text(rew_export)
        np.testing.assert_array_equal(response.freqs, [20.0, 25.0, 30.0])
        np.testing.assert_array_equal(response.magnitude_db, [78.125, 80.25, 81.0])
        np.testing.assert_array_equal(response.phase_deg, [-12.5, -40.0, -75.25])
        assert response.measurement_id == "front_left"
        assert response.name == "front_left"
        assert response.freq_step == 5.0

    def test_explicit_id_and_name(self, rew_export):
        response = load_response_text(rew_export, measurement_id="uuid-7", name="Front left")
        assert response.measurement_id == "uuid-7"
        assert response.label == "Front left"

    def test_missing_phase_column(self, tmp_path):
        path = tmp_path / "no_phase.txt"
        path.write_text("# freq mag\n20 70\n30 72\n45 71\n")
        response = load_response_text(path)
        np.testing.assert_array_equal(response.phase_deg, [0.0, 0.0, 0.0])
        assert response.freq_step is None

    def test_single_column_rejected(self, tmp_path):
        path = tmp_path / "freqs_only.txt"
        path.write_text("20\n30\n")
        with pytest.raises(InvalidInputError):
            load_response_text(path)

    def test_non_numeric_line_rejected(self, tmp_path):
        path = tmp_path / "bad_header.txt"
        path.write_text("Freq(Hz) SPL(dB) Phase(degrees)\n20 70 0\n30 72 0\n")
        with pytest.raises(InvalidInputError, match="Could not parse"):
            load_response_text(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_response_text(tmp_path / "nowhere.txt")

    def test_round_trip_through_text(self, sub_a, tmp_path):
        path = tmp_path / "sub_a.txt"
        save_response_text(sub_a, path)
        loaded = load_response_text(path)
        np.testing.assert_allclose(loaded.freqs, sub_a.freqs)
        np.testing.assert_allclose(loaded.magnitude_db, sub_a.magnitude_db, atol=1e-3)
        np.testing.assert_allclose(loaded.phase_deg, sub_a.phase_deg, atol=1e-4)


class TestFormatResponse:

    def test_line_format(self):
        response = make_response([40.0, 50.5], [80.0, 81.23456], [-90.0, 12.345678], "x")
        assert format_response(response) == (
            "40.000000  80.000 -90.0000\n"
            "50.500000  81.235 12.3457"
        )

    def test_empty_response(self):
        assert format_response(make_response([], [], [], "empty")) == ""

    def test_saved_file_has_header(self, sub_a, tmp_path, capsys):
        path = tmp_path / "out.txt"
        save_response_text(sub_a, path)
        lines = path.read_text().splitlines()
        assert lines[0] == TEXT_HEADER
        assert len(lines) == len(sub_a) + 1
        assert "Frequency response saved to" in capsys.readouterr().out


class TestResultsCsv:

    def test_one_row_per_optimized_sub(self, result_and_optimizer, tmp_path, capsys):
        result, _ = result_and_optimizer
        path = tmp_path / "results.csv"
        save_results_csv(result, path)

        with open(path, newline="") as handle:
            rows = list(csv.DictReader(handle))
        assert len(rows) == 1
        assert rows[0]["measurement"] == "sub-b"
        assert rows[0]["polarity"] == "-1"
        assert rows[0]["delay_ms"] == "0.000"
        assert rows[0]["allpass"] == "allpass: disabled"
        assert "Optimization results saved to" in capsys.readouterr().out


class TestPlotter:

    def test_plot_saved(self, result_and_optimizer, tmp_path, capsys):
        result, optimizer = result_and_optimizer
        path = tmp_path / "alignment.png"
        fig = plot_alignment(optimizer.prepared_subs, optimizer.get_final_sum(),
                             result.theoretical_max, filename=path)

        assert path.exists()
        assert "Plot saved to" in capsys.readouterr().out
        ax = fig.axes[0]
        assert ax.get_xscale() == "log"
        # two subs, the theoretical maximum and the sum
        assert len(ax.get_lines()) == 4
        plt.close(fig)

    def test_plot_without_theoretical_max(self, sub_a):
        fig = plot_alignment([sub_a], sub_a)
        assert len(fig.axes[0].get_lines()) == 2
        plt.close(fig)
