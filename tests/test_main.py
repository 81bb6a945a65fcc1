# tests/test_main.py

from unittest.mock import patch

import numpy as np
import pytest

from automatic_sub_aligner.cli.__main__ import build_parser, config_from_args, main
from automatic_sub_aligner.utils import load_response_text, save_response_text

from conftest import make_response, wrap_degrees


@pytest.fixture
def measurement_files(sub_a, tmp_path, capsys):
    """The reference sub and an inverted copy written as text exports."""
    sub_b = make_response(sub_a.freqs, sub_a.magnitude_db, wrap_degrees(sub_a.phase_deg + 180), "sub-b")
    paths = [tmp_path / "sub_a.txt", tmp_path / "sub_b.txt"]
    save_response_text(sub_a, paths[0])
    save_response_text(sub_b, paths[1])
    capsys.readouterr()
    return [str(path) for path in paths]


SMALL_GRID = ["--delay-min", "-1", "--delay-max", "1", "--delay-step", "0.5"]


def test_main_prints_chosen_parameters(measurement_files, capsys):
    assert main(measurement_files + SMALL_GRID) == 0

    out = capsys.readouterr().out
    assert "Reference: sub_a" in out
    assert "sub_b: delay=0.00 ms" in out
    assert "polarity=inverted" in out
    assert "Final score:" in out


def test_main_writes_outputs(measurement_files, sub_a, tmp_path, capsys):
    output = tmp_path / "sum.txt"
    results = tmp_path / "results.csv"
    assert main(measurement_files + SMALL_GRID + ["--output", str(output), "--csv", str(results)]) == 0

    summed = load_response_text(output)
    np.testing.assert_allclose(summed.magnitude_db, sub_a.magnitude_db + 20 * np.log10(2), atol=2e-3)
    assert results.read_text().startswith("measurement,name,delay_ms")
    out = capsys.readouterr().out
    assert "Frequency response saved to" in out
    assert "Optimization results saved to" in out


def test_main_plot_option(measurement_files, tmp_path):
    plot_path = str(tmp_path / "plot.png")
    with patch("automatic_sub_aligner.ui.plotter.plot_alignment") as mock_plot:
        assert main(measurement_files + SMALL_GRID + ["--plot", plot_path]) == 0

    mock_plot.assert_called_once()
    assert mock_plot.call_args.kwargs["filename"] == plot_path


def test_main_single_file_is_an_error(measurement_files, capsys):
    assert main(measurement_files[:1]) == 2
    assert "Error: At least 2 subwoofer measurements required" in capsys.readouterr().out


def test_main_invalid_range_is_an_error(measurement_files, capsys):
    assert main(measurement_files + ["--delay-min", "2", "--delay-max", "1"]) == 2
    assert "Error: Invalid range parameters" in capsys.readouterr().out


def test_main_uncommented_header_is_an_error(measurement_files, tmp_path, capsys):
    exported = tmp_path / "other_tool.txt"
    exported.write_text("Freq(Hz) SPL(dB) Phase(degrees)\n40 80 0\n50 81 0\n")

    assert main([str(exported), measurement_files[1]] + SMALL_GRID) == 2
    out = capsys.readouterr().out
    assert "Error: Could not parse" in out
    assert "other_tool.txt" in out


def test_main_missing_file_is_an_error(tmp_path, capsys):
    missing = [str(tmp_path / "missing_a.txt"), str(tmp_path / "missing_b.txt")]
    assert main(missing) == 2
    assert "Error:" in capsys.readouterr().out


def test_config_from_args_converts_milliseconds():
    args = build_parser().parse_args(
        ["a.txt", "b.txt", "--delay-min", "-2", "--delay-max", "3", "--delay-step", "0.05", "--allpass"])
    config = config_from_args(args)
    assert config.delay.min == pytest.approx(-0.002)
    assert config.delay.max == pytest.approx(0.003)
    assert config.delay.step == pytest.approx(0.00005)
    assert config.all_pass.enabled
    assert config.gain.min == config.gain.max == 0
