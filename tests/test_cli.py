import io
import random

import pytest

from mpcpilot.cli import SimulationSummary, format_summary, main, run_simulation
from mpcpilot.core import Vector3


@pytest.fixture(scope="module")
def run():
    random.seed(7)
    buffer = io.StringIO()
    summary = run_simulation(2, 0.01, 0.0, buffer)
    return summary, buffer.getvalue()


def test_one_data_line_per_iteration(run):
    _, data = run
    lines = data.splitlines()
    assert len(lines) == 2
    for line in lines:
        groups = line.split(";")
        assert len(groups) == 7
        assert [len(g.split(",")) for g in groups] == [3, 3, 3, 3, 3, 3, 4]


def test_data_values_parse_as_numbers(run):
    _, data = run
    for line in data.splitlines():
        *vectors, outputs = line.split(";")
        for group in vectors:
            assert all(isinstance(float(v), float) for v in group.split(","))
        assert all(10 <= int(v) <= 1000 for v in outputs.split(","))


def test_summary_averages_within_motor_range(run):
    summary, _ = run
    assert summary.iterations == 2
    assert len(summary.average_outputs) == 4
    assert all(10 <= value <= 1000 for value in summary.average_outputs)
    assert summary.wall_time >= 0


def test_rejects_non_positive_iterations():
    with pytest.raises(ValueError):
        run_simulation(0, 0.01, 0.0, None)


def test_format_summary_layout():
    summary = SimulationSummary(
        iterations=4,
        dt=0.5,
        wall_time=1.0,
        peak_position=Vector3(1.5, -2.0, 0.0),
        average_outputs=[10.0, 20.0, 30.0, 40.0],
    )
    text = format_summary(summary)
    lines = text.split("\n")
    assert lines[0] == "0.500000"
    assert "MAX Values:" in lines
    assert "Iterations to height: 0 / 4" in lines
    assert "Position:\n\tX: 1.500000\t,Y: -2.000000\t,Z: 0.000000" in text
    assert text.endswith(
        "Avg. Rotors:\n\tFL: 10.000000\tFR: 20.000000\tBL: 30.000000\tBR: 40.000000"
    )


def test_main_writes_data_and_prints(tmp_path, capsys):
    target = tmp_path / "data.txt"
    code = main(["--iterations", "1", "--data", str(target), "--seed", "1"])
    assert code == 0
    assert len(target.read_text(encoding="utf-8").splitlines()) == 1
    out = capsys.readouterr().out
    assert "Avg. Rotors:" in out
    assert "Iterations to height: 0 / 1" in out