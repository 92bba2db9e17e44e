import json
import logging

import pytest
from click.testing import CliRunner

from hydrogenpy.cli import cli


@pytest.fixture(autouse=True)
def restore_logger():
    # the cli attaches a handler bound to the runner's stderr
    logger = logging.getLogger("hydrogenpy")
    handlers, level = logger.handlers[:], logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)


def test_sample_command(tmp_path):
    output = tmp_path / "points.json"
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["sample", "-n", "2", "-l", "1", "-m", "0", "--count", "200", "--seed", "1",
         "--output", str(output)],
    )
    assert result.exit_code == 0, result.output
    assert "2p_z" in result.output
    with open(output) as data:
        record = json.load(data)
    assert len(record["points"]) == 200


def test_sample_command_rejects_invalid_numbers(tmp_path):
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["sample", "-n", "2", "-l", "2", "--output", str(tmp_path / "points.json")],
    )
    assert result.exit_code == 1
    assert "Invalid quantum numbers" in result.output
    assert not (tmp_path / "points.json").exists()


def test_sample_command_strict_budget(tmp_path):
    config = tmp_path / "sampler.json"
    config.write_text(json.dumps({"attempt_factor": 1}))
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["sample", "-n", "1", "-l", "0", "--count", "500", "--config", str(config),
         "--strict", "--output", str(tmp_path / "points.csv")],
    )
    assert result.exit_code == 1
    assert "attempt budget spent" in result.output


def test_check_envelope_command():
    runner = CliRunner()
    result = runner.invoke(
        cli, ["check-envelope", "-n", "1", "-l", "0", "--resolution", "21", "--seed", "0"]
    )
    assert result.exit_code in (0, 2)
    assert "1s: envelope" in result.output


def test_check_envelope_rejects_single_point_grid():
    runner = CliRunner()
    result = runner.invoke(
        cli, ["check-envelope", "-n", "1", "-l", "0", "--resolution", "1"]
    )
    assert result.exit_code == 2
    assert "resolution" in result.output


def test_sample_command_rejects_non_positive_deadline(tmp_path):
    output = tmp_path / "points.json"
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["sample", "-n", "1", "-l", "0", "--count", "10", "--deadline", "-1",
         "--output", str(output)],
    )
    assert result.exit_code == 2
    assert not output.exists()
