import json

import numpy.testing as npt
import pytest

from hydrogenpy import generate_orbital_points
from hydrogenpy.export import OrbitalSamples, export_samples, read_points


@pytest.fixture(scope="module")
def result():
    return generate_orbital_points(2, 1, 1, 300, rng=42)


def test_json_export(tmp_path, result):
    path = export_samples(result, tmp_path / "orbital.json")
    with open(path) as data:
        record = json.load(data)
    assert record["label"] == "2p_x"
    assert (record["n"], record["l"], record["m"]) == (2, 1, 1)
    assert record["requested"] == 300
    assert len(record["points"]) == len(result)
    npt.assert_allclose(read_points(path), result.points)


def test_csv_export(tmp_path, result):
    path = export_samples(result, tmp_path / "orbital.csv")
    npt.assert_allclose(read_points(path), result.points)


def test_unsupported_suffix(tmp_path, result):
    with pytest.raises(ValueError):
        export_samples(result, tmp_path / "orbital.txt")


def test_record_rejects_malformed_points():
    with pytest.raises(ValueError):
        OrbitalSamples(
            n=1, l=0, m=0, label="1s", points=[[0.0, 1.0]],
            requested=1, attempts=1, envelope=0.1,
        )
