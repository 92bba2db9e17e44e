import json

import pytest
import yaml
from pydantic import ValidationError

from hydrogenpy.config import SamplerConfig, parse_int_env


def test_defaults():
    config = SamplerConfig()
    assert config.attempt_factor == 500
    assert config.scan_count == 1000
    assert config.scan_fraction == 0.5
    assert config.safety_factor == 1.2
    assert config.fallback_envelope == 0.001
    assert config.cutoff_factor == 5.0
    assert config.workers == 1
    assert config.deadline is None


def test_from_json(tmp_path):
    path = tmp_path / "sampler.json"
    path.write_text(json.dumps({"attempt_factor": 50, "workers": 2}))
    config = SamplerConfig.from_file(str(path))
    assert config.attempt_factor == 50
    assert config.workers == 2


def test_from_yaml_section(tmp_path):
    path = tmp_path / "sampler.yaml"
    path.write_text(yaml.dump({"sampler": {"scan_count": 200, "deadline": 2.5}}))
    config = SamplerConfig.from_file(path)
    assert config.scan_count == 200
    assert config.deadline == 2.5


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "sampler.yml"
    path.write_text("")
    assert SamplerConfig.from_file(path) == SamplerConfig()


def test_unsupported_suffix(tmp_path):
    path = tmp_path / "sampler.toml"
    path.write_text("workers = 2")
    with pytest.raises(ValueError):
        SamplerConfig.from_file(path)


@pytest.mark.parametrize(
    "field,value",
    [
        ("attempt_factor", 0),
        ("scan_fraction", 1.5),
        ("safety_factor", 0.5),
        ("workers", 0),
        ("deadline", -1.0),
        ("unknown", 1),
    ],
)
def test_invalid_values(field, value):
    with pytest.raises(ValidationError):
        SamplerConfig(**{field: value})


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("HYDROGENPY_WORKERS", "4")
    monkeypatch.setenv("HYDROGENPY_BATCH_SIZE", "garbage")
    monkeypatch.delenv("HYDROGENPY_ATTEMPT_FACTOR", raising=False)
    config = SamplerConfig.from_env(SamplerConfig(batch_size=128, attempt_factor=20))
    assert config.workers == 4
    assert config.batch_size == 128
    assert config.attempt_factor == 20


def test_parse_int_env_minimum(monkeypatch):
    monkeypatch.setenv("HYDROGENPY_TEST_INT", "-3")
    assert parse_int_env("HYDROGENPY_TEST_INT", default=7, minimum=1) == 1
    monkeypatch.setenv("HYDROGENPY_TEST_INT", "")
    assert parse_int_env("HYDROGENPY_TEST_INT", default=7) == 7
