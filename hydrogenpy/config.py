"""Sampler configuration.

:class:`SamplerConfig` holds every tunable of the envelope pre-scan and the
rejection loop. It can be built directly, loaded from a JSON/YAML file, or
overridden from environment variables.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)


class SamplerConfig(BaseModel):
    """Tunables for :class:`hydrogenpy.sampler.RejectionSampler`.

    Attributes
    ----------
    attempt_factor:
        Attempt budget per requested point; the sampler stops after
        ``count * attempt_factor`` candidates.
    scan_count:
        Number of uniform points drawn by the envelope pre-scan.
    scan_fraction:
        Fraction of the bounding half-width covered by the pre-scan.
    safety_factor:
        Multiplier applied to the scanned maximum density.
    fallback_envelope:
        Envelope used when the pre-scan only sees zero density.
    cutoff_factor:
        Density is zero beyond ``cutoff_factor * n**2``.
    box_scale, box_offset:
        Bounding half-width is ``box_scale * n**2 + box_offset``.
    batch_size:
        Candidates evaluated per kernel call.
    workers:
        Thread-pool size; ``1`` evaluates batches inline.
    deadline:
        Wall-clock budget in seconds, checked between batches.
    seed:
        Seed for ``numpy.random.default_rng``; ``None`` draws fresh entropy.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    attempt_factor: int = Field(default=500, ge=1)
    scan_count: int = Field(default=1000, ge=1)
    scan_fraction: float = Field(default=0.5, gt=0.0, le=1.0)
    safety_factor: float = Field(default=1.2, ge=1.0)
    fallback_envelope: float = Field(default=0.001, gt=0.0)
    cutoff_factor: float = Field(default=5.0, gt=0.0)
    box_scale: float = Field(default=2.5, gt=0.0)
    box_offset: float = Field(default=5.0, ge=0.0)
    batch_size: int = Field(default=4096, ge=1)
    workers: int = Field(default=1, ge=1)
    deadline: float | None = Field(default=None, gt=0.0)
    seed: int | None = Field(default=None, ge=0)

    @classmethod
    def from_file(cls, path_config: str | Path) -> "SamplerConfig":
        """Load a config from a ``.json``, ``.yaml`` or ``.yml`` file.

        The values may sit at the top level or inside a ``sampler`` section.
        """
        path_config = Path(path_config)
        match path_config.suffix:
            case ".json":
                with open(path_config) as data:
                    config = json.load(data)
            case ".yaml" | ".yml":
                with open(path_config) as data:
                    config = yaml.safe_load(data)
            case _:
                raise ValueError(
                    "The provided config file needs to be a json or yaml file!"
                )
        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ValueError(f"Config file {path_config} must contain a mapping")
        if "sampler" in config:
            config = config["sampler"] or {}
        log.debug(f"Loaded sampler config from {path_config}")
        return cls(**config)

    @classmethod
    def from_env(cls, base: "SamplerConfig | None" = None) -> "SamplerConfig":
        """Apply ``HYDROGENPY_*`` environment overrides on top of ``base``."""
        base = base if base is not None else cls()
        return base.model_copy(
            update=dict(
                workers=parse_int_env("HYDROGENPY_WORKERS", default=base.workers),
                batch_size=parse_int_env(
                    "HYDROGENPY_BATCH_SIZE", default=base.batch_size
                ),
                attempt_factor=parse_int_env(
                    "HYDROGENPY_ATTEMPT_FACTOR", default=base.attempt_factor
                ),
            )
        )


def parse_int_env(name: str, *, default: int, minimum: int = 1) -> int:
    """Parse an integer environment variable with a lower bound.

    Invalid or empty values fall back to ``default``.
    """

    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        log.warning(f"Ignoring non-integer value {raw!r} for {name}")
        return default
    return max(minimum, value)
