"""Serialization of sample sets.

A :class:`~hydrogenpy.sampler.SamplingResult` is flattened into the
:class:`OrbitalSamples` record and written as JSON, YAML, CSV or a
bz2-compressed pickle, picked by the output suffix.
"""

from __future__ import annotations

import _pickle
import bz2
import json
import logging
from pathlib import Path

import numpy as np
import pandas as pd
import yaml
from pydantic import Field, model_validator
from pydantic.dataclasses import dataclass
from typing_extensions import Self

from hydrogenpy.sampler import SamplingResult

log = logging.getLogger(__name__)


@dataclass
class OrbitalSamples:
    n: int = Field(ge=1)
    l: int = Field(ge=0)
    m: int = Field()
    label: str = Field()
    points: list[list[float]] = Field()
    requested: int = Field(ge=1)
    attempts: int = Field(ge=0)
    envelope: float = Field(gt=0.0)
    complete: bool = Field(default=True)

    @model_validator(mode="after")
    def points_are_triples(self) -> Self:
        if any(len(p) != 3 for p in self.points):
            raise ValueError("Every point needs exactly three coordinates (x, y, z)")
        if len(self.points) > self.requested:
            raise ValueError(
                f"More points ({len(self.points)}) than requested ({self.requested})"
            )
        return self

    @classmethod
    def from_result(cls, result: SamplingResult) -> "OrbitalSamples":
        return cls(
            n=result.state.n,
            l=result.state.l,
            m=result.state.m,
            label=result.state.label,
            points=result.points.tolist(),
            requested=result.requested,
            attempts=result.attempts,
            envelope=result.envelope.ceiling,
            complete=result.complete,
        )

    def as_dict(self) -> dict:
        return dict(
            n=self.n,
            l=self.l,
            m=self.m,
            label=self.label,
            requested=self.requested,
            attempts=self.attempts,
            envelope=self.envelope,
            complete=self.complete,
            points=self.points,
        )


def export_samples(result: SamplingResult, output_path: str | Path) -> Path:
    """Write ``result`` to ``output_path``; the suffix selects the format.

    Supported suffixes are ``.json``, ``.yaml``/``.yml``, ``.csv`` (points
    only, columns ``x, y, z``) and ``.pbz2``.
    """
    output_path = Path(output_path)
    record = OrbitalSamples.from_result(result)
    match output_path.suffix:
        case ".json":
            with open(output_path, "w") as outfile:
                json.dump(record.as_dict(), outfile)
        case ".yaml" | ".yml":
            with open(output_path, "w") as outfile:
                yaml.dump(record.as_dict(), outfile, default_flow_style=False)
        case ".csv":
            pd.DataFrame(result.points, columns=["x", "y", "z"]).to_csv(
                output_path, index=False
            )
        case ".pbz2":
            with bz2.BZ2File(output_path, "w") as outfile:
                _pickle.dump(record.as_dict(), outfile)
        case _:
            raise ValueError(
                "The output file needs to be a json, yaml, csv or pbz2 file!"
            )
    log.info(f"Saved {len(result)} samples of {record.label} to {output_path}")
    return output_path


def read_points(path: str | Path) -> np.ndarray:
    """Read the ``(k, 3)`` point array back from any supported export."""
    path = Path(path)
    match path.suffix:
        case ".json":
            with open(path) as data:
                record = json.load(data)
        case ".yaml" | ".yml":
            with open(path) as data:
                record = yaml.safe_load(data)
        case ".csv":
            return pd.read_csv(path)[["x", "y", "z"]].to_numpy(dtype=float)
        case ".pbz2":
            with bz2.BZ2File(path, "rb") as data:
                record = _pickle.load(data)
        case _:
            raise ValueError("The input file needs to be a json, yaml, csv or pbz2 file!")
    return np.asarray(record["points"], dtype=float).reshape(-1, 3)
