import bz2
import logging

import _pickle
import numpy as np
from hydrogenpy import RejectionSampler, SamplerConfig

formatter = logging.Formatter("%(levelname)s (%(name)s): %(message)s")
console = logging.StreamHandler()
console.setFormatter(formatter)
logger = logging.getLogger("hydrogenpy")
logger.addHandler(console)
logger.setLevel(logging.INFO)

sampler = RejectionSampler(config=SamplerConfig(workers=4))

clouds = {}
for n, l, m in [(1, 0, 0), (2, 1, 0), (3, 2, 1), (3, 2, -2)]:
    result = sampler.sample(n, l, m, 8000)
    r, theta, phi = result.spherical()
    clouds[result.state.label] = dict(
        points=result.points,
        mean_radius=float(np.mean(r)),
        complete=result.complete,
    )
    logger.info(f"{result.state.label}: <r> = {np.mean(r):.3f} a0")

with bz2.BZ2File("orbital_clouds.pbz2", "w") as f:
    _pickle.dump(clouds, f)
