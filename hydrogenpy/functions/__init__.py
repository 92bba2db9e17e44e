"""Low-level numerical kernels and special functions.

This subpackage contains the factorial memo table and the Numba-accelerated
Laguerre/Legendre recurrences used by the wavefunction evaluator.
"""

from hydrogenpy.functions.cpu_numba import associated_legendre, generalized_laguerre
from hydrogenpy.functions.factorial import FactorialTable, factorial, factorial_ratio
