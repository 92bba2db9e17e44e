import pytest

from hydrogenpy.exceptions import InvalidQuantumNumbers
from hydrogenpy.quantum_state import QuantumState, validate_quantum_numbers


@pytest.mark.parametrize(
    "n,l,m,label",
    [
        (1, 0, 0, "1s"),
        (2, 1, 0, "2p_z"),
        (2, 1, 1, "2p_x"),
        (2, 1, -1, "2p_y"),
        (3, 2, -2, "3d_xy"),
        (3, 2, 2, "3d_x2-y2"),
        (4, 3, -2, "4f(m=-2)"),
    ],
)
def test_labels(n, l, m, label):
    assert QuantumState(n, l, m).label == label


@pytest.mark.parametrize(
    "n,l,m",
    [(0, 0, 0), (2, 2, 0), (2, -1, 0), (3, 1, 2), (3, 1, -2), (1.5, 0, 0), (True, 0, 0)],
)
def test_invalid_states(n, l, m):
    with pytest.raises(InvalidQuantumNumbers):
        QuantumState(n, l, m)


def test_error_carries_numbers():
    with pytest.raises(InvalidQuantumNumbers) as excinfo:
        validate_quantum_numbers(2, 2, 0)
    assert (excinfo.value.n, excinfo.value.l, excinfo.value.m) == (2, 2, 0)
    assert isinstance(excinfo.value, ValueError)


def test_state_is_immutable():
    state = QuantumState(3, 1, -1)
    with pytest.raises(AttributeError):
        state.n = 4
    assert state.as_tuple() == (3, 1, -1)
