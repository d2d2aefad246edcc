import pytest
import numpy as np
from ltcfit.model.ltc import LTC
from ltcfit.model.brdfs import BrdfGGX
from ltcfit.model.estimators import compute_error
from ltcfit.model.objective import LTCObjective

MIN_ALPHA = 1e-4

def _objective(isotropic):
    V = np.array([np.sin(0.4), 0.0, np.cos(0.4)])
    return LTCObjective(LTC(), BrdfGGX(), V, 0.25, isotropic, 8, MIN_ALPHA)

@pytest.mark.parametrize("params", [
    [0.3, 0.9, 0.5],
    [0.7, 0.1, -0.2],
    [-1.0, 2.0, 0.3],
])
def test_isotropic_update_collapses_shape(params):
    objective = _objective(isotropic=True)
    objective.update(params)

    assert objective.ltc.m22 == objective.ltc.m11
    assert objective.ltc.m13 == 0.0

def test_anisotropic_update_assigns_all_scalars():
    objective = _objective(isotropic=False)
    objective.update([0.3, 0.9, 0.5])

    assert objective.ltc.m11 == 0.3
    assert objective.ltc.m22 == 0.9
    assert objective.ltc.m13 == 0.5
    assert np.allclose(objective.ltc.M, [[0.3, 0.0, 0.5], [0.0, 0.9, 0.0], [0.0, 0.0, 1.0]])

@pytest.mark.parametrize("isotropic", [True, False])
@pytest.mark.parametrize("params", [
    [-0.5, -0.5, 0.1],
    [0.0, 0.0, 0.0],
    [1e-8, -3.0, 0.2],
])
def test_update_clamps_to_min_alpha(isotropic, params):
    objective = _objective(isotropic)
    objective.update(params)

    assert objective.ltc.m11 >= MIN_ALPHA
    assert objective.ltc.m22 >= MIN_ALPHA

def test_call_returns_error_of_updated_lobe():
    objective = _objective(isotropic=False)
    value = objective([0.4, 0.6, 0.1])

    expected = compute_error(objective.ltc, objective.brdf, objective.V, objective.alpha, 8)
    assert value == expected
    assert np.allclose(objective.ltc.shape, [0.4, 0.6, 0.1])

if __name__ == '__main__':
    pytest.main([__file__])
