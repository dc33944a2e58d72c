# -*- coding: utf-8 -*-
# Copyright 2024 Matthew Fitzpatrick.
#
# This program is free software: you can redistribute it and/or modify it under
# the terms of the GNU General Public License as published by the Free Software
# Foundation, version 3.
#
# This program is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS
# FOR A PARTICULAR PURPOSE. See the GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with
# this program. If not, see <https://www.gnu.org/licenses/gpl-3.0.html>.
"""Tests for the Jacobian estimators, regularizers, and descent directions of
``gradinvert``.

"""



#####################################
## Load libraries/packages/modules ##
#####################################

# For general array handling.
import numpy as np
import torch

# For operations related to unit tests.
import pytest



# For the coordinate transformations.
import gradinvert



##################################
## Define classes and functions ##
##################################

class _CountingScale(gradinvert.RealTransform):
    def __init__(self, s):
        self._num_source_dims = 3
        self._num_target_dims = 3
        self.s = s
        self.num_evaluations = 0

        return None



    def eval_forward_output(self, x):
        self.num_evaluations += 1

        return self.s*x



def _grid_points():
    for x in np.linspace(-4, 4, 5):
        for y in np.linspace(-4, 4, 5):
            yield (x, y)



@pytest.mark.parametrize("s, expected_det", [(1.0, 1.0),
                                             (4.0, 16.0),
                                             (0.25, 0.0625)])
def test_finite_difference_jacobian_determinant_of_scaling(s, expected_det):
    transform = gradinvert.AffineTransform(matrix=((0., s, 0.), (0., 0., s)))
    estimator = gradinvert.FiniteDifferenceJacobianTransform(transform)

    for point in _grid_points():
        jacobian = estimator.jacobian(point)
        assert abs(torch.linalg.det(jacobian).item() - expected_det) < 1e-4

    return None



def test_finite_difference_jacobian_of_zero_displacement_field():
    def displacement_field(x):
        return torch.zeros_like(x)

    transform = gradinvert.DisplacementFieldTransform(displacement_field)
    estimator = gradinvert.FiniteDifferenceJacobianTransform(transform)

    for point in _grid_points():
        jacobian = estimator.jacobian(point)
        assert abs(torch.linalg.det(jacobian).item() - 1.0) < 1e-4

    return None



def test_finite_difference_jacobian_columns_and_cost():
    transform = _CountingScale(s=2.0)

    kwargs = {"transform": transform, "jacobian_estimate_step": 0.5}
    estimator = gradinvert.FiniteDifferenceJacobianTransform(**kwargs)

    jacobian = estimator.jacobian((1.0, -2.0, 3.0, 100.0))

    np.testing.assert_allclose(jacobian.numpy(), 2.0*np.eye(3), atol=1e-12)
    assert transform.num_evaluations == 3+1

    np.testing.assert_allclose(estimator.apply((1.0, 2.0, 3.0)).numpy(),
                               (2.0, 4.0, 6.0))
    assert estimator.num_source_dims == 3
    assert estimator.num_target_dims == 3

    return None



def test_finite_difference_jacobian_of_nonlinear_field():
    def displacement_field(x):
        return torch.stack((x[0]*x[1], torch.sin(x[0])))

    transform = gradinvert.DisplacementFieldTransform(displacement_field)

    kwargs = {"transform": transform, "jacobian_estimate_step": 1e-7}
    estimator = gradinvert.FiniteDifferenceJacobianTransform(**kwargs)

    x = (0.3, -1.2)
    expected_jacobian = ((1+x[1], x[0]), (np.cos(x[0]), 1.0))

    np.testing.assert_allclose(estimator.jacobian(x).numpy(),
                               expected_jacobian,
                               atol=1e-6)

    return None



def test_finite_difference_copy_keeps_step():
    transform = gradinvert.AffineTransform()

    kwargs = {"transform": transform, "jacobian_estimate_step": 0.125}
    estimator = gradinvert.FiniteDifferenceJacobianTransform(**kwargs)
    estimator_copy = estimator.copy()

    assert isinstance(estimator_copy,
                      gradinvert.FiniteDifferenceJacobianTransform)
    assert estimator_copy.jacobian_estimate_step == 0.125
    assert estimator_copy.transform is not transform

    with pytest.raises(ValueError):
        gradinvert.FiniteDifferenceJacobianTransform(transform, 0)
    with pytest.raises(TypeError):
        gradinvert.FiniteDifferenceJacobianTransform(lambda x: x)

    return None



def test_singular_jacobian_does_not_raise():
    transform = gradinvert.AffineTransform(matrix=((0., 0., 0.),
                                                   (0., 0., 0.)))

    jacobian = transform.jacobian((1.0, 2.0))
    np.testing.assert_array_equal(jacobian.numpy(), np.zeros((2, 2)))

    direction = gradinvert.calc_direction_toward(transform,
                                                 (1.0, 2.0),
                                                 (3.0, 4.0))
    np.testing.assert_array_equal(direction.numpy(), (0.0, 0.0))
    assert torch.all(torch.isfinite(direction))

    return None



def test_direction_toward_is_normalized_steepest_descent():
    transform = gradinvert.AffineTransform(matrix=((0., 2., 0.),
                                                   (0., 0., 2.)))

    direction = gradinvert.calc_direction_toward(transform,
                                                 (1.0, 1.0),
                                                 (4.0, 6.0))
    np.testing.assert_allclose(direction.numpy(),
                               np.array((1.0, 2.0))/np.sqrt(5),
                               atol=1e-12)

    direction = transform.direction_toward((1.0, 1.0), (4.0, 6.0))
    np.testing.assert_allclose(torch.linalg.vector_norm(direction).item(),
                               1.0)

    direction = transform.direction_toward((2.0, 3.0), (4.0, 6.0))
    np.testing.assert_array_equal(direction.numpy(), (0.0, 0.0))

    with pytest.raises(TypeError):
        gradinvert.calc_direction_toward(_CountingScale(s=1.0),
                                         (0., 0., 0.),
                                         (0., 0., 0.))

    return None



def test_regularized_jacobian_blends_toward_identity():
    transform = gradinvert.AffineTransform(matrix=((0., 2., 4., 0.),
                                                   (0., 6., 8., 1.)))

    kwargs = {"differentiable_transform": transform,
              "jacobian_regularization_epsilon": 0.25}
    regularized_transform = gradinvert.RegularizedJacobianTransform(**kwargs)

    expected_jacobian = (0.25*np.eye(2, 3)
                         + 0.75*np.array(((2., 4., 0.), (6., 8., 1.))))
    np.testing.assert_allclose(regularized_transform.jacobian((1., 2., 3.)),
                               expected_jacobian)

    np.testing.assert_allclose(regularized_transform.apply((1., 2., 3.)),
                               transform.apply((1., 2., 3.)))
    assert regularized_transform.num_source_dims == 3
    assert regularized_transform.num_target_dims == 2

    return None



def test_regularized_jacobian_limits_and_copy():
    transform = gradinvert.AffineTransform(matrix=((0., 0., 0.),
                                                   (0., 0., 0.)))

    regularized_transform = \
        gradinvert.RegularizedJacobianTransform(transform, 1.0)
    np.testing.assert_allclose(regularized_transform.jacobian((5., 5.)),
                               np.eye(2))

    regularized_transform_copy = regularized_transform.copy()
    assert isinstance(regularized_transform_copy,
                      gradinvert.RegularizedJacobianTransform)
    assert regularized_transform_copy.jacobian_regularization_epsilon == 1.0
    assert (regularized_transform_copy.differentiable_transform
            is not transform)

    for epsilon in (-0.1, 1.5):
        with pytest.raises(ValueError):
            gradinvert.RegularizedJacobianTransform(transform, epsilon)

    return None
