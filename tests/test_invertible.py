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
"""Tests for the class :class:`gradinvert.IterativelyInvertibleTransform`.

"""



#####################################
## Load libraries/packages/modules ##
#####################################

# For running transformations concurrently.
import concurrent.futures

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

def _displacement_field(x):
    return torch.stack((0.1*torch.sin(x[1]), 0.1*torch.cos(x[0])))



def _generate_thin_plate_spline_transform():
    kwargs = {"source_landmarks": ((0., 0.), (1., 0.), (0., 1.), (1., 1.),
                                   (0.5, 0.4)),
              "target_landmarks": ((0., 0.), (1.2, 0.1), (-0.1, 0.9),
                                   (1.3, 1.4), (0.7, 0.3))}
    transform = gradinvert.ThinPlateSplineTransform(**kwargs)

    return transform



def test_differentiable_transform_is_used_directly():
    transform = _generate_thin_plate_spline_transform()
    invertible_transform = gradinvert.IterativelyInvertibleTransform(transform)

    assert invertible_transform.transform is transform
    assert (invertible_transform.solver.differentiable_transform
            is transform)
    assert not invertible_transform.is_inverse

    return None



def test_finite_difference_and_regularization_wrappers_are_added():
    transform = gradinvert.DisplacementFieldTransform(_displacement_field)

    gradient_descent_params = \
        gradinvert.GradientDescentParams(jacobian_estimate_step=0.001)
    kwargs = {"transform": transform,
              "gradient_descent_params": gradient_descent_params}
    invertible_transform = gradinvert.IterativelyInvertibleTransform(**kwargs)

    differentiable_transform = \
        invertible_transform.solver.differentiable_transform
    assert isinstance(differentiable_transform,
                      gradinvert.FiniteDifferenceJacobianTransform)
    assert differentiable_transform.transform is transform
    assert differentiable_transform.jacobian_estimate_step == 0.001

    gradient_descent_params = \
        gradinvert.GradientDescentParams(jacobian_regularization_epsilon=0.2)
    kwargs = {"transform": transform,
              "gradient_descent_params": gradient_descent_params}
    invertible_transform = gradinvert.IterativelyInvertibleTransform(**kwargs)

    differentiable_transform = \
        invertible_transform.solver.differentiable_transform
    assert isinstance(differentiable_transform,
                      gradinvert.RegularizedJacobianTransform)
    assert differentiable_transform.jacobian_regularization_epsilon == 0.2
    assert isinstance(differentiable_transform.differentiable_transform,
                      gradinvert.FiniteDifferenceJacobianTransform)

    with pytest.raises(TypeError):
        gradinvert.IterativelyInvertibleTransform(_displacement_field)
    with pytest.raises(TypeError):
        gradinvert.IterativelyInvertibleTransform(transform, 0.2)

    return None



def test_round_trip():
    transform = gradinvert.DisplacementFieldTransform(_displacement_field)

    gradient_descent_params = gradinvert.GradientDescentParams(tolerance=1e-8)
    kwargs = {"transform": transform,
              "gradient_descent_params": gradient_descent_params}
    invertible_transform = gradinvert.IterativelyInvertibleTransform(**kwargs)

    for source in ((0.0, 0.0), (1.0, -2.0), (-3.0, 0.5)):
        target = invertible_transform.apply(source)
        estimate = invertible_transform.apply_inverse(target)

        np.testing.assert_allclose(estimate.numpy(), source, atol=1e-6)
        np.testing.assert_allclose(invertible_transform.apply(estimate),
                                   target,
                                   atol=1e-7)

    return None



def test_in_place_apply_inverse():
    transform = gradinvert.AffineTransform(matrix=((1., 2., 0.),
                                                   (-1., 0., 4.)))
    invertible_transform = gradinvert.IterativelyInvertibleTransform(transform)

    buffer = np.array((3.0, 7.0, 9.0))
    returned_buffer = invertible_transform.apply_inverse(buffer, buffer)

    assert returned_buffer is buffer
    np.testing.assert_allclose(buffer, (1.0, 2.0, 9.0), atol=1e-4)

    source = torch.zeros((2,), dtype=torch.float64)
    invertible_transform.apply_inverse((3.0, 7.0), source)
    np.testing.assert_allclose(source.numpy(), (1.0, 2.0), atol=1e-4)

    return None



def test_inverse_view_swaps_roles():
    transform = gradinvert.AffineTransform(matrix=((1., 2., 0., 0.),
                                                   (-1., 0., 4., 0.)))
    gradient_descent_params = gradinvert.GradientDescentParams(tolerance=1e-8)
    kwargs = {"transform": transform,
              "gradient_descent_params": gradient_descent_params}
    invertible_transform = gradinvert.IterativelyInvertibleTransform(**kwargs)

    inverse_view = invertible_transform.inverse()

    assert inverse_view.is_inverse
    assert inverse_view.solver is invertible_transform.solver
    assert inverse_view.transform is transform
    assert inverse_view.num_source_dims == 2
    assert inverse_view.num_target_dims == 3
    assert not invertible_transform.is_inverse
    assert invertible_transform.num_source_dims == 3

    np.testing.assert_allclose(inverse_view.apply_inverse((1., 2., 5.)),
                               (3., 7.),
                               atol=1e-12)
    assert not inverse_view.inverse().is_inverse

    with pytest.raises(ValueError):
        inverse_view.apply((3., 7.))

    estimate, err = \
        inverse_view.solver.solve((3., 7.), initial_guess=(0., 0., 0.))
    assert err < 1e-8
    np.testing.assert_allclose(transform.apply(estimate), (3., 7.), atol=1e-8)

    return None



def test_copy_is_independent_and_keeps_inverse_flag():
    transform = gradinvert.AffineTransform(matrix=((0., 2., 0.),
                                                   (0., 0., 2.)))
    invertible_transform = gradinvert.IterativelyInvertibleTransform(transform)
    inverse_view = invertible_transform.inverse()

    inverse_view_copy = inverse_view.copy()

    assert inverse_view_copy.is_inverse
    assert inverse_view_copy.transform is not transform
    assert inverse_view_copy.solver is not inverse_view.solver

    transform.update({"matrix": ((0., 4., 0.), (0., 0., 4.))})

    np.testing.assert_allclose(inverse_view_copy.apply((2., 4.)).numpy(),
                               (1., 2.),
                               atol=1e-6)
    np.testing.assert_allclose(inverse_view.apply((2., 4.)).numpy(),
                               (0.5, 1.),
                               atol=1e-6)

    return None



def test_copies_can_be_used_concurrently():
    transform = gradinvert.DisplacementFieldTransform(_displacement_field)
    invertible_transform = gradinvert.IterativelyInvertibleTransform(transform)

    targets = [(0.1*idx, -0.2*idx) for idx in range(16)]
    expected_estimates = [invertible_transform.apply_inverse(target).numpy()
                          for target in targets]

    def estimate_sources(transform_copy, targets):
        estimates = [transform_copy.apply_inverse(target).numpy()
                     for target in targets]

        return estimates

    num_workers = 4
    with concurrent.futures.ThreadPoolExecutor(num_workers) as executor:
        futures = [executor.submit(estimate_sources,
                                   invertible_transform.copy(),
                                   targets[worker_idx::num_workers])
                   for worker_idx in range(num_workers)]
        results = [future.result() for future in futures]

    for worker_idx, estimates in enumerate(results):
        zip_obj = zip(estimates, expected_estimates[worker_idx::num_workers])
        for estimate, expected_estimate in zip_obj:
            np.testing.assert_array_equal(estimate, expected_estimate)

    return None
