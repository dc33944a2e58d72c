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
"""``gradinvert`` is a Python library for estimating iteratively the inverses
of coordinate transformations.

"""



#####################################
## Load libraries/packages/modules ##
#####################################

# For accessing attributes of functions.
import inspect

# For randomly selecting items in dictionaries.
import random

# For performing deep copies.
import copy

# For checking whether floating-point numbers are finite.
import math

# For logging the termination of the gradient descent algorithm.
import logging



# For general array handling.
import numpy as np
import torch

# For validating and converting objects.
import czekitout.check
import czekitout.convert

# For defining classes that support enforced validation, updatability,
# pre-serialization, and de-serialization.
import fancytypes



# Get version of current package.
from gradinvert.version import __version__



##################################
## Define classes and functions ##
##################################

# List of public objects in package.
__all__ = ["RealTransform",
           "DifferentiableRealTransform",
           "calc_direction_toward",
           "FiniteDifferenceJacobianTransform",
           "RegularizedJacobianTransform",
           "AffineTransform",
           "ThinPlateSplineTransform",
           "DisplacementFieldTransform",
           "GradientDescentParams",
           "GradientDescentInverse",
           "IterativelyInvertibleTransform"]



logger = logging.getLogger(__name__)



def _check_and_convert_real_torch_vector(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    name_of_alias_of_real_torch_vector = \
        params["name_of_alias_of_real_torch_vector"]

    if isinstance(obj, torch.Tensor):
        if obj.is_complex() or (obj.dtype == torch.bool):
            unformatted_err_msg = globals()[current_func_name+"_err_msg_1"]
            err_msg = unformatted_err_msg.format(
                name_of_alias_of_real_torch_vector)
            raise TypeError(err_msg)

        real_torch_vector = obj.detach().to(dtype=torch.float64)
    else:
        kwargs = {"obj": obj, "obj_name": name_of_alias_of_real_torch_vector}
        real_numpy_array = czekitout.convert.to_real_numpy_array(**kwargs)

        real_torch_vector = torch.tensor(real_numpy_array, dtype=torch.float64)

    min_num_elems = params["min_num_elems"]

    if ((len(real_torch_vector.shape) != 1)
        or (real_torch_vector.shape[0] < min_num_elems)):
        unformatted_err_msg = globals()[current_func_name+"_err_msg_2"]
        err_msg = unformatted_err_msg.format(name_of_alias_of_real_torch_vector,
                                             min_num_elems)
        raise ValueError(err_msg)

    return real_torch_vector



def _check_and_convert_source(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    params["real_torch_vector"] = obj
    params["name_of_alias_of_real_torch_vector"] = obj_name
    source = _check_and_convert_real_torch_vector(params)

    del params["real_torch_vector"]
    del params["name_of_alias_of_real_torch_vector"]

    return source



def _check_and_convert_target(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    params["real_torch_vector"] = obj
    params["name_of_alias_of_real_torch_vector"] = obj_name
    target = _check_and_convert_real_torch_vector(params)

    del params["real_torch_vector"]
    del params["name_of_alias_of_real_torch_vector"]

    return target



def _check_and_convert_x(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    params["real_torch_vector"] = obj
    params["name_of_alias_of_real_torch_vector"] = obj_name
    x = _check_and_convert_real_torch_vector(params)

    del params["real_torch_vector"]
    del params["name_of_alias_of_real_torch_vector"]

    return x



def _check_and_convert_y(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    params["real_torch_vector"] = obj
    params["name_of_alias_of_real_torch_vector"] = obj_name
    y = _check_and_convert_real_torch_vector(params)

    del params["real_torch_vector"]
    del params["name_of_alias_of_real_torch_vector"]

    return y



def _check_and_convert_output_buffer(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    name_of_alias_of_output_buffer = params["name_of_alias_of_output_buffer"]

    accepted_types = (torch.Tensor, np.ndarray)

    kwargs = {"obj": obj,
              "obj_name": name_of_alias_of_output_buffer,
              "accepted_types": accepted_types}
    czekitout.check.if_instance_of_any_accepted_types(**kwargs)

    if isinstance(obj, accepted_types[1]):
        if obj.dtype.kind != "f":
            unformatted_err_msg = globals()[current_func_name+"_err_msg_1"]
            err_msg = unformatted_err_msg.format(name_of_alias_of_output_buffer)
            raise TypeError(err_msg)
        output_buffer = torch.from_numpy(obj)
    else:
        if not torch.is_floating_point(obj):
            unformatted_err_msg = globals()[current_func_name+"_err_msg_1"]
            err_msg = unformatted_err_msg.format(name_of_alias_of_output_buffer)
            raise TypeError(err_msg)
        output_buffer = obj

    min_num_elems = params["min_num_elems"]

    if ((len(output_buffer.shape) != 1)
        or (output_buffer.shape[0] < min_num_elems)):
        unformatted_err_msg = globals()[current_func_name+"_err_msg_2"]
        err_msg = unformatted_err_msg.format(name_of_alias_of_output_buffer,
                                             min_num_elems)
        raise ValueError(err_msg)

    return output_buffer



def _eval_forward_output(transform, x):
    output = torch.as_tensor(transform.eval_forward_output(x),
                             dtype=torch.float64)

    expected_shape = (transform.num_target_dims,)
    if tuple(output.shape) != expected_shape:
        unformatted_err_msg = _eval_forward_output_err_msg_1
        err_msg = unformatted_err_msg.format(tuple(output.shape),
                                             expected_shape)
        raise ValueError(err_msg)

    return output



def _eval_jacobian(differentiable_transform, x):
    jacobian = torch.as_tensor(differentiable_transform.eval_jacobian(x),
                               dtype=torch.float64)

    expected_shape = (differentiable_transform.num_target_dims,
                      differentiable_transform.num_source_dims)
    if tuple(jacobian.shape) != expected_shape:
        unformatted_err_msg = _eval_jacobian_err_msg_1
        err_msg = unformatted_err_msg.format(tuple(jacobian.shape),
                                             expected_shape)
        raise ValueError(err_msg)

    return jacobian



def _apply(source,
           target,
           num_source_dims,
           num_target_dims,
           eval_output,
           names_of_aliases=("source", "target")):
    params = {names_of_aliases[0]: source, "min_num_elems": num_source_dims}
    func_alias = globals()["_check_and_convert_"+names_of_aliases[0]]
    source = func_alias(params)

    num_extra_dims = source.shape[0] - num_source_dims

    if target is None:
        target = torch.zeros((num_target_dims+num_extra_dims,),
                             dtype=torch.float64)
        output_buffer = target
    else:
        params = {"output_buffer": target,
                  "name_of_alias_of_output_buffer": names_of_aliases[1],
                  "min_num_elems": num_target_dims}
        output_buffer = _check_and_convert_output_buffer(params)
        num_extra_dims = min(num_extra_dims,
                             output_buffer.shape[0] - num_target_dims)

    extra_cmpnts = source[num_source_dims:num_source_dims+num_extra_dims].clone()

    with torch.no_grad():
        output = eval_output(source[:num_source_dims].clone())

    output_buffer[:num_target_dims] = output[:]
    output_buffer[num_target_dims:num_target_dims+num_extra_dims] = \
        extra_cmpnts[:]

    return target



class RealTransform():
    r"""A coordinate transformation from an :math:`n`-dimensional real space
    to an :math:`m`-dimensional real space.

    This is the base class of every transformation in :mod:`gradinvert`. A
    subclass must set the attributes ``_num_source_dims`` and
    ``_num_target_dims``, i.e. :math:`n` and :math:`m` respectively, upon
    construction, and must implement the method
    :meth:`~gradinvert.RealTransform.eval_forward_output`.

    Points are represented by 1D `torch.Tensor` objects with the data type
    `torch.float64`. A source point may carry more than :math:`n` components,
    in which case the trailing components are passed through unchanged to the
    trailing components of the target point, as far as the target point has
    room for them.

    """
    @property
    def num_source_dims(self):
        r"""`int`: The dimensionality :math:`n` of the source space.

        Note that ``num_source_dims`` should be considered **read-only**.

        """
        return self._num_source_dims



    @property
    def num_target_dims(self):
        r"""`int`: The dimensionality :math:`m` of the target space.

        Note that ``num_target_dims`` should be considered **read-only**.

        """
        return self._num_target_dims



    def eval_forward_output(self, x):
        r"""Evaluate the coordinate transformation at a validated point.

        Parameters
        ----------
        x : `torch.Tensor` (`float`, shape=(``num_source_dims``,))
            The source point.

        Returns
        -------
        output : `torch.Tensor` (`float`, shape=(``num_target_dims``,))
            The target point.

        """
        err_msg = _real_transform_err_msg_1.format("eval_forward_output",
                                                   type(self).__name__)
        raise NotImplementedError(err_msg)



    def apply(self, source, target=None):
        r"""Apply the coordinate transformation to a source point.

        Parameters
        ----------
        source : `array_like` (`float`, ndim=1)
            The source point, with at least ``num_source_dims`` components.
        target : `torch.Tensor` | `numpy.ndarray` | `None`, optional
            If ``target`` is a 1D floating-point array with at least
            ``num_target_dims`` components, then the target point is written
            into it, including the case where ``target`` is the same object as
            ``source``. Otherwise, if ``target`` is set to ``None``, then a new
            `torch.Tensor` is allocated.

        Returns
        -------
        target : `torch.Tensor` | `numpy.ndarray`
            The target point.

        """
        kwargs = {"source": source,
                  "target": target,
                  "num_source_dims": self.num_source_dims,
                  "num_target_dims": self.num_target_dims,
                  "eval_output": self._eval_checked_forward_output}
        target = _apply(**kwargs)

        return target



    def _eval_checked_forward_output(self, x):
        output = _eval_forward_output(self, x)

        return output



    def copy(self):
        r"""Return a deep copy of the coordinate transformation.

        Each thread that applies a coordinate transformation concurrently with
        other threads should own a copy of said transformation.

        Returns
        -------
        transform_copy : :class:`gradinvert.RealTransform`
            The deep copy.

        """
        transform_copy = copy.deepcopy(self)

        return transform_copy



class DifferentiableRealTransform(RealTransform):
    r"""A coordinate transformation that can supply its Jacobian.

    On top of the requirements of :class:`gradinvert.RealTransform`, a
    subclass must implement the method
    :meth:`~gradinvert.DifferentiableRealTransform.eval_jacobian`.

    """
    def eval_jacobian(self, x):
        r"""Evaluate the Jacobian of the coordinate transformation at a
        validated point.

        Parameters
        ----------
        x : `torch.Tensor` (`float`, shape=(``num_source_dims``,))
            The source point.

        Returns
        -------
        jacobian : `torch.Tensor` (`float`, shape=(``num_target_dims``, ``num_source_dims``))
            The Jacobian, where ``jacobian[i, j]`` is the partial derivative of
            the ``i`` th target component with respect to the ``j`` th source
            component.

        """
        err_msg = _real_transform_err_msg_1.format("eval_jacobian",
                                                   type(self).__name__)
        raise NotImplementedError(err_msg)



    def jacobian(self, x):
        r"""Evaluate the Jacobian of the coordinate transformation at a point.

        Parameters
        ----------
        x : `array_like` (`float`, ndim=1)
            The source point, with at least ``num_source_dims`` components.
            Trailing components are ignored.

        Returns
        -------
        jacobian : `torch.Tensor` (`float`, shape=(``num_target_dims``, ``num_source_dims``))
            The Jacobian.

        """
        params = {"x": x, "min_num_elems": self.num_source_dims}
        x = _check_and_convert_x(params)

        with torch.no_grad():
            jacobian = _eval_jacobian(self, x[:self.num_source_dims].clone())

        return jacobian



    def direction_toward(self, x, y):
        r"""Calculate the unit descent direction from a source point toward the
        pre-image of a target point.

        See the documentation for the function
        :func:`gradinvert.calc_direction_toward`.

        """
        kwargs = {"differentiable_transform": self, "x": x, "y": y}
        direction = calc_direction_toward(**kwargs)

        return direction



def _check_and_convert_transform(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    accepted_types = (RealTransform,)

    kwargs = {"obj": obj,
              "obj_name": obj_name,
              "accepted_types": accepted_types}
    czekitout.check.if_instance_of_any_accepted_types(**kwargs)

    transform = obj

    return transform



def _check_and_convert_differentiable_transform(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    accepted_types = (DifferentiableRealTransform,)

    kwargs = {"obj": obj,
              "obj_name": obj_name,
              "accepted_types": accepted_types}
    czekitout.check.if_instance_of_any_accepted_types(**kwargs)

    differentiable_transform = obj

    return differentiable_transform



def calc_direction_toward(differentiable_transform, x, y):
    r"""Calculate the unit descent direction from a source point toward the
    pre-image of a target point.

    Let :math:`f` be the coordinate transformation represented by
    ``differentiable_transform``, :math:`J` be its Jacobian at :math:`x`, and
    :math:`e=y-f(x)` be the residual. The descent direction is
    :math:`J^{T}e/\left|J^{T}e\right|`, i.e. the direction of steepest descent
    of :math:`\left|f(x)-y\right|^2` at :math:`x`, which remains well-defined
    when :math:`J` is singular.

    If :math:`\left|J^{T}e\right|` is zero or not finite, then the direction
    is degenerate and the zero vector is returned.

    Parameters
    ----------
    differentiable_transform : :class:`gradinvert.DifferentiableRealTransform`
        The coordinate transformation.
    x : `array_like` (`float`, ndim=1)
        The source point, with at least ``num_source_dims`` components.
    y : `array_like` (`float`, ndim=1)
        The target point, with at least ``num_target_dims`` components.

    Returns
    -------
    direction : `torch.Tensor` (`float`, shape=(``num_source_dims``,))
        The unit descent direction, or the zero vector if the direction is
        degenerate.

    """
    params = {"differentiable_transform": differentiable_transform}
    differentiable_transform = \
        _check_and_convert_differentiable_transform(params)

    num_source_dims = differentiable_transform.num_source_dims
    num_target_dims = differentiable_transform.num_target_dims

    params = {"x": x, "min_num_elems": num_source_dims}
    x = _check_and_convert_x(params)[:num_source_dims].clone()

    params = {"y": y, "min_num_elems": num_target_dims}
    y = _check_and_convert_y(params)[:num_target_dims].clone()

    with torch.no_grad():
        residual = y - _eval_forward_output(differentiable_transform, x)
        jacobian = _eval_jacobian(differentiable_transform, x)
        direction, _ = _calc_direction_from_residual(jacobian, residual)

    return direction



def _calc_direction_from_residual(jacobian, residual):
    unnormalized_direction = torch.einsum("mn, m -> n", jacobian, residual)
    magnitude = torch.linalg.vector_norm(unnormalized_direction).item()

    if (magnitude == 0) or (not math.isfinite(magnitude)):
        direction = torch.zeros_like(unnormalized_direction)
        magnitude = 0.0
    else:
        direction = unnormalized_direction / magnitude

    return direction, magnitude



def _check_and_convert_jacobian_estimate_step(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    kwargs = {"obj": obj, "obj_name": obj_name}
    jacobian_estimate_step = czekitout.convert.to_positive_float(**kwargs)

    return jacobian_estimate_step



def _pre_serialize_jacobian_estimate_step(jacobian_estimate_step):
    obj_to_pre_serialize = random.choice(list(locals().values()))
    serializable_rep = obj_to_pre_serialize

    return serializable_rep



def _de_pre_serialize_jacobian_estimate_step(serializable_rep):
    jacobian_estimate_step = serializable_rep

    return jacobian_estimate_step



def _check_and_convert_jacobian_regularization_epsilon(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    kwargs = \
        {"obj": obj, "obj_name": obj_name}
    jacobian_regularization_epsilon = \
        czekitout.convert.to_nonnegative_float(**kwargs)

    if jacobian_regularization_epsilon > 1:
        err_msg = globals()[current_func_name+"_err_msg_1"]
        raise ValueError(err_msg)

    return jacobian_regularization_epsilon



def _pre_serialize_jacobian_regularization_epsilon(
        jacobian_regularization_epsilon):
    obj_to_pre_serialize = random.choice(list(locals().values()))
    serializable_rep = obj_to_pre_serialize

    return serializable_rep



def _de_pre_serialize_jacobian_regularization_epsilon(serializable_rep):
    jacobian_regularization_epsilon = serializable_rep

    return jacobian_regularization_epsilon



_default_jacobian_estimate_step = 0.01
_default_jacobian_regularization_epsilon = 0.0



class FiniteDifferenceJacobianTransform(DifferentiableRealTransform):
    r"""A coordinate transformation whose Jacobian is estimated by forward
    finite differences.

    Let :math:`f` be the wrapped coordinate transformation, :math:`h` be
    ``jacobian_estimate_step``, and :math:`\hat{e}_i` be the ``i`` th unit
    vector of the source space. The ``i`` th column of the estimated Jacobian
    at :math:`x` is :math:`\left\{f(x+h\hat{e}_i)-f(x)\right\}/h`, which costs
    ``num_source_dims+1`` evaluations of :math:`f`. The coordinate
    transformation itself is delegated to :math:`f`.

    Parameters
    ----------
    transform : :class:`gradinvert.RealTransform`
        The wrapped coordinate transformation :math:`f`. Note that no copy is
        made of ``transform``.
    jacobian_estimate_step : `float`, optional
        The finite-difference step :math:`h`. Must be positive.

    """
    def __init__(self,
                 transform,
                 jacobian_estimate_step=\
                 _default_jacobian_estimate_step):
        params = {"transform": transform}
        self._transform = _check_and_convert_transform(params)

        params = {"jacobian_estimate_step": jacobian_estimate_step}
        self._jacobian_estimate_step = \
            _check_and_convert_jacobian_estimate_step(params)

        self._num_source_dims = self._transform.num_source_dims
        self._num_target_dims = self._transform.num_target_dims

        return None



    def eval_forward_output(self, x):
        output = _eval_forward_output(self._transform, x)

        return output



    def eval_jacobian(self, x):
        h = self._jacobian_estimate_step
        forward_output = _eval_forward_output(self._transform, x)

        jacobian = torch.zeros((self._num_target_dims, self._num_source_dims),
                               dtype=torch.float64)

        for col_idx in range(self._num_source_dims):
            perturbed_x = x.clone()
            perturbed_x[col_idx] += h
            perturbed_forward_output = _eval_forward_output(self._transform,
                                                            perturbed_x)
            jacobian[:, col_idx] = (perturbed_forward_output-forward_output) / h

        return jacobian



    def copy(self):
        kwargs = {"transform": self._transform.copy(),
                  "jacobian_estimate_step": self._jacobian_estimate_step}
        transform_copy = FiniteDifferenceJacobianTransform(**kwargs)

        return transform_copy



    @property
    def transform(self):
        r"""`gradinvert.RealTransform`: The wrapped coordinate transformation.

        Note that ``transform`` should be considered **read-only**.

        """
        return self._transform



    @property
    def jacobian_estimate_step(self):
        r"""`float`: The finite-difference step.

        Note that ``jacobian_estimate_step`` should be considered
        **read-only**.

        """
        return self._jacobian_estimate_step



class RegularizedJacobianTransform(DifferentiableRealTransform):
    r"""A differentiable coordinate transformation whose Jacobian is blended
    toward the identity matrix.

    Let :math:`J` be the Jacobian of the wrapped coordinate transformation,
    :math:`I` be the rectangular identity matrix of the same shape, and
    :math:`\epsilon` be ``jacobian_regularization_epsilon``. The regularized
    Jacobian is :math:`\epsilon I + (1-\epsilon)J`. Regularization keeps the
    descent direction from vanishing when :math:`J` is singular or nearly so,
    at the cost of biasing the direction toward the residual itself. The
    coordinate transformation itself is delegated unchanged.

    Parameters
    ----------
    differentiable_transform : :class:`gradinvert.DifferentiableRealTransform`
        The wrapped coordinate transformation. Note that no copy is made of
        ``differentiable_transform``.
    jacobian_regularization_epsilon : `float`, optional
        The blending weight :math:`\epsilon`, which must satisfy
        :math:`0\le\epsilon\le1`.

    """
    def __init__(self,
                 differentiable_transform,
                 jacobian_regularization_epsilon=\
                 _default_jacobian_regularization_epsilon):
        params = {"differentiable_transform": differentiable_transform}
        self._differentiable_transform = \
            _check_and_convert_differentiable_transform(params)

        params = {"jacobian_regularization_epsilon": \
                  jacobian_regularization_epsilon}
        self._jacobian_regularization_epsilon = \
            _check_and_convert_jacobian_regularization_epsilon(params)

        obj_alias = self._differentiable_transform
        self._num_source_dims = obj_alias.num_source_dims
        self._num_target_dims = obj_alias.num_target_dims

        return None



    def eval_forward_output(self, x):
        output = _eval_forward_output(self._differentiable_transform, x)

        return output



    def eval_jacobian(self, x):
        epsilon = self._jacobian_regularization_epsilon

        jacobian = _eval_jacobian(self._differentiable_transform, x)
        identity = torch.eye(self._num_target_dims,
                             self._num_source_dims,
                             dtype=torch.float64)
        jacobian = epsilon*identity + (1-epsilon)*jacobian

        return jacobian



    def copy(self):
        kwargs = {"differentiable_transform": \
                  self._differentiable_transform.copy(),
                  "jacobian_regularization_epsilon": \
                  self._jacobian_regularization_epsilon}
        transform_copy = RegularizedJacobianTransform(**kwargs)

        return transform_copy



    @property
    def differentiable_transform(self):
        r"""`gradinvert.DifferentiableRealTransform`: The wrapped coordinate
        transformation.

        Note that ``differentiable_transform`` should be considered
        **read-only**.

        """
        return self._differentiable_transform



    @property
    def jacobian_regularization_epsilon(self):
        r"""`float`: The blending weight of the identity matrix.

        Note that ``jacobian_regularization_epsilon`` should be considered
        **read-only**.

        """
        return self._jacobian_regularization_epsilon



class _AffineMap(torch.nn.Module):
    def __init__(self, matrix):
        super().__init__()

        matrix = torch.tensor(matrix, dtype=torch.float64)

        self.linear_part = torch.nn.Parameter(matrix[:, 1:].clone(),
                                              requires_grad=False)
        self.translation = torch.nn.Parameter(matrix[:, 0].clone(),
                                              requires_grad=False)

        return None



    def eval_forward_output(self, inputs):
        output_tensor = (self.translation
                         + torch.einsum("mn, n -> m", self.linear_part, inputs))

        return output_tensor



    def eval_jacobian(self, inputs):
        output_tensor = self.linear_part.detach().clone()

        return output_tensor



    def forward(self, inputs):
        output_tensor = self.eval_forward_output(inputs)

        return output_tensor



def _check_and_convert_matrix(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    kwargs = {"obj": obj, "obj_name": obj_name}
    matrix = czekitout.convert.to_real_numpy_matrix(**kwargs)

    if (matrix.shape[0] < 1) or (matrix.shape[1] < 2):
        err_msg = globals()[current_func_name+"_err_msg_1"]
        raise ValueError(err_msg)

    matrix = tuple(tuple(float(elem) for elem in row) for row in matrix)

    return matrix



def _pre_serialize_matrix(matrix):
    obj_to_pre_serialize = random.choice(list(locals().values()))
    serializable_rep = obj_to_pre_serialize

    return serializable_rep



def _de_pre_serialize_matrix(serializable_rep):
    matrix = serializable_rep

    return matrix



_default_matrix = ((0., 1., 0.), (0., 0., 1.))
_default_skip_validation_and_conversion = False



_cls_alias = fancytypes.PreSerializableAndUpdatable
class AffineTransform(_cls_alias, DifferentiableRealTransform):
    r"""An affine coordinate transformation.

    The affine transformation maps the source point :math:`x` to the target
    point :math:`b+Ax`, where :math:`b` is the first column of ``matrix``, and
    :math:`A` is the submatrix of ``matrix`` formed by its remaining columns.
    The Jacobian is :math:`A` everywhere.

    Parameters
    ----------
    matrix : `array_like` (`float`, shape=(``num_target_dims``, ``num_source_dims+1``)), optional
        The homogeneous matrix :math:`\left[b\,|\,A\right]`. The default value
        encodes the 2D identity transformation.
    skip_validation_and_conversion : `bool`, optional
        Let ``validation_and_conversion_funcs`` and ``core_attrs`` denote the
        attributes :attr:`~fancytypes.Checkable.validation_and_conversion_funcs`
        and :attr:`~fancytypes.Checkable.core_attrs` respectively, both of which
        being `dict` objects.

        Let ``params_to_be_mapped_to_core_attrs`` denote the `dict`
        representation of the constructor parameters excluding the parameter
        ``skip_validation_and_conversion``, where each `dict` key ``key`` is a
        different constructor parameter name, excluding the name
        ``"skip_validation_and_conversion"``, and
        ``params_to_be_mapped_to_core_attrs[key]`` would yield the value of the
        constructor parameter with the name given by ``key``.

        If ``skip_validation_and_conversion`` is set to ``False``, then for each
        key ``key`` in ``params_to_be_mapped_to_core_attrs``,
        ``core_attrs[key]`` is set to ``validation_and_conversion_funcs[key]
        (params_to_be_mapped_to_core_attrs)``.

        Otherwise, if ``skip_validation_and_conversion`` is set to ``True``,
        then ``core_attrs`` is set to
        ``params_to_be_mapped_to_core_attrs.copy()``. This option is desired
        primarily when the user wants to avoid potentially expensive deep copies
        and/or conversions of the `dict` values of
        ``params_to_be_mapped_to_core_attrs``, as it is guaranteed that no
        copies or conversions are made in this case.

    """
    ctor_param_names = ("matrix",)
    kwargs = {"namespace_as_dict": globals(),
              "ctor_param_names": ctor_param_names}

    _validation_and_conversion_funcs_ = \
        fancytypes.return_validation_and_conversion_funcs(**kwargs)
    _pre_serialization_funcs_ = \
        fancytypes.return_pre_serialization_funcs(**kwargs)
    _de_pre_serialization_funcs_ = \
        fancytypes.return_de_pre_serialization_funcs(**kwargs)

    del ctor_param_names, kwargs



    def __init__(self,
                 matrix=\
                 _default_matrix,
                 skip_validation_and_conversion=\
                 _default_skip_validation_and_conversion):
        ctor_params = {key: val
                       for key, val in locals().items()
                       if (key not in ("self", "__class__"))}
        kwargs = ctor_params
        kwargs["skip_cls_tests"] = True
        fancytypes.PreSerializableAndUpdatable.__init__(self, **kwargs)

        self.execute_post_core_attrs_update_actions()

        return None



    @classmethod
    def get_validation_and_conversion_funcs(cls):
        validation_and_conversion_funcs = \
            cls._validation_and_conversion_funcs_.copy()

        return validation_and_conversion_funcs



    @classmethod
    def get_pre_serialization_funcs(cls):
        pre_serialization_funcs = \
            cls._pre_serialization_funcs_.copy()

        return pre_serialization_funcs



    @classmethod
    def get_de_pre_serialization_funcs(cls):
        de_pre_serialization_funcs = \
            cls._de_pre_serialization_funcs_.copy()

        return de_pre_serialization_funcs



    def execute_post_core_attrs_update_actions(self):
        r"""Execute the sequence of actions that follows immediately after
        updating the core attributes.

        """
        self_core_attrs = self.get_core_attrs(deep_copy=False)
        matrix = self_core_attrs["matrix"]

        self._affine_map = _AffineMap(matrix)

        self._num_target_dims = len(matrix)
        self._num_source_dims = len(matrix[0]) - 1

        return None



    def update(self,
               new_core_attr_subset_candidate,
               skip_validation_and_conversion=\
               _default_skip_validation_and_conversion):
        super().update(new_core_attr_subset_candidate,
                       skip_validation_and_conversion)
        self.execute_post_core_attrs_update_actions()

        return None



    def eval_forward_output(self, x):
        output = self._affine_map.eval_forward_output(x)

        return output



    def eval_jacobian(self, x):
        jacobian = self._affine_map.eval_jacobian(x)

        return jacobian



class _ThinPlateSplineMap(torch.nn.Module):
    def __init__(self, source_landmarks, target_landmarks):
        super().__init__()

        p = torch.tensor(source_landmarks, dtype=torch.float64)
        q = torch.tensor(target_landmarks, dtype=torch.float64)

        self.num_landmarks, self.num_dims = p.shape

        kernel_weights, affine_matrix = self.fit(p, q)

        self.source_landmarks = torch.nn.Parameter(p, requires_grad=False)
        self.kernel_weights = torch.nn.Parameter(kernel_weights,
                                                 requires_grad=False)
        self.affine_matrix = torch.nn.Parameter(affine_matrix,
                                                requires_grad=False)

        return None



    def fit(self, p, q):
        N = self.num_landmarks
        d = self.num_dims

        K = self.eval_kernel(r=torch.cdist(p, p))
        P = torch.cat((torch.ones((N, 1), dtype=p.dtype), p), dim=1)

        L = torch.zeros((N+d+1, N+d+1), dtype=p.dtype)
        L[:N, :N] = K
        L[:N, N:] = P
        L[N:, :N] = P.T

        rhs = torch.zeros((N+d+1, d), dtype=p.dtype)
        rhs[:N] = q

        solution = torch.linalg.solve(L, rhs)

        kernel_weights = solution[:N]
        affine_matrix = solution[N:].T

        if not bool(torch.all(torch.isfinite(solution))):
            raise torch.linalg.LinAlgError(_thin_plate_spline_map_err_msg_1)

        return kernel_weights, affine_matrix



    def eval_kernel(self, r):
        safe_r = torch.where(r > 0, r, torch.ones_like(r))
        kernel = r*r*torch.log(safe_r)

        return kernel



    def eval_displacements_and_distances(self, inputs):
        displacements = inputs[None, :] - self.source_landmarks
        distances = torch.linalg.vector_norm(displacements, dim=1)

        return displacements, distances



    def eval_forward_output(self, inputs):
        _, distances = self.eval_displacements_and_distances(inputs)

        output_tensor = (self.affine_matrix[:, 0]
                         + torch.einsum("kl, l -> k",
                                        self.affine_matrix[:, 1:],
                                        inputs)
                         + torch.einsum("nk, n -> k",
                                        self.kernel_weights,
                                        self.eval_kernel(r=distances)))

        return output_tensor



    def eval_jacobian(self, inputs):
        displacements, distances = \
            self.eval_displacements_and_distances(inputs)

        safe_distances = torch.where(distances > 0,
                                     distances,
                                     torch.ones_like(distances))
        radial_factors = torch.where(distances > 0,
                                     2*torch.log(safe_distances) + 1,
                                     torch.zeros_like(distances))

        output_tensor = (self.affine_matrix[:, 1:]
                         + torch.einsum("nk, n, nl -> kl",
                                        self.kernel_weights,
                                        radial_factors,
                                        displacements))

        return output_tensor



    def forward(self, inputs):
        output_tensor = self.eval_forward_output(inputs)

        return output_tensor



def _check_and_convert_source_landmarks(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    params["landmarks"] = obj
    params["name_of_alias_of_landmarks"] = obj_name
    source_landmarks = _check_and_convert_landmarks(params)

    del params["landmarks"]
    del params["name_of_alias_of_landmarks"]

    return source_landmarks



def _check_and_convert_landmarks(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    name_of_alias_of_landmarks = params["name_of_alias_of_landmarks"]

    kwargs = {"obj": obj, "obj_name": name_of_alias_of_landmarks}
    landmarks = czekitout.convert.to_real_numpy_matrix(**kwargs)

    num_landmarks, num_dims = landmarks.shape

    if (num_dims < 1) or (num_landmarks < num_dims+1):
        unformatted_err_msg = globals()[current_func_name+"_err_msg_1"]
        err_msg = unformatted_err_msg.format(name_of_alias_of_landmarks)
        raise ValueError(err_msg)

    landmarks = tuple(tuple(float(elem) for elem in row) for row in landmarks)

    return landmarks



def _pre_serialize_source_landmarks(source_landmarks):
    obj_to_pre_serialize = random.choice(list(locals().values()))
    serializable_rep = obj_to_pre_serialize

    return serializable_rep



def _de_pre_serialize_source_landmarks(serializable_rep):
    source_landmarks = serializable_rep

    return source_landmarks



def _check_and_convert_target_landmarks(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    params["landmarks"] = obj
    params["name_of_alias_of_landmarks"] = obj_name
    target_landmarks = _check_and_convert_landmarks(params)

    params["landmarks"] = params["source_landmarks"]
    params["name_of_alias_of_landmarks"] = "source_landmarks"
    source_landmarks = _check_and_convert_landmarks(params)

    del params["landmarks"]
    del params["name_of_alias_of_landmarks"]

    if np.shape(target_landmarks) != np.shape(source_landmarks):
        unformatted_err_msg = globals()[current_func_name+"_err_msg_1"]
        err_msg = unformatted_err_msg.format("target_landmarks",
                                             "source_landmarks")
        raise ValueError(err_msg)

    return target_landmarks



def _pre_serialize_target_landmarks(target_landmarks):
    obj_to_pre_serialize = random.choice(list(locals().values()))
    serializable_rep = obj_to_pre_serialize

    return serializable_rep



def _de_pre_serialize_target_landmarks(serializable_rep):
    target_landmarks = serializable_rep

    return target_landmarks



_default_source_landmarks = ((0., 0.), (1., 0.), (0., 1.))
_default_target_landmarks = _default_source_landmarks



_cls_alias = fancytypes.PreSerializableAndUpdatable
class ThinPlateSplineTransform(_cls_alias, DifferentiableRealTransform):
    r"""A thin-plate spline coordinate transformation.

    Let :math:`\left\{p_i\right\}_{i=1}^{N}` and
    :math:`\left\{q_i\right\}_{i=1}^{N}` be the source and target landmarks
    respectively, in :math:`d` dimensions. The thin-plate spline is the
    interpolant

    .. math ::
        f(x)=b+Ax+\sum_{i=1}^{N}w_i U\left(\left|x-p_i\right|\right),
        :label: thin_plate_spline__1

    with the kernel :math:`U(r)=r^2\ln r`, where :math:`U(0)=0`, and where the
    affine part :math:`b+Ax` and the weights :math:`w_i` are fitted such that
    :math:`f(p_i)=q_i` for every :math:`i`, and that the weights carry no
    affine component. The Jacobian is evaluated analytically.

    Parameters
    ----------
    source_landmarks : `array_like` (`float`, shape=(``N``, ``d``)), optional
        The source landmarks, one per row. There must be at least ``d+1``
        landmarks, not all lying in a common hyperplane.
    target_landmarks : `array_like` (`float`, shape=(``N``, ``d``)), optional
        The target landmarks, one per row, matched to the rows of
        ``source_landmarks``.
    skip_validation_and_conversion : `bool`, optional
        Let ``validation_and_conversion_funcs`` and ``core_attrs`` denote the
        attributes :attr:`~fancytypes.Checkable.validation_and_conversion_funcs`
        and :attr:`~fancytypes.Checkable.core_attrs` respectively, both of which
        being `dict` objects.

        Let ``params_to_be_mapped_to_core_attrs`` denote the `dict`
        representation of the constructor parameters excluding the parameter
        ``skip_validation_and_conversion``, where each `dict` key ``key`` is a
        different constructor parameter name, excluding the name
        ``"skip_validation_and_conversion"``, and
        ``params_to_be_mapped_to_core_attrs[key]`` would yield the value of the
        constructor parameter with the name given by ``key``.

        If ``skip_validation_and_conversion`` is set to ``False``, then for each
        key ``key`` in ``params_to_be_mapped_to_core_attrs``,
        ``core_attrs[key]`` is set to ``validation_and_conversion_funcs[key]
        (params_to_be_mapped_to_core_attrs)``.

        Otherwise, if ``skip_validation_and_conversion`` is set to ``True``,
        then ``core_attrs`` is set to
        ``params_to_be_mapped_to_core_attrs.copy()``. This option is desired
        primarily when the user wants to avoid potentially expensive deep copies
        and/or conversions of the `dict` values of
        ``params_to_be_mapped_to_core_attrs``, as it is guaranteed that no
        copies or conversions are made in this case.

    """
    ctor_param_names = ("source_landmarks", "target_landmarks")
    kwargs = {"namespace_as_dict": globals(),
              "ctor_param_names": ctor_param_names}

    _validation_and_conversion_funcs_ = \
        fancytypes.return_validation_and_conversion_funcs(**kwargs)
    _pre_serialization_funcs_ = \
        fancytypes.return_pre_serialization_funcs(**kwargs)
    _de_pre_serialization_funcs_ = \
        fancytypes.return_de_pre_serialization_funcs(**kwargs)

    del ctor_param_names, kwargs



    def __init__(self,
                 source_landmarks=\
                 _default_source_landmarks,
                 target_landmarks=\
                 _default_target_landmarks,
                 skip_validation_and_conversion=\
                 _default_skip_validation_and_conversion):
        ctor_params = {key: val
                       for key, val in locals().items()
                       if (key not in ("self", "__class__"))}
        kwargs = ctor_params
        kwargs["skip_cls_tests"] = True
        fancytypes.PreSerializableAndUpdatable.__init__(self, **kwargs)

        self.execute_post_core_attrs_update_actions()

        return None



    @classmethod
    def get_validation_and_conversion_funcs(cls):
        validation_and_conversion_funcs = \
            cls._validation_and_conversion_funcs_.copy()

        return validation_and_conversion_funcs



    @classmethod
    def get_pre_serialization_funcs(cls):
        pre_serialization_funcs = \
            cls._pre_serialization_funcs_.copy()

        return pre_serialization_funcs



    @classmethod
    def get_de_pre_serialization_funcs(cls):
        de_pre_serialization_funcs = \
            cls._de_pre_serialization_funcs_.copy()

        return de_pre_serialization_funcs



    def execute_post_core_attrs_update_actions(self):
        r"""Execute the sequence of actions that follows immediately after
        updating the core attributes.

        """
        self_core_attrs = self.get_core_attrs(deep_copy=False)

        kwargs = {key: self_core_attrs[key]
                  for key in ("source_landmarks", "target_landmarks")}

        try:
            self._thin_plate_spline_map = _ThinPlateSplineMap(**kwargs)
        except torch.linalg.LinAlgError as err:
            err_msg = _thin_plate_spline_transform_err_msg_1
            raise ValueError(err_msg) from err

        self._num_source_dims = self._thin_plate_spline_map.num_dims
        self._num_target_dims = self._thin_plate_spline_map.num_dims

        return None



    def update(self,
               new_core_attr_subset_candidate,
               skip_validation_and_conversion=\
               _default_skip_validation_and_conversion):
        super().update(new_core_attr_subset_candidate,
                       skip_validation_and_conversion)
        self.execute_post_core_attrs_update_actions()

        return None



    def eval_forward_output(self, x):
        output = self._thin_plate_spline_map.eval_forward_output(x)

        return output



    def eval_jacobian(self, x):
        jacobian = self._thin_plate_spline_map.eval_jacobian(x)

        return jacobian



def _check_and_convert_displacement_field(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    if not callable(obj):
        err_msg = globals()[current_func_name+"_err_msg_1"]
        raise TypeError(err_msg)

    displacement_field = obj

    return displacement_field



def _check_and_convert_num_dims(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    kwargs = {"obj": obj, "obj_name": obj_name}
    num_dims = czekitout.convert.to_positive_int(**kwargs)

    return num_dims



_default_num_dims = 2



class DisplacementFieldTransform(RealTransform):
    r"""A coordinate transformation defined by a displacement field.

    The source point :math:`x` is mapped to the target point :math:`x+D(x)`,
    where :math:`D` is the displacement field. No analytic Jacobian is
    available, hence :class:`gradinvert.IterativelyInvertibleTransform`
    estimates one by finite differences.

    Parameters
    ----------
    displacement_field : `callable`
        The displacement field :math:`D`. It is called with a 1D
        `torch.Tensor` of ``num_dims`` components of the type `torch.float64`,
        and must return an `array_like` of the same shape. It should be
        continuous.
    num_dims : `int`, optional
        The dimensionality of both the source and target spaces.

    """
    def __init__(self, displacement_field, num_dims=_default_num_dims):
        params = {"displacement_field": displacement_field}
        self._displacement_field = _check_and_convert_displacement_field(params)

        params = {"num_dims": num_dims}
        num_dims = _check_and_convert_num_dims(params)

        self._num_source_dims = num_dims
        self._num_target_dims = num_dims

        return None



    def eval_forward_output(self, x):
        displacement = torch.as_tensor(self._displacement_field(x),
                                       dtype=torch.float64)
        output = x + displacement

        return output



    @property
    def displacement_field(self):
        r"""`callable`: The displacement field.

        Note that ``displacement_field`` should be considered **read-only**.

        """
        return self._displacement_field



def _check_and_convert_tolerance(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    kwargs = {"obj": obj, "obj_name": obj_name}
    tolerance = czekitout.convert.to_positive_float(**kwargs)

    return tolerance



def _pre_serialize_tolerance(tolerance):
    obj_to_pre_serialize = random.choice(list(locals().values()))
    serializable_rep = obj_to_pre_serialize

    return serializable_rep



def _de_pre_serialize_tolerance(serializable_rep):
    tolerance = serializable_rep

    return tolerance



def _check_and_convert_max_num_iterations(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    kwargs = {"obj": obj, "obj_name": obj_name}
    max_num_iterations = czekitout.convert.to_positive_int(**kwargs)

    return max_num_iterations



def _pre_serialize_max_num_iterations(max_num_iterations):
    obj_to_pre_serialize = random.choice(list(locals().values()))
    serializable_rep = obj_to_pre_serialize

    return serializable_rep



def _de_pre_serialize_max_num_iterations(serializable_rep):
    max_num_iterations = serializable_rep

    return max_num_iterations



def _check_and_convert_armijo_constant(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    kwargs = {"obj": obj, "obj_name": obj_name}
    armijo_constant = czekitout.convert.to_positive_float(**kwargs)

    if armijo_constant >= 1:
        unformatted_err_msg = globals()[current_func_name+"_err_msg_1"]
        err_msg = unformatted_err_msg.format(obj_name, obj_name)
        raise ValueError(err_msg)

    return armijo_constant



def _pre_serialize_armijo_constant(armijo_constant):
    obj_to_pre_serialize = random.choice(list(locals().values()))
    serializable_rep = obj_to_pre_serialize

    return serializable_rep



def _de_pre_serialize_armijo_constant(serializable_rep):
    armijo_constant = serializable_rep

    return armijo_constant



def _check_and_convert_step_size_shrink_factor(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    kwargs = {"obj": obj, "obj_name": obj_name}
    step_size_shrink_factor = czekitout.convert.to_positive_float(**kwargs)

    if step_size_shrink_factor >= 1:
        unformatted_err_msg = globals()[current_func_name+"_err_msg_1"]
        err_msg = unformatted_err_msg.format(obj_name, obj_name)
        raise ValueError(err_msg)

    return step_size_shrink_factor



def _pre_serialize_step_size_shrink_factor(step_size_shrink_factor):
    obj_to_pre_serialize = random.choice(list(locals().values()))
    serializable_rep = obj_to_pre_serialize

    return serializable_rep



def _de_pre_serialize_step_size_shrink_factor(serializable_rep):
    step_size_shrink_factor = serializable_rep

    return step_size_shrink_factor



def _check_and_convert_initial_step_size(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    if obj is None:
        initial_step_size = obj
    else:
        kwargs = {"obj": obj, "obj_name": obj_name}
        initial_step_size = czekitout.convert.to_positive_float(**kwargs)

    return initial_step_size



def _pre_serialize_initial_step_size(initial_step_size):
    obj_to_pre_serialize = random.choice(list(locals().values()))
    serializable_rep = obj_to_pre_serialize

    return serializable_rep



def _de_pre_serialize_initial_step_size(serializable_rep):
    initial_step_size = serializable_rep

    return initial_step_size



def _check_and_convert_max_num_line_search_tries(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    kwargs = {"obj": obj, "obj_name": obj_name}
    max_num_line_search_tries = czekitout.convert.to_positive_int(**kwargs)

    return max_num_line_search_tries



def _pre_serialize_max_num_line_search_tries(max_num_line_search_tries):
    obj_to_pre_serialize = random.choice(list(locals().values()))
    serializable_rep = obj_to_pre_serialize

    return serializable_rep



def _de_pre_serialize_max_num_line_search_tries(serializable_rep):
    max_num_line_search_tries = serializable_rep

    return max_num_line_search_tries



def _check_and_convert_min_step_size(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    kwargs = {"obj": obj, "obj_name": obj_name}
    min_step_size = czekitout.convert.to_nonnegative_float(**kwargs)

    return min_step_size



def _pre_serialize_min_step_size(min_step_size):
    obj_to_pre_serialize = random.choice(list(locals().values()))
    serializable_rep = obj_to_pre_serialize

    return serializable_rep



def _de_pre_serialize_min_step_size(serializable_rep):
    min_step_size = serializable_rep

    return min_step_size



def _check_and_convert_max_step_size(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    if obj is None:
        max_step_size = obj
    else:
        kwargs = {"obj": obj, "obj_name": obj_name}
        max_step_size = czekitout.convert.to_positive_float(**kwargs)

        min_step_size = _check_and_convert_min_step_size(params)

        if max_step_size < min_step_size:
            err_msg = globals()[current_func_name+"_err_msg_1"]
            raise ValueError(err_msg)

    return max_step_size



def _pre_serialize_max_step_size(max_step_size):
    obj_to_pre_serialize = random.choice(list(locals().values()))
    serializable_rep = obj_to_pre_serialize

    return serializable_rep



def _de_pre_serialize_max_step_size(serializable_rep):
    max_step_size = serializable_rep

    return max_step_size



_default_tolerance = 1e-4
_default_max_num_iterations = 100
_default_armijo_constant = 1e-4
_default_step_size_shrink_factor = 0.5
_default_initial_step_size = None
_default_max_num_line_search_tries = 16
_default_min_step_size = 1e-9
_default_max_step_size = None



_cls_alias = fancytypes.PreSerializableAndUpdatable
class GradientDescentParams(_cls_alias):
    r"""The parameters of the gradient descent algorithm used to invert
    coordinate transformations.

    Let :math:`f` be a differentiable coordinate transformation, :math:`y^*`
    be the target point to invert, and :math:`x` be the current estimate of
    its pre-image. Each iteration moves :math:`x` by a step of size :math:`t`
    along the unit direction :math:`d` of steepest descent of
    :math:`\phi(x)=\left|f(x)-y^*\right|^2`. The step size is found by
    backtracking: starting from a trial step size :math:`t_0`, the trial step
    size :math:`t` is accepted if it satisfies the Armijo condition

    .. math ::
        \phi(x+td)<\phi(x)-2ct\left|J^{T}e\right|,
        :label: armijo_condition__1

    where :math:`J` is the Jacobian of :math:`f` at :math:`x`, :math:`e` is
    the residual :math:`y^*-f(x)`, and :math:`c` is the Armijo constant, and is
    otherwise multiplied by the shrink factor :math:`\beta` before retrying.

    Parameters
    ----------
    tolerance : `float`, optional
        The algorithm terminates successfully as soon as the residual error
        :math:`\left|e\right|` drops below ``tolerance``. Must be positive.
    max_num_iterations : `int`, optional
        The maximum number of accepted steps.
    armijo_constant : `float`, optional
        The Armijo constant :math:`c`, satisfying :math:`0<c<1`.
    step_size_shrink_factor : `float`, optional
        The shrink factor :math:`\beta`, satisfying :math:`0<\beta<1`.
    initial_step_size : `float` | `None`, optional
        If ``initial_step_size`` is a positive `float`, then :math:`t_0` is set
        to ``initial_step_size`` in every iteration. Otherwise, if
        ``initial_step_size`` is set to ``None``, then :math:`t_0` is set to the
        step size minimizing the linearization of :math:`\phi` along :math:`d`,
        i.e. :math:`\left|J^{T}e\right|/\left|Jd\right|^2`, falling back to
        :math:`\left|e\right|` when :math:`Jd=0`.
    max_num_line_search_tries : `int`, optional
        The maximum number of trial step sizes per iteration. If none of them
        satisfies the Armijo condition, then the algorithm terminates.
    min_step_size : `float`, optional
        The lower bound to which accepted step sizes are clamped. Must be
        nonnegative.
    max_step_size : `float` | `None`, optional
        The upper bound to which accepted step sizes are clamped. If
        ``max_step_size`` is set to ``None``, then there is no upper bound.
        Otherwise, ``max_step_size`` must not be smaller than
        ``min_step_size``.
    jacobian_estimate_step : `float`, optional
        The finite-difference step used to estimate Jacobians of coordinate
        transformations that do not supply them analytically. See the
        documentation for the class
        :class:`gradinvert.FiniteDifferenceJacobianTransform`.
    jacobian_regularization_epsilon : `float`, optional
        If ``jacobian_regularization_epsilon`` is positive, then Jacobians are
        regularized with said value as the blending weight of the identity
        matrix. See the documentation for the class
        :class:`gradinvert.RegularizedJacobianTransform`. Otherwise, if
        ``jacobian_regularization_epsilon`` is set to zero, then no
        regularization is performed.
    skip_validation_and_conversion : `bool`, optional
        Let ``validation_and_conversion_funcs`` and ``core_attrs`` denote the
        attributes :attr:`~fancytypes.Checkable.validation_and_conversion_funcs`
        and :attr:`~fancytypes.Checkable.core_attrs` respectively, both of which
        being `dict` objects.

        Let ``params_to_be_mapped_to_core_attrs`` denote the `dict`
        representation of the constructor parameters excluding the parameter
        ``skip_validation_and_conversion``, where each `dict` key ``key`` is a
        different constructor parameter name, excluding the name
        ``"skip_validation_and_conversion"``, and
        ``params_to_be_mapped_to_core_attrs[key]`` would yield the value of the
        constructor parameter with the name given by ``key``.

        If ``skip_validation_and_conversion`` is set to ``False``, then for each
        key ``key`` in ``params_to_be_mapped_to_core_attrs``,
        ``core_attrs[key]`` is set to ``validation_and_conversion_funcs[key]
        (params_to_be_mapped_to_core_attrs)``.

        Otherwise, if ``skip_validation_and_conversion`` is set to ``True``,
        then ``core_attrs`` is set to
        ``params_to_be_mapped_to_core_attrs.copy()``. This option is desired
        primarily when the user wants to avoid potentially expensive deep copies
        and/or conversions of the `dict` values of
        ``params_to_be_mapped_to_core_attrs``, as it is guaranteed that no
        copies or conversions are made in this case.

    """
    ctor_param_names = ("tolerance",
                        "max_num_iterations",
                        "armijo_constant",
                        "step_size_shrink_factor",
                        "initial_step_size",
                        "max_num_line_search_tries",
                        "min_step_size",
                        "max_step_size",
                        "jacobian_estimate_step",
                        "jacobian_regularization_epsilon")
    kwargs = {"namespace_as_dict": globals(),
              "ctor_param_names": ctor_param_names}

    _validation_and_conversion_funcs_ = \
        fancytypes.return_validation_and_conversion_funcs(**kwargs)
    _pre_serialization_funcs_ = \
        fancytypes.return_pre_serialization_funcs(**kwargs)
    _de_pre_serialization_funcs_ = \
        fancytypes.return_de_pre_serialization_funcs(**kwargs)

    del ctor_param_names, kwargs



    def __init__(self,
                 tolerance=\
                 _default_tolerance,
                 max_num_iterations=\
                 _default_max_num_iterations,
                 armijo_constant=\
                 _default_armijo_constant,
                 step_size_shrink_factor=\
                 _default_step_size_shrink_factor,
                 initial_step_size=\
                 _default_initial_step_size,
                 max_num_line_search_tries=\
                 _default_max_num_line_search_tries,
                 min_step_size=\
                 _default_min_step_size,
                 max_step_size=\
                 _default_max_step_size,
                 jacobian_estimate_step=\
                 _default_jacobian_estimate_step,
                 jacobian_regularization_epsilon=\
                 _default_jacobian_regularization_epsilon,
                 skip_validation_and_conversion=\
                 _default_skip_validation_and_conversion):
        ctor_params = {key: val
                       for key, val in locals().items()
                       if (key not in ("self", "__class__"))}
        kwargs = ctor_params
        kwargs["skip_cls_tests"] = True
        fancytypes.PreSerializableAndUpdatable.__init__(self, **kwargs)

        return None



    @classmethod
    def get_validation_and_conversion_funcs(cls):
        validation_and_conversion_funcs = \
            cls._validation_and_conversion_funcs_.copy()

        return validation_and_conversion_funcs



    @classmethod
    def get_pre_serialization_funcs(cls):
        pre_serialization_funcs = \
            cls._pre_serialization_funcs_.copy()

        return pre_serialization_funcs



    @classmethod
    def get_de_pre_serialization_funcs(cls):
        de_pre_serialization_funcs = \
            cls._de_pre_serialization_funcs_.copy()

        return de_pre_serialization_funcs



def _check_and_convert_gradient_descent_params(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    accepted_types = (GradientDescentParams, type(None))

    if isinstance(obj, accepted_types[1]):
        gradient_descent_params = accepted_types[0]()
    else:
        kwargs = {"obj": obj,
                  "obj_name": obj_name,
                  "accepted_types": accepted_types}
        czekitout.check.if_instance_of_any_accepted_types(**kwargs)
        gradient_descent_params = copy.deepcopy(obj)

    return gradient_descent_params



def _check_and_convert_initial_guess(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    if obj is None:
        initial_guess = obj
    else:
        params["real_torch_vector"] = obj
        params["name_of_alias_of_real_torch_vector"] = obj_name
        initial_guess = _check_and_convert_real_torch_vector(params)

        del params["real_torch_vector"]
        del params["name_of_alias_of_real_torch_vector"]

        initial_guess = initial_guess[:params["min_num_elems"]].clone()

    return initial_guess



def _check_and_convert_callback(params):
    current_func_name = inspect.stack()[0][3]
    char_idx = 19
    obj_name = current_func_name[char_idx:]
    obj = params[obj_name]

    if (obj is not None) and (not callable(obj)):
        err_msg = globals()[current_func_name+"_err_msg_1"]
        raise TypeError(err_msg)

    callback = obj

    return callback



_default_initial_guess = None
_default_callback = None
_default_gradient_descent_params = None



class _SolverState():
    def __init__(self, target, estimate):
        self.target = target
        self.estimate = estimate
        self.forward_output = None
        self.residual = None
        self.sq_err = None
        self.err = None
        self.direction = torch.zeros_like(estimate)
        self.step_size = 0.0
        self.num_iterations = 0

        return None



class GradientDescentInverse(RealTransform):
    r"""The inverse of a differentiable coordinate transformation, estimated
    iteratively by gradient descent with backtracking line search.

    See the documentation for the class :class:`gradinvert.GradientDescentParams`
    for a description of the algorithm. The algorithm terminates when the
    residual error drops below the tolerance, when the maximum number of
    iterations is reached, when the descent direction is degenerate, when the
    line search fails, or when a step would not decrease the residual error.
    In every case the final estimate is returned together with its residual
    error, and no exception is raised: it is up to the caller to decide
    whether said error is acceptable.

    Since the inverse of a coordinate transformation from an
    :math:`n`-dimensional space to an :math:`m`-dimensional space is itself a
    coordinate transformation, from an :math:`m`-dimensional space to an
    :math:`n`-dimensional space, this class is a subclass of
    :class:`gradinvert.RealTransform`.

    All working memory of the algorithm is allocated per call, hence a single
    instance may be used by multiple threads as long as the wrapped coordinate
    transformation supports it. Otherwise, each thread should own a copy.

    Parameters
    ----------
    differentiable_transform : :class:`gradinvert.DifferentiableRealTransform`
        The coordinate transformation to invert. Note that no copy is made of
        ``differentiable_transform``.
    gradient_descent_params : :class:`gradinvert.GradientDescentParams` | `None`, optional
        The parameters of the gradient descent algorithm. If
        ``gradient_descent_params`` is set to ``None``, then the parameter set
        ``gradinvert.GradientDescentParams()`` is used. Only the parameters
        ``tolerance``, ``max_num_iterations``, ``armijo_constant``,
        ``step_size_shrink_factor``, ``initial_step_size``,
        ``max_num_line_search_tries``, ``min_step_size``, and
        ``max_step_size`` are used by this class.

    """
    def __init__(self,
                 differentiable_transform,
                 gradient_descent_params=\
                 _default_gradient_descent_params):
        params = {"differentiable_transform": differentiable_transform}
        self._differentiable_transform = \
            _check_and_convert_differentiable_transform(params)

        params = {"gradient_descent_params": gradient_descent_params}
        self._gradient_descent_params = \
            _check_and_convert_gradient_descent_params(params)

        self._gradient_descent_params_core_attrs = \
            self._gradient_descent_params.get_core_attrs(deep_copy=False)

        obj_alias = self._differentiable_transform
        self._num_source_dims = obj_alias.num_target_dims
        self._num_target_dims = obj_alias.num_source_dims

        return None



    def solve(self,
              target,
              initial_guess=_default_initial_guess,
              callback=_default_callback):
        r"""Estimate the pre-image of a target point.

        Parameters
        ----------
        target : `array_like` (`float`, ndim=1)
            The target point :math:`y^*` to invert, with at least
            ``differentiable_transform.num_target_dims`` components. Trailing
            components are ignored.
        initial_guess : `array_like` (`float`, ndim=1) | `None`, optional
            The starting estimate of the pre-image. If ``initial_guess`` is set
            to ``None``, then the first
            ``differentiable_transform.num_source_dims`` components of
            ``target`` are used, which requires the target space to have at
            least as many dimensions as the source space.
        callback : `callable` | `None`, optional
            If ``callback`` is not set to ``None``, then it is called after
            every accepted step as ``callback(iteration_idx, estimate, err)``,
            where ``iteration_idx`` is the index of the step, ``estimate`` is a
            copy of the new estimate, and ``err`` is its residual error.

        Returns
        -------
        estimate : `torch.Tensor` (`float`, shape=(``differentiable_transform.num_source_dims``,))
            The final estimate of the pre-image.
        err : `float`
            The residual error :math:`\left|f(\text{estimate})-y^*\right|`,
            which is ``float("inf")`` if the residual error of the starting
            estimate is not finite.

        """
        params = {"target": target, "min_num_elems": self._num_source_dims}
        target = _check_and_convert_target(params)

        params = {"initial_guess": initial_guess,
                  "min_num_elems": self._num_target_dims}
        initial_guess = _check_and_convert_initial_guess(params)

        params = {"callback": callback}
        callback = _check_and_convert_callback(params)

        estimate, err = self._solve(target, initial_guess, callback)

        return estimate, err



    def _solve(self, target, initial_guess=None, callback=None):
        target = target[:self._num_source_dims].clone()

        if initial_guess is None:
            initial_guess = self._generate_initial_guess(target)

        solver_state = _SolverState(target, estimate=initial_guess)

        with torch.no_grad():
            self._initialize_gradient_descent_alg_variables(solver_state)
            termination_reason = self._perform_gradient_descent_alg(solver_state,
                                                                    callback)

        logger.debug(f"Gradient descent terminated after "
                     f"{solver_state.num_iterations} iteration(s) with a "
                     f"residual error of {solver_state.err}: "
                     f"{termination_reason}.")

        estimate = solver_state.estimate
        err = solver_state.err

        return estimate, err



    def _generate_initial_guess(self, target):
        if self._num_source_dims < self._num_target_dims:
            unformatted_err_msg = _gradient_descent_inverse_err_msg_1
            err_msg = unformatted_err_msg.format(self._num_source_dims,
                                                 self._num_target_dims)
            raise ValueError(err_msg)

        initial_guess = target[:self._num_target_dims].clone()

        return initial_guess



    def _initialize_gradient_descent_alg_variables(self, solver_state):
        kwargs = {"solver_state": solver_state,
                  "estimate": solver_state.estimate}
        trial_point = self._eval_trial_point(**kwargs)

        self._update_solver_state(solver_state, trial_point)

        return None



    def _eval_trial_point(self, solver_state, estimate):
        forward_output = _eval_forward_output(self._differentiable_transform,
                                              estimate)
        residual = solver_state.target - forward_output
        sq_err = torch.dot(residual, residual).item()

        trial_point = {"estimate": estimate,
                       "forward_output": forward_output,
                       "residual": residual,
                       "sq_err": sq_err}

        return trial_point



    def _update_solver_state(self, solver_state, trial_point):
        solver_state.estimate = trial_point["estimate"]
        solver_state.forward_output = trial_point["forward_output"]
        solver_state.residual = trial_point["residual"]
        solver_state.sq_err = trial_point["sq_err"]
        solver_state.err = (math.sqrt(solver_state.sq_err)
                            if math.isfinite(solver_state.sq_err)
                            else float("inf"))

        return None



    def _perform_gradient_descent_alg(self, solver_state, callback):
        core_attrs = self._gradient_descent_params_core_attrs
        tolerance = core_attrs["tolerance"]
        max_num_iterations = core_attrs["max_num_iterations"]

        if not math.isfinite(solver_state.sq_err):
            logger.warning(f"The residual error of the initial estimate "
                           f"{solver_state.estimate.tolist()} is not finite.")
            termination_reason = "non-finite initial residual error"

            return termination_reason

        termination_reason = None

        while termination_reason is None:
            if solver_state.err < tolerance:
                termination_reason = "converged"
            elif solver_state.num_iterations >= max_num_iterations:
                termination_reason = "maximum number of iterations reached"
            else:
                termination_reason = \
                    self._perform_gradient_descent_alg_step(solver_state)

                if termination_reason is None:
                    solver_state.num_iterations += 1
                    if callback is not None:
                        callback(solver_state.num_iterations-1,
                                 solver_state.estimate.clone(),
                                 solver_state.err)

        return termination_reason



    def _perform_gradient_descent_alg_step(self, solver_state):
        core_attrs = self._gradient_descent_params_core_attrs

        jacobian = _eval_jacobian(self._differentiable_transform,
                                  solver_state.estimate)

        solver_state.direction, slope = \
            _calc_direction_from_residual(jacobian, solver_state.residual)

        if slope == 0:
            solver_state.step_size = 0.0
            termination_reason = "degenerate descent direction"

            return termination_reason

        kwargs = {"solver_state": solver_state,
                  "jacobian": jacobian,
                  "slope": slope}
        initial_step_size = self._calc_initial_step_size(**kwargs)

        kwargs = {"solver_state": solver_state,
                  "initial_step_size": initial_step_size,
                  "slope": slope}
        step_size, trial_point = self._perform_backtracking_line_search(**kwargs)

        if trial_point is None:
            solver_state.step_size = 0.0
            termination_reason = "line search failed"

            return termination_reason

        clamped_step_size = max(step_size, core_attrs["min_step_size"])
        if core_attrs["max_step_size"] is not None:
            clamped_step_size = min(clamped_step_size,
                                    core_attrs["max_step_size"])

        if clamped_step_size != step_size:
            step_size = clamped_step_size
            estimate = (solver_state.estimate
                        + step_size*solver_state.direction)
            trial_point = self._eval_trial_point(solver_state, estimate)

        if not (trial_point["sq_err"] < solver_state.sq_err):
            termination_reason = "residual error stopped decreasing"

            return termination_reason

        solver_state.step_size = step_size
        self._update_solver_state(solver_state, trial_point)

        termination_reason = None

        return termination_reason



    def _calc_initial_step_size(self, solver_state, jacobian, slope):
        core_attrs = self._gradient_descent_params_core_attrs
        initial_step_size = core_attrs["initial_step_size"]

        if initial_step_size is None:
            jacobian_times_direction = torch.einsum("mn, n -> m",
                                                    jacobian,
                                                    solver_state.direction)
            sq_norm = torch.dot(jacobian_times_direction,
                                jacobian_times_direction).item()

            initial_step_size = (slope / sq_norm
                                 if ((sq_norm > 0) and math.isfinite(sq_norm))
                                 else solver_state.err)

        return initial_step_size



    def _perform_backtracking_line_search(self,
                                          solver_state,
                                          initial_step_size,
                                          slope):
        core_attrs = self._gradient_descent_params_core_attrs
        c = core_attrs["armijo_constant"]
        beta = core_attrs["step_size_shrink_factor"]
        max_num_line_search_tries = core_attrs["max_num_line_search_tries"]

        step_size = initial_step_size

        for _ in range(max_num_line_search_tries):
            estimate = solver_state.estimate + step_size*solver_state.direction
            trial_point = self._eval_trial_point(solver_state, estimate)

            sq_err_upper_bound = solver_state.sq_err - c*step_size*2*slope
            trial_sq_err = trial_point["sq_err"]

            if math.isfinite(trial_sq_err) and (trial_sq_err
                                                < sq_err_upper_bound):
                return step_size, trial_point

            step_size *= beta

        return 0.0, None



    def eval_forward_output(self, x):
        output, _ = self._solve(target=x)

        return output



    def copy(self):
        kwargs = {"differentiable_transform": \
                  self._differentiable_transform.copy(),
                  "gradient_descent_params": \
                  self._gradient_descent_params}
        transform_copy = GradientDescentInverse(**kwargs)

        return transform_copy



    @property
    def differentiable_transform(self):
        r"""`gradinvert.DifferentiableRealTransform`: The coordinate
        transformation to invert.

        Note that ``differentiable_transform`` should be considered
        **read-only**.

        """
        return self._differentiable_transform



    @property
    def gradient_descent_params(self):
        r"""`gradinvert.GradientDescentParams`: The parameters of the gradient
        descent algorithm.

        Note that ``gradient_descent_params`` should be considered
        **read-only**.

        """
        return copy.deepcopy(self._gradient_descent_params)



class IterativelyInvertibleTransform(RealTransform):
    r"""A coordinate transformation paired with its iteratively estimated
    inverse.

    If ``transform`` is a :class:`gradinvert.DifferentiableRealTransform`,
    then its own Jacobian is used to estimate the inverse. Otherwise, the
    Jacobian is estimated by finite differences, with the step
    ``gradient_descent_params.core_attrs["jacobian_estimate_step"]``. In both
    cases, if ``gradient_descent_params.core_attrs
    ["jacobian_regularization_epsilon"]`` is positive, then the Jacobian is
    regularized. See the documentation for the classes
    :class:`gradinvert.FiniteDifferenceJacobianTransform` and
    :class:`gradinvert.RegularizedJacobianTransform`.

    The estimated inverse never raises an exception upon failing to converge.
    Use the method :meth:`gradinvert.GradientDescentInverse.solve` of
    :attr:`~gradinvert.IterativelyInvertibleTransform.solver` to retrieve the
    residual error alongside the estimate.

    Parameters
    ----------
    transform : :class:`gradinvert.RealTransform`
        The forward coordinate transformation. Note that no copy is made of
        ``transform``.
    gradient_descent_params : :class:`gradinvert.GradientDescentParams` | `None`, optional
        The parameters of the gradient descent algorithm. If
        ``gradient_descent_params`` is set to ``None``, then the parameter set
        ``gradinvert.GradientDescentParams()`` is used.

    """
    def __init__(self,
                 transform,
                 gradient_descent_params=\
                 _default_gradient_descent_params):
        params = {"transform": transform}
        self._transform = _check_and_convert_transform(params)

        params = {"gradient_descent_params": gradient_descent_params}
        self._gradient_descent_params = \
            _check_and_convert_gradient_descent_params(params)

        self._differentiable_transform = \
            self._generate_differentiable_transform()

        kwargs = {"differentiable_transform": self._differentiable_transform,
                  "gradient_descent_params": self._gradient_descent_params}
        self._solver = GradientDescentInverse(**kwargs)

        self._is_inverse = False

        return None



    def _generate_differentiable_transform(self):
        gradient_descent_params_core_attrs = \
            self._gradient_descent_params.get_core_attrs(deep_copy=False)

        jacobian_estimate_step = \
            gradient_descent_params_core_attrs["jacobian_estimate_step"]
        jacobian_regularization_epsilon = \
            gradient_descent_params_core_attrs["jacobian_regularization_epsilon"]

        if isinstance(self._transform, DifferentiableRealTransform):
            differentiable_transform = self._transform
        else:
            kwargs = {"transform": self._transform,
                      "jacobian_estimate_step": jacobian_estimate_step}
            differentiable_transform = FiniteDifferenceJacobianTransform(**kwargs)

        if jacobian_regularization_epsilon > 0:
            kwargs = {"differentiable_transform": \
                      differentiable_transform,
                      "jacobian_regularization_epsilon": \
                      jacobian_regularization_epsilon}
            differentiable_transform = RegularizedJacobianTransform(**kwargs)

        return differentiable_transform



    @property
    def num_source_dims(self):
        obj_alias = self._transform
        num_source_dims = (obj_alias.num_target_dims
                           if self._is_inverse
                           else obj_alias.num_source_dims)

        return num_source_dims



    @property
    def num_target_dims(self):
        obj_alias = self._transform
        num_target_dims = (obj_alias.num_source_dims
                           if self._is_inverse
                           else obj_alias.num_target_dims)

        return num_target_dims



    def eval_forward_output(self, x):
        output = (self._eval_inverse_of_transform(x)
                  if self._is_inverse
                  else self._eval_transform(x))

        return output



    def _eval_transform(self, x):
        output = _eval_forward_output(self._transform, x)

        return output



    def _eval_inverse_of_transform(self, x):
        output, _ = self._solver._solve(target=x)

        return output



    def apply_inverse(self, target, source=None):
        r"""Apply the estimated inverse of the coordinate transformation to a
        target point.

        Parameters
        ----------
        target : `array_like` (`float`, ndim=1)
            The target point, with at least ``num_target_dims`` components.
        source : `torch.Tensor` | `numpy.ndarray` | `None`, optional
            If ``source`` is a 1D floating-point array with at least
            ``num_source_dims`` components, then the estimated source point is
            written into it, including the case where ``source`` is the same
            object as ``target``. Otherwise, if ``source`` is set to ``None``,
            then a new `torch.Tensor` is allocated.

        Returns
        -------
        source : `torch.Tensor` | `numpy.ndarray`
            The estimated source point.

        """
        eval_output = (self._eval_transform
                       if self._is_inverse
                       else self._eval_inverse_of_transform)

        kwargs = {"source": target,
                  "target": source,
                  "num_source_dims": self.num_target_dims,
                  "num_target_dims": self.num_source_dims,
                  "eval_output": eval_output,
                  "names_of_aliases": ("target", "source")}
        source = _apply(**kwargs)

        return source



    def inverse(self):
        r"""Return the inverse view of the coordinate transformation.

        The inverse view shares the forward coordinate transformation and the
        solver of the current object, with the roles of
        :meth:`~gradinvert.IterativelyInvertibleTransform.apply` and
        :meth:`~gradinvert.IterativelyInvertibleTransform.apply_inverse`
        swapped.

        Returns
        -------
        inverse_view : :class:`gradinvert.IterativelyInvertibleTransform`
            The inverse view.

        """
        inverse_view = copy.copy(self)
        inverse_view._is_inverse = not self._is_inverse

        return inverse_view



    def copy(self):
        r"""Return an independent copy of the coordinate transformation.

        The copy wraps a copy of the forward coordinate transformation, and a
        freshly constructed solver.

        Returns
        -------
        transform_copy : :class:`gradinvert.IterativelyInvertibleTransform`
            The copy.

        """
        kwargs = {"transform": self._transform.copy(),
                  "gradient_descent_params": self._gradient_descent_params}
        transform_copy = IterativelyInvertibleTransform(**kwargs)
        transform_copy._is_inverse = self._is_inverse

        return transform_copy



    @property
    def transform(self):
        r"""`gradinvert.RealTransform`: The forward coordinate transformation.

        Note that ``transform`` should be considered **read-only**.

        """
        return self._transform



    @property
    def solver(self):
        r"""`gradinvert.GradientDescentInverse`: The solver estimating the
        inverse of the forward coordinate transformation.

        Note that ``solver`` should be considered **read-only**.

        """
        return self._solver



    @property
    def is_inverse(self):
        r"""`bool`: A boolean variable indicating whether the current object is
        an inverse view.

        If ``is_inverse`` is set to ``True``, then
        :meth:`~gradinvert.IterativelyInvertibleTransform.apply` estimates the
        inverse of the forward coordinate transformation. Otherwise,
        :meth:`~gradinvert.IterativelyInvertibleTransform.apply` applies the
        forward coordinate transformation.

        Note that ``is_inverse`` should be considered **read-only**.

        """
        return self._is_inverse



###########################
## Define error messages ##
###########################

_check_and_convert_real_torch_vector_err_msg_1 = \
    ("The object ``{}`` must be a real-valued 1D array.")
_check_and_convert_real_torch_vector_err_msg_2 = \
    ("The object ``{}`` must be a 1D array of at least {} elements.")

_check_and_convert_output_buffer_err_msg_1 = \
    ("The object ``{}`` must be a floating-point array.")
_check_and_convert_output_buffer_err_msg_2 = \
    _check_and_convert_real_torch_vector_err_msg_2

_eval_forward_output_err_msg_1 = \
    ("The coordinate transformation returned an output of shape {}, whereas "
     "the expected shape was {}.")

_eval_jacobian_err_msg_1 = \
    ("The coordinate transformation returned a Jacobian of shape {}, whereas "
     "the expected shape was {}.")

_real_transform_err_msg_1 = \
    ("The method ``{}`` must be implemented by the class ``{}``.")

_check_and_convert_jacobian_regularization_epsilon_err_msg_1 = \
    ("The object ``jacobian_regularization_epsilon`` must be a real number "
     "satisfying 0<=``jacobian_regularization_epsilon``<=1.")

_check_and_convert_matrix_err_msg_1 = \
    ("The object ``matrix`` must be a real-valued matrix with at least one row "
     "and at least two columns.")

_thin_plate_spline_map_err_msg_1 = \
    ("The thin-plate spline system of equations is singular.")

_check_and_convert_landmarks_err_msg_1 = \
    ("The object ``{}`` must be a real-valued matrix of shape (N, d), where "
     "d>=1 and N>=d+1.")

_check_and_convert_target_landmarks_err_msg_1 = \
    ("The object ``{}`` must have the same shape as the object ``{}``.")

_thin_plate_spline_transform_err_msg_1 = \
    ("Failed to fit the thin-plate spline to the specified landmarks: the "
     "source landmarks must not all lie in a common hyperplane.")

_check_and_convert_displacement_field_err_msg_1 = \
    ("The object ``displacement_field`` must be callable.")

_check_and_convert_armijo_constant_err_msg_1 = \
    ("The object ``{}`` must be a real number satisfying 0<``{}``<1.")

_check_and_convert_step_size_shrink_factor_err_msg_1 = \
    _check_and_convert_armijo_constant_err_msg_1

_check_and_convert_max_step_size_err_msg_1 = \
    ("The object ``max_step_size`` must be either of the type `NoneType` or a "
     "positive real number not smaller than ``min_step_size``.")

_check_and_convert_callback_err_msg_1 = \
    ("The object ``callback`` must be either of the type `NoneType` or "
     "callable.")

_gradient_descent_inverse_err_msg_1 = \
    ("Cannot use the target point as the initial guess of its pre-image, "
     "since the target space has fewer dimensions ({}) than the source space "
     "({}): an initial guess must be specified.")
