"""
Reduction-parameterized losses.

Each loss computes an elementwise (or per-row) term and hands it to
``reduction``, which may be one of ``'sum'``, ``'mean'``, ``'none'`` or any
callable ``Tensor -> Tensor``. Only ``predicted`` / ``logits`` is
differentiated: the target argument is detached before use, so it never
receives a gradient.
"""
from typing import Tuple, Union

import numpy as np

from np_losses.ops import as_tensor, log1p, log_softmax, maximum, softplus
from np_losses.reduction import Reduction, get_reduction
from np_losses.tensor import Tensor

ReductionArg = Union[str, Reduction]


def _prepare(predicted, expected) -> Tuple[Tensor, Tensor]:
    predicted = as_tensor(predicted)
    if not np.issubdtype(predicted.dtype, np.floating):
        raise TypeError("losses require a floating point prediction, got dtype {}"
                        .format(predicted.dtype))
    return predicted, as_tensor(expected).detach()


def l1_loss(predicted, expected, reduction: ReductionArg) -> Tensor:
    """Absolute differences between predictions and expectations."""
    predicted, expected = _prepare(predicted, expected)
    return get_reduction(reduction)((expected - predicted).abs())


def l2_loss(predicted, expected, reduction: ReductionArg) -> Tensor:
    """Squared differences between predictions and expectations."""
    predicted, expected = _prepare(predicted, expected)
    return get_reduction(reduction)((expected - predicted) ** 2)


def mean_absolute_error(predicted, expected, reduction: ReductionArg = 'mean') -> Tensor:
    return l1_loss(predicted, expected, reduction)


def mean_squared_error(predicted, expected, reduction: ReductionArg = 'mean') -> Tensor:
    return l2_loss(predicted, expected, reduction)


def hinge_loss(predicted, expected, reduction: ReductionArg) -> Tensor:
    """``max(0, 1 - expected * predicted)``; expectations are -1/1 labels."""
    predicted, expected = _prepare(predicted, expected)
    return get_reduction(reduction)(maximum(0., 1. - expected * predicted))


def squared_hinge_loss(predicted, expected, reduction: ReductionArg) -> Tensor:
    return get_reduction(reduction)(hinge_loss(predicted, expected, 'none') ** 2)


def categorical_hinge_loss(predicted, expected, reduction: ReductionArg) -> Tensor:
    r"""
    Hinge loss over one-hot expectations along the last axis.

    The margin compares the predicted score of the correct class against the
    best scoring wrong class, giving one value per row (last axis kept as 1).
    """
    predicted, expected = _prepare(predicted, expected)
    positive = (expected * predicted).sum(axis=-1, keepdims=True)
    negative = ((1. - expected) * predicted).max(axis=-1, keepdims=True)
    return get_reduction(reduction)(maximum(0., negative - positive + 1.))


def log_cosh_loss(predicted, expected, reduction: ReductionArg) -> Tensor:
    """Logarithm of the hyperbolic cosine of the prediction error."""
    predicted, expected = _prepare(predicted, expected)
    x = predicted - expected
    # log(cosh(x)) == x + softplus(-2x) - log(2), stable for large |x|
    return get_reduction(reduction)(x + softplus(-2. * x) - np.log(2.))


def poisson_loss(predicted, expected, reduction: ReductionArg) -> Tensor:
    predicted, expected = _prepare(predicted, expected)
    return get_reduction(reduction)(predicted - expected * predicted.log())


def kullback_leibler_divergence(predicted, expected, reduction: ReductionArg) -> Tensor:
    """``expected * log(expected / predicted)``, i.e. KL(expected || predicted)."""
    predicted, expected = _prepare(predicted, expected)
    return get_reduction(reduction)(expected * (expected / predicted).log())


def softmax_cross_entropy(logits, probabilities, reduction: ReductionArg) -> Tensor:
    r"""
    Categorical cross entropy between ``logits`` and a target distribution.

    Args:
        logits: unscaled scores, classes along the last axis.
        probabilities: target probabilities with the same shape as ``logits``.
        reduction: applied to the per-row losses (shape ``logits.shape[:-1]``).
    """
    logits, probabilities = _prepare(logits, probabilities)
    return get_reduction(reduction)(-(probabilities * log_softmax(logits, dim=-1)).sum(axis=-1))


def sigmoid_cross_entropy(logits, labels, reduction: ReductionArg) -> Tensor:
    """Binary cross entropy on logits, computed as ``max(x, 0) - x * z + log(1 + exp(-|x|))``."""
    logits, labels = _prepare(logits, labels)
    max_logits_with_zero = maximum(logits, 0.)
    # |x| as max(x, -x) so the tie at 0 yields a zero subgradient and d/dx stays sigmoid(x) - z
    abs_logits = maximum(logits, -logits)
    return get_reduction(reduction)(max_logits_with_zero - logits * labels + log1p((-abs_logits).exp()))
