"""
Backwards compatible entry points.

The two-argument losses keep the reductions the earlier API applied
implicitly: ``sum`` for :func:`l1_loss`, :func:`l2_loss` and
:func:`kullback_leibler_divergence`, ``mean`` for everything else. Pass a
reduction explicitly through :mod:`np_losses.losses` to choose otherwise.

The ``all_*`` comparisons collapse an elementwise comparison into a single
``bool`` and are deprecated in favour of ``(lhs < rhs).all()`` and friends.
"""
import warnings
from functools import wraps

from np_losses import losses
from np_losses.reduction import mean_reduction, sum_reduction
from np_losses.tensor import Tensor

__all__ = [
    'l1_loss', 'l2_loss', 'hinge_loss', 'squared_hinge_loss', 'categorical_hinge_loss',
    'log_cosh_loss', 'poisson_loss', 'kullback_leibler_divergence',
    'softmax_cross_entropy', 'sigmoid_cross_entropy',
    'all_less', 'all_less_equal', 'all_greater', 'all_greater_equal',
]


def l1_loss(predicted: Tensor, expected: Tensor) -> Tensor:
    """Returns the summed L1 loss between predictions and expectations."""
    return losses.l1_loss(predicted, expected, reduction=sum_reduction)


def l2_loss(predicted: Tensor, expected: Tensor) -> Tensor:
    """Returns the summed L2 loss between predictions and expectations."""
    return losses.l2_loss(predicted, expected, reduction=sum_reduction)


def hinge_loss(predicted: Tensor, expected: Tensor) -> Tensor:
    """Returns the mean hinge loss between predictions and expectations."""
    return losses.hinge_loss(predicted, expected, reduction=mean_reduction)


def squared_hinge_loss(predicted: Tensor, expected: Tensor) -> Tensor:
    """Returns the mean squared hinge loss between predictions and expectations."""
    return losses.squared_hinge_loss(predicted, expected, reduction=mean_reduction)


def categorical_hinge_loss(predicted: Tensor, expected: Tensor) -> Tensor:
    """Returns the mean categorical hinge loss between predictions and expectations."""
    return losses.categorical_hinge_loss(predicted, expected, reduction=mean_reduction)


def log_cosh_loss(predicted: Tensor, expected: Tensor) -> Tensor:
    """
    Returns the mean logarithm of the hyperbolic cosine of the error between
    predictions and expectations.
    """
    return losses.log_cosh_loss(predicted, expected, reduction=mean_reduction)


def poisson_loss(predicted: Tensor, expected: Tensor) -> Tensor:
    """Returns the mean Poisson loss between predictions and expectations."""
    return losses.poisson_loss(predicted, expected, reduction=mean_reduction)


def kullback_leibler_divergence(predicted: Tensor, expected: Tensor) -> Tensor:
    """
    Returns the summed Kullback-Leibler divergence between expectations and
    predictions. Given two distributions ``p`` and ``q``, KL divergence
    computes ``p * log(p / q)``.
    """
    return losses.kullback_leibler_divergence(predicted, expected, reduction=sum_reduction)


def softmax_cross_entropy(logits: Tensor, probabilities: Tensor) -> Tensor:
    """Returns the mean softmax (categorical) cross entropy between logits and probabilities."""
    return losses.softmax_cross_entropy(logits, probabilities, reduction=mean_reduction)


def sigmoid_cross_entropy(logits: Tensor, labels: Tensor) -> Tensor:
    """Returns the mean sigmoid (binary) cross entropy between logits and labels."""
    return losses.sigmoid_cross_entropy(logits, labels, reduction=mean_reduction)


def deprecated(replacement: str):
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            warnings.warn(
                "{}() is deprecated and will be removed in a future release. "
                "Use `{}` instead.".format(func.__name__, replacement),
                DeprecationWarning, stacklevel=2)
            return func(*args, **kwargs)

        return wrapper

    return decorator


@deprecated('(lhs < rhs).all()')
def all_less(lhs: Tensor, rhs) -> bool:
    """Returns whether the elementwise comparison ``lhs < rhs`` is true everywhere."""
    return bool((lhs < rhs).all())


@deprecated('(lhs <= rhs).all()')
def all_less_equal(lhs: Tensor, rhs) -> bool:
    """Returns whether the elementwise comparison ``lhs <= rhs`` is true everywhere."""
    return bool((lhs <= rhs).all())


@deprecated('(lhs > rhs).all()')
def all_greater(lhs: Tensor, rhs) -> bool:
    """Returns whether the elementwise comparison ``lhs > rhs`` is true everywhere."""
    return bool((lhs > rhs).all())


@deprecated('(lhs >= rhs).all()')
def all_greater_equal(lhs: Tensor, rhs) -> bool:
    """Returns whether the elementwise comparison ``lhs >= rhs`` is true everywhere."""
    return bool((lhs >= rhs).all())
