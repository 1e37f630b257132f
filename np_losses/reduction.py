from typing import Callable, Union

import np_losses.ops  # noqa: F401  registers Tensor.sum / Tensor.mean
from np_losses.tensor import Tensor

Reduction = Callable[[Tensor], Tensor]


def sum_reduction(x: Tensor) -> Tensor:
    return x.sum()


def mean_reduction(x: Tensor) -> Tensor:
    return x.mean()


def no_reduction(x: Tensor) -> Tensor:
    return x


REDUCTIONS = {
    'sum': sum_reduction,
    'mean': mean_reduction,
    'none': no_reduction,
}


def get_reduction(reduction: Union[str, Reduction]) -> Reduction:
    r"""
    Resolves ``reduction`` to a callable.

    Args:
        reduction: one of ``'sum'``, ``'mean'``, ``'none'`` or a callable mapping
            the elementwise loss tensor to its reduced value.
    """
    if isinstance(reduction, str):
        try:
            return REDUCTIONS[reduction]
        except KeyError:
            raise ValueError("unknown reduction '{}', expected one of {}"
                             .format(reduction, sorted(REDUCTIONS))) from None
    if callable(reduction):
        return reduction
    raise TypeError("reduction should be a string or a callable. "
                    "Got {}".format(type(reduction)))
