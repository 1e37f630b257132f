from abc import abstractmethod
from functools import wraps
from typing import Optional, Tuple, Union

import numpy as np

from np_losses.tensor import Tensor

__all__ = [
    'method_register', 'as_tensor', 'unbroadcast',
    'OpBase', 'UnaryOpBase', 'BinaryOpBase',
    'Add', 'Sub', 'Mul', 'Div', 'Maximum', 'Neg', 'Pow', 'Abs', 'Exp', 'Log', 'Log1p',
    'Sigmoid', 'Softplus', 'LogSoftmax', 'Sum', 'Mean', 'Max',
    'ComparisonOpBase', 'Less', 'LessEqual', 'Greater', 'GreaterEqual', 'All',
    'maximum', 'log1p', 'sigmoid', 'softplus', 'log_softmax',
]

Axis = Optional[Union[int, Tuple[int, ...]]]


def method_register(cls: object):
    def decorator(func):
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            return func(self, *args, **kwargs)

        # object already provides the rich comparisons, so only the class body counts
        if func.__name__ in vars(cls):
            msg = 'Error method name REPEAT, {} has exist'.format(func.__name__)
            raise NameError(msg)
        else:
            setattr(cls, func.__name__, wrapper)
        return func

    return decorator


def _is_numeric(dtype: np.dtype) -> bool:
    return np.issubdtype(dtype, np.number) or np.issubdtype(dtype, np.bool_)


def as_tensor(value) -> Tensor:
    """Wrap python scalars and arrays as constant tensors, leaving tensors untouched."""
    if isinstance(value, Tensor):
        return value
    data = np.asarray(value)
    if not _is_numeric(data.dtype):
        raise TypeError("expected a numeric value, got {}".format(type(value).__name__))
    return Tensor(data)


def unbroadcast(grad: np.ndarray, shape: Tuple[int, ...]) -> np.ndarray:
    """Sum ``grad`` over the axes numpy broadcasting added to reach ``shape``."""
    while grad.ndim > len(shape):
        grad = grad.sum(axis=0)
    for axis, size in enumerate(shape):
        if size == 1 and grad.shape[axis] != 1:
            grad = grad.sum(axis=axis, keepdims=True)
    return grad


def _expand_reduced(dout: np.ndarray, shape: Tuple[int, ...], axis: Axis, keepdims: bool) -> np.ndarray:
    # put back the axes a reduction dropped, so dout broadcasts against its input
    if axis is not None and not keepdims:
        axes = (axis,) if isinstance(axis, int) else axis
        axes = sorted(a % len(shape) for a in axes)
        for a in axes:
            dout = np.expand_dims(dout, axis=a)
    return np.broadcast_to(dout, shape)


def _reduced_size(shape: Tuple[int, ...], axis: Axis) -> int:
    if axis is None:
        return int(np.prod(shape))
    axes = (axis,) if isinstance(axis, int) else axis
    return int(np.prod([shape[a] for a in axes]))


class OpBase:
    def __init__(self):
        super().__init__()

    @abstractmethod
    def forward(self, *args) -> Tensor:
        pass

    @abstractmethod
    def backward(self, dout: Tensor, out: Tensor) -> ...:
        pass

    def result(self, data: np.ndarray, *inputs: Tensor) -> Tensor:
        if any(i.requires_grad for i in inputs):
            return Tensor(data,
                          requires_grad=True,
                          creators=list(inputs),
                          creation_op=self)
        return Tensor(data)

    def __repr__(self) -> str:
        return self.__class__.__name__

    def __call__(self, *args) -> Tensor:
        return self.forward(*args)


class UnaryOpBase(OpBase):
    def __init__(self):
        super().__init__()
        self.x = None

    @abstractmethod
    def forward(self, x: Tensor) -> Tensor:
        pass


class BinaryOpBase(OpBase):
    def __init__(self):
        super().__init__()
        self.x = None
        self.y = None

    @abstractmethod
    def forward(self, x: Tensor, y: Tensor) -> Tensor:
        pass


class Add(BinaryOpBase):

    def forward(self, x, y):
        self.x = as_tensor(x)
        self.y = as_tensor(y)
        return self.result(self.x.data + self.y.data, self.x, self.y)

    def backward(self, dout, out):
        self.x.backward(Tensor(unbroadcast(dout.data, self.x.shape)), out)
        self.y.backward(Tensor(unbroadcast(dout.data, self.y.shape)), out)


class Sub(BinaryOpBase):

    def forward(self, x, y):
        self.x = as_tensor(x)
        self.y = as_tensor(y)
        return self.result(self.x.data - self.y.data, self.x, self.y)

    def backward(self, dout, out):
        self.x.backward(Tensor(unbroadcast(dout.data, self.x.shape)), out)
        self.y.backward(Tensor(unbroadcast(-dout.data, self.y.shape)), out)


class Mul(BinaryOpBase):

    def forward(self, x, y):
        self.x = as_tensor(x)
        self.y = as_tensor(y)
        return self.result(self.x.data * self.y.data, self.x, self.y)

    def backward(self, dout, out):
        dx = Tensor(unbroadcast(dout.data * self.y.data, self.x.shape))
        dy = Tensor(unbroadcast(dout.data * self.x.data, self.y.shape))
        self.x.backward(dx, out)
        self.y.backward(dy, out)


class Div(BinaryOpBase):

    def forward(self, x, y):
        self.x = as_tensor(x)
        self.y = as_tensor(y)
        return self.result(self.x.data / self.y.data, self.x, self.y)

    def backward(self, dout, out):
        dx = Tensor(unbroadcast(dout.data / self.y.data, self.x.shape))
        dy = Tensor(unbroadcast(-dout.data * out.data / self.y.data, self.y.shape))
        self.x.backward(dx, out)
        self.y.backward(dy, out)


class Maximum(BinaryOpBase):
    """Elementwise maximum; tied elements split the gradient evenly."""

    def forward(self, x, y):
        self.x = as_tensor(x)
        self.y = as_tensor(y)
        return self.result(np.maximum(self.x.data, self.y.data), self.x, self.y)

    def backward(self, dout, out):
        x_share = np.where(self.x.data > self.y.data, 1., np.where(self.x.data == self.y.data, 0.5, 0.))
        dx = Tensor(unbroadcast(dout.data * x_share, self.x.shape))
        dy = Tensor(unbroadcast(dout.data * (1. - x_share), self.y.shape))
        self.x.backward(dx, out)
        self.y.backward(dy, out)


class Neg(UnaryOpBase):

    def forward(self, x):
        self.x = x
        return self.result(x.data * (-1), x)

    def backward(self, dout, out):
        self.x.backward(Tensor(dout.data * (-1)), out)


class Pow(UnaryOpBase):
    def __init__(self, exponent: float):
        super().__init__()
        self.exponent = exponent

    def forward(self, x):
        self.x = x
        return self.result(x.data ** self.exponent, x)

    def backward(self, dout, out):
        dx = Tensor(dout.data * self.exponent * self.x.data ** (self.exponent - 1))
        self.x.backward(dx, out)

    def __repr__(self) -> str:
        return f'Pow({self.exponent})'


class Abs(UnaryOpBase):

    def forward(self, x):
        self.x = x
        return self.result(np.abs(x.data), x)

    def backward(self, dout, out):
        self.x.backward(Tensor(dout.data * np.sign(self.x.data)), out)


class Exp(UnaryOpBase):

    def forward(self, x):
        self.x = x
        return self.result(np.exp(x.data), x)

    def backward(self, dout, out):
        self.x.backward(Tensor(dout.data * out.data), out)


class Log(UnaryOpBase):

    def forward(self, x):
        self.x = x
        return self.result(np.log(x.data), x)

    def backward(self, dout, out):
        dx = Tensor(1 / self.x.data * dout.data, )
        self.x.backward(dx, out)


class Log1p(UnaryOpBase):

    def forward(self, x):
        self.x = x
        return self.result(np.log1p(x.data), x)

    def backward(self, dout, out):
        self.x.backward(Tensor(dout.data / (1 + self.x.data)), out)


class Sigmoid(UnaryOpBase):

    @staticmethod
    def sigmoid(x):
        return np.exp(-np.logaddexp(0., -x))

    def forward(self, x):
        self.x = x
        return self.result(self.sigmoid(x.data), x)

    def backward(self, dout, out):
        dx = Tensor(out.data * (1 - out.data) * dout.data, )
        self.x.backward(dx, out)


class Softplus(UnaryOpBase):
    """``log(1 + exp(x))``, computed without overflow for large ``x``."""

    def forward(self, x):
        self.x = x
        return self.result(np.logaddexp(0, x.data), x)

    def backward(self, dout, out):
        self.x.backward(Tensor(Sigmoid.sigmoid(self.x.data) * dout.data), out)


class LogSoftmax(UnaryOpBase):
    def __init__(self, dim: int = -1):
        super().__init__()
        self.dim = dim

    def forward(self, x):
        self.x = x
        shifted = x.data - np.max(x.data, axis=self.dim, keepdims=True)
        log_sum = np.log(np.exp(shifted).sum(axis=self.dim, keepdims=True))
        return self.result(shifted - log_sum, x)

    def backward(self, dout, out):
        dx = dout.data - np.exp(out.data) * dout.data.sum(axis=self.dim, keepdims=True)
        self.x.backward(Tensor(dx), out)

    def __repr__(self) -> str:
        return f'LogSoftmax(dim={self.dim})'


class Sum(UnaryOpBase):
    def __init__(self, axis: Axis = None, keepdims: bool = False):
        super().__init__()
        self.axis = axis
        self.keepdims = keepdims

    def forward(self, x):
        self.x = x
        return self.result(x.data.sum(axis=self.axis, keepdims=self.keepdims), x)

    def backward(self, dout, out):
        dx = _expand_reduced(dout.data, self.x.shape, self.axis, self.keepdims)
        self.x.backward(Tensor(np.array(dx)), out)


class Mean(UnaryOpBase):
    def __init__(self, axis: Axis = None, keepdims: bool = False):
        super().__init__()
        self.axis = axis
        self.keepdims = keepdims

    def forward(self, x):
        self.x = x
        return self.result(x.data.mean(axis=self.axis, keepdims=self.keepdims), x)

    def backward(self, dout, out):
        dx = _expand_reduced(dout.data, self.x.shape, self.axis, self.keepdims)
        self.x.backward(Tensor(dx / _reduced_size(self.x.shape, self.axis)), out)


class Max(UnaryOpBase):
    """Maximum along ``axis``; tied maxima share the gradient evenly."""

    def __init__(self, axis: Axis = None, keepdims: bool = False):
        super().__init__()
        self.axis = axis
        self.keepdims = keepdims

    def forward(self, x):
        self.x = x
        return self.result(x.data.max(axis=self.axis, keepdims=self.keepdims), x)

    def backward(self, dout, out):
        peak = _expand_reduced(out.data, self.x.shape, self.axis, self.keepdims)
        mask = self.x.data == peak
        ties = mask.sum(axis=self.axis, keepdims=True)
        dx = _expand_reduced(dout.data, self.x.shape, self.axis, self.keepdims) * mask / ties
        self.x.backward(Tensor(dx), out)


class ComparisonOpBase(BinaryOpBase):
    """Elementwise ordering comparison; the boolean result never carries a gradient."""

    compare = None

    def forward(self, x, y):
        self.x = as_tensor(x)
        self.y = as_tensor(y)
        for t in (self.x, self.y):
            if not _is_numeric(t.dtype):
                raise TypeError("cannot order tensors of dtype {}".format(t.dtype))
        return Tensor(type(self).compare(self.x.data, self.y.data))

    def backward(self, dout, out):
        raise RuntimeError(f'{self!r} is not differentiable')


class Less(ComparisonOpBase):
    compare = np.less


class LessEqual(ComparisonOpBase):
    compare = np.less_equal


class Greater(ComparisonOpBase):
    compare = np.greater


class GreaterEqual(ComparisonOpBase):
    compare = np.greater_equal


class All(UnaryOpBase):
    def __init__(self, axis: Axis = None):
        super().__init__()
        self.axis = axis

    def forward(self, x):
        self.x = x
        return Tensor(np.all(x.data, axis=self.axis))

    def backward(self, dout, out):
        raise RuntimeError(f'{self!r} is not differentiable')


@method_register(Tensor)
def __add__(self: Tensor, other) -> Tensor:
    return Add().forward(self, other)


@method_register(Tensor)
def __radd__(self: Tensor, other) -> Tensor:
    return Add().forward(other, self)


@method_register(Tensor)
def __neg__(self: Tensor) -> Tensor:
    return Neg().forward(self)


@method_register(Tensor)
def __sub__(self: Tensor, other) -> Tensor:
    return Sub().forward(self, other)


@method_register(Tensor)
def __rsub__(self: Tensor, other) -> Tensor:
    return Sub().forward(other, self)


@method_register(Tensor)
def __mul__(self: Tensor, other) -> Tensor:
    return Mul().forward(self, other)


@method_register(Tensor)
def __rmul__(self: Tensor, other) -> Tensor:
    return Mul().forward(other, self)


@method_register(Tensor)
def __truediv__(self: Tensor, other) -> Tensor:
    return Div().forward(self, other)


@method_register(Tensor)
def __rtruediv__(self: Tensor, other) -> Tensor:
    return Div().forward(other, self)


@method_register(Tensor)
def __pow__(self: Tensor, exponent: float) -> Tensor:
    return Pow(exponent).forward(self)


@method_register(Tensor)
def __lt__(self: Tensor, other) -> Tensor:
    return Less().forward(self, other)


@method_register(Tensor)
def __le__(self: Tensor, other) -> Tensor:
    return LessEqual().forward(self, other)


@method_register(Tensor)
def __gt__(self: Tensor, other) -> Tensor:
    return Greater().forward(self, other)


@method_register(Tensor)
def __ge__(self: Tensor, other) -> Tensor:
    return GreaterEqual().forward(self, other)


@method_register(Tensor)
def abs(self: Tensor) -> Tensor:
    return Abs().forward(self)


@method_register(Tensor)
def exp(self: Tensor) -> Tensor:
    return Exp().forward(self)


@method_register(Tensor)
def log(self: Tensor) -> Tensor:
    return Log().forward(self)


@method_register(Tensor)
def sum(self: Tensor, axis: Axis = None, keepdims: bool = False) -> Tensor:
    return Sum(axis, keepdims).forward(self)


@method_register(Tensor)
def mean(self: Tensor, axis: Axis = None, keepdims: bool = False) -> Tensor:
    return Mean(axis, keepdims).forward(self)


@method_register(Tensor)
def max(self: Tensor, axis: Axis = None, keepdims: bool = False) -> Tensor:
    return Max(axis, keepdims).forward(self)


@method_register(Tensor)
def all(self: Tensor, axis: Axis = None) -> Tensor:
    return All(axis).forward(self)


def maximum(x, y) -> Tensor:
    return Maximum().forward(x, y)


def log1p(x: Tensor) -> Tensor:
    return Log1p().forward(x)


def sigmoid(x: Tensor) -> Tensor:
    return Sigmoid().forward(x)


def softplus(x: Tensor) -> Tensor:
    return Softplus().forward(x)


def log_softmax(x: Tensor, dim: int = -1) -> Tensor:
    return LogSoftmax(dim).forward(x)
