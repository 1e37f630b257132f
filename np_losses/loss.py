import numpy as np

from np_losses import losses
from np_losses.layer import Layer
from np_losses.reduction import get_reduction
from np_losses.tensor import Tensor


class _Loss(Layer):
    default_reduction = 'mean'

    def __init__(self, reduction=None, name: str = None):
        super(_Loss, self).__init__(name)
        self.reduction = self.default_reduction if reduction is None else reduction
        # fail at construction rather than on the first forward
        get_reduction(self.reduction)

    def extra_repr(self) -> str:
        if isinstance(self.reduction, str):
            return f"reduction='{self.reduction}'"
        return f"reduction={getattr(self.reduction, '__name__', self.reduction)}"


class L1Loss(_Loss):
    default_reduction = 'sum'

    def forward(self, source: Tensor, target: Tensor) -> Tensor:
        return losses.l1_loss(source, target, self.reduction)


class L2Loss(_Loss):
    default_reduction = 'sum'

    def forward(self, source: Tensor, target: Tensor) -> Tensor:
        return losses.l2_loss(source, target, self.reduction)


class MSELoss(_Loss):

    def forward(self, source: Tensor, target: Tensor) -> Tensor:
        return losses.mean_squared_error(source, target, self.reduction)


class HingeLoss(_Loss):

    def forward(self, source: Tensor, target: Tensor) -> Tensor:
        return losses.hinge_loss(source, target, self.reduction)


class SquaredHingeLoss(_Loss):

    def forward(self, source: Tensor, target: Tensor) -> Tensor:
        return losses.squared_hinge_loss(source, target, self.reduction)


class CategoricalHingeLoss(_Loss):

    def forward(self, source: Tensor, target: Tensor) -> Tensor:
        return losses.categorical_hinge_loss(source, target, self.reduction)


class LogCoshLoss(_Loss):

    def forward(self, source: Tensor, target: Tensor) -> Tensor:
        return losses.log_cosh_loss(source, target, self.reduction)


class PoissonLoss(_Loss):

    def forward(self, source: Tensor, target: Tensor) -> Tensor:
        return losses.poisson_loss(source, target, self.reduction)


class KLDivergence(_Loss):
    default_reduction = 'sum'

    def forward(self, source: Tensor, target: Tensor) -> Tensor:
        return losses.kullback_leibler_divergence(source, target, self.reduction)


class SoftmaxCrossEntropyLoss(_Loss):

    def forward(self, source: Tensor, target: Tensor) -> Tensor:
        return losses.softmax_cross_entropy(source, target, self.reduction)


class SigmoidCrossEntropyLoss(_Loss):

    def forward(self, source: Tensor, target: Tensor) -> Tensor:
        return losses.sigmoid_cross_entropy(source, target, self.reduction)


class CrossEntropyLoss(_Loss):
    """Softmax cross entropy against integer class indices of shape ``(N,)``."""

    def forward(self, source: Tensor, target) -> Tensor:
        num_class = source.shape[-1]
        indices = np.asarray(target.data if isinstance(target, Tensor) else target)
        if not np.issubdtype(indices.dtype, np.integer):
            raise TypeError("class indices should be integers. Got {}".format(indices.dtype))
        y_onehot = np.eye(num_class)[indices]
        return losses.softmax_cross_entropy(source, Tensor(y_onehot), self.reduction)
