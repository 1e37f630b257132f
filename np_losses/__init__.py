from np_losses.tensor import Tensor
from np_losses import ops
from np_losses import reduction, losses, compat, graph
from np_losses.layer import Layer
from np_losses.loss import (CrossEntropyLoss, MSELoss, L1Loss, L2Loss, HingeLoss, SquaredHingeLoss,
                            CategoricalHingeLoss, LogCoshLoss, PoissonLoss, KLDivergence,
                            SoftmaxCrossEntropyLoss, SigmoidCrossEntropyLoss)

__version__ = '0.1.0'
