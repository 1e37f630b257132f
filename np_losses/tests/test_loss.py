from unittest import TestCase

import numpy as np
import torch

import np_losses as anp
from np_losses import compat


class TestLossLayers(TestCase):

    def setUp(self):
        np.random.seed(42)
        torch.manual_seed(42)

    def test_default_reductions_match_compat(self):
        np_x = np.random.rand(3, 4) + 0.1
        np_y = np.random.rand(3, 4) + 0.1
        pairs = [
            (anp.L1Loss(), compat.l1_loss),
            (anp.L2Loss(), compat.l2_loss),
            (anp.HingeLoss(), compat.hinge_loss),
            (anp.SquaredHingeLoss(), compat.squared_hinge_loss),
            (anp.CategoricalHingeLoss(), compat.categorical_hinge_loss),
            (anp.LogCoshLoss(), compat.log_cosh_loss),
            (anp.PoissonLoss(), compat.poisson_loss),
            (anp.KLDivergence(), compat.kullback_leibler_divergence),
            (anp.SoftmaxCrossEntropyLoss(), compat.softmax_cross_entropy),
            (anp.SigmoidCrossEntropyLoss(), compat.sigmoid_cross_entropy),
        ]
        for layer, legacy in pairs:
            with self.subTest(layer=repr(layer)):
                x, y = anp.Tensor(np_x), anp.Tensor(np_y)
                self.assertTrue(np.allclose(layer(x, y).data, legacy(x, y).data))

    def test_reduction_override(self):
        x = anp.Tensor([1., 2.])
        y = anp.Tensor([0., 0.])
        self.assertEqual(anp.L2Loss()(x, y).item(), 5.)
        self.assertEqual(anp.L2Loss('mean')(x, y).item(), 2.5)
        self.assertEqual(anp.MSELoss()(x, y).item(), 2.5)
        self.assertTrue(np.allclose(anp.L2Loss('none')(x, y).data, [1., 4.]))

    def test_invalid_reduction(self):
        with self.assertRaises(ValueError):
            anp.L1Loss('median')
        with self.assertRaises(TypeError):
            anp.HingeLoss(1)

    def test_repr(self):
        self.assertEqual(repr(anp.L1Loss()), "L1Loss(reduction='sum')")
        self.assertEqual(repr(anp.HingeLoss(name='criterion')), "criterion: HingeLoss(reduction='mean')")

    def test_ce_backward_0(self):
        np_x = np.random.rand(3, 7)
        np_y = np.random.randint(0, 7, size=3)

        x = anp.Tensor(np_x, requires_grad=True)
        y = anp.Tensor(np_y, requires_grad=False)

        torch_x = torch.tensor(np_x, requires_grad=True)
        torch_y = torch.tensor(np_y, requires_grad=False, dtype=torch.long)

        ce = anp.CrossEntropyLoss()
        torch_ce = torch.nn.CrossEntropyLoss()

        loss = ce(x, y)
        torch_loss = torch_ce(torch_x, torch_y)
        self.assertTrue(np.allclose(loss.data, torch_loss.data.numpy()))

        torch_loss.backward()
        loss.backward()

        self.assertTrue(np.allclose(x.grad.data, torch_x.grad.data.numpy()))

    def test_ce_rejects_float_targets(self):
        with self.assertRaises(TypeError):
            anp.CrossEntropyLoss()(anp.Tensor(np.random.rand(2, 3)), anp.Tensor([0.5, 1.5]))
