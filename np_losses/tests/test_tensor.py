from unittest import TestCase

import numpy as np
import torch

from np_losses import gol
from np_losses.ops import method_register
from np_losses.tensor import Tensor


class TestTensor(TestCase):

    def test_init_tensor(self):
        x = Tensor(np.array([1, 2, 3, 4]))
        self.assertEqual(x.shape, (4,))
        self.assertEqual(x.ndim, 1)
        self.assertEqual(x.numel(), 4)
        self.assertEqual(x.requires_grad, False)
        self.assertIsNone(x.grad)
        self.assertEqual(repr(x), 'Tensor([1 2 3 4])')
        self.assertEqual(Tensor([1., 2.], name='x').short_repr(), 'x: Tensor((2,))')

    def test_tensor_backward_2(self):
        a = Tensor([1, 2, 3, 4, 5], requires_grad=True)
        b = Tensor([2, 2, 2, 2, 2], requires_grad=True)
        c = Tensor([5, 4, 3, 2, 1], requires_grad=True)

        d = a + (-b)
        e = (-b) + c
        f = d + e

        f.backward(Tensor(np.array([1, 1, 1, 1, 1])))
        self.assertTrue(np.all(a.grad.data == np.array([1, 1, 1, 1, 1])))
        self.assertTrue(np.all(b.grad.data == np.array([-2, -2, -2, -2, -2])))
        self.assertTrue(np.all(c.grad.data == np.array([1, 1, 1, 1, 1])))

    def test_tensor_backward_1(self):
        a = Tensor(2.0, requires_grad=True)
        b = Tensor(5.0, requires_grad=True)
        d = Tensor(4.0, requires_grad=True)
        c = a * b
        e = c * d
        e.backward(Tensor(1))
        self.assertEqual(a.grad.data, 20)
        self.assertEqual(b.grad.data, 8)
        self.assertEqual(c.grad.data, 4)
        self.assertEqual(d.grad.data, 10)

    def test_backward_defaults_to_ones(self):
        x = Tensor([1., 2., 3.], requires_grad=True)
        y = (x * x).sum()
        y.backward()
        self.assertTrue(np.allclose(x.grad.data, [2., 4., 6.]))

    def test_backward_accepts_ndarray(self):
        x = Tensor([1., 2.], requires_grad=True)
        y = x * 3.
        y.backward(np.array([1., 10.]))
        self.assertTrue(np.allclose(x.grad.data, [3., 30.]))

    def test_cannot_backprop_twice(self):
        x = Tensor([1., 2.], requires_grad=True)
        loss = (x * 2.).sum()
        loss.backward()
        with self.assertRaises(RuntimeError):
            loss.backward()

    def test_unused_consumer_does_not_block_backward(self):
        w = Tensor([1., 2.], requires_grad=True)
        h = w * 3.
        h.mean()  # never backpropagated
        (h * h).sum().backward()
        self.assertTrue(np.allclose(h.grad.data, [6., 12.]))
        self.assertTrue(np.allclose(w.grad.data, [18., 36.]))

    def test_intermediate_grad_is_not_propagated_twice(self):
        w = Tensor([1., 2.], requires_grad=True)
        h = w * 2.
        h.sum().backward()
        (h * h).sum().backward()
        # pass one: 2 * 1, pass two: 2 * 2h with h = [2, 4]
        self.assertTrue(np.allclose(w.grad.data, [2. + 8., 2. + 16.]))
        self.assertTrue(np.allclose(h.grad.data, [1. + 4., 1. + 8.]))

    def test_constant_gets_no_grad(self):
        x = Tensor([1., 2.], requires_grad=True)
        y = Tensor([3., 4.])
        z = (x * y).sum()
        self.assertTrue(z.requires_grad)
        z.backward()
        self.assertTrue(np.allclose(x.grad.data, [3., 4.]))
        self.assertIsNone(y.grad)

    def test_constant_expression_has_no_graph(self):
        z = Tensor([1., 2.]) + Tensor([3., 4.])
        self.assertFalse(z.requires_grad)
        self.assertIsNone(z.creators)
        self.assertIsNone(z.creation_op)

    def test_detach(self):
        x = Tensor([1., 2.], requires_grad=True)
        y = (x * 2.).detach()
        self.assertFalse(y.requires_grad)
        self.assertIsNone(y.creators)

    def test_bool(self):
        self.assertTrue(bool(Tensor(True)))
        self.assertFalse(bool(Tensor([0.])))
        with self.assertRaises(ValueError):
            bool(Tensor([1., 2.]))

    def test_method_register_rejects_duplicates(self):
        with self.assertRaises(NameError):
            @method_register(Tensor)
            def __add__(self, other):
                return other

    def test_mul_chain_matches_torch(self):
        np.random.seed(42)
        np_x = np.random.rand(3, 5)
        np_y = np.random.rand(5)

        x = Tensor(np_x, requires_grad=True)
        y = Tensor(np_y, requires_grad=True)
        torch_x = torch.tensor(np_x, requires_grad=True)
        torch_y = torch.tensor(np_y, requires_grad=True)

        res = (x * y + x / y - y).sum()
        torch_res = (torch_x * torch_y + torch_x / torch_y - torch_y).sum()
        self.assertTrue(np.allclose(res.data, torch_res.data.numpy()))

        res.backward()
        torch_res.backward()
        self.assertTrue(np.allclose(x.grad.data, torch_x.grad.numpy()))
        self.assertTrue(np.allclose(y.grad.data, torch_y.grad.numpy()))


class TestGol(TestCase):

    def tearDown(self):
        gol.init()

    def test_defaults(self):
        self.assertFalse(gol.get_value('GRAPH_FLAG'))
        self.assertIsNone(gol.get_value('G'))

    def test_set_and_get(self):
        gol.set_value('GRAPH_FLAG', True)
        self.assertTrue(gol.get_value('GRAPH_FLAG'))
        gol.init()
        self.assertFalse(gol.get_value('GRAPH_FLAG'))

    def test_unknown_key(self):
        with self.assertRaises(KeyError):
            gol.get_value('NO_SUCH_KEY')
        self.assertEqual(gol.get_value('NO_SUCH_KEY', 3), 3)
