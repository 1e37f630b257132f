from typing import Any, Iterable, List, Optional, Tuple, Union

import numpy as np

from np_losses import graph


class Tensor:
    def __init__(self, data: Union[Iterable, float], requires_grad: bool = False,
                 creators: Optional[List['Tensor']] = None,
                 creation_op: Optional[Any] = None,
                 name: str = None):
        self.data: np.ndarray = np.array(data)
        self.creation_op: ... = creation_op
        self.creators: Optional[List['Tensor']] = creators
        self.grad: Optional['Tensor'] = None
        self.name: str = name
        self.requires_grad: bool = requires_grad
        self.children: dict = {}
        self.id = id(self)
        self._pending: int = 0
        self._grad_buffer: Optional[np.ndarray] = None

        recording = graph.is_enabled()
        if recording:
            graph.add_tensor(self)
            if creation_op is not None:
                graph.add_op(creation_op, self, creators or [])

        if creators is not None:
            for c in creators:
                if self.id not in c.children:
                    c.children[self.id] = 1
                else:
                    c.children[self.id] += 1

    def _count_pending(self) -> None:
        # count, per tensor, the edges reachable from this root; consumers outside the pass never report
        visited = {self.id}
        stack = [self]
        while stack:
            node = stack.pop()
            for c in node.creators or []:
                if c.id not in visited:
                    visited.add(c.id)
                    c._pending = 0
                    c._grad_buffer = None
                    stack.append(c)
                c._pending += 1

    def backward(self, gradient: Union['Tensor', np.ndarray, float, None] = None,
                 grad_origin: Optional['Tensor'] = None) -> None:
        if not self.requires_grad:
            return

        if gradient is None:
            gradient = Tensor(np.ones_like(self.data, dtype=np.float64))
        elif not isinstance(gradient, Tensor):
            gradient = Tensor(gradient)

        if grad_origin is None:
            self._count_pending()
            self._grad_buffer = None
        else:
            # backward is possible? if yes counter -= 1
            if self.children.get(grad_origin.id, 0) == 0:
                raise RuntimeError("cannot backprop more than once")
            self.children[grad_origin.id] -= 1
            self._pending -= 1

        # grads of this pass, kept apart from self.grad which accumulates over passes
        if self._grad_buffer is None:
            self._grad_buffer = np.array(gradient.data, dtype=np.float64)
        else:
            self._grad_buffer = self._grad_buffer + gradient.data

        if self.grad is None:
            self.grad = Tensor(np.array(gradient.data, dtype=np.float64))
        else:
            self.grad.data = self.grad.data + gradient.data

        if self.creators is not None and (grad_origin is None or self._pending == 0):
            self.creation_op.backward(Tensor(self._grad_buffer), self)

    def detach(self) -> 'Tensor':
        return Tensor(self.data, name=self.name)

    @property
    def shape(self) -> Tuple[int, ...]:
        return self.data.shape

    @property
    def ndim(self) -> int:
        return self.data.ndim

    @property
    def dtype(self) -> np.dtype:
        return self.data.dtype

    def __len__(self) -> int:
        return self.data.__len__()

    def __getitem__(self, idx: Union[int, slice, Iterable]):
        return self.data.__getitem__(idx)

    def __bool__(self) -> bool:
        return bool(self.data)

    def __repr__(self) -> str:
        return str(f'Tensor({self.data})')

    def __str__(self) -> str:
        return str(f'Tensor({self.data})')

    def short_repr(self) -> str:
        if self.name is not None:
            return str(f'{self.name}: Tensor({self.data.shape})')
        return str(f'Tensor({self.data.shape})')

    def numpy(self) -> np.ndarray:
        return self.data

    def numel(self) -> int:
        return self.data.size

    def item(self) -> Union[float, int, bool]:
        return self.data.item()
