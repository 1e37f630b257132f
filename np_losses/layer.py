class Layer:
    def __init__(self, name: str = None):
        super().__init__()
        self._name: str = name

    def forward(self, *inputs):
        raise NotImplementedError

    def extra_repr(self) -> str:
        return ''

    def __repr__(self):
        main_str = self.__class__.__name__ + '(' + self.extra_repr() + ')'
        if self._name is not None:
            return f"{self._name}: {main_str}"
        return main_str

    def __call__(self, *args):
        return self.forward(*args)  # forward pass
