import copy

_MISSING = object()

_DEFAULTS = {
    'GRAPH_FLAG': False,
    'TENSOR_GRAPH_ATTR': dict(fontname="Times-Roman", fontsize=14, shape="polygon",
                              style="rounded", color="black",
                              fixedsize=False),
    'OP_GRAPH_ATTR': dict(fontname="Times-Roman", fontsize=14, shape="circle",
                          style="filled", fillcolor="#BBE4FF",
                          fixedsize=False),
    'G': None,
}


def init():
    global _global_dict
    _global_dict = copy.deepcopy(_DEFAULTS)


def set_value(key: str, value: ...) -> None:
    _global_dict[key] = value


def get_value(key: str, default: ... = _MISSING) -> ...:
    try:
        return _global_dict[key]
    except KeyError:
        if default is not _MISSING:
            return default
        raise KeyError("KeyError: %s" % key)


init()
