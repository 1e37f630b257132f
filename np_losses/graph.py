"""
Computation graph export.

When ``GRAPH_FLAG`` is set in :mod:`np_losses.gol`, every tensor and operator
created afterwards is added to a pygraphviz ``AGraph`` so a loss can be drawn
after the forward pass::

    graph.enable()
    loss = compat.l2_loss(predicted, expected)
    graph.draw('l2_loss.png')
"""
import logging

from np_losses import gol

logger = logging.getLogger(__name__)


def enable(flag: bool = True) -> None:
    gol.set_value('GRAPH_FLAG', flag)


def is_enabled() -> bool:
    return bool(gol.get_value('GRAPH_FLAG', False))


def get_graph():
    G = gol.get_value('G', None)
    if G is None:
        import pygraphviz as pgv

        G = pgv.AGraph(directed=True, rankdir="RL", overlap=False, encoding='UTF-8')
        gol.set_value('G', G)
    return G


def reset() -> None:
    gol.set_value('G', None)


def add_tensor(tensor) -> None:
    get_graph().add_node(tensor.id, label=tensor.short_repr(), **gol.get_value('TENSOR_GRAPH_ATTR'))


def add_op(op, out, creators) -> None:
    G = get_graph()
    G.add_node(id(op), label=repr(op), **gol.get_value('OP_GRAPH_ATTR'))
    G.add_edge(id(op), out.id)
    for c in creators:
        G.add_edge(c.id, id(op))


def draw(path: str, prog: str = 'dot') -> None:
    G = get_graph()
    logger.debug('laying out graph with %d nodes', G.number_of_nodes())
    G.layout(prog=prog)
    G.draw(path)
    logger.info('computation graph written to %s', path)
