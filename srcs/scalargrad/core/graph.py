"""Read-only views of a computation graph for external renderers.

Nothing here changes data or grad; the functions only walk operand edges.
"""

from collections import Counter

from .autograd import Op, topological_order


def trace(root):
    """Collect the nodes and operand edges reachable from root.

    Returns:
        (nodes, edges): nodes in topological order, edges as
        (operand, consumer) pairs. An operand used twice by the same node
        yields two edges.

    EXAMPLE:
    >>> x = Value(2.0, label="x")
    >>> nodes, edges = trace(x * x)
    >>> print(len(nodes), len(edges))
    2 2
    """
    nodes = topological_order(root)
    edges = [(operand, node) for node in nodes for operand in node.operands]
    return nodes, edges


def op_label(node):
    """Display string for a node's producing operation ("" for leaves)."""
    if node.op is Op.POW:
        exponent = node._grad_fn.exponent
        exponent = int(exponent) if exponent.is_integer() else exponent
        return f"{Op.POW.symbol}{exponent}"
    return node.op.symbol


def graph_summary(root):
    """Count nodes, edges, leaves and operations in the graph under root.

    EXAMPLE:
    >>> x = Value(2.0)
    >>> graph_summary((x * 3).tanh())["ops"]
    {'*': 1, 'tanh': 1}
    """
    nodes, edges = trace(root)
    op_counter = Counter(node.op.symbol for node in nodes if not node.is_leaf)
    fan_ins = [len(node.operands) for node in nodes]

    return {
        "nodes": len(nodes),
        "edges": len(edges),
        "leaves": sum(1 for node in nodes if node.is_leaf),
        "max_fan_in": max(fan_ins) if fan_ins else 0,
        "ops": dict(op_counter.most_common()),
    }
