import numpy as np

from enum import Enum


# Constants for numerical differentiation
EPSILON = 1e-6  # Perturbation for central finite differences
GRADCHECK_TOLERANCE = 1e-4  # Allowed gap between analytic and numerical gradients


class Op(Enum):
    """Tag for the operation that produced a Value.

    The member value is only a display symbol for graph renderers; backward
    dispatch goes through the node's Function, never through this string.
    """

    NONE = ""
    ADD = "+"
    MUL = "*"
    POW = "**"
    TANH = "tanh"

    @property
    def symbol(self):
        return self.value


class Function:
    """Base class for differentiable operations.

    Every operation that needs gradients (add, multiply, power, tanh) inherits
    from this class and implements apply(). A Function is created once per
    forward operation and keeps references to the exact operand nodes.

    Example:
        class AddBackward(Function):
            op = Op.ADD

            def apply(self, grad_output):
                # Addition distributes gradients equally
                return grad_output, grad_output
    """

    op = Op.NONE

    def __init__(self, *values):
        """Initialize function with operand values."""
        self.saved_values = values

    def apply(self, grad_output):
        """Compute gradient contributions for each saved operand.

        Args:
            grad_output: Gradient of the root with respect to this op's output

        Returns:
            Tuple with one float per entry of saved_values
        """
        raise NotImplementedError("Subclass must implement apply()")


class AddBackward(Function):
    """Backward function for addition."""

    op = Op.ADD

    def apply(self, grad_output):
        """Gradient of addition is distributed equally to both inputs.

        EXAMPLE:
        >>> a, b = Value(2.0), Value(3.0)
        >>> z = a + b  # z = 5
        >>> # During backward: grad_output = 1
        >>> # Result: grad_a = 1, grad_b = 1
        """
        return grad_output, grad_output


class MulBackward(Function):
    """Backward function for multiplication."""

    op = Op.MUL

    def apply(self, grad_output):
        """Gradient of multiplication using the product rule.

        EXAMPLE:
        >>> a, b = Value(2.0), Value(3.0)
        >>> z = a * b  # z = 6
        >>> # During backward: grad_output = 1
        >>> # Result: grad_a = b = 3, grad_b = a = 2
        """
        a, b = self.saved_values
        return b.data * grad_output, a.data * grad_output


class PowBackward(Function):
    """Backward function for raising a value to a constant exponent."""

    op = Op.POW

    def __init__(self, base, exponent):
        """
        Args:
            base: The Value being raised
            exponent: Plain int/float exponent, not differentiated
        """
        super().__init__(base)
        self.exponent = exponent

    def apply(self, grad_output):
        """Power rule: d(a^k)/da = k * a^(k-1).

        EXAMPLE:
        >>> a = Value(3.0)
        >>> z = a ** 2  # z = 9
        >>> # During backward: grad_output = 1
        >>> # Result: grad_a = 2 * 3 = 6
        """
        (base,) = self.saved_values
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            local = self.exponent * np.power(np.float64(base.data), self.exponent - 1)
        return (float(local * grad_output),)


class TanhBackward(Function):
    """Backward function for the hyperbolic tangent."""

    op = Op.TANH

    def __init__(self, x, output):
        """
        Args:
            x: Input Value
            output: tanh(x.data), captured at construction time
        """
        super().__init__(x)
        self.output = output

    def apply(self, grad_output):
        """tanh'(x) written in terms of the output: 1 - tanh(x)^2.

        EXAMPLE:
        >>> x = Value(0.0)
        >>> z = x.tanh()  # z = 0
        >>> # Result: grad_x = (1 - 0^2) * 1 = 1
        """
        return ((1.0 - self.output**2) * grad_output,)


def topological_order(root):
    """Return every node reachable from root, operands before consumers.

    Iterative depth-first search with a visited set keyed by identity and
    post-order emission, so deep graphs do not hit the recursion limit and
    shared operands appear exactly once.

    EXAMPLE:
    >>> x = Value(2.0)
    >>> y = x * x + x
    >>> [n.op for n in topological_order(y)]
    [<Op.NONE: ''>, <Op.MUL: '*'>, <Op.ADD: '+'>]
    """
    order = []
    visited = set()
    stack = [(root, False)]

    while stack:
        node, expanded = stack.pop()
        if expanded:
            order.append(node)
            continue
        if id(node) in visited:
            continue
        visited.add(id(node))
        stack.append((node, True))
        # Reversed so operands are emitted in their declared order
        for operand in reversed(node.operands):
            if id(operand) not in visited:
                stack.append((operand, False))

    return order


def backward(root):
    """Propagate root.grad to every node reachable from root.

    The caller seeds root.grad (normally 1.0) beforehand. Nodes are visited in
    reverse topological order so each node's gradient is complete before its
    rule runs, and every rule runs exactly once. Gradients accumulate: a second
    call without zero_grad() compounds them. An unseeded root leaves all
    gradients at zero.
    """
    for node in reversed(topological_order(root)):
        grad_fn = node._grad_fn
        if grad_fn is None:
            continue

        grads = grad_fn.apply(node.grad)
        for operand, grad in zip(grad_fn.saved_values, grads):
            operand.grad += grad


def zero_grad(root):
    """Reset grad to 0.0 on every node reachable from root."""
    for node in topological_order(root):
        node.grad = 0.0


def numerical_grad(f, xs, i, eps=EPSILON):
    """Central finite-difference estimate of df/dxs[i].

    Args:
        f: Callable taking a list of Values and returning a Value
        xs: Point to evaluate at, as plain floats
        i: Index of the input to perturb
        eps: Perturbation size

    EXAMPLE:
    >>> numerical_grad(lambda v: v[0] * v[1], [2.0, 3.0], 0)
    3.0  # approximately
    """
    from scalargrad.core.value import Value

    def evaluate(shift):
        point = [Value(x) for x in xs]
        point[i] = Value(xs[i] + shift)
        return f(point).data

    return (evaluate(eps) - evaluate(-eps)) / (2 * eps)


def gradcheck(f, xs, eps=EPSILON, atol=GRADCHECK_TOLERANCE):
    """Compare backward() gradients of f at xs against finite differences.

    Returns:
        True when every analytic gradient is within atol of its estimate
    """
    from scalargrad.core.value import Value

    inputs = [Value(x) for x in xs]
    out = f(inputs)
    out.backward()

    for i, x in enumerate(inputs):
        expected = numerical_grad(f, xs, i, eps)
        if not np.isclose(x.grad, expected, rtol=0.0, atol=atol):
            return False
    return True
