import numpy as np

from numbers import Real

from .autograd import (
    Op,
    AddBackward,
    MulBackward,
    PowBackward,
    TanhBackward,
    backward,
)


def as_value(x):
    """Return x unchanged if it is a Value, else lift a number into a leaf Value.

    EXAMPLE:
    >>> as_value(3).data
    3.0
    >>> v = Value(1.0)
    >>> as_value(v) is v
    True
    """
    if isinstance(x, Value):
        return x
    if isinstance(x, Real) and not isinstance(x, bool):
        return Value(x)
    raise TypeError(
        f"Cannot use {type(x).__name__} as a Value operand.\n"
        f"  Only int, float and Value take part in graph operations."
    )


class Value:
    """A scalar node in a dynamically built computation graph.

    This class holds everything the backward pass needs:
        - data: The scalar value (float)
        - grad: d(root)/d(this), accumulated over every path (float)
        - operands: The nodes this one was computed from
        - op: Which operation produced it (Op.NONE for leaves)
        - label: Optional name for printing and graph rendering

    Operators build new nodes eagerly, so the graph grows as ordinary Python
    arithmetic runs.
    """

    def __init__(self, data, label=""):
        """Create a leaf node.

        EXAMPLE:
        >>> x = Value(2.0, label="x")
        >>> print(x.data, x.grad)
        2.0 0.0
        """
        self.data = float(data)
        self.grad = 0.0
        self.label = label
        self._prev = ()
        self._grad_fn = None

    @classmethod
    def _from_op(cls, data, operands, grad_fn):
        """Build the result node of an operation."""
        out = cls(data)
        out._prev = tuple(operands)
        out._grad_fn = grad_fn
        return out

    @property
    def operands(self):
        """Nodes this node was computed from, in argument order."""
        return self._prev

    @property
    def op(self):
        """Op tag of the producing operation."""
        if self._grad_fn is None:
            return Op.NONE
        return self._grad_fn.op

    @property
    def is_leaf(self):
        return self._grad_fn is None

    def __repr__(self):
        """String representation of the node for debugging."""
        label = f", label={self.label!r}" if self.label else ""
        return f"Value(data={self.data}, grad={self.grad}{label})"

    def __add__(self, other):
        """Add two nodes.

        EXAMPLE:
        >>> c = Value(2.0) + Value(3.0)
        >>> print(c.data)
        5.0
        """
        other = as_value(other)
        return Value._from_op(
            self.data + other.data, (self, other), AddBackward(self, other)
        )

    def __radd__(self, other):
        return as_value(other) + self

    def __mul__(self, other):
        """Multiply two nodes.

        EXAMPLE:
        >>> c = Value(2.0) * Value(3.0)
        >>> print(c.data)
        6.0
        """
        other = as_value(other)
        return Value._from_op(
            self.data * other.data, (self, other), MulBackward(self, other)
        )

    def __rmul__(self, other):
        return as_value(other) * self

    def __pow__(self, exponent):
        """Raise to a constant int/float exponent.

        Domain problems are not special-cased: 0 ** -1 is inf and a negative
        base with a fractional exponent is nan.

        EXAMPLE:
        >>> c = Value(3.0) ** 2
        >>> print(c.data)
        9.0
        """
        if isinstance(exponent, Value) or not isinstance(exponent, Real):
            raise TypeError(
                f"Exponent must be an int or float constant, got {type(exponent).__name__}.\n"
                f"  Issue: Exponents are not differentiated.\n"
                f"  Fix: Pass a plain number, e.g. x ** 2 or x ** -1."
            )
        exponent = float(exponent)
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            result = float(np.power(np.float64(self.data), exponent))
        return Value._from_op(result, (self,), PowBackward(self, exponent))

    def __neg__(self):
        return self * -1

    def __sub__(self, other):
        return self + (-as_value(other))

    def __rsub__(self, other):
        return as_value(other) + (-self)

    def __truediv__(self, other):
        """Divide by another node, written as self * other ** -1.

        EXAMPLE:
        >>> c = Value(6.0) / Value(3.0)
        >>> print(c.data)
        2.0
        """
        return self * as_value(other) ** -1

    def __rtruediv__(self, other):
        return as_value(other) * self**-1

    def tanh(self):
        """Hyperbolic tangent, bounded to (-1, 1) for finite input.

        EXAMPLE:
        >>> print(round(Value(0.5).tanh().data, 4))
        0.4621
        """
        t = float(np.tanh(self.data))
        return Value._from_op(t, (self,), TanhBackward(self, t))

    def backward(self, gradient=1.0):
        """Compute gradients via backpropagation.

        Adds gradient to this node's own grad as the seed, then propagates it
        to every node this one depends on.

        Example:
        x = Value(2.0)
        y = x * 3
        y.backward()
        print(x.grad)  # 3.0
        """
        self.grad += gradient
        backward(self)
