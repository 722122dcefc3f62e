import numpy as np

from .value import Value, as_value

__all__ = [
    "DEFAULT_INIT_LOW",
    "DEFAULT_INIT_HIGH",
    "Module",
    "Neuron",
    "Layer",
    "MLP",
]


# Constants for weight initialization
DEFAULT_INIT_LOW = -1.0  # Weights and biases are drawn uniformly from [low, high)
DEFAULT_INIT_HIGH = 1.0


class Module:
    """Base class for all network components.

    All modules should inherit from this class and implement:
        - forward(x): Compute module output.
        - parameters(): Return list of trainable parameters.
    """

    def forward(self, x):
        """Forward pass through the module.

        Args:
            x: Sequence of Values (or floats) sized to the module's input

        Returns:
            Output Value(s), freshly built graph nodes.
        """
        raise NotImplementedError("Subclass must implement forward()")

    def __call__(self, x):
        """Allow module to be called like a function."""
        return self.forward(x)

    def parameters(self):
        """
        Return list of trainable parameters.

        Returns:
            List of leaf Value objects (weights and biases)
        """
        return []  # Base class has no parameters

    def zero_grad(self):
        """Reset the gradient of every parameter to zero."""
        for p in self.parameters():
            p.grad = 0.0

    def __repr__(self):
        """String representation of the module."""
        return f"{self.__class__.__name__}()"


def _check_inputs(x, expected, owner):
    if len(x) != expected:
        raise ValueError(
            f"{owner} expects {expected} inputs, got {len(x)}.\n"
            f"  Issue: Input length must match the number of weights.\n"
            f"  Fix: Pass exactly {expected} values to forward()."
        )


class Neuron(Module):
    """Single tanh neuron.

    neuron: y = tanh(b + sum_i w_i * x_i).
    """

    def __init__(self, nin, rng=None):
        """Initialize neuron with uniform random weights and bias.

        Args:
            nin: Number of inputs
            rng: numpy Generator; the global numpy.random state when None

        EXAMPLE:
        >>> n = Neuron(3)
        >>> print(len(n.w), len(n.parameters()))
        3 4
        """
        rng = np.random if rng is None else rng
        self.nin = nin
        self.w = [
            Value(w)
            for w in rng.uniform(DEFAULT_INIT_LOW, DEFAULT_INIT_HIGH, size=nin)
        ]
        self.b = Value(rng.uniform(DEFAULT_INIT_LOW, DEFAULT_INIT_HIGH))

    def forward(self, x):
        """Forward pass through the neuron.

        EXAMPLE:
        >>> n = Neuron(2)
        >>> y = n([1.0, -2.0])
        >>> -1.0 < y.data < 1.0
        True
        """
        _check_inputs(x, self.nin, repr(self))

        act = self.b
        for wi, xi in zip(self.w, x):
            act = act + wi * as_value(xi)
        return act.tanh()

    def parameters(self):
        """Return weights followed by the bias."""
        return self.w + [self.b]

    def __repr__(self):
        return f"Neuron(nin={self.nin})"


class Layer(Module):
    """Fully connected layer of independent tanh neurons sharing the same inputs."""

    def __init__(self, nin, nout, rng=None):
        """Initialize a layer of nout neurons with nin inputs each.

        EXAMPLE:
        >>> layer = Layer(2, 3)
        >>> print(len(layer.neurons), len(layer.parameters()))
        3 9
        """
        self.nin = nin
        self.nout = nout
        self.neurons = [Neuron(nin, rng=rng) for _ in range(nout)]

    def forward(self, x):
        """Apply every neuron to the same inputs; returns a list of nout Values."""
        _check_inputs(x, self.nin, repr(self))
        return [n(x) for n in self.neurons]

    def parameters(self):
        """Collect all parameters from all neurons."""
        params = []
        for n in self.neurons:
            params.extend(n.parameters())
        return params

    def __repr__(self):
        return f"Layer(nin={self.nin}, nout={self.nout})"


class MLP(Module):
    """Multi-layer perceptron that chains Layers sequentially."""

    def __init__(self, nin, hidden_sizes, nout, rng=None):
        """Initialize with one Layer per consecutive pair of sizes.

        An empty hidden_sizes gives a single direct nin -> nout layer.

        EXAMPLE:
        >>> model = MLP(2, [3, 4], 1)
        >>> print(len(model.layers), len(model.parameters()))
        3 30
        """
        self.nin = nin
        self.nout = nout
        sizes = [nin] + list(hidden_sizes) + [nout]
        self.layers = [
            Layer(sizes[i], sizes[i + 1], rng=rng) for i in range(len(sizes) - 1)
        ]

    def forward(self, x):
        """Forward pass through all layers sequentially."""
        _check_inputs(x, self.nin, repr(self))
        for layer in self.layers:
            x = layer(x)
        return x

    def parameters(self):
        """Collect all parameters from all layers."""
        params = []
        for layer in self.layers:
            params.extend(layer.parameters())
        return params

    def __repr__(self):
        layer_reprs = ", ".join(repr(layer) for layer in self.layers)
        return f"MLP([{layer_reprs}])"
