import numpy as np

from scalargrad.core.value import Value
from scalargrad.core.layers import MLP
from scalargrad.core.losses import MSELoss
from scalargrad.core.optimizers import SGD
from scalargrad.core.training import Trainer, DEFAULT_EPOCHS

# Constants for the demo run
DEFAULT_LEARNING_RATE = 0.1
DEFAULT_SEED = 1337

# 3 samples, 2 features each, targets in (-1, 1) reach of a tanh output
DEMO_INPUTS = [
    [0.5, -1.0],
    [1.0, 0.5],
    [-0.5, 1.0],
]
DEMO_TARGETS = [1.0, -1.0, -1.0]


def neuron_example():
    """Hand-wired neuron pre-activation n = x1*w1 + x2*w2 + b with gradients.

    Returns:
        Dict of the labelled nodes after n.backward()

    EXAMPLE:
    >>> nodes = neuron_example()
    >>> print(nodes["n"].data, nodes["w1"].grad)
    9.0 3.0
    """
    x1 = Value(3.0, label="x1")
    x2 = Value(5.0, label="x2")
    w1 = Value(4.0, label="w1")
    w2 = Value(-1.0, label="w2")
    b = Value(2.0, label="b")

    x1w1 = x1 * w1
    x1w1.label = "x1*w1"
    x2w2 = x2 * w2
    x2w2.label = "x2*w2"
    n = x1w1 + x2w2 + b
    n.label = "n"

    n.backward()
    return {"x1": x1, "x2": x2, "w1": w1, "w2": w2, "b": b, "n": n}


def run_demo(
    epochs=DEFAULT_EPOCHS, lr=DEFAULT_LEARNING_RATE, seed=DEFAULT_SEED, verbose=False
):
    """Train a 2-2-1 MLP on the demo dataset with full-batch gradient descent.

    Returns:
        (model, losses) where losses holds the summed squared error of each step
    """
    model = MLP(2, [2], 1, rng=np.random.default_rng(seed))
    trainer = Trainer(model, SGD(model.parameters(), lr=lr), MSELoss(reduction="sum"))
    losses = trainer.fit(DEMO_INPUTS, DEMO_TARGETS, epochs=epochs, verbose=verbose)
    return model, losses


def main():
    nodes = neuron_example()
    for name in ("x1", "w1", "x2", "w2", "b"):
        print(f"{name:>2} = {nodes[name].data:6.2f}  grad = {nodes[name].grad:6.2f}")
    print(f" n = {nodes['n'].data:6.2f}")

    model, losses = run_demo(verbose=True)
    predictions = [model(x)[0].data for x in DEMO_INPUTS]
    print("predictions:", ", ".join(f"{p:+.4f}" for p in predictions))


if __name__ == "__main__":
    main()
