import numpy as np
import pickle

from pathlib import Path

from .dataloader import DataLoader, ListDataset

# Constants for training defaults
DEFAULT_EPOCHS = 20  # Default number of passes over the data in fit()


def clip_grad_norm(parameters, max_norm: float = 1.0):
    """Clips gradient norm of an iterable of parameters.

    Returns the norm measured before clipping.

     EXAMPLE:
    >>> params = [Value(1.0), Value(2.0)]
    >>> params[0].grad, params[1].grad = 30.0, 40.0  # Norm 50
    >>> original_norm = clip_grad_norm(params, max_norm=1.0)
    >>> print(original_norm)  # 50.0, grads now scaled to norm ~1
    """
    parameters = list(parameters)
    if not parameters:
        return 0.0

    total_norm = np.sqrt(sum(param.grad**2 for param in parameters))

    # clip if necessary
    if total_norm > max_norm:
        clip_coef = max_norm / (total_norm + 1e-6)
        for param in parameters:
            param.grad *= float(clip_coef)

    return float(total_norm)


def _flatten(outputs, targets):
    """Pair every output node with its target, unwrapping multi-output models."""
    predictions, flat_targets = [], []
    for out, target in zip(outputs, targets):
        if isinstance(out, (list, tuple)):
            target = target if isinstance(target, (list, tuple)) else [target]
            if len(out) != len(target):
                raise ValueError(
                    f"Model produced {len(out)} outputs for a target of size {len(target)}"
                )
            predictions.extend(out)
            flat_targets.extend(target)
        else:
            if isinstance(target, (list, tuple)):
                if len(target) != 1:
                    raise ValueError(
                        f"Model produced 1 output for a target of size {len(target)}"
                    )
                target = target[0]
            predictions.append(out)
            flat_targets.append(target)
    return predictions, flat_targets


class Trainer:
    """Component responsible for training a model."""

    def __init__(
        self,
        model,
        optimizer,
        loss_fn,
        grad_clip_norm=None,
    ):
        self.model = model
        self.optimizer = optimizer
        self.loss_fn = loss_fn
        self.grad_clip_norm = grad_clip_norm

        # Training state
        self.epoch = 0
        self.step = 0

        # History tracking
        self.history = {"train_loss": [], "eval_loss": []}

    def _get_model_state(self):
        """Extract model parameters for checkpointing."""
        return {i: param.data for i, param in enumerate(self.model.parameters())}

    def _set_model_state(self, state):
        """Restore model parameters from checkpoint."""
        for i, param in enumerate(self.model.parameters()):
            if i in state:
                param.data = float(state[i])

    def _uses_momentum(self):
        # only SGD carries momentum buffers
        has_momentum = getattr(self.optimizer, "has_momentum", None)
        return has_momentum is not None and has_momentum()

    def _get_optimizer_state(self):
        """Extract learning rate and momentum buffers for checkpointing."""
        state = {"lr": self.optimizer.lr}
        if self._uses_momentum():
            state["momentum_buffers"] = self.optimizer.get_momentum_state()
        return state

    def _set_optimizer_state(self, state):
        if "lr" in state:
            self.optimizer.lr = state["lr"]
        if "momentum_buffers" in state and self._uses_momentum():
            self.optimizer.set_momentum_state(state["momentum_buffers"])

    def compute_loss(self, inputs, targets):
        """Run the model over a batch and return the loss node."""
        outputs = []
        for x in inputs:
            out = self.model(x)
            # Single-output models return a one-element list
            if isinstance(out, list) and len(out) == 1:
                out = out[0]
            outputs.append(out)
        predictions, flat_targets = _flatten(outputs, targets)
        return self.loss_fn(predictions, flat_targets)

    def train_step(self, inputs, targets):
        """One gradient-descent step on a batch; returns the loss before the update."""
        loss = self.compute_loss(inputs, targets)

        self.optimizer.zero_grad()
        loss.backward()

        if self.grad_clip_norm is not None:
            clip_grad_norm(self.optimizer.params, self.grad_clip_norm)

        self.optimizer.step()
        self.step += 1
        return loss.data

    def train_epoch(self, dataloader):
        """Train for one epoch through the dataset."""
        total_loss = 0.0
        num_batches = 0

        for inputs, targets in dataloader:
            total_loss += self.train_step(inputs, targets)
            num_batches += 1

        avg_loss = total_loss / max(num_batches, 1)
        self.history["train_loss"].append(avg_loss)

        self.epoch += 1
        return avg_loss

    def evaluate(self, dataloader):
        """Evaluate model on validation/test dataset without updating it."""
        total_loss = 0.0
        num_batches = 0

        for inputs, targets in dataloader:
            loss = self.compute_loss(inputs, targets)
            total_loss += loss.data
            num_batches += 1

        avg_loss = total_loss / num_batches if num_batches > 0 else 0.0
        self.history["eval_loss"].append(avg_loss)
        return avg_loss

    def fit(self, inputs, targets, epochs=DEFAULT_EPOCHS, batch_size=None, verbose=False):
        """Train on in-memory samples for a number of epochs.

        With batch_size None every epoch is a single full-batch step.

        EXAMPLE:
        >>> model = MLP(2, [2], 1)
        >>> trainer = Trainer(model, SGD(model.parameters(), lr=0.1), MSELoss("sum"))
        >>> losses = trainer.fit([[2.0, 3.0], [3.0, -1.0]], [1.0, -1.0], epochs=20)
        >>> print(len(losses))  # 20
        """
        dataset = ListDataset(inputs, targets)
        loader = DataLoader(dataset, batch_size=batch_size or len(dataset))

        losses = []
        for _ in range(epochs):
            loss = self.train_epoch(loader)
            losses.append(loss)
            if verbose:
                print(f"epoch {self.epoch:4d} | loss {loss:.6f}")
        return losses

    def save_checkpoint(self, path):
        """Save model and optimizer state to a checkpoint file."""
        checkpoint = {
            "epoch": self.epoch,
            "step": self.step,
            "model_state": self._get_model_state(),
            "optimizer_state": self._get_optimizer_state(),
            "history": self.history,
        }

        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            pickle.dump(checkpoint, f)

    def load_checkpoint(self, path):
        with open(path, "rb") as f:
            checkpoint = pickle.load(f)

        self.epoch = checkpoint["epoch"]
        self.step = checkpoint["step"]
        self.history = checkpoint["history"]

        # Restore states
        if "model_state" in checkpoint:
            self._set_model_state(checkpoint["model_state"])
        if "optimizer_state" in checkpoint:
            self._set_optimizer_state(checkpoint["optimizer_state"])
