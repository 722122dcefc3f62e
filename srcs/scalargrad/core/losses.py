from .value import as_value

__all__ = [
    "REDUCTIONS",
    "MSELoss",
]

REDUCTIONS = ("sum", "mean")


class MSELoss:
    """Squared error loss for regression tasks.

    Builds the loss as graph nodes so loss.backward() reaches every parameter
    that produced the predictions.
    """

    def __init__(self, reduction="mean"):
        """Initialize squared error loss.

        Args:
            reduction: "sum" adds the per-sample squared errors, "mean" averages them
        """
        if reduction not in REDUCTIONS:
            raise ValueError(
                f"Unknown reduction {reduction!r}, expected one of {REDUCTIONS}"
            )
        self.reduction = reduction

    def forward(self, predictions, targets):
        """Compute squared error between predictions and targets.

        >>> loss_fn = MSELoss(reduction="sum")
        >>> loss = loss_fn([Value(1.0), Value(2.0)], [1.5, 2.5])
        >>> print(f"Loss: {loss.data:.4f}")
        Loss: 0.5000
        """
        if len(predictions) != len(targets):
            raise ValueError(
                f"Got {len(predictions)} predictions for {len(targets)} targets.\n"
                f"  Issue: Every prediction needs exactly one target."
            )
        if not predictions:
            raise ValueError("Cannot compute a loss over zero samples")

        loss = as_value(0.0)
        for pred, target in zip(predictions, targets):
            loss = loss + (as_value(pred) - target) ** 2

        if self.reduction == "mean":
            loss = loss / len(predictions)
        return loss

    def __call__(self, predictions, targets):
        """Allows the loss function to be called like a function."""
        return self.forward(predictions, targets)

    def __repr__(self):
        return f"MSELoss(reduction={self.reduction!r})"
