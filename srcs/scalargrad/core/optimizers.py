import numpy as np

from typing import List

from .value import Value

# Constants for optimizer defaults
DEFAULT_LEARNING_RATE_SGD = 0.01  # Default learning rate for SGD
DEFAULT_LEARNING_RATE_ADAM = 0.001  # Default learning rate for Adam
DEFAULT_BETA1 = 0.9  # First moment decay rate for Adam
DEFAULT_BETA2 = 0.999  # Second moment decay rate for Adam
DEFAULT_EPS = 1e-8  # Small epsilon for numerical stability in Adam


class Optimizer:
    """Base class for all optimizers.

    This class defines the common interface that all optimizers must implement:
        - zero_grad(): Reset gradients of parameters to zero
        - step(): Update parameter values based on gradients
    """

    def __init__(self, params: List[Value], lr: float):
        """Initialize optimizer with parameters."""
        if lr < 0:
            raise ValueError(f"Learning rate must be non-negative, got {lr}")

        # store parameters as a list; generators would be exhausted after one pass
        self.params = list(params)
        self.lr = lr
        self.step_count = 0

    def zero_grad(self):
        """Reset gradients of all parameters to zero."""
        for param in self.params:
            param.grad = 0.0

    def step(self):
        """
        Update parameters based on gradients.

        This is abstract - each optimizer implements its own update rule.
        """
        raise NotImplementedError(
            f"Abstract method step() not implemented\n"
            f"  {self.__class__.__name__} inherits from Optimizer but doesn't define step()\n"
            f"  Override step() in your optimizer subclass:\n"
            f"      def step(self):\n"
            f"          for param in self.params:\n"
            f"              param.data -= self.lr * param.grad"
        )


class SGD(Optimizer):
    """Stochastic Gradient Descent (SGD) optimizer.

    This optimizer updates parameters in the direction of the negative gradient.
    It can also include momentum to accelerate convergence.
    """

    def __init__(
        self,
        params: List[Value],
        lr: float = DEFAULT_LEARNING_RATE_SGD,
        momentum: float = 0.0,
        weight_decay: float = 0.0,
    ):
        """Initialize SGD optimizer.

        Args:
            params: List of parameters to optimize
            lr: Learning rate (default: 0.01)
            momentum: Momentum factor in [0, 1) (default: 0.0)
            weight_decay: Weight decay factor (default: 0.0)
        """
        super().__init__(params, lr)
        if not 0.0 <= momentum < 1.0:
            raise ValueError(f"Momentum must be in [0, 1), got {momentum}")
        self.momentum = momentum
        self.weight_decay = weight_decay
        self.momentum_buffers = [0.0 for _ in self.params]

    def has_momentum(self) -> bool:
        """Check if momentum is enabled."""
        return self.momentum > 0.0

    def get_momentum_state(self):
        """Get the current momentum state for all parameters."""
        if not self.has_momentum():
            return None
        return list(self.momentum_buffers)

    def set_momentum_state(self, state):
        """Restore momentum buffers from checkpoint."""
        if state is None or not self.has_momentum():
            return

        if len(state) != len(self.momentum_buffers):
            raise ValueError(
                f"Momentum state length {len(state)} does not match number of parameters {len(self.momentum_buffers)}"
            )
        self.momentum_buffers = [float(buf) for buf in state]

    def step(self):
        """Perform SGD update step: data -= lr * grad, with optional momentum."""
        for i, param in enumerate(self.params):
            grad = param.grad

            if self.weight_decay != 0.0:
                grad = grad + self.weight_decay * param.data

            if self.has_momentum():
                self.momentum_buffers[i] = self.momentum * self.momentum_buffers[i] + grad
                grad = self.momentum_buffers[i]

            param.data -= self.lr * grad

        self.step_count += 1


class Adam(Optimizer):
    """Adam optimizer with adaptive learning rates."""

    def __init__(
        self,
        params: List[Value],
        lr: float = DEFAULT_LEARNING_RATE_ADAM,
        betas: tuple = (DEFAULT_BETA1, DEFAULT_BETA2),
        eps: float = DEFAULT_EPS,
        weight_decay: float = 0.0,
    ):
        """Initialize Adam optimizer.

        Args:
            params: List of parameters to optimize
            lr: Learning rate (default: 0.001)
            betas: Coefficients for computing running averages of gradient and its square (default: (0.9, 0.999))
            eps: Term added to denominator for numerical stability (default: 1e-8)
            weight_decay: Weight decay factor (default: 0.0)
        """
        super().__init__(params, lr)
        self.beta1, self.beta2 = betas
        self.eps = eps
        self.weight_decay = weight_decay

        self.m_buffers = [0.0 for _ in self.params]  # First moment (mean)
        self.v_buffers = [0.0 for _ in self.params]  # Second moment (variance)

    def _update_moments(self, i: int, grad: float) -> tuple:
        """Update first and second moment estimates with bias correction.

        EXAMPLE:
        >>> m_hat, v_hat = self._update_moments(0, 0.1)
        >>> # m_hat = grad and v_hat = grad^2 after bias correction at step 1
        """
        self.m_buffers[i] = self.beta1 * self.m_buffers[i] + (1 - self.beta1) * grad
        self.v_buffers[i] = self.beta2 * self.v_buffers[i] + (1 - self.beta2) * grad**2

        bias_correction1 = 1 - self.beta1**self.step_count
        bias_correction2 = 1 - self.beta2**self.step_count

        m_hat = self.m_buffers[i] / bias_correction1
        v_hat = self.v_buffers[i] / bias_correction2
        return m_hat, v_hat

    def step(self):
        """Perform Adam update step."""
        self.step_count += 1  # Increment step count first for correct bias correction

        for i, param in enumerate(self.params):
            grad = param.grad

            if self.weight_decay != 0.0:
                grad = grad + self.weight_decay * param.data

            m_hat, v_hat = self._update_moments(i, grad)
            param.data -= float(self.lr * m_hat / (np.sqrt(v_hat) + self.eps))
