__version__ = "0.1.0"

from .core.value import Value, as_value
from .core.autograd import Op, backward, zero_grad, topological_order, gradcheck
from .core.layers import Module, Neuron, Layer, MLP
from .core.losses import MSELoss
from .core.optimizers import SGD, Adam
from .core.dataloader import Dataset, ListDataset, DataLoader
from .core.training import Trainer, clip_grad_norm
from .core.graph import trace, graph_summary
