import random

from abc import ABC, abstractmethod

__all__ = [
    "Dataset",
    "ListDataset",
    "DataLoader",
]


class Dataset(ABC):
    """Abstract base class for all datasets.

    EXAMPLE:
    >>> class MyDataset(Dataset):
    ...     def __len__(self): return 100
    ...     def __getitem__(self, idx): return idx
    >>> dataset = MyDataset()
    >>> print(len(dataset))  # 100
    >>> print(dataset[42])   # 42
    """

    @abstractmethod
    def __len__(self):
        """Return the total number of samples in the datasets."""
        pass

    @abstractmethod
    def __getitem__(self, idx):
        """Return the sample at the given index."""
        pass


class ListDataset(Dataset):
    """Dataset of plain float samples for supervised learning.

    EXAMPLE:
    >>> inputs = [[2.0, 3.0], [3.0, -1.0], [0.5, 1.0]]  # 3 samples, 2 features each
    >>> targets = [1.0, -1.0, -1.0]                       # 3 targets
    >>> dataset = ListDataset(inputs, targets)
    >>> print(len(dataset))  # 3
    >>> print(dataset[1])    # ([3.0, -1.0], -1.0)
    """

    def __init__(self, inputs, targets):
        """Create dataset from parallel lists of inputs and targets."""
        if len(inputs) != len(targets):
            raise ValueError(
                f"Inputs and targets must have the same number of samples. "
                f"Inputs: {len(inputs)}, Targets: {len(targets)}"
            )
        self.inputs = [[float(v) for v in sample] for sample in inputs]
        self.targets = [
            [float(v) for v in t] if isinstance(t, (list, tuple)) else float(t)
            for t in targets
        ]

    def __len__(self):
        """Return number of samples."""
        return len(self.inputs)

    def __getitem__(self, idx):
        """Return (inputs, target) at given index."""
        if idx >= len(self) or idx < 0:
            raise IndexError(
                f"Index {idx} out of range for dataset of size {len(self)}"
            )
        return self.inputs[idx], self.targets[idx]


class DataLoader:
    """Data loader with batching and shuffling support.

    EXAMPLE:
    >>> dataset = ListDataset([[1, 2], [3, 4], [5, 6]], [0, 1, 0])
    >>> loader = DataLoader(dataset, batch_size=2, shuffle=True)
    >>> for inputs_batch, targets_batch in loader:
    ...     print(len(inputs_batch), len(targets_batch))
    """

    def __init__(self, dataset, batch_size, shuffle=False, seed=None):
        """Create DataLoader for batched iteration.

        Args:
            seed: Seed for the shuffling order; None draws from system entropy
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self.dataset = dataset
        self.batch_size = batch_size
        self.shuffle = shuffle
        self._random = random.Random(seed)

    def __len__(self):
        """Return number of batches per epoch

        EXAMPLE:
        >>> dataset = ListDataset([[1], [2], [3], [4], [5]], [0, 0, 0, 0, 0])
        >>> loader = DataLoader(dataset, batch_size=2)
        >>> print(len(loader))  # 3 (batches: [2, 2, 1])
        """
        return (len(self.dataset) + self.batch_size - 1) // self.batch_size

    def __iter__(self):
        """Return iterator over (inputs_batch, targets_batch) pairs."""
        indices = list(range(len(self.dataset)))

        if self.shuffle:
            self._random.shuffle(indices)

        for i in range(0, len(indices), self.batch_size):
            batch_indices = indices[i : i + self.batch_size]
            batch = [self.dataset[idx] for idx in batch_indices]
            yield self._collate_batch(batch)

    def _collate_batch(self, batch):
        """Collate individual samples into parallel lists.

        EXAMPLE:
        >>> # batch = [([1.0, 2.0], 0.0), ([3.0, 4.0], 1.0)]
        >>> # Returns: ([[1.0, 2.0], [3.0, 4.0]], [0.0, 1.0])
        """
        inputs = [sample[0] for sample in batch]
        targets = [sample[1] for sample in batch]
        return inputs, targets
