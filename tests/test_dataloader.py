import pytest

from scalargrad import DataLoader, ListDataset


def test_list_dataset_items_are_floats():
    ds = ListDataset([[1, 2], [3, 4]], [0, 1])
    assert len(ds) == 2
    assert ds[1] == ([3.0, 4.0], 1.0)


def test_list_dataset_length_mismatch():
    with pytest.raises(ValueError):
        ListDataset([[1.0]], [0.0, 1.0])


@pytest.mark.parametrize("idx", [-1, 2])
def test_list_dataset_index_out_of_range(idx):
    with pytest.raises(IndexError):
        ListDataset([[1.0], [2.0]], [0.0, 1.0])[idx]


def test_batches_in_order():
    ds = ListDataset([[1], [2], [3], [4], [5]], [10, 20, 30, 40, 50])
    loader = DataLoader(ds, batch_size=2)
    batches = list(loader)
    assert len(loader) == 3
    assert batches[0] == ([[1.0], [2.0]], [10.0, 20.0])
    assert batches[-1] == ([[5.0]], [50.0])


def test_shuffle_is_a_seeded_permutation():
    ds = ListDataset([[float(i)] for i in range(10)], list(range(10)))
    first = [t for _, targets in DataLoader(ds, 3, shuffle=True, seed=0) for t in targets]
    again = [t for _, targets in DataLoader(ds, 3, shuffle=True, seed=0) for t in targets]
    assert sorted(first) == [float(i) for i in range(10)]
    assert first == again


def test_invalid_batch_size():
    with pytest.raises(ValueError):
        DataLoader(ListDataset([[1.0]], [1.0]), batch_size=0)


def test_list_dataset_keeps_sequence_targets():
    ds = ListDataset([[1, 2], [3, 4]], [[1, -1], (0, 2)])
    assert ds[0] == ([1.0, 2.0], [1.0, -1.0])
    assert ds[1] == ([3.0, 4.0], [0.0, 2.0])
    _, targets = next(iter(DataLoader(ds, batch_size=2)))
    assert targets == [[1.0, -1.0], [0.0, 2.0]]
