import math

import pytest

from scalargrad import SGD, Adam, Value
from scalargrad.core.optimizers import Optimizer


def _params(*pairs):
    params = []
    for data, grad in pairs:
        p = Value(data)
        p.grad = grad
        params.append(p)
    return params


def test_sgd_step_descends_gradient():
    p, q = _params((1.0, 0.5), (-2.0, -1.0))
    opt = SGD([p, q], lr=0.1)
    opt.step()
    assert p.data == pytest.approx(0.95)
    assert q.data == pytest.approx(-1.9)
    assert opt.step_count == 1


def test_zero_grad_sets_zero_not_none():
    params = _params((1.0, 0.5), (2.0, 3.0))
    opt = SGD(params, lr=0.1)
    opt.zero_grad()
    assert [p.grad for p in params] == [0.0, 0.0]


def test_sgd_momentum_accumulates():
    (p,) = _params((0.0, 1.0))
    opt = SGD([p], lr=0.1, momentum=0.9)
    opt.step()
    assert p.data == pytest.approx(-0.1)
    opt.step()
    # buffer = 0.9 * 1 + 1 = 1.9
    assert p.data == pytest.approx(-0.1 - 0.19)


def test_sgd_weight_decay():
    (p,) = _params((2.0, 0.0))
    SGD([p], lr=0.5, weight_decay=0.1).step()
    assert p.data == pytest.approx(2.0 - 0.5 * 0.2)


def test_momentum_state_round_trip():
    params = _params((0.0, 1.0), (0.0, 2.0))
    opt = SGD(params, lr=0.1, momentum=0.5)
    opt.step()
    state = opt.get_momentum_state()
    assert state == [1.0, 2.0]

    other = SGD(_params((0.0, 0.0), (0.0, 0.0)), lr=0.1, momentum=0.5)
    other.set_momentum_state(state)
    assert other.momentum_buffers == [1.0, 2.0]
    with pytest.raises(ValueError):
        other.set_momentum_state([1.0])


def test_no_momentum_state_without_momentum():
    assert SGD(_params((0.0, 1.0)), lr=0.1).get_momentum_state() is None


@pytest.mark.parametrize("kwargs", [{"lr": -0.1}, {"lr": 0.1, "momentum": 1.0}])
def test_invalid_hyperparameters(kwargs):
    with pytest.raises(ValueError):
        SGD(_params((0.0, 0.0)), **kwargs)


def test_adam_first_step_moves_by_lr():
    (p,) = _params((1.0, 0.3))
    opt = Adam([p], lr=0.01)
    opt.step()
    # after bias correction m_hat / sqrt(v_hat) = sign(grad)
    assert p.data == pytest.approx(1.0 - 0.01, abs=1e-6)
    assert isinstance(p.data, float)


def test_adam_minimises_quadratic():
    x = Value(3.0)
    opt = Adam([x], lr=0.1)
    for _ in range(300):
        loss = (x - 1.0) ** 2
        opt.zero_grad()
        loss.backward()
        opt.step()
    assert math.isclose(x.data, 1.0, abs_tol=5e-2)


def test_base_step_is_abstract():
    with pytest.raises(NotImplementedError):
        Optimizer(_params((0.0, 0.0)), lr=0.1).step()


def test_params_generator_is_materialised():
    params = _params((1.0, 1.0), (1.0, 1.0))
    opt = SGD((p for p in params), lr=1.0)
    opt.step()
    opt.step()
    assert [p.data for p in params] == [-1.0, -1.0]
