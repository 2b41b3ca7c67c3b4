import pytest

from memorygames.core.rng import RNG


def test_same_seed_same_sequence():
    a, b = RNG(seed=7), RNG(seed=7)
    assert [a.randint(0, 100) for _ in range(20)] == [b.randint(0, 100) for _ in range(20)]
    assert a.sample(range(10), 4) == b.sample(range(10), 4)


def test_state_roundtrip():
    r = RNG(seed=3)
    state = r.state()
    first = [r.random() for _ in range(5)]
    r.set_state(state)
    assert [r.random() for _ in range(5)] == first


def test_choice_empty_raises():
    with pytest.raises(IndexError):
        RNG(seed=1).choice([])
