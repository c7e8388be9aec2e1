import pytest

from swarmbot.grid import CenteredArray


def test_values():
    arr = CenteredArray(4, (0, 0))
    for x in range(-4, 5):
        for y in range(-4, 5):
            arr[(x, y)] = (x, y)

    for x in range(-4, 5):
        for y in range(-4, 5):
            assert arr[(x, y)] == (x, y)


def test_default_fill():
    arr = CenteredArray(2, "open")
    assert all(arr[(x, y)] == "open" for x in range(-2, 3) for y in range(-2, 3))


def test_set_affects_only_one_cell():
    arr = CenteredArray(1, 0)
    arr[(0, 0)] = 5
    cells = [arr[(x, y)] for x in range(-1, 2) for y in range(-1, 2)]
    assert cells.count(5) == 1
    assert arr[(0, 0)] == 5


@pytest.mark.parametrize("key", [(5, 0), (0, -5), (-5, 5)])
def test_out_of_range(key):
    arr = CenteredArray(4, 0)
    with pytest.raises(IndexError):
        arr.__getitem__(key)
    with pytest.raises(IndexError):
        arr.__setitem__(key, 1)
    cells = [arr[(x, y)] for x in range(-4, 5) for y in range(-4, 5)]
    assert cells == [0] * 81


def test_negative_radius():
    with pytest.raises(ValueError):
        CenteredArray(-1, 0)