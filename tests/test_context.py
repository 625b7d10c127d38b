import pytest

from collections_bench import build_default_context, build_probe_batch


@pytest.mark.parametrize("populate_size", [0, 1, 99, 100, 101, 1000])
def test_default_context_length_and_values(populate_size):
    context = build_default_context(populate_size)
    assert len(context) == populate_size
    for i, element in enumerate(context):
        assert element == str(i % 100)


def test_default_context_is_read_only():
    context = build_default_context(10)
    assert isinstance(context, tuple)


def test_negative_populate_size_is_rejected():
    with pytest.raises(ValueError):
        build_default_context(-1)


def test_probe_batch_cycles_through_thirty_values():
    probe = build_probe_batch()
    assert len(probe) == 1000
    assert set(probe) == {str(i) for i in range(30)}
    assert probe[31] == "1"
