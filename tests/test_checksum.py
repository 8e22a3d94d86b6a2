import pytest
from hypothesis import given
from hypothesis import strategies as st

from linanalyzer.checksum import LINChecksum

byte_lists = st.lists(st.integers(min_value=0, max_value=255), max_size=12)


def _checksum_of(data):
    checksum = LINChecksum()
    for byte in data:
        checksum.add(byte)
    return checksum.result()


def test_spec_worked_example():
    assert _checksum_of([0x4A, 0x55, 0x93, 0xE5]) == 0xE6


def test_empty_checksum():
    assert LINChecksum().result() == 0xFF


def test_add_returns_running_sum_before_overflow():
    checksum = LINChecksum()
    assert checksum.add(0x10) == 0x10
    assert checksum.add(0x20) == 0x10 + 0x20


def test_clear_resets():
    checksum = LINChecksum()
    for byte in (0x12, 0xF0, 0x33):
        checksum.add(byte)
    checksum.clear()
    assert checksum.result() == LINChecksum().result()


@pytest.mark.parametrize("bad", [-1, 256, 1000])
def test_out_of_range_byte_rejected(bad):
    with pytest.raises(ValueError):
        LINChecksum().add(bad)


@given(byte_lists)
def test_adding_checksum_byte_sums_to_all_ones(data):
    checksum = LINChecksum()
    for byte in data:
        checksum.add(byte)
    assert checksum.add(checksum.result()) == 0xFF
    assert checksum.result() == 0


@given(byte_lists, st.randoms())
def test_order_does_not_matter(data, rnd):
    shuffled = list(data)
    rnd.shuffle(shuffled)
    assert _checksum_of(data) == _checksum_of(shuffled)