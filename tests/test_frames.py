import pytest
from hypothesis import given
from hypothesis import strategies as st

from linanalyzer.frames import (
    DisplayBase,
    Frame,
    FrameFlags,
    FrameState,
    fault_string,
    flag_names,
    format_number,
    frame_type_name,
)


@pytest.mark.parametrize(
    "state, name",
    [
        (FrameState.NO_FRAME, "no_frame"),
        (FrameState.HEADER_BREAK, "header_break"),
        (FrameState.HEADER_SYNC, "header_sync"),
        (FrameState.HEADER_PID, "header_pid"),
        (FrameState.RESPONSE_DATA_ZERO, "data"),
        (FrameState.RESPONSE_DATA, "data"),
        (FrameState.RESPONSE_CHECKSUM, "checksum"),
        (FrameState.RESPONSE_POTENTIAL_CHECKSUM, "data_or_checksum"),
    ],
)
def test_frame_type_name(state, name):
    assert frame_type_name(state) == name


def test_frame_type_name_accepts_plain_int():
    assert frame_type_name(3) == "header_pid"


def test_flag_names_in_fixed_order():
    flags = FrameFlags.CHECKSUM_MISMATCH | FrameFlags.BYTE_FRAMING_ERROR
    assert flag_names(flags) == ["byte_framing_error", "checksum_mismatch"]


def test_flag_names_all():
    flags = (
        FrameFlags.BYTE_FRAMING_ERROR
        | FrameFlags.HEADER_BREAK_EXPECTED
        | FrameFlags.HEADER_SYNC_EXPECTED
        | FrameFlags.CHECKSUM_MISMATCH
    )
    assert flag_names(flags) == [
        "byte_framing_error",
        "header_break_expected",
        "header_sync_expected",
        "checksum_mismatch",
    ]


def test_no_flags_no_names_no_fault():
    assert flag_names(FrameFlags.OKAY) == []
    assert fault_string(FrameFlags.OKAY) == ""


def test_fault_string_combines_and_terminates():
    flags = FrameFlags.BYTE_FRAMING_ERROR | FrameFlags.CHECKSUM_MISMATCH
    assert fault_string(flags) == "!FRAME!CHK!"


def test_fault_string_single_ends_with_bang():
    text = fault_string(FrameFlags.HEADER_SYNC_EXPECTED)
    assert text.startswith("!SYNC")
    assert text.endswith("!")


def test_hex_format():
    assert format_number(0x55, DisplayBase.HEXADECIMAL, 8) == "0x55"


@given(st.integers(min_value=0, max_value=255))
def test_decimal_format(value):
    assert format_number(value, DisplayBase.DECIMAL, 8) == str(value)


@given(st.integers(min_value=0, max_value=255))
def test_binary_round_trip(value):
    text = format_number(value, DisplayBase.BINARY, 8)
    assert text.startswith("0b")
    assert len(text) == 2 + 8
    assert int(text[2:], 2) == value


@given(st.integers(min_value=0, max_value=0xFFFF))
def test_hex_round_trip(value):
    text = format_number(value, DisplayBase.HEXADECIMAL, 16)
    assert int(text, 16) == value


def test_value_masked_to_width():
    assert format_number(0x1FF, DisplayBase.DECIMAL, 8) == str(0xFF)


def test_ascii_printable():
    assert format_number(ord("U"), DisplayBase.ASCII, 8) == "U"


def test_ascii_hex_contains_hex():
    text = format_number(0x41, DisplayBase.ASCII_HEX, 8)
    assert text.startswith("A")
    assert format_number(0x41, DisplayBase.HEXADECIMAL, 8) in text


def test_invalid_width():
    with pytest.raises(ValueError):
        format_number(1, DisplayBase.DECIMAL, 0)


def test_frame_defaults():
    frame = Frame(0, 10, 0x55)
    assert frame.flags == FrameFlags.OKAY
    assert frame.frame_type is FrameState.NO_FRAME
    assert frame.data2 == 0