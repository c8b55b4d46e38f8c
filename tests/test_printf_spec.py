import pytest
from hypothesis import given, strategies as st

from barekit.errors import Errno, SdkError
from barekit.printf_spec import (
    Flag,
    FormatError,
    FormatSpec,
    Radix,
    parse_format,
)


def parse(fmt, *args, start=0):
    return parse_format(fmt, start, iter(args))


def test_signed_decimal():
    spec, end = parse("%d")
    assert end == len("%d")
    assert Flag.INT in spec.flags
    assert Flag.SIGNED in spec.flags
    assert spec.radix is Radix.DEC
    assert spec.conversion == Flag.INT


def test_unsigned_has_no_signed_flag():
    spec, _ = parse("%u")
    assert spec.conversion == Flag.INT
    assert not spec.has(Flag.SIGNED)


def test_start_offset_and_end_index():
    fmt = "ab%xcd"
    spec, end = parse(fmt, start=2)
    assert end == fmt.index("c")
    assert spec.radix is Radix.HEX


def test_upper_hex():
    spec, _ = parse("%X")
    assert spec.has(Flag.UPPERCASE)
    assert spec.radix is Radix.HEX


def test_pointer_is_alt_long_hex():
    spec, _ = parse("%p")
    for flag in (Flag.ALT, Flag.LONG, Flag.INT):
        assert flag in spec.flags
    assert spec.radix is Radix.HEX


def test_binary_and_octal():
    assert parse("%b")[0].radix is Radix.BIN
    assert parse("%B")[0].has(Flag.UPPERCASE)
    assert parse("%o")[0].radix is Radix.OCT


def test_double_forms():
    assert parse("%e")[0].has(Flag.E_FORM)
    g = parse("%g")[0]
    assert (g.flags & Flag.G_FORM) == Flag.G_FORM
    a = parse("%a")[0]
    assert a.has(Flag.A_FORM) and a.radix is Radix.HEX
    f = parse("%F")[0]
    assert f.conversion == Flag.DOUBLE and f.has(Flag.UPPERCASE)


def test_left_adjust_clears_zero_pad_and_precision_clears_it_for_ints():
    spec, _ = parse("%-08.3x")
    assert not spec.has(Flag.ZERO_PAD)
    assert spec.has(Flag.LEFT_ADJ)
    assert spec.width == 8
    assert spec.precision == 3


def test_zero_pad_kept_for_doubles_with_precision():
    spec, _ = parse("%08.3f")
    assert spec.has(Flag.ZERO_PAD)
    assert spec.width == 8


def test_zero_pad_cleared_for_int_with_precision():
    spec, _ = parse("%08.3d")
    assert not spec.has(Flag.ZERO_PAD)


def test_star_width_negative_means_left_adjust():
    args = iter([-7, 99])
    spec, _ = parse_format("%*d", 0, args)
    assert spec.width == 7
    assert spec.has(Flag.LEFT_ADJ)
    assert next(args) == 99


def test_star_precision_negative_is_omitted():
    spec, _ = parse("%.*d", -1)
    assert not spec.has(Flag.HAS_PREC)


def test_star_precision():
    spec, _ = parse("%.*s", 4)
    assert spec.precision == 4
    assert spec.has(Flag.HAS_PREC)
    assert spec.conversion == Flag.STRING


def test_third_star_is_invalid():
    with pytest.raises(FormatError) as err:
        parse("%*.**d", 1, 2)
    assert err.value.errno is Errno.EINVAL


def test_star_without_argument():
    with pytest.raises(FormatError) as err:
        parse("%*d")
    assert err.value.errno is Errno.EINVAL


def test_digits_after_star_width_invalid():
    with pytest.raises(FormatError):
        parse("%*5d", 3)


@pytest.mark.parametrize("fmt", ["%1$d", "%n", "%m", "%ls", "%lc"])
def test_unsupported_specs(fmt):
    with pytest.raises(SdkError) as err:
        parse(fmt)
    assert err.value.errno is Errno.ENOTSUP


def test_half_half():
    spec, _ = parse("%hhd")
    assert Flag.HALF in spec.flags
    assert Flag.HALF_HALF in spec.flags


def test_long_long():
    spec, _ = parse("%llu")
    assert Flag.LONG_LONG in spec.flags


def test_bit_width():
    spec, _ = parse("%w16d")
    assert spec.int_bitlen == 16
    assert not spec.has(Flag.FAST)


def test_fast_bit_width():
    spec, end = parse("%wf32u")
    assert spec.int_bitlen == 32
    assert spec.has(Flag.FAST)
    assert end == len("%wf32u")


def test_sign_flags():
    spec, _ = parse("%+ d")
    assert spec.has(Flag.PLUS_SIGN)
    assert spec.has(Flag.SPACE_SIGN)


def test_unknown_characters_are_skipped():
    spec, end = parse("%yd")
    assert spec.conversion == Flag.INT
    assert end == len("%yd")


def test_missing_conversion_consumes_rest():
    spec, end = parse("%5")
    assert spec.conversion == Flag(0)
    assert end == len("%5")


def test_width_overflow():
    with pytest.raises(FormatError):
        parse("%99999999999d")


def test_format_error_is_sdk_error():
    with pytest.raises(SdkError):
        parse("%$d")


def test_spec_set_and_clear():
    spec = FormatSpec()
    spec.set(Flag.ALT | Flag.INT)
    spec.clear(Flag.ALT)
    assert spec.has(Flag.INT)
    assert not spec.has(Flag.ALT)


@given(st.integers(min_value=1, max_value=10**6))
def test_width_roundtrip(width):
    spec, _ = parse(f"%{width}d")
    assert spec.width == width
    assert spec.has(Flag.HAS_WIDTH)


@given(st.integers(min_value=0, max_value=10**6))
def test_precision_roundtrip(prec):
    spec, _ = parse(f"%.{prec}f")
    assert spec.precision == prec
    assert spec.has(Flag.HAS_PREC)