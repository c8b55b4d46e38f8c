import pytest
from hypothesis import given, strategies as st

from barekit.errors import Errno
from barekit.printf import printf, snprintf, sprintf
from barekit.printf_spec import FormatError

INT32 = st.integers(min_value=-(2**31), max_value=2**31 - 1)


@given(INT32)
def test_decimal_matches_builtin(n):
    assert sprintf("%d", n) == "%d" % n


@given(st.integers(min_value=0, max_value=2**32 - 1))
def test_hex_and_octal_match_builtin(n):
    assert sprintf("%x|%X|%o", n, n, n) == "%x|%X|%o" % (n, n, n)


def test_flags_and_width():
    assert sprintf("%05d", -42) == "%05d" % -42
    assert sprintf("%-5d|", 7) == "%-5d|" % 7
    assert sprintf("%+d", 5) == "%+d" % 5
    assert sprintf("%#x", 255) == "%#x" % 255


def test_alt_octal_gets_leading_zero():
    assert sprintf("%#o", 8) == "0" + "%o" % 8


def test_unsigned_wraps_negative():
    assert sprintf("%u", -1) == str(2**32 - 1)


def test_half_truncates():
    assert sprintf("%hd", 70000) == str(70000 - 65536)


def test_doubles_match_builtin():
    for fmt, value in [
        ("%f", 1.5),
        ("%08.3f", -2.5),
        ("%5.2f", 3.25),
        ("%e", 0.0),
        ("%f", 0.0),
        ("%g", 100.0),
        ("%g", 0.0001),
        ("%g", 1.5),
        ("%g", 1234567.0),
        ("%g", 0.0),
    ]:
        assert sprintf(fmt, value) == fmt % value


def test_hex_float_matches_hex():
    assert sprintf("%a", 1.0) == (1.0).hex()


def test_long_double_placeholder():
    assert sprintf("%Lf", 1.0) == "(n/a)"


def test_strings_and_chars():
    assert sprintf("%s", None) == "(null)"
    assert sprintf("%.2s", "abcdef") == "ab"
    assert sprintf("%c", 65) == "A"
    assert sprintf("100%%") == "100%"


def test_snprintf_truncates_but_counts():
    text, count = snprintf(4, "%d", 12345)
    assert text == "123"
    assert count == 5


def test_snprintf_zero_size_keeps_nothing():
    assert snprintf(0, "%s", "abc") == ("", 3)


def test_printf_writes_stdout(capsys):
    count = printf("%s=%d\n", "x", 3)
    assert capsys.readouterr().out == "x=3\n"
    assert count == 4


@pytest.mark.parametrize("fmt", ["%n", "%1$d", "%m"])
def test_unsupported(fmt):
    with pytest.raises(FormatError) as info:
        sprintf(fmt, 1)
    assert info.value.errno == Errno.ENOTSUP


def test_invalid_precision():
    with pytest.raises(FormatError) as info:
        sprintf("%..d", 1)
    assert info.value.errno == Errno.EINVAL


def test_missing_argument():
    with pytest.raises(FormatError) as info:
        sprintf("%d")
    assert info.value.errno == Errno.EINVAL