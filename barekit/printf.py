"""printf-style formatting to a string, a sized buffer or standard output."""

from __future__ import annotations

import sys
import threading
from collections.abc import Iterator

from .errors import Errno
from .printf_numbers import format_double, format_integer
from .printf_output import Field, Output, emit_field
from .printf_spec import Flag, FormatError, FormatSpec, parse_format

DEFAULT_STRING_PRECISION = 4095

_print_lock = threading.Lock()

_FAST_BITS = {8: 8, 16: 64, 32: 64, 64: 64}


def _next_arg(args: Iterator):
    try:
        return next(args)
    except StopIteration:
        raise FormatError(Errno.EINVAL, "missing argument") from None


def _int_bitlen(spec: FormatSpec) -> int:
    if not spec.int_bitlen:
        if spec.has(Flag.INTMAX | Flag.LONG_LONG | Flag.LONG | Flag.SIZET | Flag.PTRDIFF):
            return 64
        if spec.has(Flag.HALF):
            return 16
        if spec.has(Flag.HALF_HALF):
            return 8
        return 32
    if spec.has(Flag.FAST):
        try:
            return _FAST_BITS[spec.int_bitlen]
        except KeyError:
            raise FormatError(Errno.EINVAL, "unsupported fast integer width") from None
    return spec.int_bitlen


def _integer_value(arg, bits: int, signed: bool) -> int:
    value = int(arg) & ((1 << bits) - 1)
    if signed and value >> (bits - 1):
        value -= 1 << bits
    return value


def _char(arg) -> str:
    if isinstance(arg, str):
        if not arg:
            raise FormatError(Errno.EINVAL, "empty character argument")
        return arg[0]
    return chr(int(arg) & 0xFF)


def _render(out: Output, fmt: str, args: tuple) -> int:
    it = iter(args)
    end = len(fmt)
    i = 0
    while i < end:
        ch = fmt[i]
        if ch != "%":
            out.write(ch)
            i += 1
            continue
        if i == end - 1:
            break
        if fmt[i + 1] == "%":
            out.write("%")
            i += 2
            continue

        spec, i = parse_format(fmt, i, it)
        kind = spec.conversion
        if kind == Flag.INT:
            bits = _int_bitlen(spec)
            if bits not in (8, 16, 32, 64):
                raise FormatError(Errno.EINVAL, f"unsupported integer width {bits}")
            value = _integer_value(_next_arg(it), bits, spec.has(Flag.SIGNED))
            emit_field(format_integer(value, spec), spec, out)
        elif kind == Flag.DOUBLE:
            arg = _next_arg(it)
            if spec.has(Flag.LONG):
                emit_field(Field(body="(n/a)"), spec, out)
            else:
                emit_field(format_double(float(arg), spec), spec, out)
        elif kind == Flag.CHAR:
            emit_field(Field(body=_char(_next_arg(it))), spec, out)
        elif kind == Flag.STRING:
            arg = _next_arg(it)
            if arg is None:
                text = "(null)"
            else:
                text = str(arg).split("\0", 1)[0]
                if spec.has(Flag.HAS_PREC) and spec.precision >= 0:
                    text = text[: spec.precision]
                else:
                    text = text[:DEFAULT_STRING_PRECISION]
            emit_field(Field(body=text), spec, out)
    return out.count


def sprintf(fmt: str, *args) -> str:
    """Format the arguments and return the resulting text."""
    out = Output()
    _render(out, fmt, args)
    return out.text()


def snprintf(size: int, fmt: str, *args) -> tuple[str, int]:
    """Format into a buffer of ``size`` characters including the terminator.

    Returns the text kept and the length the full output needs.
    """
    out = Output(size)
    count = _render(out, fmt, args)
    return out.text(), count


def printf(fmt: str, *args) -> int:
    """Format to standard output and return the number of characters written."""
    out = Output()
    with _print_lock:
        count = _render(out, fmt, args)
        sys.stdout.write(out.text())
    return count