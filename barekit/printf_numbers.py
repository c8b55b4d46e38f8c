"""Conversion of integers and doubles into printf fields."""

from __future__ import annotations

import struct
from decimal import Decimal

from .printf_output import Field
from .printf_spec import Flag, FormatSpec, Radix

_SIGNIFICAND_BITS = 52
_EXPONENT_MASK = 0x7FF
_SIGNIFICAND_MASK = (1 << _SIGNIFICAND_BITS) - 1
_MAX_PRECISION = 4096

_G_BITS = int(Flag.G_FORM)
_E_BITS = int(Flag.E_FORM)


def shortest_decimal(value: float) -> tuple[int, int]:
    """Shortest digits that read back as ``abs(value)``.

    Returns ``(digits, exponent)`` with ``abs(value) == digits * 10**exponent``
    after rounding to the nearest double; ``digits`` has no trailing zeros.
    """
    if value != value or value in (float("inf"), float("-inf")):
        raise ValueError("value must be finite")
    if value == 0:
        return 0, 0
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = int("".join(map(str, digit_tuple)))
    while digits % 10 == 0:
        digits //= 10
        exponent += 1
    return digits, exponent


def round_to_digits(value: int, current_digits: int, desired_digits: int) -> int:
    """Drop ``current_digits - desired_digits`` low digits, rounding half up."""
    drop = current_digits - desired_digits
    if drop <= 0:
        return value
    scale = 10**drop
    quotient, remainder = divmod(value, scale)
    if remainder * 2 >= scale:
        quotient += 1
    return quotient


def _digits(value: int, radix: int, upper: bool) -> str:
    if radix == Radix.DEC:
        return str(value)
    text = {Radix.HEX: "x", Radix.OCT: "o", Radix.BIN: "b"}[Radix(radix)]
    out = format(value, text)
    return out.upper() if upper else out


def format_integer(value: int, spec: FormatSpec) -> Field:
    """Format an integer; negative values are only meaningful for signed decimals.

    Updates the padding held in ``spec``.
    """
    prefix = ""
    upper = spec.has(Flag.UPPERCASE)
    if spec.radix == Radix.DEC:
        if spec.has(Flag.SIGNED):
            if value < 0:
                prefix = "-"
                value = -value
            elif spec.has(Flag.PLUS_SIGN):
                prefix = "+"
            elif spec.has(Flag.SPACE_SIGN):
                prefix = " "
    elif spec.radix == Radix.HEX:
        if spec.has(Flag.ALT) and value != 0:
            prefix = "0X" if upper else "0x"
    elif spec.radix == Radix.BIN:
        if spec.has(Flag.ALT) and value != 0:
            prefix = "0B" if upper else "0b"

    digits = _digits(value, spec.radix, upper)
    length = len(digits)

    if spec.radix == Radix.OCT and spec.has(Flag.ALT):
        if digits[0] != "0" and spec.precision <= length:
            spec.set(Flag.HAS_PREC)
            spec.precision = length + 1
        elif not spec.precision and value == 0:
            spec.precision = 1

    if spec.has(Flag.HAS_PREC):
        if spec.precision > length:
            spec.num_pad = -(spec.precision - length)
        elif not spec.precision and value == 0:
            digits = ""

    return Field(body=digits, prefix=prefix)


def _exponent_text(letter: str, exp_val: int, min_digits: int) -> str:
    return letter + ("-" if exp_val < 0 else "+") + str(abs(exp_val)).rjust(min_digits, "0")


def _a_form(value_bits: tuple[int, int], spec: FormatSpec, prefix: str, upper: bool):
    exponent_biased, significand = value_bits
    if exponent_biased == 0:
        exp_val = -1022
        while not significand & (1 << _SIGNIFICAND_BITS):
            significand <<= 1
            exp_val -= 1
    else:
        exp_val = exponent_biased - 1023
        significand |= 1 << _SIGNIFICAND_BITS

    if spec.precision < 13:
        bits_to_remove = 52 - spec.precision * 4
        if bits_to_remove > 0:
            msb = 1 << bits_to_remove
            round_bit = 1 << (bits_to_remove - 1)
            sticky_mask = round_bit - 1
            if significand & round_bit and (significand & sticky_mask or significand & msb):
                significand += msb
                if significand & (1 << (_SIGNIFICAND_BITS + 1)):
                    significand >>= 1
                    exp_val += 1
            significand &= ~(msb - 1)

    digits = _digits(significand, Radix.HEX, upper)
    prefix += ("0X" if upper else "0x") + digits[0]
    rest = digits[1:]
    if spec.precision or spec.has(Flag.ALT):
        prefix += "."
    if spec.precision > len(rest):
        spec.num_pad = spec.precision - len(rest)
    if len(rest) > spec.precision:
        rest = rest[: spec.precision]
    spec.radix = Radix.DEC
    suffix = _exponent_text("P" if upper else "p", exp_val, 1)
    return prefix, rest, suffix


def _e_form(fraction10, exponent10, frac_digits, spec, prefix, upper, add_trailing_zeros):
    decimal_digits = frac_digits - 1
    if spec.precision < decimal_digits:
        fraction10 = round_to_digits(fraction10, decimal_digits, spec.precision)
        skipped = decimal_digits - spec.precision
        if len(str(fraction10)) > frac_digits - skipped:
            fraction10 //= 10
            exponent10 += 1
    elif add_trailing_zeros:
        spec.num_pad = spec.precision - decimal_digits

    digits = str(fraction10)
    prefix += digits[0]
    rest = digits[1:]
    if rest or spec.num_pad or spec.has(Flag.ALT):
        prefix += "."
    suffix = _exponent_text("E" if upper else "e", exponent10 + decimal_digits, 2)
    return prefix, rest, suffix


def _f_form(fraction10, exponent10, frac_digits, spec, prefix, add_trailing_zeros):
    int_digits = frac_digits + exponent10
    body = ""
    suffix = ""

    if int_digits >= frac_digits:
        body = str(fraction10)
        spec.num_pad = exponent10
        if (add_trailing_zeros and spec.precision) or spec.has(Flag.ALT):
            suffix = "."
            spec.suffix_pad = spec.precision
        return prefix, body, suffix

    if int_digits <= 0:
        leading = -exponent10 - frac_digits
        carry = 0
        decimal_digits = leading + frac_digits
        if spec.precision <= leading:
            if add_trailing_zeros:
                spec.num_pad = -spec.precision
            else:
                spec.precision = 0
        elif spec.precision >= decimal_digits:
            body = str(fraction10)
            spec.num_pad = -leading
            if add_trailing_zeros:
                spec.suffix_pad = spec.precision - decimal_digits
        else:
            remaining = spec.precision - leading
            fraction10 = round_to_digits(fraction10, frac_digits, remaining)
            body = str(fraction10)
            if len(body) > remaining:
                carry = 1
                body = ""
                if add_trailing_zeros:
                    spec.suffix_pad = remaining
                else:
                    spec.precision = 0
            spec.num_pad = -leading
        prefix += str(carry)
        if spec.precision or spec.has(Flag.ALT):
            prefix += "."
        return prefix, body, suffix

    decimal_digits = frac_digits - int_digits
    if spec.precision < decimal_digits:
        fraction10 = round_to_digits(fraction10, decimal_digits, spec.precision)
        frac_len = spec.precision
    else:
        frac_len = decimal_digits
    digits = str(fraction10)
    split = len(digits) - frac_len
    prefix += digits[:split]
    fraction = digits[split:]

    kept = frac_len
    for ch in reversed(fraction):
        if ch != "0":
            break
        kept -= 1
    # The kept length counts from the low end of the fraction.
    suffix = fraction[len(fraction) - kept:] if kept else ""

    if (add_trailing_zeros and frac_len) or kept or spec.has(Flag.ALT):
        body = "."
        if add_trailing_zeros:
            spec.suffix_pad = spec.precision - kept
    return prefix, body, suffix


def format_double(value: float, spec: FormatSpec) -> Field:
    """Format a double in f, e, g or a form. Updates the padding held in ``spec``."""
    (bits,) = struct.unpack("<Q", struct.pack("<d", float(value)))
    negative = bool(bits >> 63)
    exponent_biased = (bits >> _SIGNIFICAND_BITS) & _EXPONENT_MASK
    significand = bits & _SIGNIFICAND_MASK
    upper = spec.has(Flag.UPPERCASE)
    flags = int(spec.flags)

    if not spec.has(Flag.HAS_PREC):
        spec.precision = 13 if spec.has(Flag.A_FORM) else 6
    spec.precision = min(spec.precision, _MAX_PRECISION)

    if negative:
        sign = "-"
    elif spec.has(Flag.PLUS_SIGN):
        sign = "+"
    elif spec.has(Flag.SPACE_SIGN):
        sign = " "
    else:
        sign = ""

    prefix = ""
    if not spec.has(Flag.ZERO_PAD) and sign:
        prefix, sign = sign, ""

    if exponent_biased == _EXPONENT_MASK:
        spec.precision = 0
        word = "nan" if significand else "inf"
        return Field(body=word.upper() if upper else word, prefix=prefix, sign=sign)

    if exponent_biased == 0 and not significand:
        suffix = ""
        if spec.has(Flag.A_FORM):
            prefix += "0X" if upper else "0x"
        prefix += "0"
        if (flags & _G_BITS) != _G_BITS or spec.has(Flag.ALT):
            if spec.precision:
                prefix += "."
                spec.num_pad = spec.precision
        if (flags & _G_BITS) == _E_BITS:
            suffix = ("E" if upper else "e") + "+00"
        elif spec.has(Flag.A_FORM):
            suffix = ("P" if upper else "p") + "+0"
        return Field(prefix=prefix, suffix=suffix, sign=sign)

    form = (flags >> 22) & 7
    if form >= 4:
        prefix, body, suffix = _a_form((exponent_biased, significand), spec, prefix, upper)
        return Field(body=body, prefix=prefix, suffix=suffix, sign=sign)

    fraction10, exponent10 = shortest_decimal(value)
    frac_digits = len(str(fraction10))
    add_trailing_zeros = True

    if form == 3:
        if not spec.precision:
            spec.precision = 1
        if not spec.has(Flag.ALT):
            add_trailing_zeros = False
        exp_val = exponent10 + frac_digits - 1
        if spec.precision > exp_val >= -4:
            spec.precision -= exp_val + 1
            form = 1
        else:
            spec.precision -= 1
            form = 2

    if form == 2:
        prefix, body, suffix = _e_form(
            fraction10, exponent10, frac_digits, spec, prefix, upper, add_trailing_zeros
        )
    else:
        prefix, body, suffix = _f_form(
            fraction10, exponent10, frac_digits, spec, prefix, add_trailing_zeros
        )
    return Field(body=body, prefix=prefix, suffix=suffix, sign=sign)