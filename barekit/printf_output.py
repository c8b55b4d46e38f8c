"""Output of formatted fields, either unbounded or into a sized buffer."""

from __future__ import annotations

from dataclasses import dataclass

from .printf_spec import Flag, FormatSpec


@dataclass(frozen=True)
class Field:
    """The pieces of one formatted conversion.

    ``sign`` is written separately from ``prefix`` only when zero padding
    a floating-point value, so that the sign comes before the zeros.
    """

    body: str = ""
    prefix: str = ""
    suffix: str = ""
    sign: str = ""

    def __post_init__(self) -> None:
        if len(self.sign) > 1:
            raise ValueError("sign must be a single character or empty")


class Output:
    """Collects formatted text, counting every character produced.

    With a ``limit`` the text kept is at most ``limit - 1`` characters (room
    being left for a terminator), while ``count`` still reports how many
    characters the full output needs.
    """

    def __init__(self, limit: int | None = None) -> None:
        if limit is not None and limit < 0:
            raise ValueError("limit must not be negative")
        self.limit = limit
        self.count = 0
        self._parts: list[str] = []
        self._kept = 0

    @property
    def _capacity(self) -> int | None:
        if self.limit is None:
            return None
        return max(self.limit - 1, 0)

    def write(self, text: str) -> None:
        """Append text, keeping only what fits."""
        capacity = self._capacity
        if capacity is None:
            kept = text
        else:
            kept = text[: max(capacity - self._kept, 0)]
        if kept:
            self._parts.append(kept)
            self._kept += len(kept)
        self.count += len(text)

    def text(self) -> str:
        """The text kept so far."""
        return "".join(self._parts)


def _pieces(field: Field, spec: FormatSpec) -> tuple[str, str, str]:
    def oriented(text: str, flag: Flag) -> str:
        return text[::-1] if spec.flags & flag else text

    return (
        oriented(field.prefix, Flag.REVERSE_PREFIX),
        oriented(field.body, Flag.REVERSE_NUM),
        oriented(field.suffix, Flag.REVERSE_SUFFIX),
    )


def _pads(field: Field, spec: FormatSpec) -> tuple[int, int, int]:
    prebuf = -spec.num_pad if spec.num_pad < 0 else 0
    postbuf = spec.num_pad if spec.num_pad > 0 else 0
    field_width = (
        len(field.prefix)
        + prebuf
        + len(field.body)
        + postbuf
        + len(field.suffix)
        + spec.suffix_pad
        + (1 if field.sign else 0)
    )
    width_pad = max(spec.width - field_width, 0)
    return prebuf, postbuf, width_pad


def _zeros(n: int) -> str:
    return "0" * max(n, 0)


def emit_field(field: Field, spec: FormatSpec, out: Output) -> None:
    """Write a field honouring width, zero padding and left adjustment."""
    prefix, body, suffix = _pieces(field, spec)
    prebuf, postbuf, width_pad = _pads(field, spec)
    tail = body + _zeros(postbuf) + suffix + _zeros(spec.suffix_pad)
    pad_mode = (int(spec.flags) >> 1) & 3

    if pad_mode == 0:
        out.write(" " * width_pad + prefix + _zeros(prebuf) + tail)
    elif pad_mode == 1:
        if spec.has(Flag.DOUBLE):
            out.write(field.sign + _zeros(width_pad) + prefix + tail)
        else:
            out.write(prefix + _zeros(width_pad) + tail)
    else:
        out.write(prefix + _zeros(prebuf) + tail + " " * width_pad)


def emit_field_simple(field: Field, spec: FormatSpec, out: Output) -> None:
    """Write a field right-aligned with spaces, ignoring padding flags."""
    prefix, body, suffix = _pieces(field, spec)
    prebuf, postbuf, width_pad = _pads(field, spec)
    out.write(
        " " * width_pad
        + field.sign
        + prefix
        + _zeros(prebuf)
        + body
        + _zeros(postbuf)
        + suffix
        + _zeros(spec.suffix_pad)
    )