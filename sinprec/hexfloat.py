"""
Exact hexadecimal floating-point text, in the C99 ``%a`` / ``float.hex`` spelling.

Used to lift binary128 sine results into the working context without an
intermediate rounding: every finite binary value has a finite hex spelling.
"""

import re

_HEX_RE = re.compile(
    r"""^\s*(?P<sign>[+-])?0x
        (?P<int>[0-9a-f]*)
        (?:\.(?P<frac>[0-9a-f]*))?
        p(?P<exp>[+-]?\d+)\s*$""",
    re.IGNORECASE | re.VERBOSE,
)
_SPECIAL = {"inf": "+inf", "+inf": "+inf", "infinity": "+inf", "-inf": "-inf", "-infinity": "-inf", "nan": "nan", "+nan": "nan", "-nan": "nan"}


def format_hex(mantissa: int, exponent: int) -> str:
    """Render ``mantissa * 2**exponent`` as ``[-]0x1.<hex>p<+/-e>``."""
    if mantissa == 0:
        return "0x0p+0"
    sign = "-" if mantissa < 0 else ""
    man = abs(mantissa)
    frac_bits = man.bit_length() - 1
    e2 = exponent + frac_bits
    if frac_bits == 0:
        return f"{sign}0x1p{e2:+d}"
    # pad the fraction to whole nibbles
    pad = -frac_bits % 4
    frac = (man - (1 << frac_bits)) << pad
    digits = f"{frac:0{(frac_bits + pad) // 4}x}".rstrip("0")
    if not digits:
        return f"{sign}0x1p{e2:+d}"
    return f"{sign}0x1.{digits}p{e2:+d}"


def mpf_to_hex(ctx, value) -> str:
    if ctx.isnan(value):
        return "nan"
    if ctx.isinf(value):
        return "+inf" if value > 0 else "-inf"
    man, exp = value.man_exp
    return format_hex(-man if value < 0 else man, exp)


def parse_hex(ctx, text: str):
    """
    Parse a hex float literal into ``ctx`` exactly.

    Exact as long as the literal's significant bits fit in ``ctx.prec``; the
    binary128 strings produced by ``format_hex`` carry at most 113.
    """
    special = _SPECIAL.get(text.strip().lower())
    if special is not None:
        return ctx.mpf(special)
    m = _HEX_RE.match(text)
    if m is None or not (m.group("int") or m.group("frac")):
        raise ValueError(f"Not a hexadecimal floating-point literal: {text!r}")
    frac = m.group("frac") or ""
    man = int((m.group("int") or "") + frac, 16)
    exp = int(m.group("exp")) - 4 * len(frac)
    if m.group("sign") == "-":
        man = -man
    return ctx.mpf((man, exp))


__all__ = ["format_hex", "mpf_to_hex", "parse_hex"]
