"""
Two-line element set decoding.

Provides pure-Python functions that decode the fixed-column two-line format
into :class:`~sgpjax.propagators.OrbitalElements` in the units the models
work in (radians, radians per minute).
"""

from __future__ import annotations

from sgpjax.constants import DEG2RAD, MINUTES_PER_DAY, REVDAY2RADMIN
from sgpjax.propagators._types import OrbitalElements


def compute_checksum(line: str) -> int:
    """Compute the checksum of a TLE line.

    The checksum is the sum of all digit characters plus 1 for each
    minus sign, modulo 10, computed over the first 68 characters.

    Args:
        line: A TLE line string (at least 68 characters).

    Returns:
        The checksum digit (0-9).
    """
    return sum((int(c) if c.isdigit() else c == "-") for c in line[:68]) % 10


def validate_tle_line(line: str, line_number: int) -> None:
    """Validate a TLE line's format and checksum.

    Args:
        line: A TLE line string.
        line_number: Expected line number (1 or 2).

    Raises:
        ValueError: If the line fails format or checksum validation.
    """
    line = line.rstrip()

    if len(line) < 69:
        raise ValueError(f"TLE line {line_number} is too short ({len(line)} chars, expected 69): {line}")

    if line[0] != str(line_number):
        raise ValueError(f"TLE line {line_number} does not start with '{line_number}': {line}")

    checksum_char = line[68]
    if not checksum_char.isdigit():
        raise ValueError(f"TLE line {line_number} has non-digit checksum: {line}")

    expected = compute_checksum(line)
    if expected != int(checksum_char):
        raise ValueError(
            f"TLE line {line_number} checksum mismatch: computed {expected}, found {checksum_char}: {line}"
        )


def _implied_decimal(mantissa: str, exponent: str) -> float:
    """Decode the ``+NNNNN-N`` implied-decimal fields of line 1."""
    mantissa = mantissa.strip() or "0"
    sign = -1.0 if mantissa.startswith("-") else 1.0
    digits = mantissa.lstrip("+-") or "0"
    return sign * float("0." + digits) * 10.0 ** int(exponent.strip() or "0")


def parse_tle(line1: str, line2: str, validate: bool = True) -> OrbitalElements:
    """Decode a two-line element set.

    Args:
        line1: First TLE line (69 characters including checksum).
        line2: Second TLE line (69 characters including checksum).
        validate: Check line numbers, lengths and checksums. Disable for
            historical element sets published without checksums.

    Returns:
        The mean orbital elements.

    Raises:
        ValueError: If the lines fail validation, a field cannot be
            decoded, or the catalog numbers of the two lines differ.
    """
    if validate:
        validate_tle_line(line1, 1)
        validate_tle_line(line2, 2)

    l1 = line1.rstrip().ljust(69)
    l2 = line2.rstrip().ljust(69)

    satnum_str = l1[2:7]
    if satnum_str != l2[2:7]:
        raise ValueError("Object numbers in lines 1 and 2 do not match")

    classification = l1[7].strip() or "U"
    intldesg = l1[9:17].rstrip()
    two_digit_year = int(l1[18:20])
    epochdays = float(l1[20:32])
    ndot = float(l1[33:43])
    nddot = _implied_decimal(l1[44:50], l1[50:52])
    bstar = _implied_decimal(l1[53:59], l1[59:61])
    elnum = int(l1[64:68].strip() or "0")

    inclo = float(l2[8:16])
    nodeo = float(l2[17:25])
    ecco = float("0." + l2[26:33].replace(" ", "0"))
    argpo = float(l2[34:42])
    mo = float(l2[43:51])
    no_kozai = float(l2[52:63])
    revnum = int(l2[63:68].strip() or "0")

    # Two-digit years 57-99 are 1957-1999
    year = two_digit_year + 2000 if two_digit_year < 57 else two_digit_year + 1900
    jdsatepoch = year * 365 + (year - 1) // 4 + 1721044.5 + epochdays

    return OrbitalElements(
        satnum=int(satnum_str),
        jdsatepoch=jdsatepoch,
        ecco=ecco,
        inclo=inclo * DEG2RAD,
        nodeo=nodeo * DEG2RAD,
        argpo=argpo * DEG2RAD,
        mo=mo * DEG2RAD,
        no_kozai=no_kozai * REVDAY2RADMIN,
        ndot=ndot * REVDAY2RADMIN / MINUTES_PER_DAY,
        nddot=nddot * REVDAY2RADMIN / (MINUTES_PER_DAY * MINUTES_PER_DAY),
        bstar=bstar,
        classification=classification,
        intldesg=intldesg,
        epochyr=two_digit_year,
        epochdays=epochdays,
        elnum=elnum,
        revnum=revnum,
    )
