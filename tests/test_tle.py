"""Tests for two-line element set decoding."""

from math import pi

import pytest

from sgpjax.propagators import compute_checksum, parse_tle, validate_tle_line

ISS_LINE1 = "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927"
ISS_LINE2 = "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537"

# Spacetrack Report No. 3 test element sets, published without valid checksums
REPORT_NEAR_LINE1 = "1 88888U          80275.98708465  .00073094  13844-3  66816-4 0    8"
REPORT_NEAR_LINE2 = "2 88888  72.8435 115.9689 0086731  52.6988 110.5714 16.05824518    13"
REPORT_DEEP_LINE1 = "1 11801U          80230.29629788  .01431103  00000-0  14311-1 0    14"
REPORT_DEEP_LINE2 = "2 11801  46.7916 230.4354 7318036  47.4722  10.4117  2.28537848    13"

_REVDAY = 2.0 * pi / 1440.0


class TestChecksum:
    def test_iss_lines(self) -> None:
        assert compute_checksum(ISS_LINE1) == 7
        assert compute_checksum(ISS_LINE2) == 7

    def test_minus_contributes_one(self) -> None:
        assert compute_checksum("-" + " " * 67) == 1

    def test_letters_ignored(self) -> None:
        assert compute_checksum("ABC" + " " * 65) == 0


class TestValidateTleLine:
    def test_valid(self) -> None:
        validate_tle_line(ISS_LINE1, 1)
        validate_tle_line(ISS_LINE2, 2)

    def test_too_short_raises(self) -> None:
        with pytest.raises(ValueError, match="too short"):
            validate_tle_line("1 25544", 1)

    def test_wrong_line_number_raises(self) -> None:
        with pytest.raises(ValueError, match="does not start with"):
            validate_tle_line(ISS_LINE2, 1)

    def test_bad_checksum_raises(self) -> None:
        with pytest.raises(ValueError, match="checksum mismatch"):
            validate_tle_line(ISS_LINE1[:68] + "0", 1)


class TestParseTle:
    def test_iss_fields(self) -> None:
        elem = parse_tle(ISS_LINE1, ISS_LINE2)
        assert elem.satnum == 25544
        assert elem.classification == "U"
        assert elem.intldesg == "98067A"
        assert elem.epochyr == 8
        assert elem.epochdays == pytest.approx(264.51782528, rel=1e-12)
        assert elem.bstar == pytest.approx(-0.11606e-4, rel=1e-10)
        assert elem.inclo == pytest.approx(51.6416 * pi / 180.0, rel=1e-12)
        assert elem.ecco == pytest.approx(0.0006703, rel=1e-12)
        assert elem.no_kozai == pytest.approx(15.72125391 * _REVDAY, rel=1e-12)
        assert elem.ndot == pytest.approx(-0.00002182 * _REVDAY / 1440.0, rel=1e-10)
        assert elem.elnum == 292
        assert elem.revnum == 56353

    def test_iss_matches_reference(self) -> None:
        from sgp4.api import WGS72 as SGP4_WGS72
        from sgp4.api import Satrec

        ref = Satrec.twoline2rv(ISS_LINE1, ISS_LINE2, SGP4_WGS72)
        elem = parse_tle(ISS_LINE1, ISS_LINE2)
        assert elem.jdsatepoch == pytest.approx(ref.jdsatepoch + ref.jdsatepochF, abs=1e-8)
        assert elem.nodeo == pytest.approx(ref.nodeo, rel=1e-12)
        assert elem.argpo == pytest.approx(ref.argpo, rel=1e-12)
        assert elem.mo == pytest.approx(ref.mo, rel=1e-12)
        assert elem.no_kozai == pytest.approx(ref.no_kozai, rel=1e-12)
        assert elem.bstar == pytest.approx(ref.bstar, rel=1e-10)

    def test_report_near_earth(self) -> None:
        elem = parse_tle(REPORT_NEAR_LINE1, REPORT_NEAR_LINE2, validate=False)
        assert elem.satnum == 88888
        assert elem.jdsatepoch == pytest.approx(2444514.48708465, abs=1e-8)
        assert elem.bstar == pytest.approx(0.66816e-4, rel=1e-10)
        assert elem.nddot == pytest.approx(0.13844e-3 * _REVDAY / 1440.0**2, rel=1e-10)
        assert elem.epoch_days_1950 == pytest.approx(11232.98708465, abs=1e-8)

    def test_report_deep_space(self) -> None:
        elem = parse_tle(REPORT_DEEP_LINE1, REPORT_DEEP_LINE2, validate=False)
        assert elem.satnum == 11801
        assert elem.jdsatepoch == pytest.approx(2444468.79629788, abs=1e-8)
        assert elem.bstar == pytest.approx(0.014311, rel=1e-10)
        assert elem.nddot == 0.0
        assert elem.ecco == pytest.approx(0.7318036, rel=1e-12)

    def test_report_lines_fail_validation(self) -> None:
        with pytest.raises(ValueError):
            parse_tle(REPORT_NEAR_LINE1, REPORT_NEAR_LINE2)

    def test_mismatched_satnum_raises(self) -> None:
        base = "2 99999  51.6416 247.4627 0006703 130.5360 325.0288 15.7212539156353"
        line2 = base + str(compute_checksum(base + "0"))
        with pytest.raises(ValueError, match="do not match"):
            parse_tle(ISS_LINE1, line2)

    def test_twentieth_century_year(self) -> None:
        line1 = ISS_LINE1[:18] + "99" + ISS_LINE1[20:]
        line1 = line1[:68] + str(compute_checksum(line1))
        elem = parse_tle(line1, ISS_LINE2)
        assert elem.epochyr == 99
        # 1999 day 264.5 is well before 2000 January 1.5
        assert elem.jdsatepoch < 2451545.0
