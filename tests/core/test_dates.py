import pytest

from qzh_preview.core.dates import build_date_tooltip, format_date, format_iso_duration


class TestFormatDate:
    """Test cases for format_date."""

    def test_full_date(self):
        assert format_date("1423-03-15") == "15. März 1423"
        assert format_date("1500-01-01") == "1. Januar 1500"
        assert format_date("1612-12-31") == "31. Dezember 1612"

    def test_year_and_month(self):
        assert format_date("1423-05") == "Mai 1423"

    def test_year_only_unchanged(self):
        assert format_date("1423") == "1423"

    def test_invalid_month_unchanged(self):
        """Out-of-range months are passed through rather than guessed."""
        assert format_date("1423-13-01") == "1423-13-01"
        assert format_date("1423-00") == "1423-00"

    def test_non_numeric_day_unchanged(self):
        assert format_date("1423-03-xx") == "1423-03-xx"

    def test_empty(self):
        assert format_date("") == ""
        assert format_date(None) == ""


class TestBuildDateTooltip:
    """Test cases for build_date_tooltip."""

    def test_when(self):
        assert build_date_tooltip({"when": "1423-03-15"}) == "15. März 1423"

    def test_range(self):
        assert build_date_tooltip({"from": "1423-03", "to": "1424"}) == "März 1423 - 1424"

    def test_open_ranges(self):
        assert build_date_tooltip({"from": "1423"}) == "ab 1423"
        assert build_date_tooltip({"to": "1423"}) == "bis 1423"

    def test_not_before_not_after(self):
        assert build_date_tooltip({"notBefore": "1420", "notAfter": "1430"}) == "zwischen 1420 und 1430"
        assert build_date_tooltip({"notBefore": "1420"}) == "nicht vor 1420"
        assert build_date_tooltip({"notAfter": "1430"}) == "nicht nach 1430"

    def test_when_takes_precedence(self):
        assert build_date_tooltip({"when": "1423", "from": "1400", "notAfter": "1500"}) == "1423"

    def test_qualifiers_are_appended(self):
        tooltip = build_date_tooltip({
            "when": "1423-03-15",
            "calendar": "julian",
            "type": "Ausstellung",
            "period": "Spätmittelalter",
        })
        assert tooltip == "15. März 1423 | Kalender: julian | Typ: Ausstellung | Periode: Spätmittelalter"

    def test_duration_prefers_dur_iso(self):
        assert build_date_tooltip({"dur-iso": "P2D", "dur": "P1D"}) == "Dauer: 2 Tage"
        assert build_date_tooltip({"dur": "P1D"}) == "Dauer: 1 Tag"

    def test_no_attributes(self):
        assert build_date_tooltip({}) == ""


class TestFormatIsoDuration:
    """Test cases for format_iso_duration."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("P1Y", "1 Jahr"),
            ("P2Y3M", "2 Jahre 3 Monate"),
            ("P1W", "1 Woche"),
            ("P14D", "14 Tage"),
            ("PT1H30M", "1 Stunde 30 Minuten"),
            ("PT1S", "1 Sekunde"),
            ("p1d", "1 Tag"),
        ],
    )
    def test_components(self, value, expected):
        assert format_iso_duration(value) == expected

    def test_repeat_with_count(self):
        assert format_iso_duration("R3/P1W") == "3× wiederholt (1 Woche)"

    def test_repeat_without_count(self):
        assert format_iso_duration("R/P1D") == "wiederholt (1 Tag)"

    def test_unparseable_unchanged(self):
        assert format_iso_duration("drei Tage") == "drei Tage"
        assert format_iso_duration("P0D") == "P0D"

    def test_empty(self):
        assert format_iso_duration("") == ""


def test_non_dates_pass_through():
    assert format_date("not-a-date") == "not-a-date"
    assert format_iso_duration("P1Y2M") == "1 Jahr 2 Monate"
    repeated = format_iso_duration("R3/P1D")
    assert "3× wiederholt" in repeated and "1 Tag" in repeated


class TestNonAsciiDigits:
    """Superscript and other non-decimal digits are not parsed as numbers."""

    def test_superscript_day_unchanged(self):
        assert format_date("1423-03-²") == "1423-03-²"

    def test_superscript_month_unchanged(self):
        assert format_date("1423-¹") == "1423-¹"
        assert build_date_tooltip({"when": "1423-¹"}) == "1423-¹"
