"""
Unit tests for the Brazilian time zone catalog.
"""

from utils.timezones import (
    BRAZILIAN_TIMEZONES,
    find_timezone,
    get_timezone_label,
    get_timezone_offset,
    is_known_timezone,
    is_supported_timezone,
)


class TestTimezoneCatalog:
    """Test catalog lookups."""

    def test_catalog_values_are_unique(self):
        values = [tz.value for tz in BRAZILIAN_TIMEZONES]
        assert len(values) == len(set(values))

    def test_labels_and_offsets(self):
        assert get_timezone_label("America/Manaus") == find_timezone("America/Manaus").label
        assert get_timezone_offset("America/Rio_Branco") == "UTC-5"
        assert get_timezone_offset("America/Noronha") == "UTC-2"

    def test_unknown_zone_falls_back_to_brasilia(self):
        assert get_timezone_label("Europe/Lisbon") == "Brasília (UTC-3)"
        assert get_timezone_offset("Europe/Lisbon") == "UTC-3"

    def test_supported_zones(self):
        for tz in BRAZILIAN_TIMEZONES:
            assert is_supported_timezone(tz.value)

    def test_zones_outside_catalog_are_not_supported(self):
        assert not is_supported_timezone("Europe/Lisbon")
        assert not is_supported_timezone("Not/AZone")
        assert not is_supported_timezone("")

    def test_known_zones_need_not_be_in_catalog(self):
        assert is_known_timezone("Europe/Lisbon")
        assert not is_known_timezone("UTC-3")
        assert not is_known_timezone("Not/AZone")
