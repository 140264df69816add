"""
Tests for the service catalog and duration resolution.
"""

import logging

import pytest

from eventslots.domain.catalog import DEFAULT_CATALOG, ServiceCatalog, resolve_duration
from eventslots.domain.exceptions import InvalidInput, UnknownService
from eventslots.domain.models import ServiceKind


class TestResolveDuration:
    """Tests for engagement duration resolution."""

    def test_single_service(self):
        """Test that a single service uses its default hours."""
        assert resolve_duration(["DJ"]) == 300
        assert resolve_duration(["Karaoke"]) == 180

    def test_multiple_services_use_maximum(self):
        """Test that concurrent services take the longest default, not the sum."""
        dj = DEFAULT_CATALOG.lookup("DJ")
        photography = DEFAULT_CATALOG.lookup("Photography")

        duration = resolve_duration(["DJ", "Photography"])

        assert duration == max(dj.default_hours, photography.default_hours) * 60
        assert duration != (dj.default_hours + photography.default_hours) * 60

    def test_empty_services_raise(self):
        """Test that an empty request is rejected."""
        with pytest.raises(InvalidInput, match="No services"):
            resolve_duration([])

    def test_empty_services_raise_even_with_override(self):
        """Test that an override does not excuse an empty request."""
        with pytest.raises(InvalidInput):
            resolve_duration([], override_minutes=120)

    def test_override_returned_unchanged(self):
        """Test that an explicit duration bypasses the catalog and its bounds."""
        assert resolve_duration(["DJ"], override_minutes=1000) == 1000
        assert resolve_duration(["DJ"], override_minutes=0) == 0

    def test_unknown_services_are_ignored_with_warning(self, caplog):
        """Test lenient handling of unknown identifiers."""
        with caplog.at_level(logging.WARNING, logger="eventslots.domain.catalog"):
            duration = resolve_duration(["DJ", "Juggling"])

        assert duration == 300
        assert "Juggling" in caplog.text

    def test_only_unknown_services_resolve_to_zero(self):
        """Test that nothing known contributes nothing."""
        assert resolve_duration(["Juggling"]) == 0

    def test_strict_catalog_rejects_unknown_services(self):
        """Test the explicit unknown-service error path."""
        catalog = ServiceCatalog(DEFAULT_CATALOG, strict=True)

        with pytest.raises(UnknownService) as exc_info:
            catalog.resolve_duration(["DJ", "Juggling"])

        assert exc_info.value.services == ("Juggling",)
        assert isinstance(exc_info.value, InvalidInput)


class TestServiceCatalog:
    """Tests for catalog construction and lookup."""

    def test_substitute_catalog(self):
        """Test that an alternate catalog can be passed in."""
        catalog = ServiceCatalog([ServiceKind(name="Band", default_hours=2.5, min_hours=2, max_hours=3)])

        assert resolve_duration(["Band"], catalog=catalog) == 150
        assert resolve_duration(["DJ"], catalog=catalog) == 0

    def test_duplicate_services_rejected(self):
        """Test that a catalog cannot define a service twice."""
        dj = ServiceKind(name="DJ", default_hours=5, min_hours=4, max_hours=6)

        with pytest.raises(InvalidInput, match="Duplicate"):
            ServiceCatalog([dj, dj])

    def test_lookup(self):
        """Test lookup and membership."""
        assert "DJ" in DEFAULT_CATALOG
        assert "dj" not in DEFAULT_CATALOG
        assert DEFAULT_CATALOG.get("Juggling") is None
        assert len(DEFAULT_CATALOG) == 3

        with pytest.raises(UnknownService):
            DEFAULT_CATALOG.lookup("Juggling")

    def test_out_of_bounds(self):
        """Test detection of durations outside a service's min/max hours."""
        flagged = DEFAULT_CATALOG.out_of_bounds(["DJ", "Photography", "Juggling"], 420)

        assert [service.name for service in flagged] == ["DJ"]
        assert DEFAULT_CATALOG.out_of_bounds(["DJ"], 300) == []
