"""
Tests for the label:id service list parser.
"""

import pytest

from deployer.errors import ConfigurationError
from deployer.services import parse_services


class TestParseServices:
    """Parsing of the multiline services input."""

    def test_single_service(self):
        entries = parse_services("api:svc-abc123")

        assert len(entries) == 1
        assert entries[0].label == "api"
        assert entries[0].id == "svc-abc123"

    def test_one_entry_per_non_empty_line(self):
        entries = parse_services("web:svc-web\n\nworker:svc-worker\n   \nclock:svc-clock\n")

        assert [e.label for e in entries] == ["web", "worker", "clock"]
        assert [e.id for e in entries] == ["svc-web", "svc-worker", "svc-clock"]

    def test_splits_on_first_colon_only(self):
        entries = parse_services("db:urn:railway:svc:42")

        assert entries[0].label == "db"
        assert entries[0].id == "urn:railway:svc:42"

    @pytest.mark.parametrize(
        "label,service_id",
        [
            ("api-v2", "550e8400-e29b-41d4-a716-446655440000"),
            ("wörker", "svc_ü🔐"),
            ("web.frontend", "svc$abc'\"def"),
            ("job[1]", "a\\b"),
        ],
    )
    def test_preserves_special_characters(self, label, service_id):
        entries = parse_services(f"{label}:{service_id}")

        assert entries[0].label == label
        assert entries[0].id == service_id

    def test_handles_windows_line_endings(self):
        entries = parse_services("web:svc-web\r\nworker:svc-worker\r\n")

        assert [e.id for e in entries] == ["svc-web", "svc-worker"]

    def test_keeps_label_and_id_exactly_as_written(self):
        entries = parse_services(" web : svc-web \n")

        assert entries[0].label == " web "
        assert entries[0].id == " svc-web "

    def test_line_without_colon_is_an_error(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_services("web:svc-web\nworker")

        assert "line 2" in exc_info.value.message
        assert "worker" in exc_info.value.details
        assert exc_info.value.hint

    @pytest.mark.parametrize("line", [":svc-abc", "api:", "  :  "])
    def test_empty_label_or_id_is_an_error(self, line):
        with pytest.raises(ConfigurationError):
            parse_services(line)

    def test_duplicate_label_is_an_error(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_services("web:svc-1\nweb:svc-2")

        assert "Duplicate service label 'web'" in exc_info.value.message

    @pytest.mark.parametrize("text", ["", "\n\n", "   \n\t\n"])
    def test_empty_input_is_an_error(self, text):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_services(text)

        assert "No services" in exc_info.value.message
