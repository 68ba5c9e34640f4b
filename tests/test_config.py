"""
Tests for run configuration.
"""
import pytest

from mdfront.common.config import DEFAULT_SCHEMA_TIMEOUT, Mode, RunConfig
from mdfront.common.errors import ConfigError, InvalidSchemaUrlError


class TestRunConfig:
    """Test reading the preprocessor table."""

    def test_mode_default(self):
        """Validate is the default mode."""
        config = RunConfig(schema="https://example.com/schema.json")
        assert config.mode is Mode.VALIDATE

    def test_from_table_valid_https(self):
        config = RunConfig.from_table({"schema": "https://example.com/schema.json"})

        assert config.schema == "https://example.com/schema.json"
        assert config.mode is Mode.VALIDATE
        assert config.fail_on_error is True
        assert config.renderers is None
        assert config.schema_timeout == DEFAULT_SCHEMA_TIMEOUT

    def test_from_table_valid_file_fix_mode(self):
        config = RunConfig.from_table({
            "schema": "file:///path/to/schema.json",
            "mode": "fix",
            "fail_on_error": False,
            "renderers": ["html", "epub"],
            "schema_timeout": 2,
        })

        assert config.schema == "file:///path/to/schema.json"
        assert config.mode is Mode.FIX
        assert config.fail_on_error is False
        assert config.renderers == ("html", "epub")
        assert config.schema_timeout == 2.0

    def test_host_keys_are_ignored(self):
        """The host stores its own keys in the same table."""
        config = RunConfig.from_table({
            "command": "mdbook-frontmatter",
            "before": ["links"],
            "schema": "http://example.com/schema.json",
        })
        assert config.schema == "http://example.com/schema.json"

    def test_invalid_schema_scheme(self):
        """A bare path is rejected before any I/O."""
        with pytest.raises(InvalidSchemaUrlError) as exc_info:
            RunConfig.from_table({"schema": "/path/to/schema.json"})

        assert isinstance(exc_info.value, ConfigError)
        assert "/path/to/schema.json" in str(exc_info.value)

    @pytest.mark.parametrize("table", [
        {},
        {"schema": 42},
        {"schema": "https://example.com/s.json", "mode": "repair"},
        {"schema": "https://example.com/s.json", "fail_on_error": "yes"},
        {"schema": "https://example.com/s.json", "renderers": "html"},
        {"schema": "https://example.com/s.json", "schema_timeout": 0},
    ])
    def test_malformed_tables(self, table):
        with pytest.raises(ConfigError):
            RunConfig.from_table(table)

    def test_applies_to(self):
        """Renderer allow-list."""
        unrestricted = RunConfig(schema="file:///s.json")
        restricted = RunConfig(schema="file:///s.json", renderers=("html",))

        assert unrestricted.applies_to("epub")
        assert restricted.applies_to("html")
        assert not restricted.applies_to("epub")
