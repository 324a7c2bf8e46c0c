"""
Tests for pattern configuration models.

Tests cover:
- PatternConfig validation and defaults
- The "name=value;..." parameter string form
- PatternDocument variants and overrides
"""

import pytest
from pydantic import ValidationError

from chuk_mcp_juggling.constants import DEFAULT_DWELL, ErrorMessages, PatternCategory
from chuk_mcp_juggling.errors import JuggleUserError
from chuk_mcp_juggling.models import PatternConfig, PatternDocument, PatternMetadata


class TestPatternConfig:
    """Tests for PatternConfig."""

    def test_defaults(self) -> None:
        """Only the pattern is required."""
        config = PatternConfig(pattern="3")
        assert config.dwell == DEFAULT_DWELL
        assert config.dwellmax is True
        assert config.hold is False
        assert config.hss is None

    def test_pattern_stripped(self) -> None:
        """Pattern text is trimmed."""
        assert PatternConfig(pattern="  531 ").pattern == "531"

    def test_blank_pattern_rejected(self) -> None:
        """A blank pattern is an error."""
        with pytest.raises(ValidationError, match=ErrorMessages.NO_PATTERN):
            PatternConfig(pattern="   ")

    @pytest.mark.parametrize("dwell", [0, 2, -1, 2.5])
    def test_dwell_range(self, dwell: float) -> None:
        """Dwell must lie strictly between 0 and 2."""
        with pytest.raises(ValidationError, match="Dwell must be strictly between 0 and 2"):
            PatternConfig(pattern="3", dwell=dwell)

    def test_blank_strings_are_none(self) -> None:
        """Empty optional strings mean 'not given'."""
        config = PatternConfig(pattern="3", hss="", body="  ")
        assert config.hss is None
        assert config.body is None

    def test_frozen(self) -> None:
        """Configs are immutable."""
        config = PatternConfig(pattern="3")
        with pytest.raises(ValidationError):
            config.pattern = "4"  # type: ignore[misc]

    def test_extra_forbidden(self) -> None:
        """Unknown fields are rejected."""
        with pytest.raises(ValidationError):
            PatternConfig(pattern="3", colour="red")  # type: ignore[call-arg]


class TestFromValues:
    """Tests for PatternConfig.from_values error reporting."""

    def test_unknown_parameter(self) -> None:
        """Unknown names are listed."""
        with pytest.raises(JuggleUserError, match="Unknown parameter"):
            PatternConfig.from_values({"pattern": "3", "colour": "red", "bpm": 120})

    def test_missing_pattern(self) -> None:
        """The pattern is required."""
        with pytest.raises(JuggleUserError) as exc_info:
            PatternConfig.from_values({"dwell": 1.0})
        assert exc_info.value.message == ErrorMessages.NO_PATTERN

    def test_dwell_message(self) -> None:
        """Validator messages reach the user unchanged."""
        with pytest.raises(JuggleUserError) as exc_info:
            PatternConfig.from_values({"pattern": "3", "dwell": 3})
        assert exc_info.value.message == ErrorMessages.DWELL_RANGE.format(dwell=3.0)

    def test_bad_type(self) -> None:
        """Type errors name the parameter."""
        with pytest.raises(JuggleUserError, match="Bad value for parameter 'dwell'"):
            PatternConfig.from_values({"pattern": "3", "dwell": "slow"})


class TestParameterString:
    """Tests for the parameter string form."""

    def test_bare_pattern(self) -> None:
        """A string without '=' is the pattern."""
        assert PatternConfig.from_parameter_string("531").pattern == "531"

    def test_named_values(self) -> None:
        """Values are converted to their field types."""
        config = PatternConfig.from_parameter_string("pattern=3;hss=2;hold=true;dwell=1.0")
        assert config.pattern == "3"
        assert config.hss == "2"
        assert config.hold is True
        assert config.dwell == 1.0

    def test_names_case_insensitive(self) -> None:
        """Parameter names ignore case."""
        config = PatternConfig.from_parameter_string("Pattern=3;DWELL=0.5")
        assert config.dwell == 0.5

    def test_later_value_wins(self) -> None:
        """Repeated names keep the last value."""
        config = PatternConfig.from_parameter_string("pattern=3;pattern=531")
        assert config.pattern == "531"

    def test_empty_items_skipped(self) -> None:
        """Stray separators are ignored."""
        assert PatternConfig.from_parameter_string("pattern=3;;").pattern == "3"

    def test_item_without_value(self) -> None:
        """Every item needs '='."""
        with pytest.raises(JuggleUserError, match="Bad value for parameter 'junk'"):
            PatternConfig.from_parameter_string("pattern=3;junk")

    def test_unknown_name(self) -> None:
        """Unknown names are errors."""
        with pytest.raises(JuggleUserError, match="bogus"):
            PatternConfig.from_parameter_string("pattern=3;bogus=1")

    def test_no_pattern(self) -> None:
        """Named values without a pattern are rejected."""
        with pytest.raises(JuggleUserError):
            PatternConfig.from_parameter_string("dwell=1.0")

    def test_to_parameter_string(self) -> None:
        """Defaults are omitted and booleans lowercased."""
        assert PatternConfig(pattern="3").to_parameter_string() == "pattern=3"
        assert PatternConfig(pattern="3", dwell=1.0).to_parameter_string() == "pattern=3;dwell=1.0"
        config = PatternConfig(pattern="3", hss="2", hold=True)
        assert config.to_parameter_string() == "pattern=3;hss=2;hold=true"

    def test_parameter_string_round_trip(self) -> None:
        """Rendering and parsing give back the same config."""
        config = PatternConfig(pattern="<3p|3p>", body="<(90,-100).|(270,100).>", dwellmax=False)
        assert PatternConfig.from_parameter_string(config.to_parameter_string()) == config


class TestPatternDocument:
    """Tests for PatternDocument."""

    @pytest.fixture
    def document(self) -> PatternDocument:
        """A document with one variant."""
        return PatternDocument(
            name="cascade",
            category=PatternCategory.SOLO,
            description="Three ball cascade",
            config=PatternConfig(pattern="3", title="Cascade"),
            variants={
                "slow": {"name": "slow", "config": {"dwell": 1.6}},
            },
        )

    def test_resolve_default(self, document: PatternDocument) -> None:
        """Without a variant the document config is used."""
        config = document.resolve_config()
        assert config.pattern == "3"
        assert config.title == "Cascade"

    def test_resolve_variant(self, document: PatternDocument) -> None:
        """Variant values override the document config."""
        assert document.resolve_config("slow").dwell == 1.6

    def test_overrides_win(self, document: PatternDocument) -> None:
        """Explicit overrides beat the variant."""
        config = document.resolve_config("slow", {"dwell": 1.0})
        assert config.dwell == 1.0

    def test_unknown_variant(self, document: PatternDocument) -> None:
        """Unknown variants are user errors."""
        with pytest.raises(JuggleUserError, match="Unknown variant 'fast'"):
            document.resolve_config("fast")

    def test_bad_override(self, document: PatternDocument) -> None:
        """Overrides are validated."""
        with pytest.raises(JuggleUserError):
            document.resolve_config(overrides={"dwell": 5})

    def test_schema_alias(self) -> None:
        """The schema version is read from 'schema'."""
        doc = PatternDocument.model_validate(
            {
                "schema": "pattern/v1",
                "name": "fountain",
                "category": "solo",
                "config": {"pattern": "4"},
            }
        )
        assert doc.schema_version == "pattern/v1"
        assert doc.category == PatternCategory.SOLO

    def test_metadata(self, document: PatternDocument) -> None:
        """Metadata summarizes a document."""
        meta = PatternMetadata.from_document(document, path="/tmp/cascade.yaml")
        assert meta.pattern == "3"
        assert meta.variants == ["slow"]
        assert meta.path == "/tmp/cascade.yaml"
