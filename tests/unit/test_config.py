"""Unit tests for configuration."""

from pathlib import Path

import pytest

from solr_query.config import MAX_DEPTH_LIMIT, Config, ParserConfig, load_config, save_config
from solr_query.exceptions import ConfigParseError, ConfigValidationError


def test_default_config() -> None:
    """Test that default config has sensible values."""
    config = Config()
    assert config.colored_output is True
    assert config.optimize is True
    assert config.include_default_field is False
    assert config.parser == ParserConfig()
    assert config.parser.strict is False
    assert config.parser.default_field == "text"


def test_parser_config_is_frozen() -> None:
    """ParserConfig cannot be mutated after construction."""
    config = ParserConfig()
    with pytest.raises(AttributeError):
        config.strict = True  # type: ignore[misc]


def test_parser_config_coerces_allowed_fields() -> None:
    config = ParserConfig(allowed_fields=["title", "body", "title"])  # type: ignore[arg-type]
    assert config.allowed_fields == frozenset({"title", "body"})


@pytest.mark.parametrize(
    ("data", "key"),
    [
        ({"bogus": 1}, "bogus"),
        ({"strict": "yes"}, "strict"),
        ({"allowed_fields": "title"}, "allowed_fields"),
        ({"allowed_fields": ["title", 3]}, "allowed_fields"),
        ({"default_field": ""}, "default_field"),
        ({"max_depth": 0}, "max_depth"),
        ({"max_depth": True}, "max_depth"),
        ({"max_depth": MAX_DEPTH_LIMIT + 1}, "max_depth"),
    ],
)
def test_parser_config_from_dict_rejects(data: dict, key: str) -> None:
    """Unknown keys and wrong types are rejected at construction."""
    with pytest.raises(ConfigValidationError) as exc_info:
        ParserConfig.from_dict(data, prefix="parser.")
    assert exc_info.value.key == f"parser.{key}"


def test_is_allowed() -> None:
    permissive = ParserConfig(allowed_fields=frozenset({"title"}))
    strict = ParserConfig(strict=True, allowed_fields=frozenset({"title"}))
    assert permissive.is_allowed("subject") is True
    assert strict.is_allowed("title") is True
    assert strict.is_allowed("subject") is False


def test_load_missing_config(temp_dir: Path) -> None:
    """Test loading when config file doesn't exist."""
    config_path = temp_dir / "nonexistent.toml"
    config, warnings = load_config(config_path)

    assert config == Config()
    assert len(warnings) > 0  # Should warn about missing file


def test_load_valid_config(sample_config: Path) -> None:
    """Test loading a valid config file."""
    config, warnings = load_config(sample_config)

    assert config.parser.strict is True
    assert config.parser.allowed_fields == frozenset({"title", "text", "genre"})
    assert config.parser.max_depth == 8
    assert config.colored_output is False
    assert config.config_path == sample_config.resolve()
    assert warnings == []


def test_load_invalid_toml(temp_dir: Path) -> None:
    """Test loading invalid TOML raises error."""
    config_path = temp_dir / "invalid.toml"
    config_path.write_text("this is not valid [ toml")

    with pytest.raises(ConfigParseError):
        load_config(config_path)


def test_config_validation_invalid_type(temp_dir: Path) -> None:
    """Test that invalid types raise validation error."""
    config_path = temp_dir / "bad_types.toml"
    config_path.write_text("""[output]
optimize = "not a boolean"
""")

    with pytest.raises(ConfigValidationError):
        load_config(config_path)


def test_config_unknown_parser_key(temp_dir: Path) -> None:
    config_path = temp_dir / "unknown.toml"
    config_path.write_text("""[parser]
fields = ["title"]
""")

    with pytest.raises(ConfigValidationError) as exc_info:
        load_config(config_path)
    assert exc_info.value.key == "parser.fields"


@pytest.mark.parametrize(
    ("content", "key"),
    [
        ('display = "x"\n', "display"),
        ("output = 1\n", "output"),
        ("[display]\ncolour = true\n", "display.colour"),
        ("[output]\npretty = true\n", "output.pretty"),
        ('[display]\ncolored_output = "no"\n', "display.colored_output"),
    ],
)
def test_config_rejects_bad_sections(temp_dir: Path, content: str, key: str) -> None:
    config_path = temp_dir / "sections.toml"
    config_path.write_text(content)

    with pytest.raises(ConfigValidationError) as exc_info:
        load_config(config_path)
    assert exc_info.value.key == key


def test_strict_without_fields_warns(temp_dir: Path) -> None:
    config_path = temp_dir / "strict.toml"
    config_path.write_text("""[parser]
strict = true
""")

    _, warnings = load_config(config_path)
    assert any("allowed_fields is empty" in w for w in warnings)


def test_save_and_reload(temp_dir: Path) -> None:
    """Saved config loads back with the same values."""
    config = Config(
        parser=ParserConfig(strict=True, allowed_fields=frozenset({"title", "text"}), max_depth=4),
        colored_output=False,
        include_default_field=True,
        optimize=False,
    )
    path = save_config(config, temp_dir / "nested" / "config.toml")

    loaded, _ = load_config(path)
    assert loaded.parser == config.parser
    assert loaded.colored_output is False
    assert loaded.include_default_field is True
    assert loaded.optimize is False
