"""Shared pytest fixtures."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Generator

    from solr_query.search.parser import Parser


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    path = Path(tempfile.mkdtemp())
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def sample_config(temp_dir: Path) -> Path:
    """Create a sample config file with strict mode enabled."""
    config_path = temp_dir / "config.toml"
    config_path.write_text("""[parser]
strict = true
allowed_fields = ["title", "text", "genre"]
default_field = "text"
max_depth = 8

[display]
colored_output = false

[output]
include_default_field = false
optimize = true
""")
    return config_path


@pytest.fixture
def parser() -> Parser:
    """A permissive parser with default configuration."""
    from solr_query.search.parser import Parser

    return Parser()


@pytest.fixture
def strict_parser() -> Parser:
    """A strict parser that only knows ``title`` and ``text``."""
    from solr_query.search.parser import Parser

    return Parser({"strict": True, "allowed_fields": ["title", "text"]})
