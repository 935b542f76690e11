"""Tests for specgen.parser.loader."""

from __future__ import annotations

import io
import json
import textwrap
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from specgen.exceptions import SpecParseError
from specgen.parser.loader import (
    _fetch_url,
    _read_file,
    _read_stdin,
    parse_content,
    read_source,
    validate_openapi_version,
)

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


# ---------------------------------------------------------------------------
# read_source dispatch
# ---------------------------------------------------------------------------


class TestReadSource:
    """Test read_source routes to the correct reader and reports a format hint."""

    def test_reads_yaml_file(self) -> None:
        content, hint = read_source(str(FIXTURES_DIR / "petstore.yaml"))
        assert hint == "yaml"
        assert "openapi" in content

    def test_reads_json_file(self) -> None:
        content, hint = read_source(str(FIXTURES_DIR / "unions.json"))
        assert hint == "json"
        assert json.loads(content)["openapi"] == "3.1.0"

    def test_reads_stdin(self) -> None:
        spec_json = json.dumps({"openapi": "3.0.3", "info": {"title": "stdin", "version": "1"}})
        with patch("specgen.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO(spec_json)
            content, hint = read_source("-")
        assert hint == ""
        assert json.loads(content)["info"]["title"] == "stdin"

    def test_reads_url(self) -> None:
        spec = {"openapi": "3.0.3", "info": {"title": "URL test", "version": "1.0"}}
        mock_response = httpx.Response(
            status_code=200,
            json=spec,
            request=httpx.Request("GET", "https://example.com/spec.json"),
        )
        with patch("specgen.parser.loader.httpx.get", return_value=mock_response):
            content, hint = read_source("https://example.com/spec.json")
        assert hint == "json"
        assert json.loads(content)["info"]["title"] == "URL test"


# ---------------------------------------------------------------------------
# _read_file
# ---------------------------------------------------------------------------


class TestReadFile:
    """Test reading documents from local files."""

    def test_yml_extension_hints_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "spec.yml"
        path.write_text('openapi: "3.1.0"\n', encoding="utf-8")
        _, hint = _read_file(str(path))
        assert hint == "yaml"

    def test_unknown_extension_has_no_hint(self, tmp_path: Path) -> None:
        path = tmp_path / "spec.txt"
        path.write_text('{"openapi": "3.0.0"}', encoding="utf-8")
        _, hint = _read_file(str(path))
        assert hint == ""

    def test_file_not_found_raises(self) -> None:
        with pytest.raises(SpecParseError, match="not found"):
            _read_file("/nonexistent/path/to/spec.json")

    def test_empty_file_raises(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty.json"
        empty.write_text("", encoding="utf-8")
        with pytest.raises(SpecParseError, match="empty"):
            _read_file(str(empty))


# ---------------------------------------------------------------------------
# _read_stdin
# ---------------------------------------------------------------------------


class TestReadStdin:
    def test_empty_stdin_raises(self) -> None:
        with patch("specgen.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO("")
            with pytest.raises(SpecParseError, match="No input"):
                _read_stdin()

    def test_whitespace_only_stdin_raises(self) -> None:
        with patch("specgen.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO("   \n\t\n  ")
            with pytest.raises(SpecParseError, match="No input"):
                _read_stdin()


# ---------------------------------------------------------------------------
# _fetch_url
# ---------------------------------------------------------------------------


class TestFetchUrl:
    """Test fetching documents over HTTP."""

    def test_yaml_content_type_hints_yaml(self) -> None:
        mock_response = httpx.Response(
            status_code=200,
            text='openapi: "3.0.3"\n',
            headers={"content-type": "application/yaml"},
            request=httpx.Request("GET", "https://example.com/spec.yaml"),
        )
        with patch("specgen.parser.loader.httpx.get", return_value=mock_response):
            _, hint = _fetch_url("https://example.com/spec.yaml")
        assert hint == "yaml"

    def test_http_error_raises(self) -> None:
        mock_response = httpx.Response(
            status_code=404,
            request=httpx.Request("GET", "https://example.com/missing.json"),
        )
        with patch("specgen.parser.loader.httpx.get", return_value=mock_response):
            with pytest.raises(SpecParseError, match="HTTP 404"):
                _fetch_url("https://example.com/missing.json")

    def test_network_error_raises(self) -> None:
        request = httpx.Request("GET", "https://example.com/spec.json")
        with patch(
            "specgen.parser.loader.httpx.get",
            side_effect=httpx.ConnectError("refused", request=request),
        ):
            with pytest.raises(SpecParseError, match="Failed to fetch"):
                _fetch_url("https://example.com/spec.json")


# ---------------------------------------------------------------------------
# parse_content
# ---------------------------------------------------------------------------


class TestParseContent:
    """Test JSON/YAML parsing with format hints."""

    def test_parses_json(self) -> None:
        assert parse_content('{"openapi": "3.0.0"}') == {"openapi": "3.0.0"}

    def test_parses_yaml(self) -> None:
        content = textwrap.dedent("""\
            openapi: "3.0.0"
            info:
              title: YAML
        """)
        assert parse_content(content)["info"]["title"] == "YAML"

    def test_parses_bytes(self) -> None:
        assert parse_content(b'{"openapi": "3.1.0"}')["openapi"] == "3.1.0"

    def test_json_hint_rejects_invalid_json(self) -> None:
        with pytest.raises(SpecParseError, match="Invalid JSON"):
            parse_content("{invalid json", hint="json")

    def test_non_object_raises(self) -> None:
        with pytest.raises(SpecParseError, match="must be a JSON/YAML object"):
            parse_content("[1, 2, 3]")

    def test_empty_yaml_document_raises(self) -> None:
        with pytest.raises(SpecParseError, match="empty document"):
            parse_content("# only a comment\n", hint="yaml")

    def test_unparsable_content_raises(self) -> None:
        with pytest.raises(SpecParseError, match="Failed to parse"):
            parse_content("key: [unclosed")


# ---------------------------------------------------------------------------
# validate_openapi_version
# ---------------------------------------------------------------------------


class TestValidateOpenapiVersion:
    @pytest.mark.parametrize("version", ["3.0.0", "3.0.3", "3.1.0", "3.1.1"])
    def test_accepts_3x(self, version: str) -> None:
        assert validate_openapi_version({"openapi": version}) == version

    def test_rejects_swagger(self) -> None:
        with pytest.raises(SpecParseError, match="Swagger 2.0 is not supported"):
            validate_openapi_version({"swagger": "2.0"})

    def test_rejects_missing_version(self) -> None:
        with pytest.raises(SpecParseError, match="Missing 'openapi' field"):
            validate_openapi_version({"info": {}})

    def test_rejects_other_major(self) -> None:
        with pytest.raises(SpecParseError, match="Unsupported OpenAPI version"):
            validate_openapi_version({"openapi": "4.0.0"})
