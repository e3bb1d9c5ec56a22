"""Tests for the YAML adapter."""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from settings_samples import AppSettings, FrozenSettings, PartialConfig

from confloader.adapters.yaml_file import decode_yaml, parse_yaml
from confloader.core.contracts import setting
from confloader.core.exceptions import DecodeError, ParseError, ReadError, RegisterError

FULL_DOCUMENT = """\
app_name: TestApp
port: 8080
debug: true
database:
  host: localhost
  port: 5432
  username: testuser
  password: testpass
redis:
  host: cache
  port: 6379
"""


@dataclass
class Keyed:
    display_name: str = setting("", yaml="display-name")
    internal: str = setting("unchanged", yaml="-")
    Level: int = 0


@dataclass
class Release:
    name: str = ""
    version: str = ""
    build: int = 0


@pytest.fixture()
def write_yaml(tmp_path):
    def _write(content: str, name: str = "config.yaml"):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


class TestParseYaml:
    @pytest.mark.offline()
    def test_full_document(self, write_yaml):
        app = AppSettings()
        parse_yaml(app, write_yaml(FULL_DOCUMENT))

        assert app.app_name == "TestApp"
        assert app.port == 8080
        assert app.debug is True
        assert app.database.host == "localhost"
        assert app.database.port == 5432
        assert app.database.password == "testpass"
        assert app.redis.port == 6379
        assert app.redis.password == ""

    @pytest.mark.offline()
    def test_partial_document_keeps_defaults(self, write_yaml):
        cfg = PartialConfig()
        parse_yaml(cfg, write_yaml("name: PartialApp\n"))

        assert cfg.name == "PartialApp"
        assert cfg.port == 0

    @pytest.mark.offline()
    def test_empty_file_is_not_an_error(self, write_yaml):
        app = AppSettings()
        parse_yaml(app, write_yaml(""))
        assert app == AppSettings()

    @pytest.mark.offline()
    def test_null_values_keep_defaults(self, write_yaml):
        cfg = PartialConfig(port=9)
        parse_yaml(cfg, write_yaml("name: x\nport:\n"))
        assert cfg.port == 9

    @pytest.mark.offline()
    def test_missing_file_raises_read_error(self, tmp_path):
        with pytest.raises(ReadError, match="failed to read YAML file") as excinfo:
            parse_yaml(PartialConfig(), tmp_path / "nonexistent" / "config.yaml")

        assert isinstance(excinfo.value, RegisterError)
        assert isinstance(excinfo.value.__cause__, OSError)

    @pytest.mark.offline()
    def test_malformed_yaml_raises_decode_error(self, write_yaml):
        path = write_yaml("name: TestApp\nport: [invalid\n  structure\n", "invalid.yaml")

        with pytest.raises(DecodeError, match="failed to unmarshal YAML data"):
            parse_yaml(PartialConfig(), path)

    @pytest.mark.offline()
    def test_top_level_must_be_a_mapping(self, write_yaml):
        with pytest.raises(DecodeError, match="expected a mapping"):
            parse_yaml(PartialConfig(), write_yaml("- a\n- b\n"))

    @pytest.mark.offline()
    def test_numeric_scalars_decode_into_string_fields(self, write_yaml):
        release = Release()
        parse_yaml(release, write_yaml("name: 12345\nversion: 1.5\nbuild: 7\n"))

        assert release.name == "12345"
        assert release.version == "1.5"
        assert release.build == 7

    @pytest.mark.offline()
    def test_invalid_utf8_raises_decode_error(self, tmp_path):
        path = tmp_path / "binary.yaml"
        path.write_bytes(b"name: \xff\xfe\n")

        with pytest.raises(DecodeError, match="failed to unmarshal YAML data") as excinfo:
            parse_yaml(PartialConfig(), path)

        assert isinstance(excinfo.value, RegisterError)
        assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)

    @pytest.mark.offline()
    def test_type_mismatches_are_reported(self, write_yaml):
        app = AppSettings()
        document = "port: not-a-number\ndatabase:\n  port: also-bad\nredis: plain\n"

        with pytest.raises(DecodeError) as excinfo:
            parse_yaml(app, write_yaml(document))

        message = str(excinfo.value)
        assert "port:" in message
        assert "database.port" in message
        assert "redis: cannot decode str into a mapping" in message

    @pytest.mark.offline()
    def test_rejects_non_record_and_frozen_targets(self, write_yaml):
        path = write_yaml("name: x\n")
        with pytest.raises(ParseError):
            parse_yaml(PartialConfig, path)
        with pytest.raises(ParseError, match="frozen"):
            parse_yaml(FrozenSettings(), path)


class TestDecodeYaml:
    @pytest.mark.offline()
    def test_keys_follow_annotations_and_lowercase_names(self):
        keyed = Keyed()
        decode_yaml(keyed, "display-name: Shop\ninternal: overwritten\nlevel: 3\nextra: 1\n")

        assert keyed.display_name == "Shop"
        assert keyed.internal == "unchanged"
        assert keyed.Level == 3
