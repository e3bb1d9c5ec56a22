"""Tests for the validation adapter."""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from settings_samples import AppSettings, DatabaseSettings, ExampleConf, ServerSettings

from confloader.adapters.validator import parse_rules, validate_struct
from confloader.core.contracts import setting
from confloader.core.exceptions import ConfLoaderError, ValidationError


@dataclass
class Person:
    name: str = setting("", validate="required")
    age: int = setting(0, validate="gte=0,lte=130")


@dataclass
class Rules:
    code: str = setting("abc", validate="len=3")
    nick: str = setting("bob", validate="min=2,max=5")
    level: str = setting("info", validate="oneof=debug info warn")
    home: str = setting("https://example.com", validate="url")
    optional_site: str = setting("", validate="omitempty,uri")
    tags: list[str] = setting(default_factory=lambda: ["a"], validate="min=1")
    count: int = setting(3, validate="gt=0,lt=10,ne=5")


@dataclass
class BadRule:
    name: str = setting("", validate="required,shiny")


class TestValidateStruct:
    @pytest.mark.offline()
    def test_valid_record_passes(self):
        validate_struct(Person(name="XX"))
        validate_struct(Person(name="some name", age=10))
        validate_struct(Rules())

    @pytest.mark.offline()
    def test_required_field_missing(self):
        with pytest.raises(ValidationError, match="Error:Field validation") as excinfo:
            validate_struct(Person())

        [violation] = excinfo.value.violations
        assert violation.field == "name"
        assert violation.rule == "required"
        assert violation.tag == "required"

    @pytest.mark.offline()
    def test_bound_violation_reports_rule_and_value(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_struct(Person(name="some name", age=-5))

        [violation] = excinfo.value.violations
        assert violation.field == "age"
        assert violation.tag == "gte=0"
        assert violation.value == -5

    @pytest.mark.offline()
    def test_all_failures_are_aggregated(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_struct(Person(name="", age=200))

        assert {(v.field, v.rule) for v in excinfo.value.violations} == {
            ("name", "required"),
            ("age", "lte"),
        }
        assert str(excinfo.value).count("Error:Field validation") == 2

    @pytest.mark.offline()
    def test_uri_and_range(self):
        conf = ExampleConf(name="GoConf", example_host="not a uri", port=80)
        with pytest.raises(ValidationError) as excinfo:
            validate_struct(conf)

        assert {v.tag for v in excinfo.value.violations} == {"uri", "gte=8080"}

        validate_struct(
            ExampleConf(name="GoConf", example_host="https://github.com/x/y", port=8090)
        )

    @pytest.mark.offline()
    def test_nested_fields_use_qualified_names(self):
        app = AppSettings(app_name="app", port=8080)
        app.database = DatabaseSettings(host="db", port=80, username="u", password="p")
        app.redis.host = "cache"
        app.redis.port = 6379

        with pytest.raises(ValidationError) as excinfo:
            validate_struct(app)

        [violation] = excinfo.value.violations
        assert violation.field == "database.port"
        assert violation.tag == "gte=1024"

    @pytest.mark.offline()
    def test_zero_valued_required_record_fails(self):
        app = AppSettings(app_name="app", port=8080)
        app.database = DatabaseSettings(host="db", port=5432, username="u", password="p")

        with pytest.raises(ValidationError) as excinfo:
            validate_struct(app)

        assert [(v.field, v.rule) for v in excinfo.value.violations] == [("redis", "required")]

    @pytest.mark.offline()
    def test_string_and_collection_rules(self):
        bad = Rules(
            code="abcd",
            nick="b",
            level="trace",
            home="example.com",
            optional_site="::::",
            tags=[],
            count=5,
        )
        with pytest.raises(ValidationError) as excinfo:
            validate_struct(bad)

        failed = {v.field: v.tag for v in excinfo.value.violations}
        assert failed == {
            "code": "len=3",
            "nick": "min=2",
            "level": "oneof=debug info warn",
            "home": "url",
            "optional_site": "uri",
            "tags": "min=1",
            "count": "ne=5",
        }

    @pytest.mark.offline()
    def test_uri_accepts_absolute_paths(self):
        validate_struct(Rules(optional_site="/var/run/app"))

        with pytest.raises(ValidationError) as excinfo:
            validate_struct(Rules(optional_site="var/run/app"))
        assert [v.tag for v in excinfo.value.violations] == ["uri"]

    @pytest.mark.offline()
    def test_nested_rules_apply_to_locally_defined_records(self):
        @dataclass
        class Inner:
            port: int = setting(5, validate="gte=8080")

        @dataclass
        class Outer:
            inner: Inner = setting(default_factory=Inner)
            backup: Inner = setting(default_factory=lambda: Inner(port=9000))

        with pytest.raises(ValidationError) as excinfo:
            validate_struct(Outer())

        [violation] = excinfo.value.violations
        assert violation.field == "inner.port"
        assert violation.tag == "gte=8080"

    @pytest.mark.offline()
    def test_struct_without_rules_passes(self):
        validate_struct(ServerSettings(port=8090))

    @pytest.mark.offline()
    def test_unknown_rule_raises(self):
        with pytest.raises(ConfLoaderError, match="undefined validation rule 'shiny'"):
            validate_struct(BadRule())

    @pytest.mark.offline()
    @pytest.mark.parametrize("value", [Person, {"name": "x"}, 3])
    def test_non_record_raises(self, value):
        with pytest.raises(ConfLoaderError, match="not a settings record"):
            validate_struct(value)


class TestParseRules:
    @pytest.mark.offline()
    def test_splits_names_and_params(self):
        assert parse_rules("required, gte=1024,lte=65535") == [
            ("required", None),
            ("gte", "1024"),
            ("lte", "65535"),
        ]

    @pytest.mark.offline()
    def test_numeric_rule_needs_number(self):
        with pytest.raises(ConfLoaderError, match="numeric parameter"):
            parse_rules("gte=ten")
        with pytest.raises(ConfLoaderError, match="numeric parameter"):
            parse_rules("lte")
