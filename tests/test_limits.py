"""
Resource limit and configuration tests.

Validates each ceiling is enforced at its exact boundary, and that limits
are resolved from environment profiles and overrides.
"""

from collections.abc import Callable

import pytest

import jstrict
from jstrict import STRING
from jstrict import ArrayTooLarge
from jstrict import DecodeConfig
from jstrict import EnvironmentProfile
from jstrict import Limits
from jstrict import NestingTooDeep
from jstrict import ObjectOf
from jstrict import PayloadTooLarge
from jstrict import StringTooLong
from jstrict import UnknownFieldPolicy
from jstrict import field


def _nested_arrays(levels: int) -> str:
    return "[" * levels + "]" * levels


def _nested_objects(levels: int) -> str:
    return '{"a":' * (levels - 1) + "{}" + "}" * (levels - 1)


def test_default_limits() -> None:
    limits = Limits()

    assert limits.max_payload_bytes == 10 * 1024 * 1024
    assert limits.max_nesting_depth == 10
    assert limits.max_array_elements == 10_000
    assert limits.max_string_length == 1024 * 1024


def test_payload_limit_is_inclusive() -> None:
    limits = Limits(max_payload_bytes=3)

    assert jstrict.parse(b"[1]", limits=limits).to_python() == [1]
    with pytest.raises(PayloadTooLarge) as exc_info:
        jstrict.parse(b"[12]", limits=limits)
    assert exc_info.value.actual == "4 bytes"
    assert str(exc_info.value.path) == "$"


def test_payload_of_text_is_measured_in_utf8_bytes() -> None:
    limits = Limits(max_payload_bytes=5)

    with pytest.raises(PayloadTooLarge):
        jstrict.parse('"éé"', limits=limits)


def test_payload_checked_before_content() -> None:
    """Validates oversized payloads fail without being tokenized."""
    with pytest.raises(PayloadTooLarge):
        jstrict.parse(b"not json at all", limits=Limits(max_payload_bytes=4))


@pytest.mark.parametrize("build", [_nested_arrays, _nested_objects])
def test_nesting_boundary(build: Callable[[int], str]) -> None:
    """Validates 10 levels pass and 11 fail under the default ceiling."""
    jstrict.parse(build(10))

    with pytest.raises(NestingTooDeep):
        jstrict.parse(build(11))


def test_nesting_error_path() -> None:
    with pytest.raises(NestingTooDeep) as exc_info:
        jstrict.parse(_nested_objects(11))

    assert str(exc_info.value.path) == "$" + ".a" * 10


def test_nesting_counts_mixed_containers() -> None:
    doc = '{"a": [{"b": [{"c": [[[[[1]]]]]}]}]}'

    jstrict.parse(doc, limits=Limits(max_nesting_depth=10))
    with pytest.raises(NestingTooDeep):
        jstrict.parse(doc, limits=Limits(max_nesting_depth=9))


def test_deep_document_far_beyond_limit_fails_cleanly() -> None:
    with pytest.raises(NestingTooDeep):
        jstrict.parse("[" * 100_000)


def test_array_limit_is_inclusive() -> None:
    limits = Limits(max_array_elements=5)

    assert len(jstrict.parse("[1,2,3,4,5]", limits=limits).payload) == 5
    with pytest.raises(ArrayTooLarge) as exc_info:
        jstrict.parse("[1,2,3,4,5,6]", limits=limits)

    err = exc_info.value
    assert str(err.path) == "$"
    assert err.pos == 11


def test_array_limit_applies_to_nested_arrays() -> None:
    limits = Limits(max_array_elements=2)

    jstrict.parse("[[1,2],[3,4]]", limits=limits)
    with pytest.raises(ArrayTooLarge) as exc_info:
        jstrict.parse('{"xs": [[1,2],[3,4,5]]}', limits=limits)
    assert str(exc_info.value.path) == "$.xs[1]"


def test_string_limit_is_inclusive() -> None:
    limits = Limits(max_string_length=10)

    assert jstrict.parse('"' + "x" * 10 + '"', limits=limits).payload == "x" * 10
    with pytest.raises(StringTooLong):
        jstrict.parse('"' + "x" * 11 + '"', limits=limits)


def test_string_limit_applies_to_keys() -> None:
    with pytest.raises(StringTooLong) as exc_info:
        jstrict.parse(
            '{"a": {"' + "k" * 6 + '": 1}}', limits=Limits(max_string_length=5)
        )
    assert str(exc_info.value.path) == "$.a"


def test_string_limit_error_names_the_field() -> None:
    doc = ObjectOf("Doc", (field("name", STRING),))
    config = DecodeConfig(limits=Limits(max_string_length=3))

    with pytest.raises(StringTooLong) as exc_info:
        jstrict.decode('{"name": "abcdef"}', doc, config=config)

    err = exc_info.value
    assert str(err.path) == "$.name"
    assert "String too long at $.name, line 1, column 10" in str(err)


def test_string_limit_counts_escapes_with_path() -> None:
    with pytest.raises(StringTooLong) as exc_info:
        jstrict.parse('["ok", "ab\\n\\t"]', limits=Limits(max_string_length=3))
    assert str(exc_info.value.path) == "$[1]"


@pytest.mark.parametrize(
    "kwargs,error",
    [
        ({"max_nesting_depth": 0}, ValueError),
        ({"max_payload_bytes": -1}, ValueError),
        ({"max_nesting_depth": 1000}, ValueError),
        ({"max_array_elements": "5"}, TypeError),
        ({"max_string_length": True}, TypeError),
        ({"max_payload_bytes": 1.5}, TypeError),
    ],
)
def test_invalid_limits(kwargs: dict, error: type[Exception]) -> None:
    with pytest.raises(error):
        Limits(**kwargs)


def test_profiles() -> None:
    production = Limits.for_profile(EnvironmentProfile.PRODUCTION)
    development = Limits.for_profile(EnvironmentProfile.DEVELOPMENT)

    assert production == Limits()
    assert Limits.for_profile(EnvironmentProfile.STAGING) == Limits()
    assert development.max_payload_bytes > production.max_payload_bytes
    assert development.max_nesting_depth > production.max_nesting_depth
    assert development.max_array_elements > production.max_array_elements
    assert development.max_string_length > production.max_string_length


def test_limits_from_empty_environment() -> None:
    assert Limits.from_env({}) == Limits()


def test_limits_from_environment() -> None:
    limits = Limits.from_env(
        {"JSTRICT_ENV": "Development", "JSTRICT_MAX_NESTING_DEPTH": "12"}
    )

    assert limits.max_nesting_depth == 12
    assert limits.max_payload_bytes == 50 * 1024 * 1024


def test_limits_from_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JSTRICT_MAX_ARRAY_ELEMENTS", "7")
    monkeypatch.delenv("JSTRICT_ENV", raising=False)

    assert Limits.from_env().max_array_elements == 7


@pytest.mark.parametrize(
    "environ,match",
    [
        ({"JSTRICT_ENV": "qa"}, "JSTRICT_ENV"),
        ({"JSTRICT_MAX_PAYLOAD_BYTES": "lots"}, "JSTRICT_MAX_PAYLOAD_BYTES"),
        ({"JSTRICT_MAX_NESTING_DEPTH": "0"}, "max_nesting_depth"),
    ],
)
def test_invalid_environment(environ: dict[str, str], match: str) -> None:
    with pytest.raises(ValueError, match=match):
        Limits.from_env(environ)


def test_decode_config_from_environment() -> None:
    config = DecodeConfig.from_env(
        {"JSTRICT_UNKNOWN_FIELDS": "ignore", "JSTRICT_MAX_STRING_LENGTH": "64"}
    )

    assert config.unknown_fields is UnknownFieldPolicy.IGNORE
    assert config.limits.max_string_length == 64
    assert DecodeConfig.from_env({}) == DecodeConfig()

    with pytest.raises(ValueError, match="JSTRICT_UNKNOWN_FIELDS"):
        DecodeConfig.from_env({"JSTRICT_UNKNOWN_FIELDS": "warn"})


def test_decode_config_validation() -> None:
    with pytest.raises(TypeError):
        DecodeConfig(limits={"max_nesting_depth": 5})  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        DecodeConfig(unknown_fields="ignore")  # type: ignore[arg-type]
