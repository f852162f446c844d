"""
JSON specification pass2 test from json.org test suite.

Validates that the deeply nested array document is refused under the
default nesting ceiling and accepted once the ceiling is raised.
"""

import pytest

import jstrict
from jstrict import Limits
from jstrict import NestingTooDeep

# from https://json.org/JSON_checker/test/pass2.json
JSON = r"""
[[[[[[[[[[[[[[[[[[["Not too deep"]]]]]]]]]]]]]]]]]]]
"""


def test_parse_with_raised_limit() -> None:
    """
    Validates 19 levels of nesting parse when the limit allows them.
    """
    res = jstrict.parse(JSON, limits=Limits(max_nesting_depth=19)).to_python()

    for _ in range(19):
        assert isinstance(res, list)
        assert len(res) == 1
        res = res[0]
    assert res == "Not too deep"


def test_default_limit_refuses_document() -> None:
    with pytest.raises(NestingTooDeep) as exc_info:
        jstrict.parse(JSON)

    err = exc_info.value
    assert str(err.path) == "$" + "[0]" * 10
    assert err.actual == "11 levels"


def test_limit_is_inclusive() -> None:
    with pytest.raises(NestingTooDeep):
        jstrict.parse(JSON, limits=Limits(max_nesting_depth=18))
