"""点分数字版本号排序测试"""

import pytest

from cvm.core.exceptions import InvalidArgumentError
from cvm.core.version import compare_versions, is_version, sort_versions


class TestSortVersions:
    def test_numeric_not_lexicographic(self) -> None:
        assert sort_versions(["0.9.0", "0.10.0", "0.2.1"]) == ["0.2.1", "0.9.0", "0.10.0"]

    def test_multi_digit_components(self) -> None:
        assert sort_versions(["0.40.4", "0.4.40", "0.40.10"]) == ["0.4.40", "0.40.4", "0.40.10"]

    def test_empty(self) -> None:
        assert sort_versions([]) == []


class TestCompareVersions:
    @pytest.mark.parametrize(("a", "b", "expected"), [
        ("1.2.0", "1.10.0", -1),
        ("2.0", "1.99.99", 1),
        ("1.2", "1.2.0", 0),
        ("1.2.0.1", "1.2", 1),
    ])
    def test_compare(self, a: str, b: str, expected: int) -> None:
        assert compare_versions(a, b) == expected

    def test_invalid_raises(self) -> None:
        with pytest.raises(InvalidArgumentError, match="无效的版本号"):
            compare_versions("1.x", "1.0")


def test_is_version() -> None:
    assert is_version("0.40.4")
    assert is_version("3")
    assert not is_version("")
    assert not is_version("1..2")
    assert not is_version("v1.2")
