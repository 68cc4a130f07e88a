from __future__ import annotations

from pathlib import Path
from textwrap import dedent
from typing import Callable

import pytest

from accel.compat import StringView, Variant


@pytest.fixture(scope="session")
def number_or_text() -> type[Variant]:
    return Variant[int, float, str]


@pytest.fixture
def hello_view() -> StringView:
    return StringView("Hello, World!")


class NumberVisitor:
    """Visitor with one ``visit_<TypeName>`` handler per alternative."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def visit_int(self, value: int) -> int:
        self.calls.append("int")
        return 1

    def visit_float(self, value: float) -> int:
        self.calls.append("float")
        return 2

    def visit_str(self, value: str) -> int:
        self.calls.append("str")
        return 3


@pytest.fixture
def number_visitor() -> NumberVisitor:
    return NumberVisitor()


@pytest.fixture
def write_yaml(tmp_path: Path) -> Callable[[str, str], Path]:
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(dedent(content), encoding="utf-8")
        return path

    return _write
