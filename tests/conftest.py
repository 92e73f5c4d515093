"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import io

import pytest

from srgjson import ClassEntry, MemberEntry
from srgjson.json import JsonMappingsEncoder


@pytest.fixture
def output() -> io.StringIO:
    """Provide an empty text sink for each test."""
    return io.StringIO()


@pytest.fixture
def encoder(output: io.StringIO) -> JsonMappingsEncoder:
    """Provide a fresh encoder writing to the ``output`` fixture."""
    return JsonMappingsEncoder(output)


@pytest.fixture
def foo_entry() -> ClassEntry:
    """A renamed class with a renamed field and an overloaded method."""
    return ClassEntry(
        "com.example.Foo",
        "a.a",
        fields=(MemberEntry("counter", "b"),),
        methods=(MemberEntry("doWork", "c"), MemberEntry("doWork", None)),
    )
