"""Tests for the SuperSrg binary mappings decoder."""

from __future__ import annotations

import lz4.block
import pytest

from srgjson import ClassEntry, MemberEntry
from srgjson.binary import BinaryMappingsDecoder, BinaryMappingsError


def _string(text: str) -> bytes:
    data = text.encode("utf-8")
    return len(data).to_bytes(2, "big") + data


def _body() -> bytes:
    parts = [(2).to_bytes(8, "big")]
    # com/example/Foo: two overloads of doWork, then one field
    parts += [_string("com/example/Foo"), _string("a/a"), (2).to_bytes(4, "big")]
    parts += [_string("doWork"), _string("c"), _string("()V"), _string("()V")]
    parts += [_string("doWork"), _string(""), _string("(I)V"), _string("(I)V")]
    parts += [(1).to_bytes(4, "big"), _string("counter"), _string("b")]
    # com/example/Keep: not renamed, no members
    parts += [_string("com/example/Keep"), _string(""), (0).to_bytes(4, "big"), (0).to_bytes(4, "big")]
    return b"".join(parts)


def _mappings(body: bytes, compression: str = "", version: int = 1) -> bytes:
    return b"SuperSrg binary mappings\0" + version.to_bytes(4, "big") + _string(compression) + body


EXPECTED_ENTRIES = [
    ClassEntry(
        "com.example.Foo",
        "a.a",
        fields=(MemberEntry("counter", "b"),),
        methods=(MemberEntry("doWork", "c"), MemberEntry("doWork", None)),
    ),
    ClassEntry("com.example.Keep"),
]


class TestBinaryMappingsDecoder:
    """Test decoding binary mappings."""

    def test_decode_uncompressed(self) -> None:
        """Test decoding uncompressed mappings."""
        mappings = BinaryMappingsDecoder(_mappings(_body())).decode().build()

        assert list(mappings.class_entries()) == EXPECTED_ENTRIES

    def test_decode_lz4_block(self) -> None:
        """Test decoding lz4 compressed mappings."""
        data = _mappings(lz4.block.compress(_body()), compression="lz4-block")

        mappings = BinaryMappingsDecoder(data).decode().build()

        assert list(mappings.class_entries()) == EXPECTED_ENTRIES

    def test_invalid_header(self) -> None:
        """Test that other files are rejected."""
        with pytest.raises(BinaryMappingsError, match="header"):
            BinaryMappingsDecoder(b"Something else\0").decode()

    def test_missing_header_terminator(self) -> None:
        """Test that a header without a null terminator is rejected."""
        with pytest.raises(BinaryMappingsError, match="Invalid header"):
            BinaryMappingsDecoder(b"SuperSrg binary mappings").decode()

    def test_unexpected_version(self) -> None:
        """Test that only version 1 is accepted."""
        with pytest.raises(BinaryMappingsError, match="version: 2"):
            BinaryMappingsDecoder(_mappings(_body(), version=2)).decode()

    @pytest.mark.parametrize(
        ("compression", "message"),
        [("gzip", "Unsupported"), ("lzma2", "Unsupported"), ("zip", "Forbidden")],
    )
    def test_compression(self, compression: str, message: str) -> None:
        """Test that only lz4-block compression is supported."""
        with pytest.raises(BinaryMappingsError, match=message):
            BinaryMappingsDecoder(_mappings(_body(), compression=compression)).decode()

    def test_corrupt_lz4_block(self) -> None:
        """Test that corrupt compressed data is reported."""
        data = _mappings(b"\x10\x00\x00\x00" + b"\xff" * 8, compression="lz4-block")

        with pytest.raises(BinaryMappingsError):
            BinaryMappingsDecoder(data).decode()

    def test_truncated(self) -> None:
        """Test that truncated mappings are reported."""
        data = _mappings(_body())[:-3]

        with pytest.raises(BinaryMappingsError, match="Insufficent data"):
            BinaryMappingsDecoder(data).decode()

    def test_trailing_data(self) -> None:
        """Test that data after the last class is reported."""
        with pytest.raises(BinaryMappingsError, match="trailing"):
            BinaryMappingsDecoder(_mappings(_body() + b"\0\0")).decode()
