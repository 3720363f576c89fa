import io
import os
import tempfile
from pathlib import Path

import pytest

from career_core.content.encoder import BinaryBlob, decode_attachment, encode, encode_all
from career_core.domain.exceptions import EncodingError
from career_core.domain.models import AttachmentPart, TextPart


@pytest.mark.parametrize("text", ["", "hello", "  spaced  \n", "多语言 ✓ emoji 🚀", "x" * 100_000])
def test_encode_text_is_identity(text):
    part = encode(text)
    assert isinstance(part, TextPart)
    assert part.content == text
    assert part.kind == "text"


def test_encode_bytes_round_trip():
    raw = bytes(range(256)) * 4
    part = encode(BinaryBlob(raw, mime_type="application/pdf"))
    assert isinstance(part, AttachmentPart)
    assert part.mime_type == "application/pdf"
    assert decode_attachment(part) == raw


def test_encode_empty_blob_round_trip():
    part = encode(BinaryBlob(b"", mime_type="image/png"))
    assert decode_attachment(part) == b""


def test_encode_file_object_and_path():
    raw = os.urandom(2048)
    part = encode(BinaryBlob(io.BytesIO(raw), mime_type="image/jpeg"))
    assert decode_attachment(part) == raw

    with tempfile.TemporaryDirectory() as d:
        p = Path(d) / "resume.pdf"
        p.write_bytes(raw)
        part = encode(BinaryBlob.from_path(p))
        assert part.mime_type == "application/pdf"
        assert decode_attachment(part) == raw


def test_mime_type_fallback():
    assert BinaryBlob(b"x", name="blob.unknownext").resolved_mime_type() == "application/octet-stream"
    assert BinaryBlob(b"x", name="photo.png").resolved_mime_type() == "image/png"


def test_unreadable_blob_raises_encoding_error():
    with tempfile.TemporaryDirectory() as d:
        missing = Path(d) / "missing.pdf"
        with pytest.raises(EncodingError):
            encode(BinaryBlob.from_path(missing))


def test_stream_returning_text_is_rejected():
    with pytest.raises(EncodingError):
        encode(BinaryBlob(io.StringIO("not bytes"), mime_type="text/plain"))


def test_unsupported_input_type():
    with pytest.raises(EncodingError):
        encode(12345)


def test_encode_all_keeps_order():
    parts = encode_all(["a", BinaryBlob(b"\x00\x01", mime_type="image/png"), "b"])
    assert [p.kind for p in parts] == ["text", "attachment", "text"]
    assert parts[0].content == "a"
    assert parts[2].content == "b"


def test_closed_stream_raises_encoding_error():
    stream = io.BytesIO(b"abc")
    stream.close()
    with pytest.raises(EncodingError):
        encode(BinaryBlob(stream, mime_type="application/pdf"))


def test_path_with_nul_byte_raises_encoding_error():
    with pytest.raises(EncodingError):
        encode(BinaryBlob("bad\x00name.pdf", mime_type="application/pdf"))
