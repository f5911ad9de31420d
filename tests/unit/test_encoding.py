import codecs

import pytest

from datsheet.encoding import decode_text
from datsheet.errors import EncodingError


def test_plain_utf8():
    assert decode_text("name=Straßenbahn\n".encode("utf-8")) == "name=Straßenbahn\n"


def test_empty_input():
    assert decode_text(b"") == ""


@pytest.mark.parametrize("codec", ["utf-8-sig", "utf-16", "utf-32"])
def test_bom_is_honored_and_stripped(codec):
    raw = "name=bus\n".encode(codec)
    assert decode_text(raw) == "name=bus\n"


def test_utf16_big_endian_bom():
    raw = codecs.BOM_UTF16_BE + "name=bus\n".encode("utf-16-be")
    assert decode_text(raw) == "name=bus\n"


def test_legacy_single_byte_text_is_detected():
    text = "# Müllwagen für die Straße\nname=müllwagen\nintro_year=1950\n" * 4
    decoded = decode_text(text.encode("cp1252"))
    assert "name=m" in decoded
    assert "intro_year=1950" in decoded


def test_broken_bom_content_raises():
    with pytest.raises(EncodingError):
        decode_text(codecs.BOM_UTF32_LE + b"\xff\xff\xff\x7f")
