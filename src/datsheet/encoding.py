from __future__ import annotations

import codecs

from charset_normalizer import from_bytes

from .errors import EncodingError

_BOMS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


def decode_text(raw: bytes) -> str:
    """
    Decode the raw content of an object file to text.

    Files are mostly ASCII with the odd legacy-encoded comment, so UTF-8 is
    tried first and charset detection only runs when that fails.

    Raises
    ------
    EncodingError
        If no encoding can be determined.
    """
    if not raw:
        return ""
    for bom, encoding in _BOMS:
        if raw.startswith(bom):
            try:
                return raw.decode(encoding)
            except UnicodeDecodeError as exc:
                raise EncodingError(f"invalid {encoding} content: {exc}") from exc
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass

    best = from_bytes(raw).best()
    if best is None:
        raise EncodingError("could not detect the file encoding")
    return str(best)
