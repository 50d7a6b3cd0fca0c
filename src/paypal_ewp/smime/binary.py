"""Turn a signed S/MIME text envelope back into raw PKCS#7 DER, in place.

The signing step hands back base64 text wrapped in MIME headers even when
binary output was asked for, while the encryption step needs the DER
structure itself. decode_file_to_binary() always normalizes, whatever format
the signer claims to have produced.
"""
from __future__ import annotations

import base64
import binascii

from ..errors import DecodeError
from ..utils.files import write_file
from .mime import read_mime_body


def decode_body(body: str) -> bytes:
    compact = "".join(body.split())
    if not compact:
        raise DecodeError("empty base64 body")
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError("malformed base64 body") from e


def decode_file_to_binary(path: str) -> int:
    """Replace the envelope at path with its decoded body; return the byte count."""
    binary = decode_body(read_mime_body(path))
    write_file(path, binary)
    return len(binary)
