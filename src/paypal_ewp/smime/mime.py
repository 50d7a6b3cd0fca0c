"""S/MIME text envelopes: header lines, one blank line, base64 body lines.

read_mime_body() strips the transport headers off an envelope stored on disk;
write_smime() renders a DER structure into the same textual shape, the way
OpenSSL's SMIME_write_PKCS7 does for opaque (non-detached) structures.
"""
from __future__ import annotations

import base64
from typing import Iterable

from ..errors import DecodeError, ScratchIOError

SMIME_LINE_WIDTH = 64


def body_from_lines(lines: Iterable[str]) -> str:
    """Return everything after the first blank line, one "\\n" per line.

    Trailing whitespace (including CR) is trimmed from each line. Blank lines
    inside the body are kept as empty segments. An envelope that never
    reaches a blank separator line raises DecodeError.
    """
    in_body = False
    body = []
    for raw in lines:
        line = raw.rstrip()
        if not in_body:
            if line == "":
                in_body = True
            continue
        body.append(line + "\n")
    if not in_body:
        raise DecodeError("no blank line between MIME headers and body")
    return "".join(body)


def read_mime_body(path: str) -> str:
    try:
        f = open(path, "r", encoding="ascii", newline="")
    except OSError as e:
        raise ScratchIOError(f"Can't open file '{path}' for read", resource=path) from e
    with f:
        try:
            return body_from_lines(f)
        except UnicodeDecodeError as e:
            raise DecodeError(f"non-ASCII content in envelope '{path}'") from e
        except OSError as e:
            raise ScratchIOError(f"Can't read file '{path}'", resource=path) from e


def write_smime(der: bytes, smime_type: str) -> bytes:
    b64 = base64.b64encode(der).decode("ascii")
    lines = [
        "MIME-Version: 1.0",
        'Content-Disposition: attachment; filename="smime.p7m"',
        f'Content-Type: application/x-pkcs7-mime; smime-type={smime_type}; name="smime.p7m"',
        "Content-Transfer-Encoding: base64",
        "",
    ]
    lines += [b64[i:i + SMIME_LINE_WIDTH] for i in range(0, len(b64), SMIME_LINE_WIDTH)]
    return ("\n".join(lines) + "\n").encode("ascii")


__all__ = ["body_from_lines", "read_mime_body", "write_smime"]
