from .mime import read_mime_body

BEGIN_MARKER = "-----BEGIN PKCS7-----"
END_MARKER = "-----END PKCS7-----"


def armor_body(body: str) -> str:
    # body lines are already newline-terminated
    return f"{BEGIN_MARKER}\n{body}{END_MARKER}\n"


def wrap_envelope_file(path: str) -> str:
    """Swap the S/MIME headers of an encrypted envelope for PKCS7 marker lines."""
    return armor_body(read_mime_body(path))
