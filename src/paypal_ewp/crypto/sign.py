"""PKCS#7 SignedData over the canonical parameter stream.

Produces the same S/MIME text OpenSSL's PKCS7_sign + SMIME_write_PKCS7 would
for an opaque signature: the payload is embedded, signed attributes and the
signer certificate are left out, and the result is base64 text behind MIME
headers (which smime.binary later strips back to DER).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.serialization import pkcs7

from ..errors import SigningFailed
from ..smime.mime import write_smime
from ..utils.files import read_file, write_file

_DIGESTS = {
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}


def pkcs7_options(names: Sequence[str]) -> list[pkcs7.PKCS7Options]:
    return [getattr(pkcs7.PKCS7Options, n) for n in names]


@dataclass(frozen=True)
class Pkcs7Signer:
    cert_pem: bytes
    key_pem: bytes
    options: Sequence[str] = ("Binary", "NoAttributes", "NoCerts")
    digest: str = "sha256"
    key_password: Optional[str] = None

    def sign(self, data: bytes) -> bytes:
        """Return SignedData DER for data. Any failure raises SigningFailed."""
        try:
            cert = x509.load_pem_x509_certificate(self.cert_pem)
            password = self.key_password.encode() if self.key_password else None
            key = serialization.load_pem_private_key(self.key_pem, password=password)
            builder = (
                pkcs7.PKCS7SignatureBuilder()
                .set_data(data)
                .add_signer(cert, key, _DIGESTS[self.digest]())
            )
            return builder.sign(serialization.Encoding.DER, pkcs7_options(self.options))
        except SigningFailed:
            raise
        except Exception as e:
            raise SigningFailed(f"Can't sign data of pkcs7: {e}") from e

    def sign_smime(self, data: bytes) -> bytes:
        return write_smime(self.sign(data), "signed-data")

    def sign_file(self, src: str, dst: str) -> None:
        write_file(dst, self.sign_smime(read_file(src)))
