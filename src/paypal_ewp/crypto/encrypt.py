"""CMS EnvelopedData for a single recipient certificate.

The content key is wrapped with RSA PKCS#1 v1.5 (key transport, recipient
named by issuer and serial number) and the content is encrypted in CBC mode
with PKCS#7 padding. Triple-DES is the default since that is what the
recipient expects; AES-CBC is available for substitution.
"""
from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Sequence

from asn1crypto import cms
from asn1crypto import x509 as asn1_x509
from cryptography import x509
from cryptography.hazmat.decrepit.ciphers.algorithms import TripleDES
from cryptography.hazmat.primitives import padding as sym_padding
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ..errors import EncryptionFailed
from ..smime.mime import write_smime
from ..utils.files import read_file, write_file

# name -> (asn1crypto algorithm id, key bytes, block bytes, cipher factory)
CONTENT_CIPHERS = {
    "des-ede3-cbc": ("tripledes_3key", 24, 8, TripleDES),
    "aes128-cbc": ("aes128_cbc", 16, 16, algorithms.AES),
    "aes256-cbc": ("aes256_cbc", 32, 16, algorithms.AES),
}


def _text_canonical(data: bytes) -> bytes:
    # OpenSSL's SMIME_text framing: MIME header, CRLF line endings
    body = data.replace(b"\r\n", b"\n").replace(b"\n", b"\r\n")
    return b"Content-Type: text/plain\r\n\r\n" + body


def encrypt_content(data: bytes, cipher_name: str) -> tuple[bytes, bytes, bytes]:
    """Return (key, iv, ciphertext) for data under a fresh random content key."""
    _, key_len, block_len, factory = CONTENT_CIPHERS[cipher_name]
    key = os.urandom(key_len)
    iv = os.urandom(block_len)
    padder = sym_padding.PKCS7(block_len * 8).padder()
    padded = padder.update(data) + padder.finalize()
    encryptor = Cipher(factory(key), modes.CBC(iv)).encryptor()
    return key, iv, encryptor.update(padded) + encryptor.finalize()


def recipient_info(cert: x509.Certificate, content_key: bytes) -> cms.RecipientInfo:
    public_key = cert.public_key()
    if not isinstance(public_key, rsa.RSAPublicKey):
        raise EncryptionFailed("recipient certificate does not carry an RSA key")
    encrypted_key = public_key.encrypt(content_key, padding.PKCS1v15())
    asn1_cert = asn1_x509.Certificate.load(cert.public_bytes(serialization.Encoding.DER))
    return cms.RecipientInfo(
        name="ktri",
        value=cms.KeyTransRecipientInfo({
            "version": "v0",
            "rid": cms.RecipientIdentifier(
                name="issuer_and_serial_number",
                value=cms.IssuerAndSerialNumber({
                    "issuer": asn1_cert.issuer,
                    "serial_number": asn1_cert.serial_number,
                }),
            ),
            "key_encryption_algorithm": {"algorithm": "rsaes_pkcs1v15"},
            "encrypted_key": encrypted_key,
        }),
    )


@dataclass(frozen=True)
class Pkcs7Encryptor:
    recipient_cert_pem: bytes
    cipher: str = "des-ede3-cbc"
    options: Sequence[str] = ("Binary", "NoAttributes", "NoCerts")

    def encrypt(self, data: bytes) -> bytes:
        """Return EnvelopedData (ContentInfo) DER. Any failure raises EncryptionFailed."""
        try:
            cert = x509.load_pem_x509_certificate(self.recipient_cert_pem)
            if "Text" in self.options and "Binary" not in self.options:
                data = _text_canonical(data)
            alg_id = CONTENT_CIPHERS[self.cipher][0]
            key, iv, ciphertext = encrypt_content(data, self.cipher)
            enveloped = cms.EnvelopedData({
                "version": "v0",
                "recipient_infos": [recipient_info(cert, key)],
                "encrypted_content_info": {
                    "content_type": "data",
                    "content_encryption_algorithm": {"algorithm": alg_id, "parameters": iv},
                    "encrypted_content": ciphertext,
                },
            })
            return cms.ContentInfo({"content_type": "enveloped_data", "content": enveloped}).dump()
        except EncryptionFailed:
            raise
        except Exception as e:
            raise EncryptionFailed(f"Can't encrypt data of pkcs7: {e}") from e

    def encrypt_smime(self, data: bytes) -> bytes:
        return write_smime(self.encrypt(data), "enveloped-data")

    def encrypt_file(self, src: str, dst: str) -> None:
        write_file(dst, self.encrypt_smime(read_file(src)))
