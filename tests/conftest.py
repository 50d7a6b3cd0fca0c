import base64
import datetime

import pytest
from asn1crypto import cms
from cryptography import x509
from cryptography.x509.oid import NameOID
from cryptography.hazmat.decrepit.ciphers.algorithms import TripleDES
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives import padding as sym_padding
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from paypal_ewp.config import PipelineConfig
from paypal_ewp.crypto.keyloader import CredentialSet


def _self_signed(cn: str):
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, cn)])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .sign(key, hashes.SHA256())
    )
    return key, cert


def _key_pem(key) -> bytes:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture(scope="session")
def signer_pair():
    return _self_signed("ewp-test-merchant")


@pytest.fixture(scope="session")
def recipient_pair():
    return _self_signed("ewp-test-recipient")


@pytest.fixture(scope="session")
def credentials(signer_pair, recipient_pair) -> CredentialSet:
    return CredentialSet(
        signer_key=_key_pem(signer_pair[0]),
        signer_cert=signer_pair[1].public_bytes(serialization.Encoding.PEM),
        recipient_cert=recipient_pair[1].public_bytes(serialization.Encoding.PEM),
    )


@pytest.fixture
def cert_dir(tmp_path, credentials):
    d = tmp_path / "cert"
    d.mkdir()
    (d / "project-prvkey.pem").write_bytes(credentials.signer_key)
    (d / "project-pubcert.pem").write_bytes(credentials.signer_cert)
    (d / "paypal_cert_pem.pem").write_bytes(credentials.recipient_cert)
    return d


@pytest.fixture
def scratch_dir(tmp_path):
    d = tmp_path / "scratch"
    d.mkdir()
    return d


@pytest.fixture
def config(cert_dir, scratch_dir) -> PipelineConfig:
    return PipelineConfig(cert_dir=str(cert_dir), tmp_dir=str(scratch_dir))


_CIPHERS = {
    "tripledes": TripleDES,
    "aes": algorithms.AES,
}


def _open_envelope(envelope: str, recipient_key) -> bytes:
    """PKCS7-armored EnvelopedData -> decrypted inner bytes."""
    lines = envelope.splitlines()
    assert lines[0] == "-----BEGIN PKCS7-----"
    assert lines[-1] == "-----END PKCS7-----"
    der = base64.b64decode("".join(lines[1:-1]))
    info = cms.ContentInfo.load(der)
    assert info["content_type"].native == "enveloped_data"
    env = info["content"]
    ktri = env["recipient_infos"][0].chosen
    content_key = recipient_key.decrypt(ktri["encrypted_key"].native, padding.PKCS1v15())
    eci = env["encrypted_content_info"]
    alg = eci["content_encryption_algorithm"]
    cipher = Cipher(_CIPHERS[alg.encryption_cipher](content_key), modes.CBC(alg.encryption_iv))
    decryptor = cipher.decryptor()
    padded = decryptor.update(eci["encrypted_content"].native) + decryptor.finalize()
    unpadder = sym_padding.PKCS7(alg.encryption_block_size * 8).unpadder()
    return unpadder.update(padded) + unpadder.finalize()


def _verify_signed(der: bytes, signer_cert) -> bytes:
    """SignedData DER -> embedded content, after checking the RSA signature."""
    info = cms.ContentInfo.load(der)
    assert info["content_type"].native == "signed_data"
    sd = info["content"]
    content = sd["encap_content_info"]["content"].native
    signer_info = sd["signer_infos"][0]
    assert signer_info["signed_attrs"].native is None
    signer_cert.public_key().verify(
        signer_info["signature"].native, content, padding.PKCS1v15(), hashes.SHA256()
    )
    return content


@pytest.fixture
def open_envelope(recipient_pair):
    return lambda envelope: _open_envelope(envelope, recipient_pair[0])


@pytest.fixture
def verify_signed(signer_pair):
    return lambda der: _verify_signed(der, signer_pair[1])
