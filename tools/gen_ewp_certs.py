from cryptography import x509
from cryptography.x509.oid import NameOID
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
import datetime
import os
import sys

# Usage: python tools/gen_ewp_certs.py [cert_dir]
out = sys.argv[1] if len(sys.argv) > 1 else "cert"
os.makedirs(out, exist_ok=True)


def self_signed(cn: str):
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
        .not_valid_after(now + datetime.timedelta(days=365))
        .sign(key, hashes.SHA256())
    )
    return key, cert


def write_key(path, key):
    with open(path, "wb") as f:
        f.write(key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption()
        ))


def write_cert(path, cert):
    with open(path, "wb") as f:
        f.write(cert.public_bytes(serialization.Encoding.PEM))


# Merchant signing pair
sk, scert = self_signed("ewp-merchant")
write_key(os.path.join(out, "project-prvkey.pem"), sk)
write_cert(os.path.join(out, "project-pubcert.pem"), scert)

# Stand-in for the payment processor's certificate (keep its key for decrypting locally)
rk, rcert = self_signed("ewp-recipient")
write_cert(os.path.join(out, "paypal_cert_pem.pem"), rcert)
write_key(os.path.join(out, "recipient-prvkey.pem"), rk)

print(f"Generated: {out}/project-prvkey.pem, {out}/project-pubcert.pem, {out}/paypal_cert_pem.pem, {out}/recipient-prvkey.pem")
