from __future__ import annotations

from dataclasses import dataclass
import os

from ..config import PipelineConfig
from ..errors import MissingCredential


@dataclass(frozen=True)
class CredentialSet:
    """PEM material for one merchant: signer key + cert, and the recipient cert."""

    signer_key: bytes
    signer_cert: bytes
    recipient_cert: bytes

    def __post_init__(self):
        for name in ("signer_key", "signer_cert", "recipient_cert"):
            if not getattr(self, name):
                raise MissingCredential(f"empty credential {name}", name=name, path="")


def _read_credential(path: str, name: str, label: str) -> bytes:
    if not os.path.isfile(path):
        raise MissingCredential(f"Can't find {label}", name=name, path=path)
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise MissingCredential(f"Can't open {label}", name=name, path=path) from e
    if not data:
        raise MissingCredential(f"Can't find {label} (file is empty)", name=name, path=path)
    return data


def load_credentials(cfg: PipelineConfig, cert_dir: str | None = None) -> CredentialSet:
    base = cert_dir or cfg.cert_dir
    return CredentialSet(
        signer_key=_read_credential(os.path.join(base, cfg.signer_key_name), "signer_key", "project private key"),
        signer_cert=_read_credential(os.path.join(base, cfg.signer_cert_name), "signer_cert", "project certificate"),
        recipient_cert=_read_credential(os.path.join(base, cfg.recipient_cert_name), "recipient_cert", "PayPal certificate"),
    )
