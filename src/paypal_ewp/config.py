"""Pipeline configuration.

Every constant the pipeline relies on (credential filenames, PKCS#7 flag sets,
content cipher, scratch naming) lives on an immutable PipelineConfig so tests
can swap ciphers or flags without touching module globals.
Values come from the environment (and an optional .env file) first, then from
keyword overrides passed to load_config().
"""
from __future__ import annotations

import os
import tempfile
from typing import Any, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

load_dotenv()

SIGN_OPTION_NAMES = ("Binary", "NoAttributes", "NoCerts", "NoCapabilities")
ENCRYPT_OPTION_NAMES = ("Binary", "NoAttributes", "NoCerts", "Text")
SUPPORTED_CIPHERS = ("des-ede3-cbc", "aes128-cbc", "aes256-cbc")
SUPPORTED_DIGESTS = ("sha256", "sha384", "sha512")


def _env_options(name: str, default: str) -> Tuple[str, ...]:
    return tuple(p.strip() for p in os.getenv(name, default).split(",") if p.strip())


class PipelineConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    cert_dir: str = "cert"
    signer_key_name: str = "project-prvkey.pem"
    signer_cert_name: str = "project-pubcert.pem"
    recipient_cert_name: str = "paypal_cert_pem.pem"
    key_password: Optional[str] = None

    sign_options: Tuple[str, ...] = ("Binary", "NoAttributes", "NoCerts")
    encrypt_options: Tuple[str, ...] = ("Binary", "NoAttributes", "NoCerts")
    sign_digest: str = "sha256"
    cipher: str = "des-ede3-cbc"

    tmp_prefix: str = "PayPal_"
    tmp_dir: str = tempfile.gettempdir()

    @field_validator("sign_options")
    @classmethod
    def _check_sign_options(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        for name in v:
            if name not in SIGN_OPTION_NAMES:
                raise ValueError(f"unsupported signing option {name!r}")
        if "NoAttributes" in v and "NoCapabilities" in v:
            raise ValueError("NoAttributes and NoCapabilities are mutually exclusive")
        return v

    @field_validator("encrypt_options")
    @classmethod
    def _check_encrypt_options(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        for name in v:
            if name not in ENCRYPT_OPTION_NAMES:
                raise ValueError(f"unsupported encryption option {name!r}")
        return v

    @field_validator("cipher")
    @classmethod
    def _check_cipher(cls, v: str) -> str:
        v = v.lower()
        if v not in SUPPORTED_CIPHERS:
            raise ValueError(f"unsupported content cipher {v!r}")
        return v

    @field_validator("sign_digest")
    @classmethod
    def _check_digest(cls, v: str) -> str:
        v = v.lower()
        if v not in SUPPORTED_DIGESTS:
            raise ValueError(f"unsupported signing digest {v!r}")
        return v


_ENV_MAP = {
    "cert_dir": "EWP_CERT_DIR",
    "signer_key_name": "EWP_SIGNER_KEY_NAME",
    "signer_cert_name": "EWP_SIGNER_CERT_NAME",
    "recipient_cert_name": "EWP_RECIPIENT_CERT_NAME",
    "key_password": "EWP_KEY_PASSWORD",
    "sign_digest": "EWP_SIGN_DIGEST",
    "cipher": "EWP_CIPHER",
    "tmp_prefix": "EWP_TMP_PREFIX",
    "tmp_dir": "EWP_TMP_DIR",
}


def load_config(**overrides: Any) -> PipelineConfig:
    """Build a PipelineConfig from EWP_* environment variables plus overrides."""
    data: dict[str, Any] = {}
    for field, env in _ENV_MAP.items():
        if os.getenv(env):
            data[field] = os.environ[env]
    if os.getenv("EWP_SIGN_OPTIONS"):
        data["sign_options"] = _env_options("EWP_SIGN_OPTIONS", "")
    if os.getenv("EWP_ENCRYPT_OPTIONS"):
        data["encrypt_options"] = _env_options("EWP_ENCRYPT_OPTIONS", "")
    data.update({k: v for k, v in overrides.items() if v is not None})
    return PipelineConfig(**data)
