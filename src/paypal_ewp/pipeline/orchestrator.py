"""Encrypted payment-button pipeline.

encrypt() runs Idle -> Encoding -> Signing -> Normalizing -> Encrypting ->
Wrapping -> Done strictly in order. Any stage failure moves to Failed: the
error is tagged with the state it happened in and re-raised after the three
scratch slots (data, signed, encrypted) have been removed.
"""
from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
import time
from typing import Optional

from ..config import PipelineConfig, load_config
from ..crypto.canonical import Params, encode_params
from ..crypto.encrypt import Pkcs7Encryptor
from ..crypto.keyloader import CredentialSet, load_credentials
from ..crypto.sign import Pkcs7Signer
from ..errors import EWPError
from ..obs.prom import observe_failure, observe_stage, observe_success
from ..smime.armor import wrap_envelope_file
from ..smime.binary import decode_file_to_binary
from ..utils.files import write_file
from ..utils.logging import get_logger
from .scratch import ScratchSpace

log = get_logger("pipeline")

__all__ = ["PipelineState", "EWPEncryptor"]


class PipelineState(str, Enum):
    IDLE = "Idle"
    ENCODING = "Encoding"
    SIGNING = "Signing"
    NORMALIZING = "Normalizing"
    ENCRYPTING = "Encrypting"
    WRAPPING = "Wrapping"
    DONE = "Done"
    FAILED = "Failed"


class _Run:
    def __init__(self):
        self.state = PipelineState.IDLE

    @contextmanager
    def stage(self, state: PipelineState):
        log.debug("%s -> %s", self.state.value, state.value)
        self.state = state
        start = time.perf_counter()
        yield
        observe_stage(state.value, (time.perf_counter() - start) * 1000.0)


class EWPEncryptor:
    """Signs then encrypts payment variables for the payment processor.

    Credentials are loaded once and never mutated, so one instance can be
    shared across threads; every encrypt() call gets its own scratch files.
    """

    def __init__(self, credentials: CredentialSet, config: Optional[PipelineConfig] = None):
        self.config = config or load_config()
        self.credentials = credentials
        self.signer = Pkcs7Signer(
            cert_pem=credentials.signer_cert,
            key_pem=credentials.signer_key,
            options=self.config.sign_options,
            digest=self.config.sign_digest,
            key_password=self.config.key_password,
        )
        self.encryptor = Pkcs7Encryptor(
            recipient_cert_pem=credentials.recipient_cert,
            cipher=self.config.cipher,
            options=self.config.encrypt_options,
        )

    @classmethod
    def from_cert_dir(cls, cert_dir: Optional[str] = None, config: Optional[PipelineConfig] = None) -> "EWPEncryptor":
        cfg = config or load_config()
        return cls(load_credentials(cfg, cert_dir), cfg)

    def encrypt(self, params: Params) -> str:
        """Return the PKCS7-armored envelope for params (mapping or (name, value) pairs)."""
        run = _Run()
        try:
            with ScratchSpace(self.config.tmp_dir, self.config.tmp_prefix) as scratch:
                with run.stage(PipelineState.ENCODING):
                    data = encode_params(params)
                    write_file(scratch["data"], data)
                with run.stage(PipelineState.SIGNING):
                    self.signer.sign_file(scratch["data"], scratch["signed"])
                with run.stage(PipelineState.NORMALIZING):
                    decode_file_to_binary(scratch["signed"])
                with run.stage(PipelineState.ENCRYPTING):
                    self.encryptor.encrypt_file(scratch["signed"], scratch["encrypted"])
                with run.stage(PipelineState.WRAPPING):
                    envelope = wrap_envelope_file(scratch["encrypted"])
        except EWPError as e:
            e.stage = run.state.value
            run.state = PipelineState.FAILED
            log.warning("encrypt failed in %s: %s (%s)", e.stage, e.kind, e)
            observe_failure(e.kind)
            raise
        run.state = PipelineState.DONE
        observe_success(len(envelope))
        log.info("encrypted %d bytes of canonical data into %d byte envelope", len(data), len(envelope))
        return envelope
