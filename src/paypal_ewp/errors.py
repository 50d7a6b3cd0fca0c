"""Failure kinds surfaced by the encryption pipeline.

Each error carries a stable ``kind`` string used in logs, metrics and HTTP
responses. ``stage`` is filled in by the orchestrator with the pipeline state
that was active when the failure happened.

Extra fields default so instances survive pickling (BaseException rebuilds
from args and restores __dict__ afterwards).
"""
from __future__ import annotations

from typing import Optional


class EWPError(Exception):
    kind = "ewp_error"

    def __init__(self, message: str, *, stage: Optional[str] = None):
        super().__init__(message)
        self.stage = stage


class MissingCredential(EWPError):
    kind = "missing_credential"

    def __init__(self, message: str, *, name: str = "", path: str = ""):
        super().__init__(message)
        self.name = name
        self.path = path


class SigningFailed(EWPError):
    kind = "signing_failed"


class EncryptionFailed(EWPError):
    kind = "encryption_failed"


class ScratchIOError(EWPError):
    kind = "io_error"

    def __init__(self, message: str, *, resource: str = ""):
        super().__init__(message)
        self.resource = resource


class DecodeError(EWPError):
    kind = "decode_error"


__all__ = [
    "EWPError",
    "MissingCredential",
    "SigningFailed",
    "EncryptionFailed",
    "ScratchIOError",
    "DecodeError",
]
