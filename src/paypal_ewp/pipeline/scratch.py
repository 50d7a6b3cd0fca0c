"""Per-call scratch files for the sign/encrypt primitives.

ScratchSpace creates one exclusively-opened file per named slot, with a
uuid4-derived name so concurrent calls (threads or processes sharing the same
temp dir) never collide. Leaving the block removes every slot it created,
whether the block returned or raised.
"""
from __future__ import annotations

import os
import uuid
from typing import Dict, Iterable

from ..errors import ScratchIOError
from ..utils.logging import get_logger

log = get_logger("scratch")

SLOTS = ("data", "signed", "encrypted")


class ScratchSpace:
    def __init__(self, tmp_dir: str, prefix: str, slots: Iterable[str] = SLOTS):
        self.tmp_dir = tmp_dir
        self.prefix = prefix
        self.slots = tuple(slots)
        self.paths: Dict[str, str] = {}

    def _create(self) -> str:
        path = os.path.join(self.tmp_dir, f"{self.prefix}{uuid.uuid4().hex}")
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        except OSError as e:
            raise ScratchIOError(f"Can't create scratch file '{path}'", resource=path) from e
        os.close(fd)
        return path

    def __enter__(self) -> "ScratchSpace":
        try:
            for slot in self.slots:
                self.paths[slot] = self._create()
        except BaseException:
            self.release()
            raise
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __getitem__(self, slot: str) -> str:
        return self.paths[slot]

    def release(self) -> None:
        while self.paths:
            _, path = self.paths.popitem()
            try:
                os.unlink(path)
            except FileNotFoundError:
                pass
            except OSError as e:
                log.warning("scratch cleanup failed for %s: %s", path, e)
