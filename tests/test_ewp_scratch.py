import os

import pytest

from paypal_ewp.errors import ScratchIOError
from paypal_ewp.pipeline.scratch import ScratchSpace


def test_slots_created_and_released(scratch_dir):
    with ScratchSpace(str(scratch_dir), "PayPal_") as s:
        paths = [s["data"], s["signed"], s["encrypted"]]
        assert len(set(paths)) == 3
        for p in paths:
            assert os.path.exists(p)
            assert os.path.basename(p).startswith("PayPal_")
    assert os.listdir(scratch_dir) == []


def test_released_on_error(scratch_dir):
    with pytest.raises(RuntimeError):
        with ScratchSpace(str(scratch_dir), "PayPal_") as s:
            with open(s["signed"], "wb") as f:
                f.write(b"partial")
            raise RuntimeError("boom")
    assert os.listdir(scratch_dir) == []


def test_slot_already_removed_is_fine(scratch_dir):
    with ScratchSpace(str(scratch_dir), "x") as s:
        os.unlink(s["data"])
    assert os.listdir(scratch_dir) == []


def test_unusable_directory(tmp_path):
    missing = tmp_path / "does-not-exist"
    with pytest.raises(ScratchIOError) as ei:
        with ScratchSpace(str(missing), "x"):
            pass
    assert str(missing) in ei.value.resource


def test_names_unique_across_instances(scratch_dir):
    seen = set()
    for _ in range(50):
        with ScratchSpace(str(scratch_dir), "p") as s:
            seen.update(s.paths.values())
    assert len(seen) == 150
