import pytest
from pydantic import ValidationError

from paypal_ewp.config import PipelineConfig, load_config


def test_defaults_match_processor_expectations():
    cfg = PipelineConfig()
    assert cfg.cipher == "des-ede3-cbc"
    assert cfg.sign_options == ("Binary", "NoAttributes", "NoCerts")
    assert cfg.encrypt_options == ("Binary", "NoAttributes", "NoCerts")
    assert cfg.tmp_prefix == "PayPal_"
    assert cfg.signer_key_name == "project-prvkey.pem"
    assert cfg.recipient_cert_name == "paypal_cert_pem.pem"


def test_config_is_immutable():
    cfg = PipelineConfig()
    with pytest.raises(ValidationError):
        cfg.cipher = "aes256-cbc"


def test_env_and_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("EWP_CERT_DIR", str(tmp_path))
    monkeypatch.setenv("EWP_CIPHER", "AES256-CBC")
    monkeypatch.setenv("EWP_SIGN_OPTIONS", "Binary, NoCerts")
    cfg = load_config(tmp_prefix="Test_")
    assert cfg.cert_dir == str(tmp_path)
    assert cfg.cipher == "aes256-cbc"
    assert cfg.sign_options == ("Binary", "NoCerts")
    assert cfg.tmp_prefix == "Test_"


def test_none_overrides_ignored(monkeypatch):
    monkeypatch.setenv("EWP_CIPHER", "aes128-cbc")
    assert load_config(cipher=None).cipher == "aes128-cbc"


@pytest.mark.parametrize("kwargs", [
    {"cipher": "rc2-40-cbc"},
    {"sign_options": ("Binary", "Bogus")},
    {"sign_options": ("NoAttributes", "NoCapabilities")},
    {"encrypt_options": ("DetachedSignature",)},
    {"sign_digest": "md5"},
])
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValidationError):
        PipelineConfig(**kwargs)
