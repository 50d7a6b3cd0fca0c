from paypal_ewp.smime.armor import armor_body, wrap_envelope_file


def test_armor_exact_bytes():
    assert armor_body("AAAA\nBBBB\n") == "-----BEGIN PKCS7-----\nAAAA\nBBBB\n-----END PKCS7-----\n"


def test_wrap_strips_headers_keeps_base64_text(tmp_path):
    p = tmp_path / "encrypted"
    p.write_text(
        "MIME-Version: 1.0\n"
        "Content-Type: application/x-pkcs7-mime; smime-type=enveloped-data\n"
        "\n"
        "MIIB\n"
        "Zm9v\n"
    )
    assert wrap_envelope_file(str(p)) == "-----BEGIN PKCS7-----\nMIIB\nZm9v\n-----END PKCS7-----\n"
