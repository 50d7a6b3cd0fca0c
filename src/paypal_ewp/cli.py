from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import load_config
from .errors import EWPError
from .pipeline.orchestrator import EWPEncryptor
from .smime.mime import read_mime_body
from .utils.logging import get_logger


def parse_pair(text: str) -> tuple[str, str]:
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected name=value, got {text!r}")
    return name, value


def cmd_encrypt(args: argparse.Namespace) -> int:
    cfg = load_config(cert_dir=args.cert_dir, cipher=args.cipher, tmp_dir=args.tmp_dir)
    try:
        envelope = EWPEncryptor.from_cert_dir(config=cfg).encrypt(args.params)
    except EWPError as e:
        print(f"error: {e.kind}: {e}", file=sys.stderr)
        return 1
    if args.output:
        Path(args.output).write_text(envelope, encoding="ascii")
        print(f"wrote {args.output} ({len(envelope)} bytes)")
    else:
        sys.stdout.write(envelope)
    return 0


def cmd_extract(args: argparse.Namespace) -> int:
    try:
        sys.stdout.write(read_mime_body(args.input))
    except EWPError as e:
        print(f"error: {e.kind}: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser("ewp")
    p.add_argument("-v", "--verbose", action="store_true", help="log pipeline stages to stdout")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_enc = sub.add_parser("encrypt", help="sign and encrypt name=value payment variables")
    p_enc.add_argument("--cert-dir", dest="cert_dir")
    p_enc.add_argument("--cipher", choices=["des-ede3-cbc", "aes128-cbc", "aes256-cbc"])
    p_enc.add_argument("--tmp-dir", dest="tmp_dir")
    p_enc.add_argument("--output")
    p_enc.add_argument("params", nargs="*", type=parse_pair)
    p_enc.set_defaults(func=cmd_encrypt)

    p_ext = sub.add_parser("extract", help="print the body of an S/MIME envelope file")
    p_ext.add_argument("input")
    p_ext.set_defaults(func=cmd_extract)

    args = p.parse_args(argv)
    # stdout carries the envelope; keep INFO chatter off it unless asked
    get_logger().setLevel(logging.DEBUG if args.verbose else logging.WARNING)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
