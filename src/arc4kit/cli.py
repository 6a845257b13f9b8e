"""
Command line interface for arc4kit.

Subcommands:

- ``crypt``: encrypt or decrypt a file (the ARC4 operation is symmetric)
- ``derive``: derive key bytes from a password and salt
- ``sblock``: print a salt-derived or random starting permutation
- ``init-config``: write the sample settings file
- ``save-config``: validate a settings file and install it as JSON
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from pathlib import Path

from arc4kit.crypto import ARC4, ARC4DeriveBytes, ARC4Stream, Arc4Error, SBlock
from arc4kit.infra.config import (
    ConfigAdapter,
    copy_default_config,
    load_config,
    save_config_file,
)
from arc4kit.infra.paths import DEFAULT_CONFIG_FILENAME
from arc4kit.schemas import KeyConfig

logger = logging.getLogger("arc4kit.cli")


def _parse_hex(value: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a hex string: {value!r}") from None


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="arc4kit",
        description="ARC4 stream cipher toolkit",
    )
    ap.add_argument("--config", default=None, help="Path to a settings TOML/JSON file")
    ap.add_argument(
        "--log-level",
        default=None,
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Override the configured log level",
    )

    sub = ap.add_subparsers(dest="cmd", required=True)

    p_crypt = sub.add_parser("crypt", help="Encrypt or decrypt a file")
    p_crypt.add_argument("infile")
    p_crypt.add_argument("outfile")
    key = p_crypt.add_mutually_exclusive_group()
    key.add_argument("--key-hex", type=_parse_hex, default=None, help="Raw key as hex")
    key.add_argument("--password", default=None, help="Password (unsafe on shared shells)")
    start = p_crypt.add_mutually_exclusive_group()
    start.add_argument(
        "--iv-hex", type=_parse_hex, default=None, help="256-byte starting permutation as hex"
    )
    start.add_argument(
        "--salt-hex", type=_parse_hex, default=None, help="Derive the starting permutation from a salt"
    )
    start.add_argument(
        "--random-iv",
        action="store_true",
        help="Start from a fresh random permutation and print it as hex",
    )

    p_derive = sub.add_parser("derive", help="Derive bytes from a password and salt")
    p_derive.add_argument("--password", default=None, help="Password (unsafe on shared shells)")
    p_derive.add_argument(
        "--salt-hex", type=_parse_hex, default=None, help="Salt as hex (random if omitted)"
    )
    p_derive.add_argument("-n", "--length", type=int, default=32, help="Number of bytes (default 32)")

    p_sblock = sub.add_parser("sblock", help="Print a starting permutation as hex")
    src = p_sblock.add_mutually_exclusive_group(required=True)
    src.add_argument("--salt-hex", type=_parse_hex, default=None)
    src.add_argument("--random", action="store_true")

    p_init = sub.add_parser("init-config", help="Write the sample settings file")
    p_init.add_argument("--output", default=DEFAULT_CONFIG_FILENAME)

    p_save = sub.add_parser("save-config", help="Validate a settings file and install it as JSON")
    p_save.add_argument("source", help="TOML or JSON settings file")
    p_save.add_argument("--output", default=None, help="Destination (default: user settings)")

    return ap


def _read_key(args: argparse.Namespace, key_cfg: KeyConfig) -> bytes:
    """Resolve the key from --key-hex, --password or an interactive prompt."""
    if getattr(args, "key_hex", None) is not None:
        return ARC4.key_material(args.key_hex)
    password = args.password
    if password is None:
        password = getpass.getpass("Password: ")
    return ARC4.key_material(password, key_cfg.encoding)


def _cmd_crypt(args: argparse.Namespace, adapter: ConfigAdapter) -> int:
    key_cfg = adapter.get_key_config()
    stream_cfg = adapter.get_stream_config()

    key = _read_key(args, key_cfg)
    sblock: SBlock | bytes | None = args.iv_hex
    if args.salt_hex is not None:
        sblock = SBlock.from_salt(args.salt_hex)
    elif args.random_iv:
        sblock = SBlock.random()
        print(f"iv: {sblock.to_bytes().hex()}")

    infile = Path(args.infile)
    outfile = Path(args.outfile)
    total = 0
    with infile.open("rb") as src, outfile.open("wb") as dst:
        with ARC4Stream(dst, key, sblock, leave_open=stream_cfg.leave_open) as out:
            while chunk := src.read(stream_cfg.chunk_size):
                total += out.write(chunk)

    logger.info("Wrote %d bytes to %s", total, outfile)
    return 0


def _cmd_derive(args: argparse.Namespace, adapter: ConfigAdapter) -> int:
    key_cfg = adapter.get_key_config()
    key = _read_key(args, key_cfg)

    with ARC4DeriveBytes(key, args.salt_hex, salt_size=key_cfg.salt_size) as kdf:
        print(f"salt: {kdf.salt.hex()}")
        print(f"key:  {kdf.get_bytes(args.length).hex()}")
    return 0


def _cmd_sblock(args: argparse.Namespace, adapter: ConfigAdapter) -> int:
    sblock = SBlock.random() if args.random else SBlock.from_salt(args.salt_hex)
    print(sblock.to_bytes().hex())
    return 0


def _cmd_init_config(args: argparse.Namespace, adapter: ConfigAdapter) -> int:
    target = Path(args.output)
    if target.exists():
        print(f"File already exists: {target}", file=sys.stderr)
        return 2
    copy_default_config(target)
    return 0


def _cmd_save_config(args: argparse.Namespace, adapter: ConfigAdapter) -> int:
    print(save_config_file(args.source, args.output))
    return 0


_COMMANDS = {
    "crypt": _cmd_crypt,
    "derive": _cmd_derive,
    "sblock": _cmd_sblock,
    "init-config": _cmd_init_config,
    "save-config": _cmd_save_config,
}


def main(argv: list[str] | None = None) -> int:
    ap = _build_parser()
    args = ap.parse_args(argv)

    try:
        adapter = ConfigAdapter(load_config(args.config, required=False))
        logging.basicConfig(
            level=args.log_level or adapter.get_log_level(),
            format="%(levelname)s %(name)s: %(message)s",
        )
        return _COMMANDS[args.cmd](args, adapter)

    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        return 2
    except (Arc4Error, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
