"""Command line entry point: ``keyfmt show`` and ``keyfmt convert``."""

import argparse
import sys
from collections.abc import Callable
from enum import StrEnum
from typing import TypeVar

from keyfmt.cli.passwords import parse_password_arg
from keyfmt.cli.streams import read_input, write_output
from keyfmt.conversion.engine import convert
from keyfmt.core.errors import KeyfmtError
from keyfmt.core.logging import get_logger
from keyfmt.core.settings import KeyfmtSettings
from keyfmt.crypto.types import (
    Algorithm,
    ConversionTarget,
    Encoding,
    Format,
    KeyType,
)
from keyfmt.discovery.describe import describe
from keyfmt.discovery.engine import discover

E = TypeVar("E", bound=StrEnum)

PASSWORD_FORMS = "pass:<value> or file:<path>"


def _choice(enum_cls: type[E]) -> Callable[[str], E]:
    """argparse ``type=`` callable accepting any spelling ``parse`` accepts."""

    def parse(value: str) -> E:
        try:
            return enum_cls.parse(value)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    parse.__name__ = enum_cls.__name__.lower()
    return parse


def cmd_show(args: argparse.Namespace, settings: KeyfmtSettings) -> int:
    """Describe the input key on stdout."""
    raw = read_input(args.infile)
    with discover(raw, parse_password_arg(args.inpass)) as descriptor:
        sys.stdout.write(describe(descriptor))
    return 0


def cmd_convert(args: argparse.Namespace, settings: KeyfmtSettings) -> int:
    """Convert the input key and write the result."""
    raw = read_input(args.infile)
    target = ConversionTarget(
        encoding=args.encoding,
        format=args.format,
        algorithm=args.alg,
        key_type=args.keytype,
        key_id=args.kid,
        input_password=parse_password_arg(args.inpass),
        output_password=parse_password_arg(args.outpass),
    )
    with discover(raw, target.input_password) as descriptor:
        output = convert(descriptor, target, settings)
    write_output(args.outfile, output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Parser with the ``show`` and ``convert`` sub-commands."""
    p = argparse.ArgumentParser("keyfmt", description="Inspect and convert key files.")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_show = sub.add_parser("show", help="describe a key")
    p_show.add_argument("--in", dest="infile", help="input file (default stdin)")
    p_show.add_argument("--inpass", help=f"input password, {PASSWORD_FORMS}")
    p_show.set_defaults(func=cmd_show)

    p_conv = sub.add_parser("convert", help="convert a key to another format")
    p_conv.add_argument("--in", dest="infile", help="input file (default stdin)")
    p_conv.add_argument("--out", dest="outfile", help="output file (default stdout)")
    p_conv.add_argument("--inpass", help=f"input password, {PASSWORD_FORMS}")
    p_conv.add_argument("--outpass", help=f"output password, {PASSWORD_FORMS}")
    p_conv.add_argument(
        "--format", type=_choice(Format), help="PKCS1, PKCS8, SPKI or SEC1"
    )
    p_conv.add_argument("--encoding", type=_choice(Encoding), help="PEM, DER or JWK")
    p_conv.add_argument(
        "--keytype", type=_choice(KeyType), help="PUBLIC, PRIVATE or KEYPAIR"
    )
    p_conv.add_argument("--alg", type=_choice(Algorithm), help="target algorithm")
    p_conv.add_argument("--kid", help="key identifier")
    p_conv.set_defaults(func=cmd_convert)
    return p


def main(argv: list[str] | None = None) -> int:
    """Run one command; keyfmt errors are printed and give exit status 1."""
    settings = KeyfmtSettings()
    logger = get_logger(settings.log_level)
    args = build_parser().parse_args(argv)
    try:
        return args.func(args, settings)
    except KeyfmtError as exc:
        logger.debug("%s failed", args.cmd, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
