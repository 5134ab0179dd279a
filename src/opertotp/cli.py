import argparse
import logging
import sys
from typing import Callable, List, Optional

from .config import TOTPConfig, load_config
from .hashes import ProviderReference
from .login import check_login
from .secret import generate_secret
from .totp import TOTP

logger = logging.getLogger(__name__)


def show_secret(totp: TOTP, label: Optional[str] = None) -> None:
    print("Secret: {}".format(totp.secret))
    print("Algorithm: {}".format(totp.hash.name))
    print("URI: {}".format(totp.provisioning_uri(name=label or "TOTP")))


def is_code(value: str) -> bool:
    return len(value) == 6 and value.isascii() and value.isdigit() and int(value) != 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="opertotp", description="Generate TOTP secrets or check a TOTP code against a stored secret."
    )
    parser.add_argument("-c", "--config", help="INI file with a [totp] section")
    parser.add_argument("--hash", help="HMAC hash name (sha1, sha256, sha512)")
    parser.add_argument("--window", type=int, help="time steps accepted on either side of now")
    parser.add_argument("--secret", help="stored base32 secret to check a code against")
    parser.add_argument("--login", metavar="PASSWORD", help='check an oper password of the form "<password> <code>"')
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("target", nargs="?", help="a 6 digit code to check, or a label for a new secret")
    return parser


def main(argv: Optional[List[str]] = None, clock: Optional[Callable[[], float]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    overrides = {"hash": args.hash, "window": args.window, "secret": args.secret}
    if any(v is not None for v in overrides.values()):
        merged = dict(vars(config))
        merged.update({k: v for k, v in overrides.items() if v is not None})
        config = TOTPConfig.from_mapping(merged)

    logger.debug("totp config: hash=%s window=%d", config.hash, config.window)
    reference = config.rehash(ProviderReference())
    if not reference:
        print("The TOTP hash provider specified is not loaded.", file=sys.stderr)
        return 1

    checking = args.login is not None or (args.target and is_code(args.target))
    if checking and not config.secret:
        print("No TOTP secret configured to check the code against.", file=sys.stderr)
        return 1
    if checking:
        totp = TOTP(
            config.secret, digest=reference, window=config.window, clock=clock, constant_time=config.constant_time
        )

    if args.login is not None:
        result = check_login(totp, args.login)
        if not result.ok:
            print(result.denial)
            return 1
        print("TOTP accepted, password passed on.")
        return 0

    if checking:
        if not totp.verify(args.target):
            print("TOTP not valid: {}".format(args.target))
            return 1
        print("Fetched your TOTP secret from config:")
        show_secret(totp)
        return 0

    label = args.target
    _, encoded = generate_secret()
    print("Generated TOTP for {}:".format(label) if label else "Generated TOTP:")
    show_secret(TOTP(encoded, digest=reference, window=config.window), label)
    return 0


if __name__ == "__main__":
    sys.exit(main())
