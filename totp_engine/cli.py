#!/usr/bin/env python3
"""
cli.py — Command line over the SQLite-backed authenticator.

Subcommands:
- init       : create the account secret, print the otpauth URI
- totp       : show the live TOTP code (refreshes every second, Ctrl+C quits)
- hotp       : HOTP code for an explicit counter
- uri        : print the otpauth URI of the enrolled account
- verify     : check a code (skew window + replay guard)
- clear-used : forget consumed codes
"""

import argparse
import logging
import sys

from database import SQLiteStore
from database.setup_database import DATABASE_FILE

from . import hotp, timestep
from .authenticator import Authenticator
from .errors import NotEnrolledError, OTPError
from .ticker import CodeTicker

logger = logging.getLogger(__name__)


def _authenticator(args) -> Authenticator:
    return Authenticator(
        SQLiteStore(args.db),
        step_seconds=args.period,
        digits=args.digits,
        window=args.window,
    )


# --- CLI command handlers ---
def cmd_init(args) -> int:
    auth = _authenticator(args)
    record = auth.enroll(args.account, args.issuer, secret_length=args.secret_bytes)
    print(f"[*] Enrolled '{record.account}' ({record.issuer or 'no issuer'})")
    print("    otpauth URI (import into an authenticator app):")
    print("   ", auth.provisioning_uri())
    return 0


def cmd_totp(args) -> int:
    auth = _authenticator(args)
    auth.account()  # fail fast before starting the ticker
    last = {"code": None}

    def render():
        snap = auth.snapshot()
        if snap.code != last["code"]:
            print(f"\nTOTP ({auth.digits}d): {snap.code}  (valid ~{snap.remaining:2d}s)")
            if args.breakdown:
                b = snap.breakdown
                print(f"    counter={b.counter} bytes={b.counter_bytes}")
                print(f"    hmac={b.hmac}")
                print(f"    offset={b.offset} truncated={b.truncated}")
            last["code"] = snap.code
        else:
            print(f".. {snap.remaining:2d}s left", end='\r', flush=True)

    print(f"Press Ctrl+C to quit. Generating {auth.digits}-digit TOTP every {auth.step_seconds}s...")
    ticker = CodeTicker(render, interval=1.0).start()
    try:
        ticker.wait()
    except KeyboardInterrupt:
        print("\nBye.")
    finally:
        ticker.stop()
    return 0


def cmd_hotp(args) -> int:
    auth = _authenticator(args)
    code = hotp.compute_code(auth.account().secret, args.counter, args.digits)
    print(f"HOTP({args.digits}d, counter={args.counter}): {code}")
    return 0


def cmd_uri(args) -> int:
    print(_authenticator(args).provisioning_uri())
    return 0


def cmd_verify(args) -> int:
    verdict = _authenticator(args).verify(args.code)
    if verdict.accepted:
        print("[+] TOTP code is VALID")
        return 0
    print(f"[-] TOTP code rejected ({verdict.value})")
    return 1


def cmd_clear_used(args) -> int:
    _authenticator(args).clear_used_codes()
    print("[*] Used-code history cleared")
    return 0


# --- Argparse builder ---
def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--db", default=DATABASE_FILE, help="SQLite database file")
    common.add_argument("--digits", type=int, default=hotp.DEFAULT_DIGITS, help="Number of OTP digits (6-8)")
    common.add_argument("--period", type=int, default=timestep.DEFAULT_TIME_STEP, help="TOTP time step (seconds)")
    common.add_argument("--window", type=int, default=timestep.DEFAULT_WINDOW, help="Allowed +/- step window")
    common.add_argument("--verbose", action="store_true", help="Verbose logging")

    p = argparse.ArgumentParser(prog="totp-demo", description="TOTP (HMAC-SHA1) demo authenticator")
    sub = p.add_subparsers(dest="cmd")

    pi = sub.add_parser("init", parents=[common], help="Generate the account secret and print the otpauth URI")
    pi.add_argument("--account", default="user@example", help="Account label for otpauth URI")
    pi.add_argument("--issuer", default="otp-tool", help="Issuer label for otpauth URI")
    pi.add_argument("--secret-bytes", type=int, default=20, help="Secret length in bytes")
    pi.set_defaults(func=cmd_init)

    pt = sub.add_parser("totp", parents=[common], help="Show the TOTP code in real time")
    pt.add_argument("--breakdown", action="store_true", help="Print the HMAC / truncation steps")
    pt.set_defaults(func=cmd_totp)

    ph = sub.add_parser("hotp", parents=[common], help="Generate the HOTP code for a specific counter")
    ph.add_argument("--counter", type=int, required=True)
    ph.set_defaults(func=cmd_hotp)

    pu = sub.add_parser("uri", parents=[common], help="Print the otpauth URI")
    pu.set_defaults(func=cmd_uri)

    pv = sub.add_parser("verify", parents=[common], help="Verify a TOTP code")
    pv.add_argument("--code", required=True, help="OTP code to verify")
    pv.set_defaults(func=cmd_verify)

    pc = sub.add_parser("clear-used", parents=[common], help="Forget consumed codes")
    pc.set_defaults(func=cmd_clear_used)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except NotEnrolledError:
        print("[!] No account enrolled. Run 'totp-demo init' first.", file=sys.stderr)
        return 1
    except OTPError as e:
        logger.debug("Command failed: %s", e)
        print("[!] verification failed", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
