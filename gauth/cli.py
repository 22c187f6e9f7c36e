#!/usr/bin/env python3
"""
cli.py — Command line wrapper around the gauth library.

Subcommands:
- secret : create a new Base32 secret
- code   : print the code for a secret (now or at a given time step)
- verify : check a code against a secret
- url    : print the QR-code image URL and otpauth URI
- watch  : show the current code in real time
"""

import argparse
import logging
import sys
import time

from gauth import otp, qr, secret
from gauth.errors import AuthenticatorError

logger = logging.getLogger("gauth")


# --- CLI command handlers ---
def cmd_secret(args):
    print(secret.create_secret(args.length))
    return 0


def cmd_code(args):
    code = otp.get_code(args.secret, args.time_step, args.code_length)
    print(code)
    return 0


def cmd_verify(args):
    ok = otp.verify_code(
        args.secret,
        args.code,
        discrepancy=args.discrepancy,
        time_step=args.time_step,
        code_length=args.code_length,
    )
    if ok:
        print("[+] Code is VALID")
        return 0
    print("[-] Code is INVALID")
    return 1


def cmd_url(args):
    print(qr.qr_code_url(
        args.name, args.secret, args.title,
        width=args.width, height=args.height, level=args.level,
    ))
    print(qr.otpauth_uri(args.name, args.secret, args.title))
    return 0


def cmd_watch(args):
    print(f"Press Ctrl+C to quit. Generating {args.code_length}-digit codes every {otp.TIME_STEP}s...\n")
    last_code = None
    try:
        while True:
            code, remaining = otp.totp(args.secret, time.time(), args.code_length)
            if code != last_code:
                print(f"Code: {code}  (valid ~{remaining:2d}s)")
                last_code = code
            else:
                print(f".. {remaining:2d}s left", end='\r', flush=True)
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nBye.")
    return 0


def cmd_help(args):
    print("'gauth -h' for help.")
    return 0


# --- Argparse builder ---
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="gauth", description="Google Authenticator TOTP tool")
    p.add_argument("--verbose", action="store_true", help="Verbose output")
    sub = p.add_subparsers(dest="cmd")
    p.set_defaults(func=cmd_help)

    # secret
    ps = sub.add_parser("secret", help="Create a random Base32 secret")
    ps.add_argument("--length", type=int, default=secret.DEFAULT_SECRET_LENGTH,
                    help="Secret length in Base32 characters (16-128, 5 bits each)")
    ps.set_defaults(func=cmd_secret)

    # code
    pc = sub.add_parser("code", help="Print the code for a secret")
    pc.add_argument("--secret", required=True, help="Base32 secret")
    pc.add_argument("--time-step", type=int, help="floor(unix_time / 30), default: now")
    pc.add_argument("--code-length", type=int, default=otp.DEFAULT_CODE_LENGTH)
    pc.set_defaults(func=cmd_code)

    # verify
    pv = sub.add_parser("verify", help="Verify a code")
    pv.add_argument("--secret", required=True, help="Base32 secret")
    pv.add_argument("--code", required=True, help="Code to verify")
    pv.add_argument("--discrepancy", type=int, default=otp.DEFAULT_DISCREPANCY,
                    help="Allowed +/- 30s steps")
    pv.add_argument("--time-step", type=int, help="Current time step, default: now")
    pv.add_argument("--code-length", type=int, default=otp.DEFAULT_CODE_LENGTH)
    pv.set_defaults(func=cmd_verify)

    # url
    pu = sub.add_parser("url", help="Print QR-code URL and otpauth URI")
    pu.add_argument("--name", required=True, help="Account label, e.g. alice@example.com")
    pu.add_argument("--secret", required=True, help="Base32 secret")
    pu.add_argument("--title", help="Issuer label")
    pu.add_argument("--width", type=int, default=qr.DEFAULT_QR_SIZE)
    pu.add_argument("--height", type=int, default=qr.DEFAULT_QR_SIZE)
    pu.add_argument("--level", choices=qr.QR_LEVELS, default=qr.DEFAULT_QR_LEVEL)
    pu.set_defaults(func=cmd_url)

    # watch
    pw = sub.add_parser("watch", help="Show the code in real time")
    pw.add_argument("--secret", required=True, help="Base32 secret")
    pw.add_argument("--code-length", type=int, default=otp.DEFAULT_CODE_LENGTH)
    pw.set_defaults(func=cmd_watch)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="[+] %(message)s")
    try:
        logger.debug("Running command %s", args.cmd)
        return args.func(args)
    except AuthenticatorError as e:
        print(f"[!] {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
