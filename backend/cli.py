#!/usr/bin/env python3
"""
cli.py - command-line authenticator over the account database.

Subcommands:
- add    : store an account (validates the secret first)
- list   : print every account with its current code
- delete : remove an account by id
- code   : one-shot code for a secret, nothing stored
- watch  : live codes with countdown, refreshed every second
- uri    : otpauth URI of a stored account
- serve  : run the HTTP API

eg..:
    authenticator add --label GitHub --secret "JBSW Y3DP EHPK 3PXP" --issuer GitHub
    authenticator add --label Test --generate
    authenticator add --label Work --secret "jbsw y3dp ehpk 3pxp" --strict
    authenticator watch
    authenticator --db /tmp/accounts.db list
"""

import argparse
import logging
import sys
import time

from backend.config import Config, configure_logging, env_setting
from backend.display import CodeTicker, format_rows
from core.base32 import decode, random_secret
from core.otp_core import (
    InvalidSecretError,
    format_otpauth_uri,
    generate_code,
    normalize_secret,
    remaining_seconds,
    validate_secret,
)
from database.db_manager import (
    AccountNotFoundError,
    add_account,
    delete_account,
    get_account,
    init_db,
    list_accounts,
)

logger = logging.getLogger(__name__)

CLEAR_SCREEN = "\033[2J\033[H"


# --- CLI command handlers ---
def cmd_add(args):
    secret = random_secret() if args.generate else normalize_secret(args.secret or "")
    label = args.label.strip()
    if not label or not secret:
        raise ValueError("Label and secret are required")
    if args.strict:
        decode(secret, strict=True)
    validate_secret(secret)

    account_id = add_account(label, secret, args.issuer, db_path=args.db)
    print(f"[+] Added account '{label}' (id={account_id})")
    if args.generate:
        print(f"    Secret: {secret}")


def cmd_list(args):
    ticker = CodeTicker(lambda: list_accounts(db_path=args.db), _print_rows)
    ticker.tick()


def cmd_delete(args):
    delete_account(args.id, db_path=args.db)
    print(f"[+] Deleted account {args.id}")


def cmd_code(args):
    now = int(time.time())
    code = generate_code(normalize_secret(args.secret), now)
    print(f"{code}  (valid ~{remaining_seconds(now):2d}s)")


def cmd_watch(args):
    def render(rows):
        print(CLEAR_SCREEN + format_rows(rows), flush=True)

    ticker = CodeTicker(lambda: list_accounts(db_path=args.db), render,
                        interval=args.interval)
    print("Press Ctrl+C to quit.")
    try:
        ticker.run()
    except KeyboardInterrupt:
        ticker.stop()
        print("\nBye.")


def cmd_uri(args):
    account = get_account(args.id, db_path=args.db)
    if account is None:
        raise AccountNotFoundError(f"Account {args.id} not found")
    print(format_otpauth_uri(account["secret"], account["label"], account["issuer"]))


def cmd_serve(args):
    from backend.app import create_app

    app = create_app({"DATABASE": args.db})
    app.run(host=args.host, port=args.port, debug=args.debug)


def cmd_help(args):
    print("'authenticator -h' for help.")


def _print_rows(rows):
    print(format_rows(rows))


# --- Argparse builder ---
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="TOTP authenticator (HMAC-SHA1, 30s, 6 digits)")
    p.add_argument("--db", default=env_setting("DATABASE", Config.DATABASE),
                   help="Path of the sqlite account database")
    p.add_argument("--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="cmd")
    p.set_defaults(func=cmd_help)

    # add
    pa = sub.add_parser("add", help="Store a new account")
    pa.add_argument("--label", required=True, help="Account name, e.g. GitHub")
    group = pa.add_mutually_exclusive_group(required=True)
    group.add_argument("--secret", help="Base32 secret from the provider")
    group.add_argument("--generate", action="store_true", help="Generate a random secret")
    pa.add_argument("--issuer", default="", help="Issuer shown in authenticator apps")
    pa.add_argument("--strict", action="store_true",
                    help="Reject characters outside the Base32 alphabet instead of skipping them")
    pa.set_defaults(func=cmd_add)

    # list
    pl = sub.add_parser("list", help="Show all accounts with their current code")
    pl.set_defaults(func=cmd_list)

    # delete
    pd = sub.add_parser("delete", help="Delete an account")
    pd.add_argument("--id", type=int, required=True)
    pd.set_defaults(func=cmd_delete)

    # code
    pc = sub.add_parser("code", help="Print the current code for a secret (nothing stored)")
    pc.add_argument("--secret", required=True)
    pc.set_defaults(func=cmd_code)

    # watch
    pw = sub.add_parser("watch", help="Show live codes, refreshed every second")
    pw.add_argument("--interval", type=float, default=1.0, help="Refresh interval (seconds)")
    pw.set_defaults(func=cmd_watch)

    # uri
    pu = sub.add_parser("uri", help="Print the otpauth URI of an account")
    pu.add_argument("--id", type=int, required=True)
    pu.set_defaults(func=cmd_uri)

    # serve
    ps = sub.add_parser("serve", help="Run the HTTP API")
    ps.add_argument("--host", default="127.0.0.1")
    ps.add_argument("--port", type=int, default=4000)
    ps.add_argument("--debug", action="store_true")
    ps.set_defaults(func=cmd_serve)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging("DEBUG" if args.verbose else env_setting("LOG_LEVEL", Config.LOG_LEVEL))

    init_db(args.db)
    try:
        args.func(args)
    except InvalidSecretError:
        print("[!] Invalid secret key", file=sys.stderr)
        return 1
    except (AccountNotFoundError, ValueError) as e:
        print(f"[!] {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
