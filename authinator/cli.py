"""
cli.py — Command line front end for authinator.

Subcommands:
- create : store a new named secret (prompts when arguments are missing)
- list   : every entry with its current code
- code   : current + next code for one entry, copied to the clipboard
- remove : delete an entry
- serve  : run the HTTP API
- help   : usage guide

`authinator NAME` is shorthand for `authinator code NAME`. Subcommand names
take precedence, so an entry called "list" has to be read with
`authinator code list`.
"""

import argparse
import logging
import sys

from . import clipboard, config
from .core import otp_core
from .core.errors import AuthinatorError, DerivationError, DuplicateNameError, NotFoundError
from .database import SecretStore

logger = logging.getLogger(__name__)

COMMANDS = ("create", "list", "code", "remove", "serve", "help")

GUIDE = """\
Examples:
  authinator create github JBSWY3DPEHPK3PXP
  authinator list
  authinator github
  authinator remove github
  authinator serve

The secret key is the base32 text shown by the service you are enabling
2FA for. Entries are kept in clear text in the data file (default
totp.json, override with --data-file or AUTHINATOR_DATA_FILE).

HTTP API (authinator serve, port 8055):
  GET    /totps          list all entries
  POST   /totps          create an entry, JSON body {"name": ..., "secret": ...}
  GET    /totps/{name}   current code for an entry
  DELETE /totps/{name}   delete an entry
"""


def _store(args) -> SecretStore:
    path = config.data_file(args.data_file)
    logger.debug("Using data file %s", path)
    return SecretStore(path)


# --- CLI command handlers ---
def cmd_help(args):
    build_parser().print_help()
    return 0


def cmd_create(args):
    name = args.name
    secret = args.secret
    try:
        if name is None:
            name = input("Enter name: ").strip()
        if secret is None:
            secret = input("Enter TOTP secret: ").strip()
    except EOFError:
        # stdin closed before both answers were given
        print()
    if not name or not secret:
        print("[!] Both a name and a secret are required.")
        return 1

    try:
        _store(args).add(name, secret)
    except DuplicateNameError:
        print("[!] Entry with this name already exists.")
        return 1
    print("Entry created successfully!")
    return 0


def cmd_list(args):
    entries = _store(args).list()
    if not entries:
        print("No entries found.")
        return 0

    print("Stored TOTP entries:")
    for entry in entries:
        try:
            derived = otp_core.derive(entry.secret)
        except DerivationError as e:
            print(f"[!] Error generating TOTP code for {entry.name}: {e}")
            continue
        print(f" - {entry.name}: {derived.code} (expires in {derived.expires_in} seconds)")
    return 0


def cmd_code(args):
    try:
        entry = _store(args).find(args.name)
    except NotFoundError:
        print("No entry found with that name.")
        return 1

    try:
        derived = otp_core.derive(entry.secret)
    except DerivationError as e:
        print(f"[!] Error generating TOTP code: {e}")
        return 1

    print(f"Your current TOTP code is: {derived.code} (Time remaining: {derived.expires_in} seconds)")
    print(f"After this, your next TOTP code will be: {derived.next_code}")
    if not args.no_copy and clipboard.copy_code(derived.code):
        print("Current code copied to clipboard.")
    return 0


def cmd_remove(args):
    try:
        _store(args).remove(args.name)
    except NotFoundError:
        print(f"No entry found with the name: {args.name}")
        return 1
    print(f"Entry '{args.name}' has been removed.")
    return 0


def cmd_serve(args):
    # imported here so the plain CLI commands never load Flask
    from .backend import create_app

    host = config.host(args.host)
    port = config.port(args.port)
    app = create_app(config.data_file(args.data_file))
    print(f"Serving on http://{host}:{port}")
    app.run(host=host, port=port, threaded=True)
    return 0


# --- Argparse builder ---
def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--data-file", help=f"JSON data file (default: ${config.DATA_FILE_ENV} or {config.DEFAULT_DATA_FILE})")
    common.add_argument("--verbose", action="store_true", help="Debug logging")

    p = argparse.ArgumentParser(
        prog="authinator",
        description="Store TOTP secrets and print their current codes.",
        epilog=GUIDE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = p.add_subparsers(dest="cmd", metavar="command")
    p.set_defaults(func=cmd_help)

    # create
    pc = sub.add_parser("create", parents=[common], help="Create a new TOTP entry")
    pc.add_argument("name", nargs="?", help="Entry name (prompted when omitted)")
    pc.add_argument("secret", nargs="?", help="Base32 secret (prompted when omitted)")
    pc.set_defaults(func=cmd_create)

    # list
    pl = sub.add_parser("list", parents=[common], help="List entries with their current codes")
    pl.set_defaults(func=cmd_list)

    # code
    pg = sub.add_parser("code", parents=[common], help="Show the current and next code for an entry")
    pg.add_argument("name")
    pg.add_argument("--no-copy", action="store_true", help="Do not copy the code to the clipboard")
    pg.set_defaults(func=cmd_code)

    # remove
    pr = sub.add_parser("remove", parents=[common], help="Remove an entry")
    pr.add_argument("name")
    pr.set_defaults(func=cmd_remove)

    # serve
    ps = sub.add_parser("serve", parents=[common], help="Serve the REST API")
    ps.add_argument("--host", help=f"Bind address (default: {config.DEFAULT_HOST})")
    ps.add_argument("--port", type=int, help=f"Port (default: {config.DEFAULT_PORT})")
    ps.set_defaults(func=cmd_serve)

    # help
    ph = sub.add_parser("help", help="Show this guide")
    ph.set_defaults(func=cmd_help)

    return p


def _route(argv):
    """`authinator NAME ...` -> `authinator code NAME ...`."""
    if argv and argv[0] not in COMMANDS and not argv[0].startswith("-"):
        return ["code"] + argv
    return argv


def main(argv=None) -> int:
    argv = _route(list(sys.argv[1:] if argv is None else argv))
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except (AuthinatorError, ValueError) as e:
        print(f"[!] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
