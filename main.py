import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

"""
Netbank Export - Main Entry Point

This script is the command-line interface (CLI) for netbank-export. It logs on
through the configured NetbankSession, picks an account, and writes its
transaction history to a file in the requested format.

Usage:
    python main.py list                              # List accounts
    python main.py download -a <name or number>      # Download posted transactions
    python main.py download-pending -a <account>     # Download pending transactions

Command-line flags override the environment (NETBANK_*), which overrides the
YAML config file. Credentials therefore fall back to NETBANK_USERNAME and
NETBANK_PASSWORD when -u/-p are not given.

Dependencies:
- argparse: command-line parsing.
- logging: verbose output with --debug.
- netbank_export.*: configuration, serializers, templating and export orchestration.
"""
from netbank_export.config import Config
from netbank_export.exceptions import AccountNotFoundError, NetbankExportError, SessionError
from netbank_export.exporter import build_export, default_date_range, find_account, write_export
from netbank_export.formats import ExportFormat
from netbank_export.render import render_account, render_accounts
from netbank_export.session import NetbankSession, load_session_class
from netbank_export.utils import TransactionNormalizer

logger = logging.getLogger("netbank_export")


def cli_date(value: str) -> date:
    """argparse type for DD/MM/YYYY (or ISO) dates."""
    try:
        return TransactionNormalizer.parse_date(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Netbank Export - Account history exporter")
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="YAML configuration file (default: ./config.yaml or ~/.netbank_export/config.yaml)"
    )
    parser.add_argument("-u", "--username", help="Client number (default: $NETBANK_USERNAME)")
    parser.add_argument("-p", "--password", help="Password (default: $NETBANK_PASSWORD)")
    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Enable verbose logging"
    )

    commands = parser.add_subparsers(dest="command", metavar="<command>")
    commands.required = True

    commands.add_parser("list", help="List accounts")

    def add_export_options(cmd: argparse.ArgumentParser):
        cmd.add_argument("-a", "--account", required=True, help="Account name or number")
        cmd.add_argument(
            "-o", "--output",
            help="Output file name template (tokens: <name> <number> <from> <to> <ext>)"
        )
        cmd.add_argument(
            "--format",
            type=str.lower,
            choices=ExportFormat.names(),
            help="Output file format (default: default_format from config, else json)"
        )

    download = commands.add_parser("download", help="Download transaction history for an account")
    add_export_options(download)
    download.add_argument("-f", "--from", dest="from_date", type=cli_date,
                          help="History range start, DD/MM/YYYY (default: history_months ago)")
    download.add_argument("-t", "--to", dest="to_date", type=cli_date,
                          help="History range end, DD/MM/YYYY (default: today)")

    pending = commands.add_parser("download-pending", help="Download pending transactions for an account")
    add_export_options(pending)

    return parser


def load_config(args: argparse.Namespace) -> Config:
    """Resolve configuration with the command-line flags on top."""
    return Config.load(
        args.config,
        username=args.username,
        password=args.password,
        debug=args.debug,
        output_template=getattr(args, "output", None),
        default_format=getattr(args, "format", None),
    )


def get_session(config: Config) -> NetbankSession:
    """Instantiate the configured NetbankSession implementation."""
    if not config.session_class:
        raise SessionError("No session implementation configured (set NETBANK_SESSION_CLASS)")
    return load_session_class(config.session_class)()


def logon(session: NetbankSession, config: Config):
    return session.logon(config.username, config.password.get_secret_value())


def run_list(session: NetbankSession, config: Config) -> int:
    print(render_accounts(logon(session, config)))
    return 0


def run_download(session: NetbankSession, args: argparse.Namespace, config: Config,
                 pending: bool = False, today: Optional[date] = None) -> int:
    today = today or date.today()
    account = find_account(logon(session, config), args.account)
    logger.debug(render_account(account))

    if pending:
        from_date = to_date = None
        history = session.download_history(account)
        count = len(history.pendings)
    else:
        default_from, default_to = default_date_range(today, config.history_months)
        from_date = args.from_date or default_from
        to_date = args.to_date or default_to
        history = session.download_history(account, from_date, to_date)
        count = len(history.transactions)
    print(f"Retrieved {count} {'pending ' if pending else ''}transactions")

    descriptor, payload = build_export(
        history, account, config.default_format, config.output_template,
        from_date, to_date, pending=pending, today=today,
    )
    print(f"filename: {descriptor.filename}")
    write_export(descriptor, payload)
    return 0


def main(argv: Optional[List[str]] = None, session: Optional[NetbankSession] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = load_config(args)

    if not config.username or not config.password:
        parser.error("credentials required: use -u/-p or set NETBANK_USERNAME and NETBANK_PASSWORD")

    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        session = session or get_session(config)
        if args.command == "list":
            return run_list(session, config)
        return run_download(session, args, config, pending=args.command == "download-pending")
    except AccountNotFoundError as e:
        print(str(e))
        return 1
    except NetbankExportError as e:
        print(f"Error: {e}")
        if config.debug:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
