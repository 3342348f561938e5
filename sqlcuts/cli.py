#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
sqlcuts command line (SQLite)

Commands:
  query     Run a read-only statement and print one formatted row per line
  update    Run a write statement (or script) in a single transaction

Notes:
- The directory passed to `update` must be the folder that holds the database;
  it defaults to the database's parent.
- Exit codes: 0 ok, 1 statement failed, 2 a required value is missing.
"""

import argparse
import os
import sys

from .db import get_settings
from .domain.requests import QueryIntent, UpdateIntent
from .logs import configure_logging
from .sandbox import LocalSandbox
from .services.query_svc import handle_query
from .services.update_svc import handle_update

EXIT_OK, EXIT_FAILURE, EXIT_NEEDS_VALUE = 0, 1, 2


def _sandbox(settings: dict) -> LocalSandbox:
    return LocalSandbox(settings["scoped_roots"])


def _finish(resp) -> int:
    if resp.code == "needs_value":
        print(f"missing value: {resp.needs_value}", file=sys.stderr)
        return EXIT_NEEDS_VALUE
    if resp.code == "failure":
        print(resp.error_text, file=sys.stderr)
        return EXIT_FAILURE
    return EXIT_OK


# ---------------- Commands ----------------

def cmd_query(args, settings: dict) -> int:
    sandbox = _sandbox(settings)
    intent = QueryIntent(
        database=sandbox.handle_for(args.database),
        query=args.sql,
        column_separator=args.separator,
        null_value=args.null_value,
        quote_strings=args.quote,
    )
    resp = handle_query(intent, sandbox, settings)
    for row in resp.rows:
        print(row)
    return _finish(resp)


def cmd_update(args, settings: dict) -> int:
    sandbox = _sandbox(settings)
    database = sandbox.handle_for(args.database)
    directory = sandbox.handle_for(args.directory or os.path.dirname(database.path))
    intent = UpdateIntent(database=database, directory=directory, statement=args.sql)
    resp = handle_update(intent, sandbox, settings)
    if resp.code == "success":
        print("OK")
    return _finish(resp)


# ---------------- Entry ----------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sqlcuts", description="Run SQL against a SQLite file")
    parser.add_argument("--config", default=None, help="YAML settings file (default ./config.yaml)")
    sub = parser.add_subparsers()

    p_query = sub.add_parser("query", help="run a read-only statement")
    p_query.add_argument("database")
    p_query.add_argument("sql")
    p_query.add_argument("--separator", default=",")
    p_query.add_argument("--null-value", default="NULL")
    p_query.add_argument("--quote", action="store_true", help="print text values as quoted literals")
    p_query.set_defaults(func=cmd_query)

    p_update = sub.add_parser("update", help="run a write statement")
    p_update.add_argument("database")
    p_update.add_argument("sql")
    p_update.add_argument("--directory", required=False, help="parent folder of the database")
    p_update.set_defaults(func=cmd_update)
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_OK
    settings = get_settings(args.config)
    configure_logging(settings["log_level"])
    return args.func(args, settings)


if __name__ == "__main__":
    sys.exit(main())
