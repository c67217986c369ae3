from __future__ import annotations

import argparse
import json
import logging
import sys

from MN_App.config import load_config
from MN_App.ledger import read_ledgers
from MN_App.logger import setup_logging
from MN_Genesis.builder import GenesisAccountsBuilder
from MN_Genesis.state import GenesisState, load_genesis
from MN_Tool_Box.errors import GenesisToolError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="generate-accounts",
        description="Generate mainnet genesis accounts from token-distribution ledger files",
    )
    parser.add_argument("genesis_file", help="existing genesis file to update")
    parser.add_argument("accounts_path", help="ledger CSV file or directory of ledger files")
    parser.add_argument(
        "-o", "--output", default="",
        help="write updated genesis state to file instead of overwriting the existing genesis file",
    )
    parser.add_argument("--config", default="genesis_tool.yaml")
    parser.add_argument("--log-level", default=None)
    parser.add_argument("--log-json", action="store_true")
    parser.add_argument(
        "--reconcile-account", default=None,
        help="credit base units lost to truncation to this (already generated) account",
    )
    parser.add_argument(
        "--target-supply", default=None,
        help="with --reconcile-account, top the base denom supply up to this amount (display units)",
    )
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.target_supply is not None and not args.reconcile_account:
        parser.error("--target-supply requires --reconcile-account")

    try:
        cfg = load_config(args.config)
    except GenesisToolError as e:
        print(e, file=sys.stderr)
        return 1
    setup_logging(level=args.log_level or cfg.logging.level, json_output=args.log_json or cfg.logging.json)

    try:
        document = load_genesis(args.genesis_file)
        state = GenesisState(document, cfg.chain)
        builder = GenesisAccountsBuilder(state, cfg.chain, genesis_time=document.genesis_time)
        summary = builder.add_records(read_ledgers(args.accounts_path))
        if args.reconcile_account:
            builder.reconcile(args.reconcile_account, args.target_supply)
        output_path = builder.finalize().write(args.output or args.genesis_file)
    except GenesisToolError as e:
        logger.error("genesis account generation failed: %s", e)
        print(e, file=sys.stderr)
        return 1

    result = {"status": "ok", "output": str(output_path), **summary.to_dict()}
    result["supply"] = [coin.to_dict() for coin in state.supply]
    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
