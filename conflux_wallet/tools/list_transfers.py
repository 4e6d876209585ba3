"""
Print one page of an address's transfers with block hash and revert rate as JSON.

Usage:
    python -m conflux_wallet.tools.list_transfers --address 0x1... [--token 0x8...] [--page 1] [--page-size 10]

Server locations, node URL and concurrency come from env / .env (see conflux_wallet.config.env).
"""

from __future__ import annotations

import argparse
import json
import sys

from conflux_wallet.config import get_settings
from conflux_wallet.core.exceptions import BatchEnrichmentFailed, WalletClientError
from conflux_wallet.rich_client import RichClient
from conflux_wallet.wallet_logging import get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="List address transfers enriched with block revert rate")
    ap.add_argument("--address", required=True, help="Account address")
    ap.add_argument("--token", default=None, help="Token contract address; omit for native coin transactions")
    ap.add_argument("--page", type=int, default=1)
    ap.add_argument("--page-size", type=int, default=10)
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        client = RichClient.from_settings(get_settings())
        page = client.get_account_token_transfers(args.address, args.token, args.page, args.page_size)
    except BatchEnrichmentFailed as e:
        logger.error("list_transfers_enrich_failed", address=args.address, failures=e.messages)
        return 1
    except WalletClientError as e:
        logger.error("list_transfers_failed", address=args.address, error=str(e))
        return 1
    except ValueError as e:
        logger.error("list_transfers_bad_args", error=str(e))
        return 2

    out = {"total": page.total, "list": [r.to_dict() for r in page.records]}
    json.dump(out, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
