"""Simple CLI for looking up wallet holdings through a running WalletLens API"""

import argparse
import asyncio
import sys
from typing import List, Optional

from .client import HoldingRow, WalletViewer, to_rows
from .config import settings


def _truncate(value: str, width: int) -> str:
    if len(value) <= width:
        return value
    return value[: width - 1] + "…"


def print_holdings(rows: List[HoldingRow], address: str, address_url: Optional[str]) -> None:
    """Pretty print holdings as a table"""
    if not rows:
        print("No tokens or NFTs found.")
        return

    print(f"\n📦 Assets for {address}")
    if address_url:
        print(f"   {address_url}")
    print("=" * 100)
    print(f"{'Type':<7} {'Name':<24} {'Symbol':<10} {'Balance/Token ID':<24} Contract Address")
    print("-" * 100)

    for row in rows:
        print(
            f"{row.type:<7} {_truncate(row.name, 24):<24} {_truncate(row.symbol, 10):<10} "
            f"{_truncate(row.amount, 24):<24} {row.contract}"
        )
        if row.image:
            print(f"        image: {row.image}")
        if row.metadata:
            for line in row.metadata.splitlines():
                print(f"        {line}")


async def cli_holdings(address: str, chain: Optional[str], api_url: Optional[str]) -> int:
    """CLI command to look up holdings"""
    viewer = WalletViewer(base_url=api_url, chain=chain)
    print(f"🔍 Fetching tokens and NFTs for {address.strip()} on {viewer.chain}...")

    await viewer.submit(address)

    if viewer.error:
        print(f"❌ Error: {viewer.error}")
        return 1

    print_holdings(to_rows(viewer.entries, viewer.chain), viewer.address, viewer.address_url)
    return 0


def serve(host: Optional[str], port: Optional[int], reload: bool) -> int:
    import uvicorn

    uvicorn.run(
        "walletlens.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="WalletLens CLI")
    subparsers = parser.add_subparsers(dest="command")

    holdings_parser = subparsers.add_parser("holdings", help="Show ERC-20 tokens and NFTs for a wallet")
    holdings_parser.add_argument("address", help="Wallet address")
    holdings_parser.add_argument("--chain", default=None, help=f"Chain (default: {settings.default_chain})")
    holdings_parser.add_argument("--api-url", default=None, help=f"API base URL (default: {settings.api_base_url})")

    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)
    serve_parser.add_argument("--reload", action="store_true")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "holdings":
        return asyncio.run(cli_holdings(args.address, args.chain, args.api_url))

    if args.command == "serve":
        return serve(args.host, args.port, args.reload)

    print(f"❌ Unknown command: {args.command}")
    parser.print_help()
    return 2


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
