from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from claimstack import __version__, app
from claimstack.adapters.fixtures import JsonFileClaimSource, JsonFileOverrideSource
from claimstack.config import ConfigurationError, configure_logging
from claimstack.domain.cancellation import CancelScope
from claimstack.domain.errors import DataAccessError
from claimstack.domain.formatting import FormatContext

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from claimstack.domain.model import EffectiveClaim

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve effective product claims per market")
    parser.add_argument(
        "--fixture",
        type=str,
        help="Read claims and overrides from a JSON export instead of the database",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Abort if storage reads take longer than this many seconds",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve = subparsers.add_parser("resolve", help="Resolve claims for one product and market")
    resolve.add_argument("product_id", help="Product identifier")
    resolve.add_argument("country", help="ISO-3166 alpha-2 market code")
    resolve.add_argument("--product-name", type=str, help="Product name for the intro sentence")
    resolve.add_argument("--brand-name", type=str, help="Brand name for the intro sentence")
    resolve.add_argument(
        "--json",
        action="store_true",
        help="Emit the formatted claims as JSON (prompt-builder input)",
    )

    matrix = subparsers.add_parser("matrix", help="Resolve one product for several markets")
    matrix.add_argument("product_id", help="Product identifier")
    matrix.add_argument("countries", nargs="+", help="ISO-3166 alpha-2 market codes")

    return parser.parse_args(list(argv))


def _install_fixture(path: str) -> None:
    app.configure(
        app.build_resolver(
            claim_source=JsonFileClaimSource(path),
            override_source=JsonFileOverrideSource(path),
        )
    )


def _claim_row(claim: EffectiveClaim) -> dict[str, object]:
    return {
        "text": claim.text,
        "type": claim.type.value,
        "level": claim.level.value,
        "resolved_country_code": claim.resolved_country_code,
        "was_overridden": claim.was_overridden,
        "provenance": list(claim.provenance),
    }


def _write(text: str) -> None:
    sys.stdout.write(text + "\n")


def _run_resolve(args: argparse.Namespace, scope: CancelScope | None) -> None:
    claims = app.resolve_effective_claims(args.product_id, args.country, scope=scope)
    styled = app.format_for_display(
        claims,
        FormatContext(product_name=args.product_name, brand_name=args.brand_name),
    )
    if args.json:
        _write(styled.to_json())
        return
    if styled.introductory_sentence is None:
        _write(f"No claims resolved for {args.product_id} in {args.country.upper()}.")
        return
    _write(styled.introductory_sentence)
    for group in styled.grouped_claims:
        _write(f"\n{group.level}")
        for text in group.allowed_claims:
            _write(f"  + {text}")
        for text in group.disallowed_claims:
            _write(f"  - {text}")


def _run_matrix(args: argparse.Namespace, scope: CancelScope | None) -> None:
    matrix = app.resolve_claims_matrix(args.product_id, args.countries, scope=scope)
    payload = {market: [_claim_row(claim) for claim in claims] for market, claims in matrix.items()}
    _write(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else None)

    try:
        scope = (
            CancelScope.with_timeout(parsed_args.timeout)
            if parsed_args.timeout is not None
            else None
        )
        if parsed_args.fixture:
            _install_fixture(parsed_args.fixture)
        if parsed_args.command == "resolve":
            _run_resolve(parsed_args, scope)
        else:
            _run_matrix(parsed_args, scope)
    except (ValueError, ConfigurationError) as exc:
        log.error("Invalid input: %s", exc)  # noqa: TRY400
        sys.exit(2)
    except (DataAccessError, TimeoutError):
        log.exception("Could not resolve claims")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
