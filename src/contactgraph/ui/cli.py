# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

import pydantic
from dotenv import load_dotenv

from contactgraph.app import identify_contact
from contactgraph.config import ConfigurationError, configure_logging
from contactgraph.domain.errors import ValidationError
from contactgraph.ui.schema import IdentifyRequest, IdentifyResponse

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile contact identities")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log reconciliation details at DEBUG level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    identify = subparsers.add_parser(
        "identify",
        help="Reconcile an email and/or phone number and print the consolidated contact",
    )
    identify.add_argument("--email", type=str, help="Observed email address")
    identify.add_argument("--phone", type=str, help="Observed phone number")
    identify.add_argument(
        "--json",
        dest="payload",
        type=str,
        help='Request payload, e.g. \'{"email": "a@x.com", "phoneNumber": "123"}\' ("-" reads stdin)',
    )
    identify.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Indent the printed JSON response",
    )

    args = parser.parse_args(list(argv))
    if args.payload is not None and (args.email is not None or args.phone is not None):
        parser.error("--json cannot be combined with --email/--phone")
    return args


def _build_request(args: argparse.Namespace) -> IdentifyRequest:
    if args.payload is None:
        return IdentifyRequest(email=args.email, phone_number=args.phone)
    payload = sys.stdin.read() if args.payload == "-" else args.payload
    try:
        return IdentifyRequest.model_validate_json(payload)
    except pydantic.ValidationError as exc:
        raise ValueError(f"Invalid identify payload: {exc}") from exc


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(verbose=parsed_args.verbose)

    try:
        request = _build_request(parsed_args)
        view = identify_contact(request.email, request.phone_number)
    except (ValueError, ValidationError):
        log.exception("Invalid identify request")
        sys.exit(2)
    except ConfigurationError:
        log.exception("Invalid configuration")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during reconciliation")
        sys.exit(1)

    print(IdentifyResponse.from_view(view).to_json(indent=parsed_args.indent))


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
