#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Main entry point for the Green-Acres CRM Lead Bridge.

This module provides the command-line interface: serving the webhook,
parsing a saved notification and feeding a raw email through the email
transport.
"""

import sys
import argparse
import logging
from pathlib import Path
from typing import Optional

from greenacres_bridge import __version__
from greenacres_bridge.config import config
from greenacres_bridge.utils.logger import get_logger, set_log_level

logger = get_logger(__name__)


def setup_argparse() -> argparse.ArgumentParser:
    """
    Set up command-line argument parsing.

    Returns:
        argparse.ArgumentParser: Configured argument parser
    """
    parser = argparse.ArgumentParser(
        description="Green-Acres CRM Lead Bridge",
        epilog="Parses Green-Acres lead notifications and forwards them to the CRM.",
    )

    parser.add_argument(
        "command",
        nargs="?",
        choices=["serve", "parse", "process-email", "check-config"],
        help="Command to execute",
    )

    # Input options
    parser.add_argument(
        "--input",
        "-i",
        type=str,
        help="HTML body (parse) or raw message (process-email); stdin when omitted",
    )
    parser.add_argument(
        "--subject",
        "-s",
        type=str,
        default="",
        help="Notification subject line for parse",
    )
    parser.add_argument(
        "--mail-from",
        type=str,
        default="",
        help="Envelope sender for process-email",
    )
    parser.add_argument(
        "--no-remote",
        action="store_true",
        help="Skip the property page fallback when classifying",
    )
    parser.add_argument(
        "--submit",
        action="store_true",
        help="Post the parsed lead to the CRM (parse only)",
    )

    # Server options
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help=f"Interface to bind (default: {config.api_host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help=f"Port to listen on (default: {config.api_port})",
    )

    # Common options
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information",
    )

    return parser


def read_input(path: Optional[str]) -> bytes:
    """Read a file, or stdin when no path is given."""
    if path:
        return Path(path).read_bytes()
    return sys.stdin.buffer.read()


def parse_notification(
    input_path: Optional[str],
    subject: str = "",
    use_remote: bool = True,
    submit: bool = False,
) -> bool:
    """
    Assemble a lead from a saved HTML body and print it as JSON.

    Args:
        input_path: HTML file, or None for stdin
        subject: Notification subject line
        use_remote: Whether the property page fallback may run
        submit: Whether to post the lead to the CRM

    Returns:
        bool: True if a lead was produced (and accepted, when submitted)
    """
    from greenacres_bridge.classification.classifier import PropertyClassifier
    from greenacres_bridge.classification.remote import PropertyPageFetcher
    from greenacres_bridge.pipeline.assembler import LeadAssembler, LeadParsingError
    from greenacres_bridge.pipeline.bridge import LeadBridge

    html_body = read_input(input_path).decode("utf-8", errors="replace")

    classifier = PropertyClassifier(
        PropertyPageFetcher(config),
        remote_enabled=use_remote and config.remote_classification_enabled,
    )
    bridge = LeadBridge(assembler=LeadAssembler(classifier=classifier, config=config), config=config)

    try:
        result = bridge.process(html_body, subject, submit=submit)
    except LeadParsingError as e:
        logger.error(f"Could not parse notification: {str(e)}")
        return False

    print(result.lead.to_json())

    if submit:
        return result.success
    return True


def process_email(input_path: Optional[str], mail_from: str = "") -> bool:
    """
    Run one raw message through the email transport.

    Args:
        input_path: Message file, or None for stdin
        mail_from: Envelope sender

    Returns:
        bool: True if the message was accepted and produced a lead
    """
    from greenacres_bridge.inbound.email_handler import InboundEmailHandler

    outcome = InboundEmailHandler(config=config).handle(read_input(input_path), mail_from)

    if not outcome.accepted:
        print(f"Rejected: {outcome.reason}", file=sys.stderr)
        return False

    if outcome.result is None:
        print(f"Skipped: {outcome.reason}", file=sys.stderr)
        return False

    return True


def check_config() -> bool:
    """Print configuration problems; True when there are none."""
    errors = config.validate()
    for error in errors:
        print(f"Configuration error: {error}")
    if not errors:
        print("Configuration OK")
    return not errors


def main() -> int:
    """
    Main entry point for the application.

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    parser = setup_argparse()
    args = parser.parse_args()

    if args.version:
        print(f"Green-Acres CRM Lead Bridge v{__version__}")
        return 0

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        set_log_level(logging.DEBUG)
    elif args.log_level:
        set_log_level(args.log_level)
    elif args.command == "parse":
        # Keep stdout clean for the JSON output
        set_log_level(logging.WARNING)

    try:
        if args.command == "serve":
            from greenacres_bridge.api.api import run

            for error in config.validate():
                logger.warning(f"Configuration error: {error}")
            run(args.host, args.port)
            success = True
        elif args.command == "parse":
            success = parse_notification(args.input, args.subject, not args.no_remote, args.submit)
        elif args.command == "process-email":
            success = process_email(args.input, args.mail_from)
        elif args.command == "check-config":
            success = check_config()
        else:
            logger.error(f"Unknown command: {args.command}")
            return 1

        return 0 if success else 1

    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 130  # Standard exit code for SIGINT
    except Exception as e:
        logger.exception(f"Unhandled error: {str(e)}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
