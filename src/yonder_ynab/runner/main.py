"""
CLI main entry point.
"""

import argparse
import logging
import sys
from pathlib import Path

from ..config import Config, ConfigValidationError, create_default_config, load_config
from ..schemas.yonder_csv import ParseError
from ..services.importer import BatchValidationError, create_importer
from ..services.notifier import format_failure
from ..ynab_client import YnabClient, YnabError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_cli() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="yonder-ynab",
        description="Import Yonder CSV exports into YNAB",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: $YONDER_YNAB_CONFIG or config.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # serve command
    serve_parser = subparsers.add_parser(
        "serve", help="Run the webhook service (HTTP import + Telegram bot)"
    )
    serve_parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind the web server (default: 127.0.0.1)",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8080,
        help="Port for the web server (default: 8080)",
    )

    # import command
    import_parser = subparsers.add_parser("import", help="Import a local Yonder CSV file")
    import_parser.add_argument("file", type=Path, help="Yonder CSV export")
    import_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the YNAB payload without importing",
    )

    # check command
    subparsers.add_parser("check", help="Validate config and YNAB access")

    # init-config command
    init_parser = subparsers.add_parser("init-config", help="Write a default config file")
    init_parser.add_argument(
        "path",
        type=Path,
        nargs="?",
        default=Path("config.yaml"),
        help="Where to write the config (default: config.yaml)",
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing file",
    )

    return parser


def cmd_serve(config_path: Path | None, host: str = "127.0.0.1", port: int = 8080) -> int:
    """Start the web service."""
    from ..web.app import run_server

    try:
        run_server(host=host, port=port, config_path=str(config_path) if config_path else None)
    except KeyboardInterrupt:
        print("\n✓ Server stopped")

    return 0


def cmd_import(config: Config, file: Path, dry_run: bool = False) -> int:
    """Import a local CSV file."""
    if not file.exists():
        print(f"❌ File not found: {file}")
        return 1

    data = file.read_bytes()
    importer = create_importer(config)

    if dry_run:
        try:
            batch = importer.build_batch(data)
        except (ParseError, BatchValidationError) as e:
            print(f"❌ {format_failure(e, config.secrets())}")
            return 1

        print(batch.to_json())
        print(f"\n✓ Dry run: {len(batch)} transaction(s) would be imported")
        return 0

    try:
        config.ensure_valid()
        result = importer.import_csv(data)
    except (ConfigValidationError, ParseError, BatchValidationError, YnabError) as e:
        logger.debug("Import failed", exc_info=True)
        print(f"❌ {format_failure(e, config.secrets())}")
        return 1

    print(f"✓ {result}")
    return 0


def cmd_check(config: Config) -> int:
    """Validate configuration and YNAB access."""
    errors = config.validate()
    if errors:
        print("❌ Configuration errors:")
        for error in errors:
            print(f"   - {error}")
        return 1
    print("✓ Configuration is valid")

    client = YnabClient(
        base_url=config.ynab.base_url,
        token=config.ynab.api_key,
        timeout=config.ynab.timeout,
    )

    if not client.test_connection():
        print("❌ Failed to connect to YNAB (check ynab.api_key)")
        return 1
    print("✓ Connected to YNAB")

    try:
        account = client.get_account(config.ynab.budget_id, config.ynab.account_id)
    except YnabError as e:
        print(f"❌ Account lookup failed: {e}")
        return 1

    print(f"✓ Account: {account.get('name', '?')} ({account.get('type', '?')})")
    if account.get("closed"):
        print("⚠ Account is closed")

    print(f"   Telegram bot: {'enabled' if config.telegram.enabled else 'disabled'}")
    print(f"   Webhook: {'enabled' if config.webhook.api_key else 'disabled'}")
    return 0


def cmd_init_config(path: Path, force: bool = False) -> int:
    """Write the default config file."""
    if path.exists() and not force:
        print(f"❌ {path} already exists (use --force to overwrite)")
        return 1

    create_default_config(path)
    print(f"✓ Wrote {path}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_cli()
    parsed = parser.parse_args(args)

    setup_logging(parsed.verbose)

    if not parsed.command:
        parser.print_help()
        return 1

    if parsed.command == "init-config":
        return cmd_init_config(parsed.path, parsed.force)
    if parsed.command == "serve":
        return cmd_serve(parsed.config, parsed.host, parsed.port)

    # Load config
    try:
        config = load_config(parsed.config)
    except Exception as e:
        print(f"❌ Failed to load config: {e}")
        return 1

    # Route to command
    if parsed.command == "import":
        return cmd_import(config, parsed.file, parsed.dry_run)
    elif parsed.command == "check":
        return cmd_check(config)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
