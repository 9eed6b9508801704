"""
Command-line interface for the i18n extractor.

Usage Examples:
    Create a configuration and empty locale files:
        jsx-i18n init --locales en ko ja

    Extract text into the locale dictionaries:
        jsx-i18n extract
        jsx-i18n extract --namespace home --format nested --backup

    Rewrite components to use the runtime lookup:
        jsx-i18n transform
        jsx-i18n transform --dry-run src/App.tsx

    Reports and maintenance:
        jsx-i18n check-duplicates
        jsx-i18n check-unused
        jsx-i18n clean --dry-run
        jsx-i18n status
        jsx-i18n exclusion --add "/^[A-Z]{2,}$/" --reason "acronyms"
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.table import Table

from . import __version__
from .config.manager import ConfigManager
from .config.schema import I18nConfig
from .dictionaries.analyzer import KeyAnalyzer
from .dictionaries.store import locale_file_path, write_dictionary
from .extraction.exclusions import ExclusionPolicy
from .extraction.transformer import Transformer
from .manager import TranslationManager
from .utils.core.exceptions import ConfigurationError, DictionaryWriteError, ValidationError

logger = logging.getLogger(__name__)

console = Console()

DEFAULT_CONFIG_PATH = Path("config/i18n.json")
DEFAULT_BACKUP_PATH = Path("./backup")


def setup_logging(verbose: bool = False) -> None:
    """
    Set up logging configuration.

    Args:
        verbose: Enable verbose logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="jsx-i18n",
        description="Automatic i18n management for JSX/TSX component sources",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _ = parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    _ = parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"Configuration file, YAML or JSON (default: {DEFAULT_CONFIG_PATH})",
    )
    _ = parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    init = subparsers.add_parser("init", help="Create the configuration and locale files")
    _ = init.add_argument("--source-dir", type=Path, help="Source directory (default: ./src)")
    _ = init.add_argument("--locales-dir", type=Path, help="Locales directory (default: ./src/locales)")
    _ = init.add_argument("--locales", nargs="+", help="Supported locales (default: en ko)")
    _ = init.add_argument("--default-locale", help="Default locale (default: first of --locales)")
    _ = init.add_argument("--key-generation", choices=["text", "hash"])
    _ = init.add_argument("--format", dest="output_format", choices=["flat", "nested"])
    _ = init.add_argument("--force", action="store_true", help="Overwrite an existing configuration")

    extract = subparsers.add_parser("extract", help="Extract translations from source files")
    _ = extract.add_argument("-n", "--namespace", help="Namespace for the translations")
    _ = extract.add_argument("-f", "--format", dest="output_format", choices=["flat", "nested"])
    _ = extract.add_argument(
        "-b", "--backup", action="store_true", help="Back up the locale files before writing"
    )
    _ = extract.add_argument("--dry-run", action="store_true", help="Report without writing files")

    transform = subparsers.add_parser("transform", help="Rewrite sources to use the runtime lookup")
    _ = transform.add_argument("paths", nargs="*", type=Path, help="Files to rewrite (default: all)")
    _ = transform.add_argument("--dry-run", action="store_true", help="Report without writing files")

    _ = subparsers.add_parser("check-duplicates", help="Find keys referenced from several places")
    _ = subparsers.add_parser("check-unused", help="Find keys no source file references")
    _ = subparsers.add_parser("check-missing", help="Find referenced keys missing from the default locale")

    clean = subparsers.add_parser("clean", help="Remove unused translations")
    _ = clean.add_argument(
        "-d", "--dry-run", action="store_true", help="Show what would be removed without making changes"
    )

    _ = subparsers.add_parser("status", help="Show translation status")

    exclusion = subparsers.add_parser("exclusion", help="Manage translation exclusion rules")
    group = exclusion.add_mutually_exclusive_group(required=True)
    _ = group.add_argument("-a", "--add", metavar="PATTERN", help="Add exclusion pattern")
    _ = group.add_argument("-r", "--remove", metavar="PATTERN", help="Remove exclusion pattern")
    _ = group.add_argument("-l", "--list", action="store_true", help="List all exclusion patterns")
    _ = exclusion.add_argument("--reason", help="Reason for exclusion (with --add)")

    return parser


def load_config(config_path: Path, **overrides: object) -> I18nConfig:
    config = ConfigManager.load_config(config_path)
    return ConfigManager.with_overrides(config, **overrides)


def cmd_init(args: argparse.Namespace) -> int:
    config_path: Path = args.config
    if config_path.exists() and not args.force:
        logger.error(f"{config_path} already exists (use --force to overwrite)")
        return 1

    locales: list[str] | None = args.locales
    default_locale: str | None = args.default_locale or (locales[0] if locales else None)
    config = ConfigManager.with_overrides(
        ConfigManager.default_config(),
        source_dir=args.source_dir,
        locales_dir=args.locales_dir,
        supported_locales=locales,
        default_locale=default_locale,
        key_generation=args.key_generation,
        output_format=args.output_format,
    )
    ConfigManager.save_config(config, config_path)

    for locale in config.supported_locales:
        path = locale_file_path(config.locales_dir, locale)
        if not path.exists():
            write_dictionary(path, {}, locale)
            logger.info(f"Created {path}")

    console.print(f"[green]Initialized i18n configuration in {config_path}[/green]")
    return 0


def cmd_extract(args: argparse.Namespace) -> int:
    config = load_config(args.config, namespace=args.namespace, output_format=args.output_format)
    if args.backup and config.backup_path is None:
        config = ConfigManager.with_overrides(config, backup_path=DEFAULT_BACKUP_PATH)
    scan, result = TranslationManager(config).extract_and_update(dry_run=args.dry_run)

    for path, error in scan.failed_files:
        console.print(f"[yellow]Skipped {path}: {error.reason}[/yellow]")
    for warning in result.warnings:
        console.print(f"[yellow]{warning}[/yellow]")

    table = Table(title="Extraction Summary")
    table.add_column("Locale", style="cyan")
    table.add_column("Keys", justify="right")
    table.add_column("New", justify="right")
    table.add_column("Written")
    failed = {locale for locale, _ in result.failed_locales}
    for locale, translations in result.dictionaries.items():
        written = "dry run" if args.dry_run else ("[red]failed[/red]" if locale in failed else "[green]yes[/green]")
        table.add_row(locale, str(len(translations)), str(len(result.added_keys.get(locale, []))), written)
    console.print(table)
    console.print(f"{scan}\n{result}")

    return 1 if result.failed_locales else 0


def cmd_transform(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    transformer = Transformer(config, ExclusionPolicy(config.exclusions_file))
    paths: list[Path] = args.paths
    run = transformer.transform_directory(paths or None, write=not args.dry_run)

    for path in run.changed_files:
        console.print(f"[green]{'would rewrite' if args.dry_run else 'rewrote'}[/green] {path}")
    for path, error in run.failed_files:
        console.print(f"[red]failed[/red] {path}: {error}")
    console.print(str(run))
    return 1 if run.failed_files else 0


def cmd_check_duplicates(args: argparse.Namespace) -> int:
    duplicates = KeyAnalyzer(load_config(args.config)).find_duplicates()
    if not duplicates:
        console.print("[green]No duplicate keys found.[/green]")
        return 0

    console.print("[yellow]Found duplicate keys:[/yellow]")
    for key, locations in duplicates.items():
        console.print(f"\n[cyan]Key: {key}[/cyan]")
        for location in locations:
            console.print(f"  {location}")
    return 0


def cmd_check_unused(args: argparse.Namespace) -> int:
    unused = KeyAnalyzer(load_config(args.config)).find_unused()
    if not unused:
        console.print("[green]No unused keys found.[/green]")
        return 0

    console.print("[yellow]Found unused keys:[/yellow]")
    for key in unused:
        console.print(f"[cyan]{key}[/cyan]")
    return 0


def cmd_check_missing(args: argparse.Namespace) -> int:
    missing = KeyAnalyzer(load_config(args.config)).find_missing()
    if not missing:
        console.print("[green]No missing keys found.[/green]")
        return 0

    console.print("[yellow]Keys referenced in source but missing from the default locale:[/yellow]")
    for key in missing:
        console.print(f"[cyan]{key}[/cyan]")
    return 1


def cmd_clean(args: argparse.Namespace) -> int:
    result = KeyAnalyzer(load_config(args.config)).remove_unused(dry_run=args.dry_run)
    if not result.unused_keys:
        console.print("[green]No unused translations found.[/green]")
        return 0

    console.print(f"[yellow]Found {len(result.unused_keys)} unused translations:[/yellow]")
    for key in result.unused_keys:
        console.print(f"[cyan]{key}[/cyan]")
    if not args.dry_run:
        console.print("\n[green]Unused translations have been removed.[/green]")
    return 1 if result.failed_locales else 0


def cmd_status(args: argparse.Namespace) -> int:
    status = KeyAnalyzer(load_config(args.config)).translation_status()

    table = Table(title="Translation Status")
    table.add_column("Locale", style="cyan")
    table.add_column("Total keys", justify="right")
    table.add_column("Completed", justify="right")
    table.add_column("Missing", justify="right")
    table.add_column("Progress", justify="right")
    for locale, entry in status.items():
        table.add_row(
            locale.upper(), str(entry.total), str(entry.completed), str(entry.empty), f"{entry.percentage}%"
        )
    console.print(table)
    return 0


def cmd_exclusion(args: argparse.Namespace) -> int:
    config_path: Path = args.config
    if config_path.exists():
        rules_file = load_config(config_path).exclusions_file
    else:
        rules_file = config_path.parent / "i18n-exclusions.json"
    policy = ExclusionPolicy(rules_file)

    if args.list:
        console.print("[cyan]Current exclusion rules:[/cyan]")
        for rule in policy.list_rules():
            console.print(f"\nPattern: {rule.pattern}")
            if rule.reason:
                console.print(f"Reason: {rule.reason}")
        return 0

    if args.add:
        _ = policy.add_rule(args.add, args.reason)
        console.print(f"[green]Added exclusion rule: {args.add}[/green]")
        return 0

    if policy.remove_rule(args.remove):
        console.print(f"[green]Removed exclusion rule: {args.remove}[/green]")
    else:
        console.print(f"[yellow]No exclusion rule matches: {args.remove}[/yellow]")
    return 0


COMMANDS = {
    "init": cmd_init,
    "extract": cmd_extract,
    "transform": cmd_transform,
    "check-duplicates": cmd_check_duplicates,
    "check-unused": cmd_check_unused,
    "check-missing": cmd_check_missing,
    "clean": cmd_clean,
    "status": cmd_status,
    "exclusion": cmd_exclusion,
}


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        return COMMANDS[args.command](args)
    except OSError as e:
        logger.error(str(e))
        return 1
    except (ConfigurationError, DictionaryWriteError, ValidationError) as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
