#!/usr/bin/env python3
"""
IPP Print Client - Main Entry Point

Print files on a network printer over IPP using named profiles, and read
printer status and ink levels.

Usage:
    ippprint [global options] <command> [command options]

Commands:
    print FILE [PROFILE]    Print a file with a profile ID or name
    list                    List available print profiles
    test                    Show printer status (--json for JSON output)
    info                    Generate a PDF status report and print it

Environment Variables:
    PRINTER_URI         Printer URI (required; --printer overrides it)
    IPPPRINT_PROFILES   JSON file with custom profiles
    LOG_LEVEL           Logging level
    LOG_FILE            Log file path
"""

import argparse
import logging
import sys
from typing import Callable, Optional

from ippprint.config.settings import settings
from ippprint.core.errors import PrintClientError
from ippprint.core.options import ProfileOverrides
from ippprint.core.page_range import parse_page_range
from ippprint.core.profiles import (PROFILE_CATEGORIES, ProfileRegistry,
                                    load_profiles_file, media_display_name)
from ippprint.printer.client import PrinterClient
from ippprint.printer.report import format_snapshot
from ippprint.utils import log_unexpected, setup_logging, validate_configuration

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], PrinterClient]


def parse_arguments(argv=None):

    parser = argparse.ArgumentParser(
        prog="ippprint",
        description="Print files and read printer status over IPP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
            Examples:
                ippprint list                                   # Show profiles
                ippprint print document.pdf 17                  # Use profile ID 17
                ippprint print photo.jpg photo-4x6-borderless-glossy
                ippprint print document.pdf 17 --pages "2:"     # Pages 2 to end
                ippprint print calendar.pdf 7 -q 3 --pages 1-5  # Override settings
                ippprint test --json                            # Status as JSON
                ippprint info                                   # Print a status report

            Environment Variables:
                PRINTER_URI=http://localhost:631/printers/EPSON_ET-8550_Series
                    """
    )

    parser.add_argument('--printer', default=settings.PRINTER_URI,
                        help='Printer URI (default: PRINTER_URI environment variable)')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: from config)')
    parser.add_argument('--log-file',
                        help='Log file path (default: console only)')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug mode')
    parser.add_argument('--version', action='version',
                        version=f'IPP Print Client v{settings.VERSION}')

    commands = parser.add_subparsers(dest='command', metavar='command')
    commands.required = True

    print_parser = commands.add_parser('print', help='Print a file using a profile')
    print_parser.add_argument('file', help='File to print')
    print_parser.add_argument('profile', nargs='?',
                              help='Profile ID or name (default: 0 / "default")')
    print_parser.add_argument('-p', '--profile', dest='profile_option',
                              help='Profile name or ID (alternative to positional)')
    print_parser.add_argument('--pages',
                              help="Page range: '1', '1-5', '2:' (from 2), ':5' (to 5)")
    print_parser.add_argument('-q', '--quality', type=int, default=0,
                              help='Quality: 3 (draft), 4 (normal), 5 (best)')
    print_parser.add_argument('--paper', help='Paper size override')
    print_parser.add_argument('--tray', help='Tray override: Photo, Main, Rear, Auto')
    print_parser.add_argument('--media', help='Media type override')
    print_parser.add_argument('--copies', type=int, default=0, help='Number of copies')
    print_parser.add_argument('--strict-pages', action='store_true',
                              help='Fail on an unparsable page range instead of printing all pages')

    list_parser = commands.add_parser('list', help='List available print profiles')
    list_parser.add_argument('--all', action='store_true',
                             help='Include custom profiles without a numeric ID')

    test_parser = commands.add_parser('test', help='Test the IPP connection and show printer status')
    test_parser.add_argument('--json', action='store_true', help='Output in JSON format')

    info_parser = commands.add_parser('info', help='Generate and print a PDF status report')
    info_parser.add_argument('--output-dir', default=None,
                             help='Directory for the report PDF (default: REPORT_DIR)')

    return parser.parse_args(argv)


def create_registry() -> ProfileRegistry:
    registry = ProfileRegistry()
    if settings.PROFILES_FILE:
        load_profiles_file(registry, settings.PROFILES_FILE)
    return registry


def run_print(args, registry: ProfileRegistry, client_factory: ClientFactory) -> int:
    validate_configuration(args.printer)

    profile = args.profile_option or args.profile or "default"
    if args.strict_pages and args.pages:
        parse_page_range(args.pages, strict=True)

    overrides = ProfileOverrides(
        page_range=args.pages,
        quality=args.quality,
        paper_size=args.paper,
        tray=args.tray,
        media_type=args.media,
        copies=args.copies,
    )
    options = registry.resolve_with_overrides(profile, overrides)

    print("=========================================")
    print("PRINT JOB")
    print("=========================================")
    print(f"File:        {args.file}")
    print(f"Profile:     {profile}")
    print(f"Paper size:  {options.paper_size}")
    print(f"Tray:        {options.tray}")
    print(f"Media type:  {options.media_type}")
    print(f"Quality:     {options.quality} (3=draft, 4=normal, 5=best)")
    print(f"Pages:       {options.page_range}")
    print(f"Copies:      {options.copies}")
    print("=========================================")
    print()

    result = client_factory(args.printer).print_file(args.file, options)
    if not result.succeeded:
        job_text = f" (Job ID: {result.job_id})" if result.job_id else ""
        print(f"Print failed: {result.error}{job_text}", file=sys.stderr)
        return 1

    print(f"✓ Print job sent successfully! (Job ID: {result.job_id})")
    return 0


def run_list(args, registry: ProfileRegistry, client_factory: ClientFactory) -> int:
    print("Available Print Profiles:")
    print("========================")

    profiles = registry.list(include_unnumbered=args.all)
    listed = set()

    for category, first_id, last_id in PROFILE_CATEGORIES:
        members = [p for p in profiles if first_id <= p.profile_id <= last_id]
        if not members:
            continue
        print()
        print(f"{category}:")
        for profile in members:
            _print_profile_line(profile)
            listed.add(profile.name)

    custom = [p for p in profiles if p.name not in listed]
    if custom:
        print()
        print("Custom:")
        for profile in custom:
            _print_profile_line(profile)

    print("\nUsage:")
    print("  ippprint print <file> <profile-id-or-name>")
    print("\nExamples:")
    print("  ippprint print document.pdf 17                        # Use profile ID 17")
    print("  ippprint print photo.jpg photo-4x6-borderless-glossy  # Use full name")
    print("  ippprint print document.pdf 17 --pages \"2:\"           # Pages 2 to end")
    print("  ippprint print calendar.pdf 7 --quality 3 --pages 1-5 # Override settings")
    return 0


def _print_profile_line(profile):
    options = profile.options
    profile_id = str(profile.profile_id) if profile.profile_id >= 0 else "-"
    print(f"  {profile_id:<2}  {profile.name:<35}  {options.paper_size}, {options.tray}, "
          f"{media_display_name(options.media_type)}, Quality {options.quality}")


def run_test(args, registry: ProfileRegistry, client_factory: ClientFactory) -> int:
    validate_configuration(args.printer)

    if not args.json:
        print("=============================================")
        print("IPP Connection Test")
        print("=============================================")
        print(f"Testing connection to: {args.printer}\n")

    snapshot = client_factory(args.printer).query_status()

    if args.json:
        print(snapshot.to_json())
    else:
        print(format_snapshot(snapshot))
        print("\n✓ Connection successful!")
    return 0


def run_info(args, registry: ProfileRegistry, client_factory: ClientFactory) -> int:
    validate_configuration(args.printer)

    print(f"Fetching printer information from: {args.printer}")
    print("Generating PDF report...")

    pdf_path, result = client_factory(args.printer).print_status_report(args.output_dir)
    print(f"\n✓ PDF report created: {pdf_path}")
    if not result.succeeded:
        print(f"Printing the report failed: {result.error}", file=sys.stderr)
        return 1

    print(f"✓ Print job sent! (Job ID: {result.job_id})")
    print(f"\nPDF file saved for reference: {pdf_path}")
    return 0


COMMANDS = {
    'print': run_print,
    'list': run_list,
    'test': run_test,
    'info': run_info,
}


def main(argv=None, registry: Optional[ProfileRegistry] = None,
         client_factory: ClientFactory = PrinterClient) -> int:

    args = parse_arguments(argv)

    # Adjust log level for debug mode
    if args.debug:
        args.log_level = args.log_level or 'DEBUG'

    # Setup logging
    setup_logging(args.log_level, args.log_file)

    try:
        if registry is None:
            registry = create_registry()
        return COMMANDS[args.command](args, registry, client_factory)

    except PrintClientError as e:
        logger.debug(f"{type(e).__name__}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        log_unexpected(args.command, e)
        print(f"Fatal error: {e}", file=sys.stderr)
        return 1


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
