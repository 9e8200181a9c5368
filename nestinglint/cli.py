"""
Command-line interface for the nesting lint.

Reads serialized syntax trees, analyzes them and writes the diagnostics as
JSON for a rendering tool to consume.
"""

import argparse
import logging
import sys
import os
from typing import Optional, List

from nestinglint import __version__
from nestinglint.config import Config, load_lint_config, create_default_config
from nestinglint.core.engine import Analyzer
from nestinglint.core.tree import load_unit
from nestinglint.exceptions import NestingLintError
from nestinglint.formatters import JSONFormatter


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="nestinglint",
        description="Structural-complexity lint for nesting depth, if-else chains and then-block size.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  nestinglint check unit.json                 # Analyze one tree document
  nestinglint check a.json b.yaml -j 8        # Analyze several units in parallel
  nestinglint check unit.json -c lint.toml    # Use a specific config file
  nestinglint init                            # Create config file
  nestinglint list-rules                      # Show the rules and their limits
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Check command
    check_parser = subparsers.add_parser("check", help="Analyze syntax tree documents")
    check_parser.add_argument(
        "trees",
        nargs="+",
        help="JSON or YAML tree documents, one compilation unit each",
    )
    check_parser.add_argument(
        "-c", "--config",
        help="Path to configuration file",
    )
    check_parser.add_argument(
        "-o", "--output",
        help="Output file (default: stdout)",
    )
    check_parser.add_argument(
        "-j", "--jobs",
        type=int,
        default=4,
        help="Number of parallel workers (default: 4)",
    )
    check_parser.add_argument(
        "--debug",
        action="store_true",
        help="Record a traversal trace and include it in the output",
    )

    # Init command
    init_parser = subparsers.add_parser("init", help="Create a configuration file")
    init_parser.add_argument(
        "-f", "--force",
        action="store_true",
        help="Overwrite existing config file",
    )

    # List-rules command
    rules_parser = subparsers.add_parser("list-rules", help="List available rules")
    rules_parser.add_argument(
        "-c", "--config",
        help="Path to configuration file",
    )

    return parser


def cmd_check(args: argparse.Namespace) -> int:
    """Execute the check command."""
    start_dir = os.path.dirname(os.path.abspath(args.trees[0]))
    config = load_lint_config(args.config, start_dir=start_dir)

    if args.debug and not config.debug:
        data = config.to_dict()
        data["debug"] = True
        config = Config.from_dict(data)
    if config.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s", stream=sys.stderr)

    units = [load_unit(path) for path in args.trees]

    analyzer = Analyzer(config, max_workers=args.jobs)
    result = analyzer.analyze_units(units)

    formatter = JSONFormatter(include_trace=config.debug)
    output = formatter.format_result(result)

    # Write output
    if args.output:
        with open(args.output, 'w', encoding="utf-8") as f:
            f.write(output)
    else:
        print(output)

    # Return exit code based on findings
    if result.aborted_units:
        return 2
    elif result.total_diagnostics > 0:
        return 1
    return 0


def cmd_init(args: argparse.Namespace) -> int:
    """Execute the init command."""
    config_file = ".nestinglint.yaml"

    if os.path.exists(config_file) and not args.force:
        print(f"Configuration file {config_file} already exists.")
        print("Use --force to overwrite.")
        return 1

    content = create_default_config()

    with open(config_file, 'w', encoding="utf-8") as f:
        f.write(content)

    print(f"Created configuration file: {config_file}")
    return 0


def cmd_list_rules(args: argparse.Namespace) -> int:
    """Execute the list-rules command."""
    from nestinglint.core.rules import RuleRegistry

    # Import rules to register them
    import nestinglint.rules  # noqa: F401

    config = load_lint_config(args.config)
    rules = RuleRegistry.get_instance().get_all_rules(config)

    print("\nAvailable Rules")
    print("=" * 70)
    for rule in rules:
        meta = rule.metadata
        limit = f"{meta.config_key} = {rule.threshold}"
        print(f"  {meta.rule_id.value:<20} {limit:<28} [{meta.severity.value}]")
        print(f"  {'':<20} {meta.description}")

    print(f"\nTotal: {len(rules)} rules")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        if args.command == "check":
            return cmd_check(args)
        elif args.command == "init":
            return cmd_init(args)
        elif args.command == "list-rules":
            return cmd_list_rules(args)
        else:
            parser.print_help()
            return 0

    except KeyboardInterrupt:
        print("\nAnalysis interrupted.")
        return 130
    except (NestingLintError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if os.environ.get("DEBUG"):
            raise
        return 1


if __name__ == "__main__":
    sys.exit(main())
