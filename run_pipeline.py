#!/usr/bin/env python3
"""Report pipeline runner with dependency injection."""

import argparse
import sys
from pathlib import Path
from typing import Any

from core.container import Container
from core.config import Config
from sources.registry import get_registry

# Import sources to register them
import sources.covid_timeseries  # noqa: F401
import sources.nypd_shootings  # noqa: F401


def run_all_sources(container: Container) -> list[dict[str, Any]]:
    """Run every enabled report."""
    registry = get_registry()
    sources = registry.create_enabled_sources(container)

    if not sources:
        print("No enabled sources found in configuration")
        return []

    results = []
    for source in sources:
        print(f"\nRunning {source.name}...")
        result = source.run()
        results.append(result)

    return results


def run_single_source(container: Container, source_name: str) -> dict[str, Any]:
    """Run a single report."""
    registry = get_registry()

    try:
        source = registry.create_source(source_name, container)
        return source.run()
    except KeyError as e:
        print(f"Error: {e}")
        print(f"Available sources: {registry.names()}")
        sys.exit(1)


def list_sources(container: Container) -> None:
    """List all available sources and their status."""
    registry = get_registry()
    config = container.get_config()

    print("\nAvailable Report Sources:")
    print("-" * 50)

    for name, source_class in registry.get_all().items():
        try:
            source_config = config.get_source_config(name)
            enabled = source_config.get('enabled', False)
            status = "enabled" if enabled else "disabled"
            desc = source_config.get('description', source_class.description)
        except KeyError:
            status = "not configured"
            desc = source_class.description

        print(f"  {name}: {desc}")
        print(f"    Status: {status}")
        print()


def export_tables(result: dict[str, Any], output_dir: str | Path) -> list[Path]:
    """Write every table of a successful run as CSV under `output_dir/<source>/`."""
    if not result.get('success'):
        return []

    target = Path(output_dir) / result['source']
    target.mkdir(parents=True, exist_ok=True)

    written = []
    for table_name, table in result['tables'].items():
        path = target / f"{table_name}.csv"
        table.to_csv(path, index=False)
        written.append(path)
    return written


def print_summary(results: list[dict[str, Any]]) -> None:
    print("\n" + "=" * 60)
    print("Report Pipeline Summary")
    print("=" * 60)

    for result in results:
        status = "SUCCESS" if result.get('success') else "FAILED"
        print(f"\n{result['source']}: {status}")

        if result.get('success'):
            for table_name, rows in result.get('rows', {}).items():
                print(f"  {table_name}: {rows:,} rows")
            print(f"  Duration: {result.get('duration_seconds', 0):.2f}s")
        else:
            print(f"  Error: {result.get('error', 'Unknown error')}")


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="Run exploratory reports for public COVID-19 and NYPD shooting data"
    )
    parser.add_argument(
        '--source', '-s',
        help="Run specific source (default: all enabled sources)"
    )
    parser.add_argument(
        '--list', '-l',
        action='store_true',
        help="List available sources"
    )
    parser.add_argument(
        '--config', '-c',
        help="Path to configuration file"
    )
    parser.add_argument(
        '--output-dir', '-o',
        help="Write every produced table as CSV into this directory"
    )

    args = parser.parse_args(argv)

    # Initialize container
    config = Config(args.config) if args.config else Config()
    container = Container(config)

    if args.list:
        list_sources(container)
        return

    # Run pipelines
    if args.source:
        result = run_single_source(container, args.source)
        results = [result]
    else:
        results = run_all_sources(container)

    if args.output_dir:
        for result in results:
            for path in export_tables(result, args.output_dir):
                print(f"Wrote {path}")

    print_summary(results)

    if not all(r.get('success') for r in results):
        sys.exit(1)


if __name__ == "__main__":
    main()
