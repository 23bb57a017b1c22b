"""
Command-line interface for batch loads.

Usage:
    python -m textload.cli.load_cli run --config <load.yaml> [options]
"""

import argparse
import sys

from pyspark.sql import SparkSession

from textload.batch.pipeline import LoadPipeline
from textload.batch.writers import TextFileErrorSink
from textload.config import LoadSettings
from textload.observability.logger import get_logger
from textload.observability.metrics import get_metrics


logger = get_logger(__name__)


def create_spark_session(app_name: str = "TextLoad", master: str = "local[*]") -> SparkSession:
    """
    Create Spark session for batch loads.

    Args:
        app_name: Application name
        master: Spark master URL

    Returns:
        SparkSession
    """
    spark = SparkSession.builder \
        .appName(app_name) \
        .master(master) \
        .config("spark.sql.adaptive.enabled", "true") \
        .getOrCreate()

    return spark


def run_load(pipeline: LoadPipeline, settings: LoadSettings):
    """Dispatch to the pipeline entry point matching the settings."""
    common = dict(
        sources=settings.sources,
        errors=TextFileErrorSink(settings.errors, overwrite=settings.overwrite_errors),
        time_source=settings.time_source(),
        codec=settings.codec(),
        clean=settings.cleaner(),
        validator=settings.validator(),
        row_filter=settings.row_filter(),
    )

    if settings.widths is not None:
        return pipeline.load_fixed_length(settings.widths, **common)
    if settings.with_key:
        return pipeline.load_with_key(settings.delimiter, **common)
    return pipeline.load(settings.delimiter, **common)


def run_command(args):
    """
    Execute a load.

    Args:
        args: Command-line arguments
    """
    try:
        settings = LoadSettings.from_yaml(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid load configuration: {e}")
        sys.exit(1)

    updates = {}
    if args.errors:
        updates["errors"] = args.errors
    if args.output:
        updates["output"] = args.output
    if args.overwrite:
        updates["overwrite_errors"] = True
    if updates:
        settings = settings.model_copy(update=updates)

    logger.info(f"Loading {len(settings.sources)} source(s) from {args.config}")

    spark = create_spark_session(args.app_name, args.master)
    spark.sparkContext.setLogLevel("WARN")

    try:
        pipeline = LoadPipeline(spark)
        result = run_load(pipeline, settings)

        if args.dry_run:
            logger.info("DRY RUN MODE: accepted records are counted but not written")
        elif settings.output:
            logger.info(f"Writing accepted records to {settings.output} as {settings.output_format}")
            writer = result.to_dataframe(spark).write
            if args.overwrite:
                writer = writer.mode("overwrite")
            writer.format(settings.output_format).save(settings.output)
        else:
            logger.warning("No output configured; accepted records were not written")

        summary = result.summarize()
        result.unpersist()

        logger.info("=" * 60)
        logger.info("LOAD COMPLETE")
        logger.info("=" * 60)
        logger.info(f"Mode: {summary['mode']}")
        logger.info(f"Accepted records: {summary['accepted']}")
        logger.info(f"Rejected records: {summary['rejected']} (written to {settings.errors})")
        logger.info(f"Validation warnings: {summary['warnings']}")
        for kind, count in sorted(summary["rejected_by_kind"].items()):
            logger.info(f"  {kind}: {count}")
        logger.info("=" * 60)

        if args.metrics:
            sys.stdout.write(get_metrics().decode("utf-8"))

    except Exception as e:
        logger.error(f"Error during load: {e}", exc_info=True)
        sys.exit(1)
    finally:
        spark.stop()


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Load delimited or fixed-width text into typed records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the load described by a YAML file
  python -m textload.cli.load_cli run --config config/load.example.yaml

  # Validate only: write rejections, count accepted records, write nothing else
  python -m textload.cli.load_cli run --config config/load.example.yaml --dry-run

  # Re-run into existing output directories and print Prometheus metrics
  python -m textload.cli.load_cli run --config config/load.example.yaml --overwrite --metrics
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Run a load")
    run_parser.add_argument(
        "--config",
        required=True,
        help="Path to the load YAML file"
    )
    run_parser.add_argument(
        "--errors",
        help="Override the error output directory"
    )
    run_parser.add_argument(
        "--output",
        help="Override the accepted-record output directory"
    )
    run_parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace existing output and error directories"
    )
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Do not write accepted records"
    )
    run_parser.add_argument(
        "--metrics",
        action="store_true",
        help="Print Prometheus metrics after the load"
    )
    run_parser.add_argument(
        "--master",
        default="local[*]",
        help="Spark master URL (default: local[*])"
    )
    run_parser.add_argument(
        "--app-name",
        default="TextLoad",
        help="Spark application name (default: TextLoad)"
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "run":
        run_command(args)


if __name__ == "__main__":
    main()
