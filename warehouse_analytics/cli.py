"""
Command Line Interface

Usage:
    warehouse-analytics generate --output data/csv-files
    warehouse-analytics init-db
    warehouse-analytics load --data-dir data/csv-files
    warehouse-analytics validate --source db
    warehouse-analytics report --source csv --as-of 2014-01-31 --format csv
    warehouse-analytics analyze top-products
    warehouse-analytics serve --port 8000
"""

import argparse
import sys
from datetime import date
from typing import List, Optional

import polars as pl
import structlog

from warehouse_analytics.analysis import ANALYSES
from warehouse_analytics.config import get_settings
from warehouse_analytics.config.logging import configure_logging
from warehouse_analytics.database.connection import (
    close_database,
    create_schema,
    drop_schema,
    init_database,
)
from warehouse_analytics.ingestion.batch_loader import BatchLoader, LoadStatus
from warehouse_analytics.ingestion.schemas import InputSchemaError, MissingInputError
from warehouse_analytics.ingestion.sources import WarehouseTables
from warehouse_analytics.quality.validators import ValidationStatus, validate_warehouse
from warehouse_analytics.reports.pipeline import ReportPipeline

logger = structlog.get_logger(__name__)


def _load_tables(args: argparse.Namespace) -> WarehouseTables:
    if args.source == "db":
        return WarehouseTables.from_database(init_database(args.database_url))
    return WarehouseTables.from_csv_dir(args.data_dir)


def _print_frame(df: pl.DataFrame) -> None:
    with pl.Config(tbl_rows=-1, tbl_cols=-1, tbl_width_chars=200):
        print(df)


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_generate(args: argparse.Namespace) -> int:
    from warehouse_analytics.data.generators import WarehouseDataGenerator

    generator = WarehouseDataGenerator(seed=args.seed)
    generator.generate(
        n_customers=args.customers,
        n_products=args.products,
        n_orders=args.orders,
    )
    for name, path in generator.write_csv(args.output).items():
        print(f"{name}: {path}")
    return 0


def cmd_init_db(args: argparse.Namespace) -> int:
    engine = init_database(args.database_url)
    if args.drop:
        drop_schema(engine)
    create_schema(engine)
    print(f"Schema ready at {engine.url.render_as_string(hide_password=True)}")
    return 0


def cmd_load(args: argparse.Namespace) -> int:
    engine = init_database(args.database_url)
    create_schema(engine)

    results = BatchLoader(engine).load_warehouse(args.data_dir or get_settings().data_lake.source_path)
    failed = 0
    for relation, result in results.items():
        print(f"{relation}: {result.status.value} ({result.rows_loaded}/{result.rows_read} rows)")
        if result.status == LoadStatus.FAILED:
            failed += 1
            print(f"  {result.error_message}", file=sys.stderr)
    return 1 if failed else 0


def cmd_validate(args: argparse.Namespace) -> int:
    results = validate_warehouse(_load_tables(args))
    exit_code = 0
    for relation, result in results.items():
        print(
            f"{relation}: {result.status.value} "
            f"({result.passed_checks}/{result.total_checks} checks passed)"
        )
        for check in result.failures:
            print(f"  [{check.severity.value}] {check.name}: {check.message}")
        if result.status == ValidationStatus.FAILED:
            exit_code = 1
    return exit_code


def cmd_report(args: argparse.Namespace) -> int:
    tables = _load_tables(args)
    pipeline = ReportPipeline(output_path=args.output, output_format=args.format)
    result = pipeline.run(tables, args.as_of)

    for name, path in pipeline.write(result).items():
        print(f"{name}: {result.row_counts[name]} rows -> {path}")

    if args.materialize:
        engine = init_database(args.database_url)
        counts = pipeline.materialize(result, engine)
        print(f"Materialized report tables: {counts}")
    return 0


def cmd_analyze(args: argparse.Namespace) -> int:
    tables = _load_tables(args)
    _print_frame(ANALYSES[args.name](tables, args.as_of))
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "warehouse_analytics.main:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        reload=args.reload,
        log_config=None,
        access_log=True,
    )
    return 0


# =============================================================================
# PARSER
# =============================================================================

def _add_database_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy URL (default: WAREHOUSE_DB_URL or sqlite:///./data/warehouse.db)",
    )


def _add_source_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--source", choices=["csv", "db"], default="csv", help="Where to read the warehouse from")
    parser.add_argument("--data-dir", default=None, help="Directory of the warehouse CSV files")
    _add_database_option(parser)


def _add_as_of_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=date.today(),
        help="Reference date YYYY-MM-DD for age and recency (default: today)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="warehouse-analytics",
        description="Customer and product reports over a sales warehouse",
    )
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Write a synthetic warehouse as CSV files")
    generate.add_argument("--output", default=get_settings().data_lake.source_path)
    generate.add_argument("--seed", type=int, default=42)
    generate.add_argument("--customers", type=int, default=500)
    generate.add_argument("--products", type=int, default=60)
    generate.add_argument("--orders", type=int, default=3000)
    generate.set_defaults(func=cmd_generate)

    init_db = subparsers.add_parser("init-db", help="Create the warehouse and report tables")
    init_db.add_argument("--drop", action="store_true", help="Drop existing tables first")
    _add_database_option(init_db)
    init_db.set_defaults(func=cmd_init_db)

    load = subparsers.add_parser("load", help="Load the warehouse CSV files into the database")
    load.add_argument("--data-dir", default=None)
    _add_database_option(load)
    load.set_defaults(func=cmd_load)

    validate = subparsers.add_parser("validate", help="Run data quality checks")
    _add_source_options(validate)
    validate.set_defaults(func=cmd_validate)

    report = subparsers.add_parser("report", help="Build the customer and product reports")
    _add_source_options(report)
    _add_as_of_option(report)
    report.add_argument("--output", default=None, help="Output directory for report files")
    report.add_argument("--format", choices=["parquet", "csv"], default=None)
    report.add_argument("--materialize", action="store_true", help="Also replace the report tables")
    report.set_defaults(func=cmd_report)

    analyze = subparsers.add_parser("analyze", help="Print one exploratory analysis")
    analyze.add_argument("name", choices=sorted(ANALYSES))
    _add_source_options(analyze)
    _add_as_of_option(analyze)
    analyze.set_defaults(func=cmd_analyze)

    serve = subparsers.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--reload", action="store_true", help="Auto-reload on code changes")
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        return args.func(args)
    except (MissingInputError, InputSchemaError) as e:
        logger.error("Cannot read warehouse input", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1
    finally:
        close_database()


if __name__ == "__main__":
    sys.exit(main())
