import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv

from common.config.env import get_env_bool, get_env_str
from common.errors import DiagramError
from dal.mssql import MssqlConfig
from diagram.pipeline import run_pipeline

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser; all four connection flags are required."""
    parser = argparse.ArgumentParser(
        prog="schema-diagram",
        description="Generates a PlantUML class diagram from a SQL Server database schema",
    )
    parser.add_argument(
        "-i", "--ip_address", required=True, help="Sets the IP address of the SQL server"
    )
    parser.add_argument(
        "-u", "--username", required=True, help="Sets the username for the SQL server"
    )
    parser.add_argument(
        "-p", "--password", required=True, help="Sets the password for the SQL server"
    )
    parser.add_argument(
        "-c",
        "--initial_catalog",
        required=True,
        help="Sets the initial catalog for the SQL server",
    )
    return parser


def configure_logging() -> None:
    """Configure root logging from LOG_LEVEL (default INFO)."""
    level_name = (get_env_str("LOG_LEVEL", "INFO") or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Run the schema diagram CLI."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    configure_logging()

    try:
        config = MssqlConfig.from_cli(
            host=args.ip_address,
            user=args.username,
            password=args.password,
            database=args.initial_catalog,
        )
        result = asyncio.run(
            run_pipeline(config, batch_columns=bool(get_env_bool("DIAGRAM_BATCH_COLUMNS", False)))
        )
    except (DiagramError, ValueError) as e:
        logger.error(f"Schema diagram generation failed: {e}")
        sys.exit(1)

    logger.info(
        "Rendered %d tables and %d references", result.table_count, result.reference_count
    )
    print(f"PlantUML script generated and saved to {result.output_path}")


if __name__ == "__main__":
    main()
