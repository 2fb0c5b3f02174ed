#!/usr/bin/env python3
"""
Command-line interface for tastematch.

Usage:
    tastematch init                                  # Create tables
    tastematch seed --count 5000 --seed 42           # Synthetic population
    tastematch matches 42 --top 10 --strategy push_down
    tastematch benchmark --entity 42 --top 10 --repeat 5
    tastematch status

    tastematch --database-url postgresql://... matches 42
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional

from .core.types import RankingStrategy, ScoringStrategy

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("tastematch.cli")


def get_db(args: argparse.Namespace) -> Any:
    """Open the database selected on the command line or by settings."""
    if args.database_url:
        from .pg_connection import PostgresDB

        return PostgresDB(connection_string=args.database_url)

    if args.db_path:
        from .connection import TasteDB

        return TasteDB(db_path=args.db_path)

    from .core.config import get_settings

    settings = get_settings()
    if settings.use_postgres:
        from .pg_connection import PostgresDB

        return PostgresDB()

    from .connection import TasteDB

    return TasteDB()


def _describe(db: Any) -> str:
    return str(db.db_path) if db.dialect == "sqlite" else "PostgreSQL (DATABASE_URL)"


def cmd_init(args: argparse.Namespace) -> int:
    """Initialize the database with schema."""
    from .schema import init_schema

    db = get_db(args)

    try:
        logger.info("Initializing tastematch database...")
        init_schema(db)
        logger.info("Database initialized successfully at %s", _describe(db))
        return 0
    except Exception as e:
        logger.error("Failed to initialize database: %s", e)
        return 1
    finally:
        db.close()


def cmd_status(args: argparse.Namespace) -> int:
    """Show database status."""
    from .schema import get_schema_version, get_table_counts

    db = get_db(args)

    try:
        if db.dialect == "sqlite" and not db.exists():
            logger.info("Database does not exist at %s", db.db_path)
            return 1

        if not db.is_initialized():
            logger.info("Database exists but is not initialized")
            return 1

        version = get_schema_version(db)
        counts = get_table_counts(db)

        print("\nTastematch Database Status")
        print("=" * 50)
        print(f"Location: {_describe(db)}")
        print(f"Schema Version: {version}")
        print(f"Last Seeded: {db.get_meta('last_seeded') or 'Never'}")
        print()
        print("Table Counts:")
        for table, count in sorted(counts.items()):
            print(f"  {table}: {count:,}")

        return 0

    except Exception as e:
        logger.error("Failed to get status: %s", e)
        return 1
    finally:
        db.close()


def cmd_seed(args: argparse.Namespace) -> int:
    """Replace the population with synthetic entities."""
    from .repositories import get_vector_store
    from .schema import init_schema
    from .seeders import seed_population

    db = get_db(args)

    try:
        if not db.is_initialized():
            logger.info("Database not initialized, running initialization...")
            init_schema(db)

        store = get_vector_store(db)
        created = seed_population(
            store,
            count=args.count,
            seed=args.seed,
            precision=args.precision,
        )
        db.set_meta("last_seeded", datetime.now(tz=timezone.utc).isoformat())

        print(f"\nSeeded {created:,} entities into {_describe(db)}")
        return 0

    except Exception as e:
        logger.error("Seeding failed: %s", e)
        return 1
    finally:
        db.close()


def cmd_matches(args: argparse.Namespace) -> int:
    """Print the top matches for one entity."""
    from .core.errors import TasteMatchError
    from .repositories import get_vector_store
    from .services import MatchingService

    db = get_db(args)

    try:
        service = MatchingService(get_vector_store(db))
        matches = service.top_matches(
            args.entity_id,
            args.top,
            RankingStrategy(args.strategy) if args.strategy else None,
            ScoringStrategy(args.scoring) if args.scoring else None,
        )

        print(f"\nTop {len(matches)} matches for entity {args.entity_id}")
        print("=" * 50)
        for rank, match in enumerate(matches, start=1):
            print(f"  {rank:>3}. entity {match.entity_id:<10} {match.score:6.1f}%")
        return 0

    except TasteMatchError as e:
        logger.error("%s", e.message)
        return 1
    finally:
        db.close()


def cmd_benchmark(args: argparse.Namespace) -> int:
    """Compare in-memory and push-down ranking on the same request."""
    from .benchmark import benchmark_strategies
    from .core.errors import TasteMatchError
    from .ranking import Ranker
    from .repositories import get_vector_store

    db = get_db(args)

    try:
        ranker = Ranker(get_vector_store(db))
        result = benchmark_strategies(
            ranker,
            args.entity,
            n=args.top,
            repeat=args.repeat,
            scoring=ScoringStrategy(args.scoring),
        )

        print(f"\nBenchmark: entity {result.reference_id}, top {result.n}, {result.scoring.value} scoring")
        print("=" * 50)
        print(f"Population: {result.population:,}")
        for strategy, timing in result.timings.items():
            print(f"  {strategy.value:<10} best {timing.best:.4f}s  median {timing.median:.4f}s")
        print(f"Speedup (in_memory / push_down): {result.speedup:.1f}x")
        print(f"Identical results: {'yes' if result.identical else 'NO'}")

        return 0 if result.identical else 1

    except TasteMatchError as e:
        logger.error("%s", e.message)
        return 1
    except ValueError as e:
        logger.error("%s", e)
        return 1
    finally:
        db.close()


def positive_int(value: str) -> int:
    """argparse type for options that must be at least 1."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Top-N taste matching over preference vectors",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--db-path", help="SQLite database file (overrides SQLITE_PATH)")
    parser.add_argument("--database-url", help="PostgreSQL URL (overrides DATABASE_URL)")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # init command
    subparsers.add_parser("init", help="Initialize the database")

    # status command
    subparsers.add_parser("status", help="Show database status")

    # seed command
    seed_parser = subparsers.add_parser("seed", help="Replace the population with synthetic entities")
    seed_parser.add_argument("--count", type=int, default=5000, help="Entities to create (default: 5000)")
    seed_parser.add_argument("--seed", type=int, help="RNG seed for a reproducible population")
    seed_parser.add_argument(
        "--precision",
        type=int,
        choices=[0, 1],
        default=0,
        help="0 for whole-number components, 1 for one decimal (default: 0)",
    )

    # matches command
    matches_parser = subparsers.add_parser("matches", help="Show the top matches for an entity")
    matches_parser.add_argument("entity_id", type=int, help="Reference entity ID")
    matches_parser.add_argument("--top", type=int, help="Number of matches (default: DEFAULT_TOP_N)")
    matches_parser.add_argument("--strategy", choices=[s.value for s in RankingStrategy])
    matches_parser.add_argument("--scoring", choices=[s.value for s in ScoringStrategy])

    # benchmark command
    bench_parser = subparsers.add_parser("benchmark", help="Time in-memory vs push-down ranking")
    bench_parser.add_argument("--entity", type=int, default=1, help="Reference entity ID (default: 1)")
    bench_parser.add_argument("--top", type=int, default=10, help="Number of matches (default: 10)")
    bench_parser.add_argument("--repeat", type=positive_int, default=3, help="Runs per strategy (default: 3)")
    bench_parser.add_argument(
        "--scoring",
        choices=[s.value for s in ScoringStrategy],
        default=ScoringStrategy.weighted.value,
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    commands = {
        "init": cmd_init,
        "status": cmd_status,
        "seed": cmd_seed,
        "matches": cmd_matches,
        "benchmark": cmd_benchmark,
    }

    cmd_func = commands.get(args.command)
    if cmd_func:
        return cmd_func(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
