"""
Medication Safety Engine - Command Line Interface

Query medication reference data and evaluate prescriptions from the shell.

Usage:
    medsafety lookup Advil
    medsafety interactions Warfarin Ibuprofen Aspirin
    medsafety dosage Ibuprofen --age 8 --weight 25
    medsafety guideline Hypertension
    medsafety guideline --icd10 E11
    medsafety beers Diphenhydramine
    medsafety check Warfarin Aspirin --age 72 --allergy penicillin
    medsafety evaluate --patient P001 --prescription RX1 Aspirin
    medsafety stats --days 30
"""

import argparse
import asyncio
from datetime import UTC, datetime, timedelta
import json
import logging
import sys
from typing import Any

from pydantic import BaseModel

from medsafety import __version__
from medsafety.core.cache import InMemoryCache, set_cache
from medsafety.core.config import settings
from medsafety.core.errors import EngineError
from medsafety.core.redis import close_redis
from medsafety.services.knowledge_repository import get_knowledge_repository
from medsafety.services.safety_monitor import get_safety_monitor

logger = logging.getLogger(__name__)


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value


def emit(value: Any) -> None:
    """Print a result as indented JSON."""
    print(json.dumps(_jsonable(value), indent=2, default=str))


# ============================================================================
# Commands
# ============================================================================


async def cmd_lookup(args: argparse.Namespace) -> int:
    repo = get_knowledge_repository()
    if args.rxnorm:
        medication = await repo.get_medication_by_rxnorm(args.name)
    else:
        medication = await repo.get_medication_by_name(args.name)
    if medication is None:
        print(f"Medication not found: {args.name}", file=sys.stderr)
        return 1
    emit(medication)
    return 0


async def cmd_interactions(args: argparse.Namespace) -> int:
    matches = await get_knowledge_repository().check_interactions(args.name, args.candidates)
    emit(matches)
    return 0


async def cmd_dosage(args: argparse.Namespace) -> int:
    guidelines = await get_knowledge_repository().get_dosage_guidelines(
        args.name,
        age=args.age,
        weight_kg=args.weight,
        condition=args.condition,
    )
    if guidelines is None:
        print(f"Medication not found: {args.name}", file=sys.stderr)
        return 1
    emit(guidelines)
    return 0


async def cmd_guideline(args: argparse.Namespace) -> int:
    repo = get_knowledge_repository()
    if args.icd10:
        guideline = await repo.get_guidelines_by_icd10(args.icd10)
    elif args.condition:
        guideline = await repo.get_guidelines_for_condition(args.condition)
    else:
        print("Provide a condition or --icd10 code", file=sys.stderr)
        return 2
    if guideline is None:
        print("No treatment guideline found", file=sys.stderr)
        return 1
    emit(guideline)
    return 0


async def cmd_beers(args: argparse.Namespace) -> int:
    repo = get_knowledge_repository()
    emit(
        {
            "medication": args.name,
            "beers_criteria": _jsonable(await repo.check_beers_criteria(args.name)),
            "pregnancy_category": await repo.check_pregnancy_category(args.name),
        }
    )
    return 0


async def cmd_check(args: argparse.Namespace) -> int:
    alerts = await get_safety_monitor().check_medication_safety(
        args.medications,
        conditions=args.condition,
        allergies=args.allergy,
        age=args.age,
        pregnant=args.pregnant,
    )
    emit(alerts)
    return 0


async def cmd_evaluate(args: argparse.Namespace) -> int:
    evaluation = await get_safety_monitor().evaluate_prescription_safety(
        args.prescription,
        args.medications,
        args.patient,
    )
    emit(evaluation)
    return 0 if evaluation.is_safe else 3


async def cmd_stats(args: argparse.Namespace) -> int:
    if args.medication:
        stats = await get_safety_monitor().get_medication_stats(args.medication)
        if stats is None:
            print(f"No statistics recorded for {args.medication}", file=sys.stderr)
            return 1
        emit(stats)
        return 0

    end = datetime.now(UTC)
    start = end - timedelta(days=args.days)
    emit(await get_safety_monitor().generate_safety_statistics(start, end))
    return 0


async def cmd_info(args: argparse.Namespace) -> int:
    emit(await get_knowledge_repository().get_stats())
    return 0


# ============================================================================
# Main Entry Point
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="medsafety",
        description=f"{settings.app_name} - medication reference and safety checks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--memory", action="store_true", help="Use a process-local cache instead of Redis")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("lookup", help="Look up a medication by name, brand or RxNorm code")
    p.add_argument("name")
    p.add_argument("--rxnorm", action="store_true", help="Treat NAME as an RxNorm code")
    p.set_defaults(handler=cmd_lookup)

    p = sub.add_parser("interactions", help="Check a medication against other drugs")
    p.add_argument("name")
    p.add_argument("candidates", nargs="+")
    p.set_defaults(handler=cmd_interactions)

    p = sub.add_parser("dosage", help="Dosage guidelines applicable to a patient")
    p.add_argument("name")
    p.add_argument("--age", type=float)
    p.add_argument("--weight", type=float, help="Body weight in kg")
    p.add_argument("--condition")
    p.set_defaults(handler=cmd_dosage)

    p = sub.add_parser("guideline", help="Treatment guideline for a condition")
    p.add_argument("condition", nargs="?")
    p.add_argument("--icd10", help="Look up by ICD-10 code instead")
    p.set_defaults(handler=cmd_guideline)

    p = sub.add_parser("beers", help="Beers Criteria and pregnancy category of a medication")
    p.add_argument("name")
    p.set_defaults(handler=cmd_beers)

    p = sub.add_parser("check", help="Knowledge-based safety alerts for a medication list")
    p.add_argument("medications", nargs="+")
    p.add_argument("--condition", action="append", default=[])
    p.add_argument("--allergy", action="append", default=[])
    p.add_argument("--age", type=float)
    p.add_argument("--pregnant", action="store_true")
    p.set_defaults(handler=cmd_check)

    p = sub.add_parser("evaluate", help="Evaluate a prescription against a patient's safety history")
    p.add_argument("medications", nargs="+")
    p.add_argument("--patient", required=True)
    p.add_argument("--prescription", required=True)
    p.set_defaults(handler=cmd_evaluate)

    p = sub.add_parser("stats", help="Safety statistics for a recent window or one medication")
    p.add_argument("--days", type=int, default=30)
    p.add_argument("--medication")
    p.set_defaults(handler=cmd_stats)

    p = sub.add_parser("info", help="Summary of the loaded reference data")
    p.set_defaults(handler=cmd_info)

    return parser


async def _run(args: argparse.Namespace) -> int:
    try:
        return await args.handler(args)
    finally:
        await close_redis()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.memory:
        set_cache(InMemoryCache())

    try:
        return asyncio.run(_run(args))
    except EngineError as e:
        logger.error(f"{e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
