"""Generate a training plan from a goal JSON file and write or store it."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pydantic import ValidationError

from app.config import get_settings
from app.logging_config import configure_logging
from app.models.schemas import ExportOptions, GoalSubmission, TrainingPlan
from app.services.plan_exporter import export_filename, render_plan_document, summarize_plan
from app.services.plan_generator import generate_plan


logger = logging.getLogger("scripts.generate_plan")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate a race training plan",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print the plan JSON for a goal file
  python scripts/generate_plan.py --goal goal.json

  # Write the plan and a printable landscape page
  python scripts/generate_plan.py --goal goal.json --output plan.json --export --orientation landscape

  # Store goal and plan so the API serves them
  python scripts/generate_plan.py --goal goal.json --save
        """
    )
    parser.add_argument("--goal", type=Path, required=True, help="Goal JSON file")
    parser.add_argument("--output", type=Path, help="Write the plan JSON here instead of stdout")
    parser.add_argument(
        "--export",
        type=Path,
        nargs="?",
        const=Path(export_filename(date.today())),
        help="Write a printable HTML page (default name training-plan-YYYY-MM-DD.html)",
    )
    parser.add_argument("--title", type=str, help="Title of the printable page")
    parser.add_argument("--orientation", choices=["portrait", "landscape"], help="Page orientation")
    parser.add_argument("--header-color", type=str, help="Hex colour of the table header")
    parser.add_argument("--save", action="store_true", help="Store goal and plan in the database")
    parser.add_argument("--verbose", action="store_true", help="Show detailed output")
    return parser.parse_args(argv)


def load_goal(path: Path) -> GoalSubmission:
    with path.open("r", encoding="utf-8") as fh:
        return GoalSubmission.model_validate(json.load(fh))


def save_to_store(goal: GoalSubmission, plan: TrainingPlan) -> None:
    from app.database import SessionLocal
    from app.services.plan_store import PlanStore

    db = SessionLocal()
    try:
        store = PlanStore(db)
        store.save_goal(goal)
        store.save_plan(plan)
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging("DEBUG" if args.verbose else None)
    settings = get_settings()

    try:
        goal = load_goal(args.goal)
    except FileNotFoundError:
        print(f"Goal file not found: {args.goal}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f"Goal file is not valid JSON: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"Invalid goal:\n{e}", file=sys.stderr)
        return 1

    plan = generate_plan(goal)
    summary = summarize_plan(plan)
    logger.info(
        "Plan ready: %d weeks, %d km total, peak week %s (%d km)",
        summary.total_weeks,
        summary.total_distance,
        summary.peak_week,
        summary.peak_weekly_total,
    )

    plan_json = plan.model_dump_json(indent=2)
    if args.output:
        args.output.write_text(plan_json, encoding="utf-8")
        logger.info("Wrote plan to %s", args.output)
    elif not args.export and not args.save:
        print(plan_json)

    if args.export:
        try:
            options = ExportOptions(
                title=args.title or settings.export_title,
                orientation=args.orientation or settings.export_orientation,
                header_color=args.header_color or settings.export_header_color,
            )
        except ValidationError as e:
            print(f"Invalid export options:\n{e}", file=sys.stderr)
            return 1
        args.export.write_text(render_plan_document(plan, options), encoding="utf-8")
        logger.info("Wrote printable plan to %s", args.export)

    if args.save:
        save_to_store(goal, plan)
        logger.info("Stored goal and plan")

    return 0


if __name__ == "__main__":
    sys.exit(main())
