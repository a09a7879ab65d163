import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from medcase.config import LOG_LEVEL
from medcase.models.case import CaseDescription
from medcase.services.analysis import analyze_case
from medcase.services.prompt_renderer import render
from medcase.services.section_extractor import extract

logger = logging.getLogger(__name__)


def _load_case(path: str) -> CaseDescription:
    return CaseDescription.model_validate_json(Path(path).read_text(encoding="utf-8"))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Clinical case analysis: render -> model -> extract")
    parser.add_argument("--tier", default=None, help="Model tier: fast, standard or high.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyze a case JSON file and print the report.")
    analyze.add_argument("case_file")

    render_cmd = subparsers.add_parser("render", help="Print the prompt for a case JSON file.")
    render_cmd.add_argument("case_file")

    extract_cmd = subparsers.add_parser("extract", help="Extract a report from a saved model response.")
    extract_cmd.add_argument("response_file")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    args = parse_args(argv)

    if args.command == "extract":
        try:
            raw = Path(args.response_file).read_text(encoding="utf-8")
        except OSError as e:
            logger.error("Cannot read response file %s: %s", args.response_file, e)
            return 1
        print(extract(raw).model_dump_json(indent=2))
        return 0

    try:
        case = _load_case(args.case_file)
    except OSError as e:
        logger.error("Cannot read case file %s: %s", args.case_file, e)
        return 1
    except ValidationError as e:
        logger.error("Invalid case file %s: %s", args.case_file, e)
        return 1

    if args.command == "render":
        print(render(case))
        return 0

    result = asyncio.run(analyze_case(case, tier=args.tier))
    if not result.success:
        logger.error("Analysis failed: %s", result.error)
        return 1
    print(result.data.model_dump_json(indent=2))
    missing = result.data.missing_sections()
    if missing:
        logger.warning("Report incomplete, missing: %s", ", ".join(missing))
    return 0


if __name__ == "__main__":
    sys.exit(main())
