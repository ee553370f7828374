"""
CLI interface for chatbond
"""

import sys
import json
import logging
import argparse

from . import config
from .exceptions import ChatbondError, ParseError
from .pipeline import run_full_analysis

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def analyze_file(filepath: str, output_file: str = None, format_hint: str = None, enrich: bool = False) -> dict:
    """
    Analyze a chat export file.

    Args:
        filepath: Path to the export (.txt, .json or mail-style text)
        output_file: Optional output JSON file
        format_hint: plain, json or pdf (inferred from the file name if omitted)
        enrich: Use the enrichment API for sampled messages and a narrative

    Returns:
        Analysis bundle as a dict
    """
    logger.info(f"Analyzing file: {filepath}")

    if enrich:
        valid, msg = config.validate_config()
        if not valid:
            logger.warning(f"Configuration issue, enrichment may be skipped: {msg}")

    bundle = run_full_analysis(filepath, format_hint=format_hint, use_enrichment=enrich or None)
    report = bundle.to_dict()

    if output_file:
        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2, ensure_ascii=False)
        logger.info(f"Report saved to {output_file}")
    else:
        print(json.dumps(report, indent=2, ensure_ascii=False))

    return report


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="chatbond - chat transcript analytics and relationship scoring"
    )

    parser.add_argument(
        "command",
        choices=["analyze", "validate"],
        help="Command to run"
    )

    parser.add_argument(
        "filepath",
        help="Path to chat export file"
    )

    parser.add_argument(
        "-o", "--output",
        dest="output_file",
        help="Output JSON file path"
    )

    parser.add_argument(
        "--format",
        dest="format_hint",
        choices=["plain", "json", "pdf"],
        help="Export format (default: inferred from file name)"
    )

    parser.add_argument(
        "--enrich",
        action="store_true",
        help="Enrich sampled messages with the generative API (needs ENRICHMENT_API_KEY)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose logging"
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.command == "validate":
        from .parser import validate_format
        valid, msg = validate_format(args.filepath)
        print(f"Valid: {valid} - {msg}")
        sys.exit(0 if valid else 1)

    elif args.command == "analyze":
        try:
            report = analyze_file(args.filepath, args.output_file, args.format_hint, args.enrich)
        except ParseError as e:
            logger.error(f"Failed to parse file: {e}")
            sys.exit(1)
        except ChatbondError as e:
            logger.error(f"Analysis failed: {e}", exc_info=True)
            sys.exit(1)

        level = report["gamification"]["relationship_level"]
        compatibility = report["gamification"]["compatibility"]
        logger.info(f"Relationship Level: {level['level']} ({level['title']})")
        logger.info(f"Compatibility: {compatibility['score']}/100 ({compatibility['tier']})")


if __name__ == "__main__":
    main()
