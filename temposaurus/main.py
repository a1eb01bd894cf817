import argparse
import logging
import sys

from temposaurus.config import get_settings
from temposaurus.errors import ConfigError
from temposaurus.pipeline import PipelineRunner
from temposaurus.schemas import PipelineState


logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Report approved Tempo time against required time")
    subparsers = parser.add_subparsers(dest="command", required=True)

    report_parser = subparsers.add_parser("report", help="print the overtime report for a date range")
    report_parser.add_argument("--date-from", required=False, help="Start date in YYYY-MM-DD format (overrides DATE_FROM)")
    report_parser.add_argument("--date-to", required=False, help="End date in YYYY-MM-DD format (overrides DATE_TO)")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        settings = get_settings(date_from=args.date_from, date_to=args.date_to)
    except ConfigError as exc:
        logger.error("invalid configuration: %s", exc)
        raise SystemExit(1) from exc

    logging.getLogger().setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.info("Temposaurus starting")

    result = PipelineRunner(settings).run()
    if result.state == PipelineState.ABORTED or result.report is None:
        raise SystemExit(1)

    sys.stdout.write(result.report)


if __name__ == "__main__":
    main()
