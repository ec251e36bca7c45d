"""Command-line entry point for SmartLedger"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv

# Load environment variables FIRST, before anything reads them
load_dotenv()

from smartledger.constants import ReportFormat
from smartledger.demo.sample_data import write_sample_csv
from smartledger.orchestrator.pipeline import AnalysisPipeline, PipelineContext
from smartledger.tools.report_export import write_report
from smartledger.tools.risk_tools import anomaly_badge, risk_badge
from smartledger.utils.config_loader import load_config
from smartledger.utils.errors import SmartLedgerError
from smartledger.utils.logging import get_logger

logger = get_logger(__name__)


def print_results(context: PipelineContext) -> None:
    """Print a console summary of a completed run"""
    risk = context.summary.summary.risk_level.value
    print("\n" + "=" * 60)
    print(f"  SmartLedger - {context.source_name}")
    print("=" * 60)
    print(f"Transactions analyzed: {len(context.transactions)}")
    print(f"Anomalies found: {context.detection.total_count}")
    print(f"Risk level: {risk} Risk [{risk_badge(risk)['icon']}]")
    if context.summary.summary.overview:
        print(f"\n{context.summary.summary.overview}")

    print(f"\nFlagged Transactions ({len(context.enriched_anomalies)})")
    for anomaly in context.enriched_anomalies:
        badge = anomaly_badge(anomaly.anomaly_type.value)
        date = anomaly.date.date() if anomaly.date else "unknown date"
        print(
            f"  [{badge['icon']}] {anomaly.transaction_id} {date} "
            f"{anomaly.account} ${anomaly.amount:,.2f} - {anomaly.description} "
            f"({anomaly.confidence * 100:.1f}%)"
        )
        explanation = context.summary.explanation_for(anomaly.id)
        if explanation and explanation.recommendation:
            print(f"      -> {explanation.recommendation}")

    if context.summary.summary.patterns_detected:
        print("\nPatterns Detected")
        for pattern in context.summary.summary.patterns_detected:
            print(f"  - {pattern}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="smartledger", description="Transaction anomaly analysis")
    parser.add_argument("--config", help="Path to settings YAML")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyze a transactions CSV")
    analyze.add_argument("csv", help="Input CSV file")
    analyze.add_argument("--output", help="Directory for the exported report")
    analyze.add_argument(
        "--format",
        choices=[f.value for f in ReportFormat],
        help="Export format (defaults to report.default_format)"
    )
    analyze.add_argument("--offline", action="store_true", help="Skip narrative agents and use local fallbacks")

    sample = subparsers.add_parser("sample", help="Write the demo transactions CSV")
    sample.add_argument("path", nargs="?", default="dummy_transactions.csv", help="Output file")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    if args.command == "sample":
        path = write_sample_csv(args.path)
        print(f"Sample data written to {path}")
        return 0

    try:
        config = load_config(args.config)
    except SmartLedgerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    pipeline = AnalysisPipeline(config=config, use_collaborator=False if args.offline else None)
    context = pipeline.run_file(args.csv)

    if context.error:
        print(f"Error: {context.error}", file=sys.stderr)
        return 1

    print_results(context)

    report_settings = config.get('report') or {}
    fmt = args.format or report_settings.get('default_format', ReportFormat.TEXT.value)
    output_dir = Path(args.output or report_settings.get('output_dir', 'reports'))
    path = write_report(pipeline.export(fmt), output_dir)
    print(f"\nReport saved to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
