"""Plain-text report rendering and export"""

from pydantic import BaseModel, Field
from datetime import datetime
from pathlib import Path
import pandas as pd
from typing import Optional, Union
from smartledger.constants import (
    ReportFormat,
    REPORT_PREAMBLE,
    REPORT_MEDIA_TYPES,
    REPORT_EXTENSIONS
)
from smartledger.models import ReportData, ReportSection
from smartledger.utils.logging import get_logger

logger = get_logger(__name__)


class ExportedReport(BaseModel):
    """A rendered report ready to be saved or served"""

    filename: str = Field(..., description="Suggested file name")
    media_type: str = Field(..., description="Declared media type")
    content: str = Field(..., description="Report text")


def _display_date(value: str) -> str:
    try:
        ts = pd.Timestamp(value)
    except ValueError:
        return value
    if ts is pd.NaT:
        return value
    return ts.date().isoformat()


def _render_section(section: ReportSection) -> str:
    return f"{section.title}\n{'=' * len(section.title)}\n{section.body}\n"


def render_report_text(
    report: ReportData,
    total_anomalies: int,
    listed_anomalies: int,
    risk_level: Optional[str],
    transaction_count: int,
    now: Optional[datetime] = None
) -> str:
    """
    Render the report as plain text.

    Args:
        report: Report sections and metadata
        total_anomalies: Untruncated anomaly count
        listed_anomalies: Anomalies included in the findings
        risk_level: Risk level label, 'Unknown' when missing
        transaction_count: Number of analyzed transactions
        now: Timestamp for the footer

    Returns:
        Report text
    """
    now = now or datetime.now()
    body = report.report

    lines = [
        REPORT_PREAMBLE,
        "=" * 53,
        "",
        f"Title: {body.title}",
        f"Generated: {_display_date(body.generated_date)}",
        f"Report ID: {body.metadata.report_id}",
        "",
    ]
    for section in body.sections:
        lines.append(_render_section(section))

    lines.extend([
        "Anomaly Detection Summary",
        "-" * 24,
        f"Total Anomalies Found: {total_anomalies}",
        f"Anomalies Listed: {listed_anomalies}",
        f"Risk Level: {risk_level or 'Unknown'}",
        f"Analyzed Transactions: {transaction_count}",
        "",
        "Generated by SmartLedger AI Analysis",
        f"Timestamp: {now.isoformat()}",
        "",
    ])
    return "\n".join(lines)


def export_report(text: str, fmt: Union[ReportFormat, str] = ReportFormat.TEXT, now: Optional[datetime] = None) -> ExportedReport:
    """
    Package report text under the media type of the requested format.

    Both formats carry the same plain text; only the declared media type and
    file extension differ.
    """
    fmt = ReportFormat(fmt)
    now = now or datetime.now()
    filename = f"smartledger-report-{fmt.value}-{now.date().isoformat()}.{REPORT_EXTENSIONS[fmt]}"
    return ExportedReport(filename=filename, media_type=REPORT_MEDIA_TYPES[fmt], content=text)


def write_report(exported: ExportedReport, output_dir: Union[str, Path]) -> Path:
    """
    Save an exported report to a directory

    Returns:
        Path of the written file
    """
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / exported.filename
    path.write_text(exported.content, encoding='utf-8')
    logger.info(f"Report written to {path}", media_type=exported.media_type)
    return path
