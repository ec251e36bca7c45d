"""Analysis pipeline - upload -> detecting -> summarizing -> reporting -> complete"""

import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Any, List, Optional, Union
from pydantic import BaseModel, Field
from smartledger.constants import ProcessingStep, ReportFormat
from smartledger.models import (
    Transaction,
    DetectionResult,
    EnrichedAnomaly,
    RiskAssessment,
    SummaryData,
    ReportData
)
from smartledger.tools.csv_parser import parse_transactions, load_transactions
from smartledger.tools.anomaly_tools import detect_anomalies, enrich_anomalies
from smartledger.tools.risk_tools import assess_risk, build_fallback_summary, build_fallback_report
from smartledger.tools.llm_client import call_agent, parse_agent_json
from smartledger.tools.report_export import ExportedReport, render_report_text, export_report
from smartledger.utils.config_loader import load_config, get_rules
from smartledger.utils.errors import SmartLedgerError
from smartledger.utils.logging import get_logger
from smartledger.utils.metrics import pipeline_runs, pipeline_duration

logger = get_logger(__name__)

# (message, agent_id, context) -> raw reply
AgentCaller = Callable[..., str]


class PipelineContext(BaseModel):
    """Everything one analysis run produces, passed from stage to stage"""

    source_name: Optional[str] = None
    step: ProcessingStep = ProcessingStep.UPLOAD
    transactions: List[Transaction] = Field(default_factory=list)
    detection: Optional[DetectionResult] = None
    enriched_anomalies: List[EnrichedAnomaly] = Field(default_factory=list)
    risk: Optional[RiskAssessment] = None
    summary: Optional[SummaryData] = None
    report: Optional[ReportData] = None
    error: Optional[str] = None
    history: List[ProcessingStep] = Field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return self.step == ProcessingStep.COMPLETE


class AnalysisPipeline:
    """Runs parse/detect/assess locally and delegates narrative to agents"""

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        agent_caller: Optional[AgentCaller] = None,
        use_collaborator: Optional[bool] = None
    ):
        self.config = config or load_config()
        collaborator = self.config.get('collaborator') or {}
        agents = collaborator.get('agents') or {}

        self.summary_agent_id = (agents.get('summary') or {}).get('agent_id', 'summary')
        self.report_agent_id = (agents.get('report') or {}).get('agent_id', 'report')
        self.use_collaborator = collaborator.get('enabled', True) if use_collaborator is None else use_collaborator
        self.agent_caller = agent_caller or self._call_configured_agent
        self.context = PipelineContext()

    def _call_configured_agent(self, message: str, agent_id: str, context: Optional[Dict[str, Any]] = None) -> str:
        return call_agent(message, agent_id, context=context, config=self.config)

    def _transition(self, step: ProcessingStep) -> None:
        self.context.step = step
        self.context.history.append(step)
        logger.info(f"Pipeline step: {step.value}", source=self.context.source_name)

    def reset(self) -> PipelineContext:
        """Discard results and any error; back to file selection"""
        self.context = PipelineContext()
        return self.context

    def run(self, content: str, source_name: Optional[str] = None) -> PipelineContext:
        """
        Execute a full analysis run over raw CSV content.

        Any failure returns the context to the upload step with the error
        message set and every partial result cleared.

        Args:
            content: Raw CSV text
            source_name: Display name of the input (e.g. file name)

        Returns:
            The pipeline context
        """
        return self._execute(lambda: parse_transactions(content), source_name)

    def run_file(self, path: Union[str, Path]) -> PipelineContext:
        """Load a CSV file and run the analysis; a missing file surfaces like any other error"""
        filepath = Path(path)
        return self._execute(lambda: load_transactions(filepath), filepath.name)

    def _execute(self, load: Callable[[], List[Transaction]], source_name: Optional[str]) -> PipelineContext:
        self.context = PipelineContext(source_name=source_name, history=[ProcessingStep.UPLOAD])
        start_time = time.time()

        try:
            self._detect(load)
            self._summarize()
            self._report()
            self._transition(ProcessingStep.COMPLETE)

            duration = time.time() - start_time
            pipeline_duration.observe(duration)
            pipeline_runs.labels(status='complete').inc()
            logger.info(
                "Analysis complete",
                source=source_name,
                transactions=len(self.context.transactions),
                anomalies=self.context.detection.total_count,
                risk_level=self.context.risk.risk_level.value,
                duration_seconds=round(duration, 3)
            )

        except Exception as e:
            logger.error(f"Analysis failed: {e}", source=source_name, step=self.context.step.value)
            pipeline_runs.labels(status='failed').inc()
            history = self.context.history + [ProcessingStep.UPLOAD]
            self.context = PipelineContext(
                source_name=source_name,
                error=str(e) or 'An unexpected error occurred',
                history=history
            )

        return self.context

    def _detect(self, load: Callable[[], List[Transaction]]) -> None:
        self._transition(ProcessingStep.DETECTING)

        transactions = load()
        detection = detect_anomalies(transactions, get_rules(self.config, 'anomaly_detection'))

        self.context.transactions = transactions
        self.context.detection = detection
        self.context.enriched_anomalies = enrich_anomalies(detection.anomalies, transactions)
        self.context.risk = assess_risk(detection.total_count, get_rules(self.config, 'risk_assessment'))

    def _summarize(self) -> None:
        self._transition(ProcessingStep.SUMMARIZING)

        fallback = build_fallback_summary(self.context.detection.anomalies, self.context.risk)
        count = len(self.context.detection.anomalies)
        message = (
            f"Analyze these {count} financial transaction anomalies and provide a comprehensive summary "
            f"with overview, detailed explanations for each anomaly, possible causes, and recommendations."
        )
        self.context.summary = self._ask(message, self.summary_agent_id, SummaryData, fallback, {
            'anomalies': [a.model_dump(mode='json') for a in self.context.enriched_anomalies],
            'total_anomalies': self.context.detection.total_count,
            'draft': fallback.model_dump(mode='json')
        })

    def _report(self) -> None:
        self._transition(ProcessingStep.REPORTING)

        fallback = build_fallback_report(self.context.summary)
        count = len(self.context.detection.anomalies)
        message = (
            f"Create a professional financial anomaly analysis report based on these {count} anomalies "
            f"with sections for executive summary, detailed findings, and recommendations. "
            f"Include proper formatting and metadata."
        )
        self.context.report = self._ask(message, self.report_agent_id, ReportData, fallback, {
            'summary': self.context.summary.model_dump(mode='json'),
            'draft': fallback.model_dump(mode='json')
        })

    def _ask(self, message: str, agent_id: str, model, fallback, data: Dict[str, Any]):
        if not self.use_collaborator:
            logger.info("Collaborator disabled, using local fallback", agent_id=agent_id)
            return fallback
        response = self.agent_caller(message, agent_id, context=data)
        return parse_agent_json(response, model, fallback)

    def export(self, fmt: Union[ReportFormat, str] = ReportFormat.TEXT, now: Optional[datetime] = None) -> ExportedReport:
        """
        Render the completed run's report

        Raises:
            SmartLedgerError: If no completed report is available
        """
        if not self.context.is_complete or self.context.report is None:
            raise SmartLedgerError("No report available - run an analysis first")

        ctx = self.context
        text = render_report_text(
            ctx.report,
            total_anomalies=ctx.detection.total_count,
            listed_anomalies=len(ctx.detection.anomalies),
            risk_level=ctx.summary.summary.risk_level.value if ctx.summary else None,
            transaction_count=len(ctx.transactions),
            now=now
        )
        return export_report(text, fmt, now=now)
