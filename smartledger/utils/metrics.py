"""Prometheus metrics definitions"""

from prometheus_client import Counter, Histogram


# Pipeline health
pipeline_runs = Counter(
    'smartledger_pipeline_runs_total',
    'Pipeline runs by final status',
    labelnames=['status']  # complete, failed
)

pipeline_duration = Histogram(
    'smartledger_pipeline_duration_seconds',
    'Time to complete a full analysis run',
    buckets=[0.1, 0.5, 1, 5, 15, 30, 60, 120]
)

# Parsing & detection
transactions_parsed = Counter(
    'smartledger_transactions_parsed_total',
    'Transactions decoded from input files'
)

rows_skipped = Counter(
    'smartledger_rows_skipped_total',
    'Input rows skipped for having too few fields'
)

anomalies_detected = Counter(
    'smartledger_anomalies_detected_total',
    'Anomalies detected (untruncated)',
    labelnames=['anomaly_type']
)

risk_assessments = Counter(
    'smartledger_risk_assessments_total',
    'Risk assessments by level',
    labelnames=['risk_level']
)

# Collaborator usage
collaborator_calls = Counter(
    'smartledger_collaborator_calls_total',
    'Narrative agent calls',
    labelnames=['agent_id', 'status']  # success, failure
)

collaborator_fallbacks = Counter(
    'smartledger_collaborator_fallbacks_total',
    'Responses replaced by the local structured fallback',
    labelnames=['shape']  # summary, report
)

llm_api_latency = Histogram(
    'smartledger_llm_api_latency_seconds',
    'Latency of LLM API calls',
    labelnames=['model_name'],
    buckets=[0.5, 1, 2, 5, 10, 30]
)

llm_tokens_counter = Counter(
    'smartledger_llm_tokens_used_total',
    'Total LLM tokens consumed',
    labelnames=['model_name', 'agent_id']
)

llm_cost_counter = Counter(
    'smartledger_llm_cost_dollars_total',
    'Total LLM cost in USD',
    labelnames=['model_name']
)
