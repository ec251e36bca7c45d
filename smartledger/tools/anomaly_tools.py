"""Anomaly detection tools using statistical threshold rules"""

import numpy as np
from typing import Dict, Any, List, Optional
from smartledger.constants import (
    AnomalyType,
    ANOMALY_ID_SUFFIX,
    DEFAULT_AMOUNT_SIGMA,
    DEFAULT_AMOUNT_CONFIDENCE_SIGMA,
    DEFAULT_AMOUNT_MAX_CONFIDENCE,
    DEFAULT_TIMING_WINDOW_HOURS,
    DEFAULT_TIMING_AMOUNT_RATIO,
    DEFAULT_TIMING_CONFIDENCE,
    DEFAULT_ROUND_AMOUNT_UNIT,
    DEFAULT_PATTERN_CONFIDENCE,
    MAX_REPORTED_ANOMALIES
)
from smartledger.models import Transaction, Anomaly, EnrichedAnomaly, DetectionResult
from smartledger.utils.logging import get_logger
from smartledger.utils.metrics import anomalies_detected

logger = get_logger(__name__)


def format_amount(amount: float) -> str:
    """Format an amount with thousands separators, e.g. 1,250.00"""
    return f"{amount:,.2f}"


def _make_anomaly(txn: Transaction, anomaly_type: AnomalyType, confidence: float, description: str) -> Anomaly:
    return Anomaly(
        id=f"{txn.id}_{ANOMALY_ID_SUFFIX[anomaly_type]}",
        transaction_id=txn.id,
        anomaly_type=anomaly_type,
        confidence=confidence,
        description=description
    )


def amount_statistics(transactions: List[Transaction]) -> Dict[str, float]:
    """
    Mean and population standard deviation of the batch amounts

    Returns:
        {'mean': float, 'std': float}, both 0.0 for an empty batch
    """
    if not transactions:
        return {'mean': 0.0, 'std': 0.0}

    amounts = np.array([t.amount for t in transactions], dtype=float)
    return {'mean': float(amounts.mean()), 'std': float(amounts.std(ddof=0))}


def check_amount_anomaly(txn: Transaction, mean: float, std: float, rules: Optional[Dict[str, Any]] = None) -> Optional[Anomaly]:
    """
    Flag amounts more than `sigma` standard deviations from the batch mean.

    Never fires on a zero-variance batch.
    """
    rules = rules or {}
    sigma = rules.get('sigma', DEFAULT_AMOUNT_SIGMA)
    confidence_sigma = rules.get('confidence_sigma', DEFAULT_AMOUNT_CONFIDENCE_SIGMA)
    max_confidence = rules.get('max_confidence', DEFAULT_AMOUNT_MAX_CONFIDENCE)

    if std <= 0:
        return None

    deviation = abs(txn.amount - mean)
    if deviation <= sigma * std:
        return None

    direction = 'high' if txn.amount > mean else 'low'
    return _make_anomaly(
        txn,
        AnomalyType.AMOUNT,
        min(max_confidence, deviation / (confidence_sigma * std)),
        f"Unusually {direction} amount: ${format_amount(txn.amount)}"
    )


def check_timing_anomaly(txn: Transaction, previous: Transaction, mean: float, rules: Optional[Dict[str, Any]] = None) -> Optional[Anomaly]:
    """
    Flag a sizeable transaction arriving within the timing window of the
    previous row. Rows are compared in input order, so a negative gap also
    counts as "within" the window. Rows without a readable date never fire
    and never trigger the row after them.
    """
    rules = rules or {}
    window_hours = rules.get('window_hours', DEFAULT_TIMING_WINDOW_HOURS)
    amount_ratio = rules.get('amount_ratio', DEFAULT_TIMING_AMOUNT_RATIO)
    confidence = rules.get('confidence', DEFAULT_TIMING_CONFIDENCE)

    if txn.date is None or previous.date is None:
        return None

    hours = (txn.date - previous.date).total_seconds() / 3600
    if hours < window_hours and abs(txn.amount) > mean * amount_ratio:
        return _make_anomaly(
            txn,
            AnomalyType.TIMING,
            confidence,
            f"Rapid transaction within {hours:.1f} hours"
        )
    return None


def check_pattern_anomaly(txn: Transaction, mean: float, rules: Optional[Dict[str, Any]] = None) -> Optional[Anomaly]:
    """Flag above-average amounts that are exact multiples of the round unit"""
    rules = rules or {}
    unit = rules.get('unit', DEFAULT_ROUND_AMOUNT_UNIT)
    confidence = rules.get('confidence', DEFAULT_PATTERN_CONFIDENCE)

    if txn.amount % unit == 0 and txn.amount > mean:
        return _make_anomaly(
            txn,
            AnomalyType.PATTERN,
            confidence,
            f"Suspect round number amount: ${format_amount(txn.amount)}"
        )
    return None


def detect_anomalies(transactions: List[Transaction], rules: Optional[Dict[str, Any]] = None) -> DetectionResult:
    """
    Run the amount, timing and round-number rules over a batch.

    Rules are evaluated per transaction in that order and are not exclusive.
    The returned list keeps the first `max_reported` anomalies in
    (transaction, rule) order; `total_count` is the untruncated count.

    Args:
        transactions: Transactions in input order
        rules: Optional `rules.anomaly_detection` config section

    Returns:
        DetectionResult
    """
    rules = rules or {}
    amount_rules = rules.get('amount_outlier', {})
    timing_rules = rules.get('timing', {})
    pattern_rules = rules.get('round_amount', {})
    max_reported = rules.get('max_reported', MAX_REPORTED_ANOMALIES)

    logger.info(f"Detecting anomalies in {len(transactions)} transactions")

    stats = amount_statistics(transactions)
    mean, std = stats['mean'], stats['std']

    found: List[Anomaly] = []
    for index, txn in enumerate(transactions):
        candidates = [check_amount_anomaly(txn, mean, std, amount_rules)]
        if index > 0:
            candidates.append(check_timing_anomaly(txn, transactions[index - 1], mean, timing_rules))
        candidates.append(check_pattern_anomaly(txn, mean, pattern_rules))
        found.extend(a for a in candidates if a is not None)

    for anomaly in found:
        anomalies_detected.labels(anomaly_type=anomaly.anomaly_type.value).inc()

    result = DetectionResult(anomalies=found[:max_reported], total_count=len(found))

    logger.info(
        f"Found {result.total_count} anomalies",
        mean=round(mean, 2),
        std=round(std, 2),
        reported=len(result.anomalies)
    )
    return result


def enrich_anomalies(anomalies: List[Anomaly], transactions: List[Transaction]) -> List[EnrichedAnomaly]:
    """
    Join each anomaly with its source transaction (first match by id)

    Raises:
        KeyError: If an anomaly references a transaction missing from the batch
    """
    by_id: Dict[str, Transaction] = {}
    for txn in transactions:
        by_id.setdefault(txn.id, txn)

    enriched = []
    for anomaly in anomalies:
        txn = by_id.get(anomaly.transaction_id)
        if txn is None:
            raise KeyError(f"Anomaly {anomaly.id} references unknown transaction {anomaly.transaction_id}")
        enriched.append(EnrichedAnomaly(
            **anomaly.model_dump(),
            date=txn.date,
            transaction_description=txn.description,
            amount=txn.amount,
            account=txn.account,
            category=txn.category,
            merchant=txn.merchant
        ))
    return enriched
