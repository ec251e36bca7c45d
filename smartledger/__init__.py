"""SmartLedger - transaction anomaly detection and reporting"""

__version__ = "0.1.0"
