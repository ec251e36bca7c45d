"""Demo module for running analyses on bundled sample data"""

from .sample_data import generate_sample_transactions, sample_csv, write_sample_csv

__all__ = ['generate_sample_transactions', 'sample_csv', 'write_sample_csv']
