"""
Ingestion: turn a delimited source (path or URL) into a Dataset.
"""

from .csv_loader import load_csv

__all__ = ["load_csv"]
