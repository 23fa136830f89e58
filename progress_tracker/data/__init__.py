"""Data module - Chargement, tri et mise en forme des relevés."""

from progress_tracker.data.loaders import DataLoader, CSVLoader
from progress_tracker.data.transformers import sort_records, records_table, records_to_csv
from progress_tracker.data.refresh import ScheduledRefresh

__all__ = [
    "DataLoader",
    "CSVLoader",
    "sort_records",
    "records_table",
    "records_to_csv",
    "ScheduledRefresh",
]
