from .base import Exporter
from .csv_exporter import CSVExporter
from .json_exporter import JSONExporter

__all__ = ["Exporter", "CSVExporter", "JSONExporter"]
