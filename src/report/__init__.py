from .exporter import ReportExporter

__all__ = ["ReportExporter"]
