"""RAG project health report — schedule, phase and defect scoring."""

__version__ = "0.1.0"

from rag_report.generator import ReportGenerator  # noqa: F401
from rag_report.report_data import ReportData  # noqa: F401
from rag_report.scorer import Scores, compute_scores, rag_status  # noqa: F401
