"""Document rendering adapters"""

from .pdf_renderer import ReportLabDocumentRenderer
from .scratch import scratch_file

__all__ = ["ReportLabDocumentRenderer", "scratch_file"]
