from .file_service import FileService
from .action_service import ActionExecutor
from .report_service import ReportService

__all__ = ["FileService", "ActionExecutor", "ReportService"]
