from .file_service import FileService, TargetPathGenerator
from .reporter import Reporter

__all__ = ["FileService", "TargetPathGenerator", "Reporter"]
