"""
Repository layer exports.
"""

from db.repositories.file_processing_repository import FileProcessingRepository

__all__ = ["FileProcessingRepository"]
