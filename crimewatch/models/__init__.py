from crimewatch.models.base import IDModel, TimestampModel
from crimewatch.models.user import User
from crimewatch.models.report import Report

__all__ = [
    'IDModel',
    'TimestampModel',
    'User',
    'Report',
]
