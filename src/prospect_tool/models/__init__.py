"""Database models"""
from src.prospect_tool.models.base import Base
from src.prospect_tool.models.user import User
from src.prospect_tool.models.prospect import Prospect
from src.prospect_tool.models.audit_log import AuditLog

__all__ = ["Base", "User", "Prospect", "AuditLog"]
