"""
Scheduled system tasks and their execution log
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, Text, JSON, Enum as SQLEnum
import enum

from app.models.base import Base, TimestampMixin, enum_values


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"


class SystemTask(Base, TimestampMixin):
    """
    A recurring job. task_class names the handler that performs it;
    next_run is last_run + run_interval seconds while the task is enabled.
    """
    __tablename__ = "system_tasks"

    id = Column(Integer, primary_key=True, index=True)
    task_name = Column(String(255), unique=True, nullable=False)
    task_class = Column(String(255), nullable=False)
    enabled = Column(Boolean, default=True, nullable=False)
    run_interval = Column(Integer, default=86400, nullable=False)  # seconds
    last_run = Column(DateTime, nullable=True)
    next_run = Column(DateTime, nullable=True)
    last_status = Column(
        SQLEnum(TaskStatus, name="task_status", values_callable=enum_values),
        default=TaskStatus.PENDING,
        nullable=False,
    )
    last_message = Column(Text, nullable=True)


class TaskLog(Base):
    """One execution of a system task"""
    __tablename__ = "task_logs"

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey("system_tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False)  # TaskStatus value
    message = Column(Text, nullable=True)
    execution_time = Column(Integer, nullable=True)  # milliseconds
    details = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
