"""
Task Service

Scheduled system tasks. Each task names a task_class whose handler does the
work; running a task records a task_logs row and updates last_run, next_run
and last_status. A failed run rolls back the handler's changes, then the
failure itself is recorded in a separate commit.
"""
import logging
import time
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, ErrorCode, NotFoundError
from app.models.journal import Issue
from app.models.task import SystemTask, TaskLog, TaskStatus
from app.schemas.common import ActionResult
from app.schemas.task import TaskCreate, TaskGet, TaskLogResponse, TaskQuery, TaskResponse, TaskRunResult, TaskUpdate
from app.services.actions import ActionContext, CredentialsLike, run_action
from app.services.issue_service import ISSUE_PATHS
from app.services.maintenance_service import MAINTENANCE_TASKS

logger = logging.getLogger(__name__)

TASK_PATHS = ("/admin/tasks",)
LIST_LOG_LIMIT = 100
TASK_LOG_LIMIT = 50

# A rejected caller never reached the handler, so there is no failed run to record
NOT_A_RUN = (ErrorCode.VALIDATION, ErrorCode.UNAUTHORIZED, ErrorCode.FORBIDDEN, ErrorCode.NOT_FOUND)


async def publish_scheduled_issues(ctx: ActionContext) -> Dict[str, Any]:
    """Publish every unpublished issue whose scheduled date has passed"""
    now = datetime.utcnow()
    result = await ctx.db.execute(
        select(Issue).where(
            Issue.is_published.is_(False),
            Issue.published_date.is_not(None),
            Issue.published_date <= now,
        )
    )
    published = []
    for issue in result.scalars().all():
        issue.is_published = True
        published.append(issue.id)
        ctx.audit(
            "issue_published", "issue", issue.id, {"published_date": issue.published_date.isoformat(), "scheduled": True}
        )
    await ctx.db.flush()

    if published:
        ctx.invalidate(*ISSUE_PATHS)
    return {"message": f"Published {len(published)} scheduled issue(s)", "published_issues": published}


TASK_HANDLERS = {task_id: task.handler for task_id, task in MAINTENANCE_TASKS.items()}
TASK_HANDLERS["publish_scheduled_issues"] = publish_scheduled_issues


def _next_run(task: SystemTask, now: Optional[datetime] = None) -> Optional[datetime]:
    if not task.enabled:
        return None
    return (task.last_run or now or datetime.utcnow()) + timedelta(seconds=task.run_interval)


class TaskService:
    """Service for scheduled system tasks"""

    async def _get_task(self, db: AsyncSession, task_id: int) -> SystemTask:
        task = (await db.execute(select(SystemTask).where(SystemTask.id == task_id))).scalar_one_or_none()
        if not task:
            raise NotFoundError("Task not found")
        return task

    async def _logs(self, db: AsyncSession, task_ids: List[int], limit: int) -> Dict[int, List[TaskLogResponse]]:
        result = await db.execute(
            select(TaskLog)
            .where(TaskLog.task_id.in_(task_ids))
            .order_by(TaskLog.created_at.desc(), TaskLog.id.desc())
            .limit(limit)
        )
        grouped: Dict[int, List[TaskLogResponse]] = {task_id: [] for task_id in task_ids}
        for log in result.scalars().all():
            grouped[log.task_id].append(TaskLogResponse.model_validate(log))
        return grouped

    async def _list(self, ctx: ActionContext, query: TaskQuery) -> List[TaskResponse]:
        result = await ctx.db.execute(select(SystemTask).order_by(SystemTask.task_name))
        tasks = [TaskResponse.model_validate(task) for task in result.scalars().all()]
        if query.include_logs and tasks:
            logs = await self._logs(ctx.db, [task.id for task in tasks], LIST_LOG_LIMIT)
            for task in tasks:
                task.logs = logs[task.id]
        return tasks

    async def _get(self, ctx: ActionContext, data: TaskGet) -> TaskResponse:
        task = TaskResponse.model_validate(await self._get_task(ctx.db, data.id))
        if data.include_logs:
            task.logs = (await self._logs(ctx.db, [task.id], TASK_LOG_LIMIT))[task.id]
        return task

    async def _create(self, ctx: ActionContext, data: TaskCreate) -> TaskResponse:
        db = ctx.db
        existing = (
            await db.execute(select(SystemTask.id).where(SystemTask.task_name == data.task_name))
        ).scalar_one_or_none()
        if existing is not None:
            raise ConflictError("A task with this name already exists")

        task = SystemTask(
            task_name=data.task_name,
            task_class=data.task_class,
            enabled=data.enabled,
            run_interval=data.run_interval,
            last_status=TaskStatus.PENDING,
        )
        task.next_run = _next_run(task)
        db.add(task)
        await db.flush()
        await db.refresh(task)

        ctx.audit(
            "system_task_created", "system_task", task.id, {"task_name": task.task_name, "task_class": task.task_class}
        )
        ctx.invalidate(*TASK_PATHS)
        return TaskResponse.model_validate(task)

    async def _update(self, ctx: ActionContext, data: TaskUpdate) -> TaskResponse:
        task = await self._get_task(ctx.db, data.id)
        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True, exclude={"id"}).items()
            if value is not None
        }

        for field, value in changes.items():
            setattr(task, field, value)
        if "enabled" in changes or "run_interval" in changes:
            task.next_run = _next_run(task)
        await ctx.db.flush()
        await ctx.db.refresh(task)

        ctx.audit("system_task_updated", "system_task", task.id, {"changes": changes})
        ctx.invalidate(*TASK_PATHS)
        return TaskResponse.model_validate(task)

    async def _run(self, ctx: ActionContext, data: TaskGet) -> TaskRunResult:
        db = ctx.db
        task = await self._get_task(db, data.id)
        handler = TASK_HANDLERS[task.task_class]

        started = time.perf_counter()
        result = await handler(ctx)
        execution_time = int((time.perf_counter() - started) * 1000)

        now = datetime.utcnow()
        task.last_run = now
        task.last_status = TaskStatus.SUCCESS
        task.last_message = "Task executed successfully"
        task.next_run = _next_run(task, now)
        db.add(
            TaskLog(
                task_id=task.id,
                status=TaskStatus.SUCCESS.value,
                message="Task executed manually",
                execution_time=execution_time,
                details={"manual": True, "task_class": task.task_class, "result": result},
            )
        )
        await db.flush()
        logger.info(f"Task {task.task_name} ({task.task_class}) finished in {execution_time} ms")

        ctx.audit(
            "system_task_executed", "system_task", task.id, {"task_name": task.task_name, "execution_time": execution_time}
        )
        ctx.invalidate(*TASK_PATHS)
        return TaskRunResult(
            task_id=task.id,
            status=TaskStatus.SUCCESS,
            execution_time=execution_time,
            message="Task executed successfully",
            result=result,
        )

    async def _record_failure(self, db: AsyncSession, task_id: Any, message: str, execution_time: int) -> None:
        """Mark the task failed and log the run, in its own commit"""
        try:
            task = await db.get(SystemTask, int(task_id))
            if task is None:
                return
            now = datetime.utcnow()
            task.last_run = now
            task.last_status = TaskStatus.ERROR
            task.last_message = message
            task.next_run = _next_run(task, now)
            db.add(
                TaskLog(
                    task_id=task.id,
                    status=TaskStatus.ERROR.value,
                    message=message,
                    execution_time=execution_time,
                    details={"manual": True, "task_class": task.task_class},
                )
            )
            await db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error recording failed run of task {task_id}: {e}")
            await db.rollback()

    async def list_tasks(self, db: AsyncSession, credentials: CredentialsLike, query: Any = None) -> ActionResult:
        return await run_action("list_tasks", db, credentials, self._list, query or {}, TaskQuery)

    async def get_task(
        self, db: AsyncSession, credentials: CredentialsLike, task_id: Any, include_logs: Any = False
    ) -> ActionResult:
        return await run_action(
            "get_task", db, credentials, self._get, {"id": task_id, "include_logs": include_logs}, TaskGet
        )

    async def create_task(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("create_task", db, credentials, self._create, payload, TaskCreate)

    async def update_task(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("update_task", db, credentials, self._update, payload, TaskUpdate)

    async def run_task(self, db: AsyncSession, credentials: CredentialsLike, task_id: Any) -> ActionResult:
        started = time.perf_counter()
        result = await run_action("run_task", db, credentials, self._run, {"id": task_id}, TaskGet)
        if not result.success and result.code not in NOT_A_RUN:
            execution_time = int((time.perf_counter() - started) * 1000)
            logger.warning(f"Task {task_id} failed: {result.error}")
            await self._record_failure(db, task_id, result.error, execution_time)
        return result


# Global task service instance
task_service = TaskService()
