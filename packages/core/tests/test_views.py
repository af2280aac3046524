"""视图单元测试

测试内容：
1. list_tasks 的过滤与排序
2. get_task / stats
3. 视图只读，不改变状态
"""

import pytest
from intertask.core.exceptions import NotFoundError, ValidationError
from intertask.core.machine import apply_operation, run_view
from intertask.core.models import StatsResult, TaskStatus


async def _seed(state_store, admins, op_factory) -> None:
    """task_000001 bob/open, task_000002 bob/completed, task_000003 carol/cancelled, task_000004 无人/open"""
    await apply_operation(state_store, admins, op_factory("add_task", {"title": "one", "assignee": "bob"}))
    await apply_operation(state_store, admins, op_factory("add_task", {"title": "two", "assignee": "bob"}))
    await apply_operation(state_store, admins, op_factory("add_task", {"title": "three", "assignee": "carol"}))
    await apply_operation(state_store, admins, op_factory("add_task", {"title": "four"}))
    await apply_operation(state_store, admins, op_factory("complete_task", {"id": "task_000002"}, signer="bob"))
    await apply_operation(state_store, admins, op_factory("cancel_task", {"id": "task_000003"}, signer="admin"))


class TestListTasks:
    """list_tasks 视图"""

    async def test_all_sorted_newest_first(self, state_store, admins, op_factory):
        await _seed(state_store, admins, op_factory)

        result = await run_view(state_store, "list_tasks")
        assert [t.id for t in result.tasks] == ["task_000004", "task_000003", "task_000002", "task_000001"]
        assert result.count == 4

    async def test_filter_by_status(self, state_store, admins, op_factory):
        await _seed(state_store, admins, op_factory)

        result = await run_view(state_store, "list_tasks", {"status": "open"})
        assert [t.id for t in result.tasks] == ["task_000004", "task_000001"]
        assert all(t.status == TaskStatus.OPEN for t in result.tasks)

    async def test_filter_by_assignee(self, state_store, admins, op_factory):
        await _seed(state_store, admins, op_factory)

        result = await run_view(state_store, "list_tasks", {"assignee": "bob"})
        assert [t.id for t in result.tasks] == ["task_000002", "task_000001"]

    async def test_filter_by_assignee_and_status(self, state_store, admins, op_factory):
        await _seed(state_store, admins, op_factory)

        result = await run_view(state_store, "list_tasks", {"assignee": "bob", "status": "completed"})
        assert [t.id for t in result.tasks] == ["task_000002"]

    async def test_unknown_assignee_is_empty(self, state_store, admins, op_factory):
        await _seed(state_store, admins, op_factory)

        result = await run_view(state_store, "list_tasks", {"assignee": "nobody"})
        assert result.tasks == []
        assert result.count == 0

    async def test_equal_timestamps_ordered_by_id(self, state_store, admins, op_factory):
        for title in ("a", "b", "c"):
            await apply_operation(state_store, admins, op_factory("add_task", {"title": title}, ts=5_000))

        result = await run_view(state_store, "list_tasks")
        assert [t.id for t in result.tasks] == ["task_000003", "task_000002", "task_000001"]

    async def test_missing_record_skipped(self, state_store, admins, op_factory):
        """索引中存在但记录缺失的 id 被跳过"""
        await apply_operation(state_store, admins, op_factory("add_task", {"title": "a"}))
        await state_store.sadd("tasks:all", "task_000042")

        result = await run_view(state_store, "list_tasks")
        assert [t.id for t in result.tasks] == ["task_000001"]

    async def test_invalid_status_filter(self, state_store):
        with pytest.raises(ValidationError):
            await run_view(state_store, "list_tasks", {"status": "done"})

    async def test_empty_store(self, state_store):
        result = await run_view(state_store, "list_tasks")
        assert result.count == 0


class TestGetTaskAndStats:
    """get_task / stats 视图"""

    async def test_get_task(self, state_store, admins, op_factory):
        await _seed(state_store, admins, op_factory)

        result = await run_view(state_store, "get_task", {"id": "task_000002"})
        assert result.task.status == TaskStatus.COMPLETED
        assert result.task.completed_by == "bob"

    async def test_get_missing_task(self, state_store):
        with pytest.raises(NotFoundError, match="task_000404"):
            await run_view(state_store, "get_task", {"id": "task_000404"})

    async def test_stats(self, state_store, admins, op_factory):
        await _seed(state_store, admins, op_factory)

        result = await run_view(state_store, "stats")
        assert result == StatsResult(total=4, open=2, completed=1, cancelled=1)
        assert result.open + result.completed + result.cancelled == result.total

    async def test_stats_empty(self, state_store):
        assert await run_view(state_store, "stats") == StatsResult(total=0, open=0, completed=0, cancelled=0)

    async def test_views_do_not_mutate(self, state_store, admins, op_factory):
        await _seed(state_store, admins, op_factory)
        before = await state_store.dump()

        await run_view(state_store, "list_tasks", {"assignee": "bob"})
        await run_view(state_store, "get_task", {"id": "task_000001"})
        await run_view(state_store, "stats")

        assert await state_store.dump() == before

    async def test_unknown_view(self, state_store):
        with pytest.raises(ValidationError, match="unknown"):
            await run_view(state_store, "add_task", {"title": "a"})
