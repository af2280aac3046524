"""Domain Models 单元测试

测试内容：
1. 枚举值
2. 参数模型在边界处的校验
3. Task / Operation 模型
4. 通知解析（接收端忽略非法载荷）
"""

import json

import pytest
from intertask.core.exceptions import ValidationError
from intertask.core.models import (
    AddTaskParams,
    ChatNotification,
    CompleteTaskParams,
    ListTasksParams,
    NotificationType,
    Operation,
    StatsParams,
    Task,
    TaskStatus,
    TaskUpdateNotification,
    TransactionMethod,
    ViewMethod,
    parse_notification,
    parse_params,
)


class TestEnums:
    """枚举值测试"""

    def test_task_status_values(self):
        assert TaskStatus.OPEN == "open"
        assert TaskStatus.COMPLETED == "completed"
        assert TaskStatus.CANCELLED == "cancelled"

    def test_method_names(self):
        assert {m.value for m in TransactionMethod} == {"add_task", "complete_task", "cancel_task"}
        assert {m.value for m in ViewMethod} == {"list_tasks", "get_task", "stats"}

    def test_notification_types(self):
        assert NotificationType.TASK_UPDATE == "task_update"
        assert NotificationType.CHAT == "chat"

    def test_notification_models_use_type_enum(self):
        assert TaskUpdateNotification(id="task_000001", status="open").type is NotificationType.TASK_UPDATE
        assert ChatNotification(text="hi").type is NotificationType.CHAT

        parsed = parse_notification('{"type": "chat", "text": "hi"}')
        assert parsed.type == NotificationType.CHAT


class TestAddTaskParams:
    """add_task 参数校验"""

    def test_title_of_140_chars_accepted(self):
        params = parse_params("add_task", {"title": "x" * 140})
        assert isinstance(params, AddTaskParams)
        assert params.title == "x" * 140

    def test_title_of_141_chars_rejected(self):
        with pytest.raises(ValidationError, match="140"):
            parse_params("add_task", {"title": "x" * 141})

    def test_title_missing_rejected(self):
        with pytest.raises(ValidationError, match="title"):
            parse_params("add_task", {"desc": "no title"})

    @pytest.mark.parametrize("title", [None, 42, ["a"], {"a": 1}])
    def test_title_wrong_type_rejected(self, title):
        with pytest.raises(ValidationError):
            parse_params("add_task", {"title": title})

    @pytest.mark.parametrize("title", ["", "   "])
    def test_blank_title_rejected(self, title):
        with pytest.raises(ValidationError, match="title is required"):
            parse_params("add_task", {"title": title})

    def test_title_and_desc_trimmed(self):
        params = parse_params("add_task", {"title": "  Write spec  ", "desc": "\tdetails \n"})
        assert params.title == "Write spec"
        assert params.desc == "details"

    def test_desc_defaults_to_empty(self):
        assert parse_params("add_task", {"title": "t"}).desc == ""
        assert parse_params("add_task", {"title": "t", "desc": None}).desc == ""

    def test_desc_limit(self):
        assert len(parse_params("add_task", {"title": "t", "desc": "d" * 1000}).desc) == 1000
        with pytest.raises(ValidationError, match="1000"):
            parse_params("add_task", {"title": "t", "desc": "d" * 1001})

    def test_empty_assignee_normalised_to_none(self):
        assert parse_params("add_task", {"title": "t", "assignee": ""}).assignee is None
        assert parse_params("add_task", {"title": "t", "assignee": None}).assignee is None
        assert parse_params("add_task", {"title": "t", "assignee": "bob"}).assignee == "bob"

    def test_unknown_fields_ignored(self):
        params = parse_params("add_task", {"title": "t", "priority": "high"})
        assert params.model_dump() == {"title": "t", "desc": "", "assignee": None}


class TestOtherParams:
    """其余方法参数校验"""

    def test_id_required(self):
        with pytest.raises(ValidationError, match="id"):
            parse_params("complete_task", {})
        with pytest.raises(ValidationError):
            parse_params("cancel_task", {"id": ""})
        with pytest.raises(ValidationError):
            parse_params("get_task", None)

    def test_id_accepted(self):
        params = parse_params("complete_task", {"id": "task_000001"})
        assert isinstance(params, CompleteTaskParams)
        assert params.id == "task_000001"

    def test_list_filters_optional(self):
        params = parse_params("list_tasks", None)
        assert isinstance(params, ListTasksParams)
        assert params.status is None
        assert params.assignee is None

    def test_list_status_parsed_to_enum(self):
        assert parse_params("list_tasks", {"status": "completed"}).status is TaskStatus.COMPLETED

    def test_list_blank_filters_treated_as_absent(self):
        params = parse_params("list_tasks", {"status": "", "assignee": ""})
        assert params.status is None
        assert params.assignee is None

    def test_list_unknown_status_rejected(self):
        with pytest.raises(ValidationError, match="status"):
            parse_params("list_tasks", {"status": "archived"})

    def test_stats_takes_no_params(self):
        assert isinstance(parse_params("stats", {}), StatsParams)

    def test_unknown_method_rejected(self):
        with pytest.raises(ValidationError, match="unknown method"):
            parse_params("delete_task", {"id": "task_000001"})

    def test_params_must_be_object(self):
        with pytest.raises(ValidationError, match="object"):
            parse_params("add_task", ["title"])


class TestTaskModel:
    """Task 模型"""

    def test_defaults(self):
        task = Task(id="task_000001", title="t", creator="alice", created_at=1, updated_at=1)
        assert task.status == TaskStatus.OPEN
        assert task.desc == ""
        assert task.assignee is None
        assert task.completed_by is None
        assert task.cancelled_by is None

    def test_json_round_trip(self):
        task = Task(
            id="task_000007",
            title="t",
            assignee="bob",
            creator="alice",
            status=TaskStatus.COMPLETED,
            created_at=10,
            updated_at=20,
            completed_by="bob",
        )
        data = task.model_dump(mode="json")
        assert data["status"] == "completed"
        assert Task.model_validate(data) == task


class TestOperationModel:
    """Operation 信封"""

    def test_seq_must_be_positive(self):
        with pytest.raises(Exception):
            Operation(seq=0, op_id="x", method="add_task", signer="alice", ts=0)

    def test_signer_required(self):
        with pytest.raises(Exception):
            Operation(seq=1, op_id="x", method="add_task", signer="", ts=0)

    def test_params_default_empty(self):
        op = Operation(seq=1, op_id="x", method="stats", signer="alice", ts=0)
        assert op.params == {}


class TestNotifications:
    """通知序列化与接收端解析"""

    def test_task_update_wire_shape(self):
        n = TaskUpdateNotification(id="task_000001", status=TaskStatus.OPEN)
        assert json.loads(n.model_dump_json()) == {
            "type": "task_update",
            "id": "task_000001",
            "status": "open",
        }

    def test_parse_task_update_from_str_bytes_and_dict(self):
        raw = '{"type": "task_update", "id": "task_000002", "status": "completed"}'
        for payload in (raw, raw.encode(), json.loads(raw)):
            parsed = parse_notification(payload)
            assert isinstance(parsed, TaskUpdateNotification)
            assert parsed.id == "task_000002"
            assert parsed.status is TaskStatus.COMPLETED

    def test_parse_chat(self):
        parsed = parse_notification('{"type": "chat", "text": "hello"}')
        assert isinstance(parsed, ChatNotification)
        assert parsed.text == "hello"
        assert parsed.sender is None

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            b"\xff\xfe",
            "[1, 2, 3]",
            '{"type": "ping"}',
            '{"type": "task_update", "status": "open"}',
            '{"type": "task_update", "id": "task_000001", "status": "archived"}',
            '{"type": "chat"}',
        ],
    )
    def test_malformed_payload_ignored(self, payload):
        assert parse_notification(payload) is None
