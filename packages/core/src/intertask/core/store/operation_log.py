"""OperationLog SQLite 实现

操作日志 append-only：只允许插入，不允许更新或删除。
seq 即全局顺序，严格单调递增。
"""

import json

import aiosqlite

from ..models.operation import Operation


class SqliteOperationLog:
    """OperationLog 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def append_operation(self, op: Operation) -> None:
        """追加操作（append-only）

        注意：此方法不自动提交事务，需由调用方管理事务。
        """
        await self._conn.execute(
            """
            INSERT INTO operations (seq, op_id, method, params, signer, ts)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                op.seq,
                op.op_id,
                op.method,
                json.dumps(op.params, ensure_ascii=False, sort_keys=True),
                op.signer,
                op.ts,
            ),
        )

    async def get_operations_after(
        self,
        seq: int,
        limit: int | None = None,
    ) -> list[Operation]:
        """查询 seq 之后的操作，按 seq 正序（用于节点追赶）"""
        sql = "SELECT * FROM operations WHERE seq > ? ORDER BY seq ASC"
        params: tuple = (seq,)
        if limit is not None:
            sql += " LIMIT ?"
            params = (seq, limit)
        cursor = await self._conn.execute(sql, params)
        rows = await cursor.fetchall()
        return [self._row_to_operation(row) for row in rows]

    async def get_all_operations(self) -> list[Operation]:
        """查询所有操作，按 seq 排序（用于状态重建）"""
        cursor = await self._conn.execute("SELECT * FROM operations ORDER BY seq ASC")
        rows = await cursor.fetchall()
        return [self._row_to_operation(row) for row in rows]

    async def get_next_seq(self) -> int:
        """获取下一个 seq（MAX+1）

        在事务内调用以确保原子性。
        """
        cursor = await self._conn.execute("SELECT COALESCE(MAX(seq), 0) FROM operations")
        row = await cursor.fetchone()
        return (row[0] if row else 0) + 1

    async def has_operation(self, op_id: str) -> bool:
        cursor = await self._conn.execute(
            "SELECT 1 FROM operations WHERE op_id = ? LIMIT 1",
            (op_id,),
        )
        row = await cursor.fetchone()
        return row is not None

    @staticmethod
    def _row_to_operation(row: aiosqlite.Row) -> Operation:
        """将数据库行转换为 Operation 模型"""
        return Operation(
            seq=row[0],
            op_id=row[1],
            method=row[2],
            params=json.loads(row[3]) if row[3] else {},
            signer=row[4],
            ts=row[5],
        )
