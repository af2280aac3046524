"""NotificationHub -- 内存中通知广播器

每个订阅者持有一个 asyncio.Queue，支持 subscribe/unsubscribe/broadcast。
通知不属于复制状态：投递尽力而为，队列满的订阅者直接摘除。
"""

import asyncio

from intertask.core.config import NOTIFY_QUEUE_MAXSIZE
from intertask.core.models import Notification


class NotificationHub:
    """通知广播器 -- 基于 asyncio.Queue 的发布/订阅模式"""

    def __init__(self, queue_maxsize: int = NOTIFY_QUEUE_MAXSIZE) -> None:
        self._subscribers: set[asyncio.Queue] = set()
        self._queue_maxsize = queue_maxsize

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def subscribe(self) -> asyncio.Queue:
        """订阅通知流

        Returns:
            asyncio.Queue 实例，新通知会被推送到此队列
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_maxsize)
        self._subscribers.add(queue)
        return queue

    async def unsubscribe(self, queue: asyncio.Queue) -> None:
        """取消订阅

        Args:
            queue: 之前订阅时返回的队列
        """
        self._subscribers.discard(queue)

    async def broadcast(self, notification: Notification) -> int:
        """向所有订阅者广播通知

        Args:
            notification: 要广播的通知

        Returns:
            成功投递的订阅者数量
        """
        delivered = 0
        dead_queues = []
        for queue in self._subscribers:
            try:
                queue.put_nowait(notification)
                delivered += 1
            except asyncio.QueueFull:
                dead_queues.append(queue)

        # 清理已满的队列
        for q in dead_queues:
            self._subscribers.discard(q)
        return delivered
