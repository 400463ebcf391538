"""Group-scoped live fan-out of delivery events.

Connections join the group of a single delivery (``Delivery_{id}``) or the
global ``AllDeliveries`` group. Every delivery event goes to both groups; a
connection that sits in both receives it once.

Each connection owns a bounded FIFO queue drained by one pump task, so
publishing never waits on a socket and a connection sees events in the order
they were published. A connection whose send fails is dropped from every
group; nothing else is affected. Events are not stored for absent or slow
connections.
"""

import asyncio
import enum
import threading
import uuid
from collections import defaultdict
from typing import Any, Awaitable, Callable, Iterable, Optional

from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger

logger = get_logger(__name__)

GLOBAL_GROUP = "AllDeliveries"

SendFn = Callable[[dict[str, Any]], Awaitable[None]]


def delivery_group(delivery_id: int | str) -> str:
    return f"Delivery_{delivery_id}"


class DeliveryEvent(str, enum.Enum):
    CREATED = "DeliveryCreated"
    STATUS_UPDATED = "StatusUpdated"
    LOCATION_UPDATED = "LocationUpdated"


class Subscriber:
    """One live connection: a send coroutine plus its outbound queue."""

    def __init__(
        self,
        send: SendFn,
        *,
        queue_size: int,
        on_failure: Callable[["Subscriber", BaseException], None],
        name: Optional[str] = None,
    ):
        self.id = name or uuid.uuid4().hex
        self._send = send
        self._on_failure = on_failure
        self._queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=queue_size)
        self._task: Optional[asyncio.Task] = None
        self.closed = False

    def start(self) -> None:
        self._task = asyncio.get_running_loop().create_task(
            self._pump(), name=f"notifier-pump-{self.id}"
        )

    def offer(self, message: dict[str, Any]) -> bool:
        """Queue a message without blocking. False if closed or full."""
        if self.closed:
            return False
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning("Dropping %s for slow connection %s", message.get("event"), self.id)
            return False
        return True

    async def _pump(self) -> None:
        while True:
            message = await self._queue.get()
            try:
                await self._send(message)
            except Exception as exc:
                self._queue.task_done()
                self._discard_pending()
                self.closed = True
                self._on_failure(self, exc)
                return
            self._queue.task_done()

    def _discard_pending(self) -> None:
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()

    async def drain(self) -> None:
        """Wait until everything queued so far has been sent or discarded."""
        await self._queue.join()

    async def close(self) -> None:
        self.closed = True
        self._discard_pending()
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

    def __repr__(self):
        return f"<Subscriber {self.id} closed={self.closed}>"


class RealtimeNotifier:
    """In-memory registry of group -> subscribers with non-blocking publish.

    One instance per process, shared by every request handler.
    """

    def __init__(self, *, queue_size: int = 256):
        self._queue_size = queue_size
        self._groups: dict[str, set[Subscriber]] = defaultdict(set)
        self._subscribers: dict[str, Subscriber] = {}
        self._lock = threading.Lock()

    # -- membership ---------------------------------------------------------

    def connect(self, send: SendFn, *, name: Optional[str] = None) -> Subscriber:
        """Register a connection. Must be called from the running event loop."""
        subscriber = Subscriber(
            send,
            queue_size=self._queue_size,
            on_failure=self._handle_failure,
            name=name,
        )
        subscriber.start()
        with self._lock:
            self._subscribers[subscriber.id] = subscriber
        logger.debug("Connection %s registered", subscriber.id)
        return subscriber

    def join(self, subscriber: Subscriber, delivery_id: int | str) -> None:
        self._add(subscriber, delivery_group(delivery_id))

    def leave(self, subscriber: Subscriber, delivery_id: int | str) -> None:
        group = delivery_group(delivery_id)
        with self._lock:
            members = self._groups.get(group)
            if members is not None:
                members.discard(subscriber)
                if not members:
                    del self._groups[group]

    def join_all(self, subscriber: Subscriber) -> None:
        self._add(subscriber, GLOBAL_GROUP)

    def _add(self, subscriber: Subscriber, group: str) -> None:
        with self._lock:
            if subscriber.id not in self._subscribers:
                raise ValueError(f"Connection {subscriber.id} is not registered")
            self._groups[group].add(subscriber)

    def _remove_everywhere(self, subscriber: Subscriber) -> None:
        with self._lock:
            self._subscribers.pop(subscriber.id, None)
            for group in [g for g, members in self._groups.items() if subscriber in members]:
                self._groups[group].discard(subscriber)
                if not self._groups[group]:
                    del self._groups[group]

    async def disconnect(self, subscriber: Subscriber) -> None:
        """Forget a connection and stop its pump."""
        self._remove_everywhere(subscriber)
        await subscriber.close()
        logger.debug("Connection %s disconnected", subscriber.id)

    def _handle_failure(self, subscriber: Subscriber, exc: BaseException) -> None:
        logger.warning("Dropping connection %s after send failure: %s", subscriber.id, exc)
        self._remove_everywhere(subscriber)

    def group_members(self, group: str) -> set[Subscriber]:
        with self._lock:
            return set(self._groups.get(group, ()))

    @property
    def connection_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    # -- publishing ---------------------------------------------------------

    def publish(self, groups: Iterable[str], message: dict[str, Any]) -> int:
        """Enqueue ``message`` once for every connection in any of ``groups``.

        Returns how many connections accepted it.
        """
        with self._lock:
            targets: set[Subscriber] = set()
            for group in groups:
                targets.update(self._groups.get(group, ()))
        return sum(1 for subscriber in targets if subscriber.offer(message))

    def publish_delivery_event(
        self, delivery_id: int, event: DeliveryEvent, data: dict[str, Any]
    ) -> int:
        message = {
            "event": event.value,
            "delivery_id": delivery_id,
            "data": data,
            "timestamp": utc_now().isoformat(),
        }
        delivered = self.publish((delivery_group(delivery_id), GLOBAL_GROUP), message)
        logger.info(
            "Published %s for delivery %s to %d connection(s)",
            event.value,
            delivery_id,
            delivered,
        )
        return delivered

    async def drain(self) -> None:
        """Wait for every connection's queue to empty."""
        with self._lock:
            subscribers = list(self._subscribers.values())
        await asyncio.gather(*(s.drain() for s in subscribers))

    async def close(self) -> None:
        with self._lock:
            subscribers = list(self._subscribers.values())
        for subscriber in subscribers:
            await self.disconnect(subscriber)


def notify(
    notifier: Optional[RealtimeNotifier],
    delivery_id: int,
    event: DeliveryEvent,
    data: dict[str, Any],
) -> None:
    """Publish after a committed write. A fan-out fault is logged, never raised."""
    if notifier is None:
        return
    try:
        notifier.publish_delivery_event(delivery_id, event, data)
    except Exception:
        logger.exception("Failed to publish %s for delivery %s", event.value, delivery_id)
