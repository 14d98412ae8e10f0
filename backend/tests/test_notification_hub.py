import asyncio

from timetabler.services.allocation.events import HubEventPublisher
from timetabler.services.notification_hub import NotificationHub


class FakeWebSocket:
    def __init__(self, *, broken=False):
        self.accepted = False
        self.sent = []
        self.broken = broken

    async def accept(self):
        self.accepted = True

    async def send_json(self, payload):
        if self.broken:
            raise RuntimeError("socket closed")
        self.sent.append(payload)


def test_publish_reaches_channel_subscribers_only():
    hub = NotificationHub()
    schedule_socket = FakeWebSocket()
    other_socket = FakeWebSocket()

    async def scenario():
        await hub.connect("schedule", schedule_socket)
        await hub.connect("other", other_socket)
        await hub.publish("schedule", {"event": "schedule.generated"})

    asyncio.run(scenario())

    assert schedule_socket.accepted
    assert schedule_socket.sent == [{"event": "schedule.generated"}]
    assert other_socket.sent == []


def test_stale_sockets_are_dropped():
    hub = NotificationHub()
    healthy = FakeWebSocket()
    broken = FakeWebSocket(broken=True)

    async def scenario():
        await hub.connect("schedule", healthy)
        await hub.connect("schedule", broken)
        await hub.publish("schedule", {"event": "ping"})

    asyncio.run(scenario())

    assert hub.subscriber_count("schedule") == 1
    assert healthy.sent == [{"event": "ping"}]


def test_disconnect_removes_empty_channel():
    hub = NotificationHub()
    socket = FakeWebSocket()

    async def scenario():
        await hub.connect("schedule", socket)
        await hub.disconnect("schedule", socket)

    asyncio.run(scenario())

    assert hub.subscriber_count("schedule") == 0


def test_hub_publisher_outside_worker_thread_is_silent():
    hub = NotificationHub()
    # No running portal: the publish attempt is logged and dropped.
    HubEventPublisher(hub=hub).publish("schedule.generated", {"allocated": 0})
    assert hub.subscriber_count("schedule") == 0
