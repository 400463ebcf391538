from typing import Any


class RecordingSocket:
    """Async send callable that remembers every frame it was given."""

    def __init__(self):
        self.messages: list[dict[str, Any]] = []

    async def __call__(self, message: dict[str, Any]) -> None:
        self.messages.append(message)

    @property
    def events(self) -> list[str]:
        return [m["event"] for m in self.messages]


class BrokenSocket:
    """Send callable for a peer that has gone away."""

    def __init__(self):
        self.attempts = 0

    async def __call__(self, message: dict[str, Any]) -> None:
        self.attempts += 1
        raise ConnectionResetError("peer closed the connection")
