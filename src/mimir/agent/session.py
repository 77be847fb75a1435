"""Per-session conversation history."""

from ..provider.base import Message


class SessionContexts:
    """Role-tagged conversation turns, keyed by session id."""

    def __init__(self, max_messages: int | None = None) -> None:
        self._contexts: dict[str, list[Message]] = {}
        self.max_messages = max_messages

    def get(self, session_id: str | None) -> list[Message]:
        """Return a copy of the turns recorded for a session."""
        if session_id is None:
            return []
        return list(self._contexts.get(session_id, []))

    def append(self, session_id: str | None, role: str, content: str) -> None:
        if session_id is None:
            return
        turns = self._contexts.setdefault(session_id, [])
        turns.append({"role": role, "content": content})
        if self.max_messages is not None and len(turns) > self.max_messages:
            del turns[: len(turns) - self.max_messages]

    def record_exchange(self, session_id: str | None, user_input: str, output: str) -> None:
        """Record a user turn and the assistant's reply."""
        self.append(session_id, "user", user_input)
        self.append(session_id, "assistant", output)

    def clear(self, session_id: str) -> None:
        self._contexts.pop(session_id, None)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._contexts
