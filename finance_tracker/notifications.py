"""
User-facing notification channel.

Forms report every outcome through a Notifier. Notifications are
fire-and-forget: nothing waits for the user to acknowledge them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class Notifier(ABC):
    """Anything that can show a short success or error message to the user."""

    @abstractmethod
    def success(self, message: str) -> None:
        pass

    @abstractmethod
    def error(self, message: str) -> None:
        pass


@dataclass(frozen=True)
class Notification:
    level: str  # "success" | "error"
    message: str


@dataclass
class CollectingNotifier(Notifier):
    """
    Notifier that queues messages until someone drains them.

    The Streamlit shell drains it after each rerun and renders the
    messages as toasts.
    """

    pending: list[Notification] = field(default_factory=list)

    def success(self, message: str) -> None:
        self.pending.append(Notification("success", message))

    def error(self, message: str) -> None:
        self.pending.append(Notification("error", message))

    def drain(self) -> list[Notification]:
        drained, self.pending = self.pending, []
        return drained
