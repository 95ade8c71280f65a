"""Port interface for the read-only class schedule feed."""

from abc import ABC, abstractmethod

from class_likes.domain.entities.class_session import ClassSession


class ScheduleRepository(ABC):
    @abstractmethod
    def get_all(self) -> list[ClassSession]:
        """Return every scheduled class session."""
        ...
