"""Abstract database interface."""

from abc import ABC, abstractmethod

# Import entities directly to avoid circular import through domain/__init__.py
from familyhub.domain.entities import Snapshot


class Database(ABC):
    """Abstract snapshot database interface for familyhub.

    The store keeps all state in memory; a database only loads the state at
    start-up and saves it back after changes.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def load_snapshot(self) -> Snapshot:
        """Load the complete stored state. Returns an empty snapshot for a new database."""
        pass

    @abstractmethod
    def save_snapshot(self, snapshot: Snapshot) -> None:
        """Replace the stored state with ``snapshot`` in a single transaction."""
        pass
