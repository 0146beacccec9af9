"""Identity contract for records stored in a table."""

import abc


class Identifiable(abc.ABC):
    """A record that can be stored in a table.

    Every record stored in a table must report an id unique within that table.
    The id must stay stable for as long as the record is stored under it;
    changing it is done through `SelectView.update`, which moves the record to
    its new key.
    """

    @abc.abstractmethod
    def id(self) -> str:
        """Return the identifier of this record."""
