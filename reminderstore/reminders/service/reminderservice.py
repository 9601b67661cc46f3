"""Protocol for the services which hold reminders on behalf of the ``ReminderStore``."""
from __future__ import annotations

from typing import List, Protocol

from reminderstore.reminders.model.reminder import AccessState, Reminder, ReminderFilter
from reminderstore.reminders.model.reminderlist import ReminderList


class ReminderService(Protocol):
    """
    A backing reminders store. Implementations raise ``PermissionDenied`` or ``BackingStoreFailure`` when a request
    fails.
    """

    def get_authorization_status(self) -> AccessState:
        """Return the current access state without prompting the user."""
        ...

    async def request_full_access(self) -> AccessState:
        """Ask for read/write access to reminders."""
        ...

    async def fetch(self, matching: ReminderFilter) -> List[Reminder]:
        """Fetch every reminder matching the filter."""
        ...

    async def save(self, reminder: Reminder) -> None:
        """Create or update a reminder. New reminders have their ``id`` set by the store."""
        ...

    async def remove(self, reminder: Reminder) -> None:
        """Delete a reminder."""
        ...

    def default_list_for_new_records(self) -> ReminderList:
        """Return the list new reminders are added to."""
        ...
