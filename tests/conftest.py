import copy
import datetime
from typing import List

import pytest

from reminderstore.reminders.errors import BackingStoreFailure
from reminderstore.reminders.model.reminder import AccessState, Reminder, ReminderFilter
from reminderstore.reminders.model.reminderlist import ReminderList


class MockReminderService:
    """
    Keeps reminders in a dictionary. Operations named in ``fail`` raise ``BackingStoreFailure``.
    """

    def __init__(self, reminders: List[Reminder] | None = None, grant: bool = True):
        self.records = {r.id: r for r in reminders or []}
        self.status = AccessState.UNKNOWN
        self.grant = grant
        self.fail = set()
        self.calls = []
        self.next_id = 1
        self.default_list = ReminderList('Reminders', 'list-1')

    def get_authorization_status(self) -> AccessState:
        self.calls.append('status')
        return self.status

    async def request_full_access(self) -> AccessState:
        self.calls.append('request')
        if 'request' in self.fail:
            raise BackingStoreFailure('request failed')
        self.status = AccessState.AUTHORIZED if self.grant else AccessState.DENIED
        return self.status

    async def fetch(self, matching: ReminderFilter) -> List[Reminder]:
        self.calls.append('fetch')
        if 'fetch' in self.fail:
            raise BackingStoreFailure('fetch failed')
        return [copy.copy(r) for r in self.records.values() if matching == ReminderFilter.ALL or not r.is_completed]

    async def save(self, reminder: Reminder) -> None:
        self.calls.append('save')
        if 'save' in self.fail:
            raise BackingStoreFailure('save failed')
        if reminder.id is None:
            reminder.id = 'id-{}'.format(self.next_id)
            self.next_id += 1
        self.records[reminder.id] = copy.copy(reminder)

    async def remove(self, reminder: Reminder) -> None:
        self.calls.append('remove')
        if 'remove' in self.fail:
            raise BackingStoreFailure('remove failed')
        if reminder.id not in self.records:
            raise BackingStoreFailure('Reminder {} not found'.format(reminder.id))
        del self.records[reminder.id]

    def default_list_for_new_records(self) -> ReminderList:
        return self.default_list


@pytest.fixture
def service():
    return MockReminderService([
        Reminder('r1', 'Buy milk'),
        Reminder('r2', 'Pay rent', due_at=datetime.datetime(2024, 2, 1, 9, 0), raw_priority=1),
        Reminder('r3', 'File taxes', is_completed=True),
    ])
