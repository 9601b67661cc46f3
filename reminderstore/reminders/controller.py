"""
This is the reminder controller. It contains the ``ReminderStore``, which keeps the list of reminders shown to the user
in step with a backing reminders service. It is called by the CLI, but can be used by any presentation layer.

All of the store's state must be changed from the asyncio event loop which owns the store. Callers await each operation
before issuing the next one.
"""
from __future__ import annotations

import copy
import datetime
import logging
from typing import Callable, Iterable, List, Tuple

from reminderstore.reminders.errors import BackingStoreFailure, ReminderStoreError
from reminderstore.reminders.model.reminder import AccessState, Reminder, ReminderFilter, ReminderPriority
from reminderstore.reminders.service.reminderservice import ReminderService

#: Signature of change listeners: ``listener(field_name, new_value)``.
Listener = Callable[[str, object], None]


def sort_reminders(reminders: Iterable[Reminder]) -> List[Reminder]:
    """
    Sort reminders for display. Reminders with a due date come first, earliest first. Reminders without a due date
    follow, sorted by title.

    :param reminders: the reminders to sort.

    :return: a new, sorted list.
    """
    return sorted(reminders, key=_sort_key)


def _sort_key(reminder: Reminder) -> tuple:
    if reminder.due_at is not None:
        return 0, reminder.due_at
    return 1, reminder.title or ''


class ReminderStore:
    """
    Holds the cached, sorted list of reminders together with the access state, a loading flag and the last error.

    Failures never escape the store: each operation logs them, stores a message in ``last_error`` and returns False.
    Successful mutations refresh the cache exactly once; failed ones leave it alone.
    """

    def __init__(self, service: ReminderService):
        """
        Create a new reminder store.

        :param service: the backing service which holds the reminders.
        """
        self.service: ReminderService = service
        self._reminders: Tuple[Reminder, ...] = ()
        self._access_state: AccessState = AccessState.UNKNOWN
        self._is_loading: bool = False
        self._last_error: str | None = None
        self._listeners: List[Listener] = []

    @property
    def reminders(self) -> Tuple[Reminder, ...]:
        """The cached reminders, in display order."""
        return self._reminders

    @property
    def access_state(self) -> AccessState:
        return self._access_state

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def last_error(self) -> str | None:
        """Message describing the most recent failure. Left in place until ``clear_error()`` is called."""
        return self._last_error

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a function to be called whenever ``reminders``, ``access_state``, ``is_loading`` or ``last_error``
        changes.

        :param listener: called with the name of the field and its new value.

        :return: a function which removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, field: str, value) -> None:
        attribute = '_' + field
        if getattr(self, attribute) == value:
            return
        setattr(self, attribute, value)
        for listener in list(self._listeners):
            listener(field, value)

    def _fail(self, message: str) -> bool:
        logging.critical(message)
        self._set('last_error', message)
        return False

    def clear_error(self) -> None:
        self._set('last_error', None)

    def _lookup(self, reminder_id: str) -> Reminder:
        reminder = next((r for r in self._reminders if r.id == reminder_id), None)
        if reminder is None:
            raise BackingStoreFailure('No reminder with ID {} found.'.format(reminder_id))
        return reminder

    def check_access(self) -> AccessState:
        """
        Read the current access state from the backing service. The cached reminders are not touched.

        :return: the current access state.
        """
        state = self.service.get_authorization_status()
        self._set('access_state', state)
        logging.debug('Reminder access state: {}'.format(state.value))
        return state

    async def request_access(self) -> bool:
        """
        Ask the backing service for access. If access is granted, incomplete reminders are loaded straight away.

        :return: True if access was granted.
        """
        try:
            state = await self.service.request_full_access()
        except ReminderStoreError as e:
            return self._fail('Failed to request access: {}'.format(e))

        if state == AccessState.AUTHORIZED:
            self._set('access_state', AccessState.AUTHORIZED)
            await self.list_reminders(ReminderFilter.INCOMPLETE)
            return True

        self._set('access_state', AccessState.DENIED)
        return self._fail('Access to reminders was denied.')

    async def list_reminders(self, show: ReminderFilter = ReminderFilter.INCOMPLETE) -> bool:
        """
        Fetch reminders from the backing service and replace the cache with them, sorted by ``sort_reminders()``. If the
        fetch fails, the cache is emptied.

        :param show: ``INCOMPLETE`` for reminders which haven't been completed, ``ALL`` for every reminder.

        :return: True if the reminders were fetched.
        """
        self._set('is_loading', True)
        try:
            try:
                fetched = await self.service.fetch(show)
                success = True
            except ReminderStoreError as e:
                fetched = []
                success = self._fail('Failed to fetch reminders: {}'.format(e))
            self._set('reminders', tuple(sort_reminders(fetched)))
        finally:
            self._set('is_loading', False)
        logging.debug('Reminders in cache: {}'.format(len(self._reminders)))
        return success

    async def create_reminder(self,
                              title: str,
                              due_at: datetime.datetime | None = None,
                              priority: ReminderPriority = ReminderPriority.NONE,
                              notes: str | None = None) -> bool:
        """
        Create a reminder in the backing service's default list, then reload incomplete reminders.

        :param title: the title of the reminder. Must not be empty or whitespace.
        :param due_at: when the reminder is due.
        :param priority: the reminder's priority.
        :param notes: free text attached to the reminder.

        :return: True if the reminder was saved.
        """
        if title is None or title.strip() == '':
            return self._fail('Reminder title cannot be empty.')

        try:
            default_list = self.service.default_list_for_new_records()
            reminder = Reminder(
                reminder_id=None,
                title=title,
                notes=notes,
                due_at=due_at,
                raw_priority=priority.raw_value,
                list_id=default_list.id
            )
            await self.service.save(reminder)
        except ReminderStoreError as e:
            return self._fail('Failed to save reminder {0}: {1}'.format(title, e))

        logging.info('Created reminder {0} ({1})'.format(reminder.title, reminder.id))
        await self.list_reminders(ReminderFilter.INCOMPLETE)
        return True

    async def toggle_complete(self, reminder_id: str, show: ReminderFilter = ReminderFilter.INCOMPLETE) -> bool:
        """
        Flip the completion state of a reminder and save it, then reload reminders.

        The flip is made on a copy of the cached reminder, so a failed save leaves the cache exactly as it was.

        :param reminder_id: the ID of the reminder.
        :param show: the filter to reload reminders with.

        :return: True if the change was saved.
        """
        try:
            reminder = copy.copy(self._lookup(reminder_id))
            reminder.is_completed = not reminder.is_completed
            await self.service.save(reminder)
        except ReminderStoreError as e:
            return self._fail('Failed to update reminder: {}'.format(e))

        logging.info('Marked reminder {0} as {1}'.format(reminder.title,
                                                         'completed' if reminder.is_completed else 'incomplete'))
        await self.list_reminders(show)
        return True

    async def delete_reminder(self, reminder_id: str, show: ReminderFilter = ReminderFilter.INCOMPLETE) -> bool:
        """
        Delete a reminder, then reload reminders.

        :param reminder_id: the ID of the reminder.
        :param show: the filter to reload reminders with.

        :return: True if the reminder was deleted.
        """
        try:
            reminder = self._lookup(reminder_id)
            await self.service.remove(reminder)
        except ReminderStoreError as e:
            return self._fail('Failed to delete reminder: {}'.format(e))

        logging.info('Deleted reminder {}'.format(reminder.title))
        await self.list_reminders(show)
        return True
