"""
Contains the ``CalDavReminderService``, which keeps reminders as *VTODO* tasks in a remote CalDav calendar.
"""

from __future__ import annotations

import asyncio
import datetime
import logging
from typing import List

import caldav
from caldav.lib import error

from reminderstore import helpers
from reminderstore.reminders.errors import BackingStoreFailure, PermissionDenied
from reminderstore.reminders.model.reminder import AccessState, Reminder, ReminderFilter
from reminderstore.reminders.model.reminderlist import ReminderList


class CalDavReminderService:
    """
    Backing service for a CalDav server. Access is granted when the server accepts the configured credentials.
    """

    def __init__(self,
                 url: str,
                 username: str,
                 password: str | None,
                 headers: dict | None = None,
                 calendar_name: str | None = None):
        """
        Create a new CalDav service. Nothing is sent to the server until ``request_full_access()`` is called.

        :param url: URL of the CalDav server.
        :param username: username for the CalDav server.
        :param password: password for the CalDav server.
        :param headers: extra headers to send to the server.
        :param calendar_name: name of the task calendar to use. If empty, the first calendar supporting *VTODO* is used.
        """
        self.url: str = url
        self.username: str = username
        self.password: str | None = password
        self.headers: dict = headers if headers is not None else {}
        self.calendar_name: str | None = calendar_name
        self.access_state: AccessState = AccessState.UNKNOWN
        self.principal: caldav.Principal | None = None
        self.calendar: ReminderList | None = None

    def get_authorization_status(self) -> AccessState:
        return self.access_state

    async def request_full_access(self) -> AccessState:
        return await asyncio.to_thread(self._connect)

    # noinspection PyUnresolvedReferences
    def _connect(self) -> AccessState:
        """
        Connect to the CalDav server and pick the task calendar.

        :return: ``AUTHORIZED`` if the server accepted the credentials, ``DENIED`` otherwise.
        """
        try:
            client = caldav.DAVClient(
                url=self.url,
                username=self.username,
                password=self.password,
                headers=self.headers,
            )
            self.principal = client.principal()
        except error.AuthorizationError:
            self.access_state = AccessState.DENIED
            logging.debug('CalDav server {} refused the credentials'.format(self.url))
            return self.access_state
        except (error.DAVError, OSError) as e:
            raise BackingStoreFailure('Failed to connect to CalDav server {0}: {1}'.format(self.url, e))

        self.calendar = self._load_task_calendar()
        self.access_state = AccessState.AUTHORIZED
        logging.debug('Connected to CalDav server {0}, using calendar {1}'.format(self.url, self.calendar))
        return self.access_state

    def _load_task_calendar(self) -> ReminderList:
        """
        Find the calendar which holds reminders. Only calendars supporting *VTODO* components are considered.

        :return: the task calendar.
        """
        try:
            task_calendars = [c for c in self.principal.calendars() if "VTODO" in c.get_supported_components()]
        except (error.DAVError, OSError) as e:
            raise BackingStoreFailure('Unable to load CalDav calendars: {}'.format(e))

        if self.calendar_name:
            task_calendars = [c for c in task_calendars if c.name == self.calendar_name]
        if len(task_calendars) == 0:
            raise BackingStoreFailure('No CalDav task calendar named {} found.'.format(self.calendar_name)
                                      if self.calendar_name else 'No CalDav task calendar found.')
        return ReminderList.create_from_remote(task_calendars[0])

    def _task_calendar(self) -> ReminderList:
        if self.calendar is None:
            if self.access_state == AccessState.DENIED:
                raise PermissionDenied('The CalDav server refused access.')
            raise BackingStoreFailure('Not connected to the CalDav server.')
        return self.calendar

    def _find(self, uid: str) -> caldav.CalendarObjectResource | None:
        """
        Fetch an existing remote task.

        :param uid: the UID of the task.

        :return: the task with this UID, or None.
        """
        tasks = self._task_calendar().cal_obj.search(todo=True, uid=uid, include_completed=True)
        return tasks[0] if len(tasks) > 0 else None

    async def fetch(self, matching: ReminderFilter) -> List[Reminder]:
        return await asyncio.to_thread(self._fetch, matching)

    def _fetch(self, matching: ReminderFilter) -> List[Reminder]:
        calendar = self._task_calendar()
        try:
            tasks = calendar.cal_obj.search(todo=True, include_completed=matching == ReminderFilter.ALL)
        except (error.DAVError, OSError) as e:
            raise BackingStoreFailure('Unable to load remote reminders: {}'.format(e))
        reminders = [Reminder.create_from_remote(task, calendar.id) for task in tasks]
        logging.debug('Loaded {0} remote reminders from {1}'.format(len(reminders), calendar))
        return reminders

    async def save(self, reminder: Reminder) -> None:
        await asyncio.to_thread(self._save, reminder)

    def _save(self, reminder: Reminder) -> None:
        """
        Creates or updates a remote reminder. New reminders are given a fresh UUID.

        :param reminder: the reminder to save.
        """
        calendar = self._task_calendar()
        try:
            if reminder.id is None:
                uid = helpers.get_uuid()
                calendar.cal_obj.save_todo(ical=reminder.get_ical_string(uid))
                reminder.id = uid
                logging.debug('Remote reminder added: {}'.format(reminder.title))
                return

            remote = self._find(reminder.id)
            if remote is None:
                raise BackingStoreFailure('Could not find remote reminder {0} ({1})'.format(reminder.title, reminder.id))
            comp = remote.icalendar_component
            _replace(comp, 'SUMMARY', reminder.title)
            _replace(comp, 'DESCRIPTION', reminder.notes)
            _replace(comp, 'DUE', reminder.due_at)
            _replace(comp, 'PRIORITY', reminder.raw_priority)
            _replace(comp, 'STATUS', 'COMPLETED' if reminder.is_completed else 'NEEDS-ACTION')
            if reminder.is_completed:
                if 'COMPLETED' not in comp:
                    comp.add('COMPLETED', datetime.datetime.now())
                _replace(comp, 'PERCENT-COMPLETE', 100)
            else:
                _replace(comp, 'COMPLETED', None)
                _replace(comp, 'PERCENT-COMPLETE', None)
            remote.save()
            logging.debug('Remote reminder updated: {}'.format(reminder.title))
        except (error.DAVError, OSError) as e:
            raise BackingStoreFailure('Failed to save remote reminder {0}: {1}'.format(reminder.title, e))

    async def remove(self, reminder: Reminder) -> None:
        await asyncio.to_thread(self._remove, reminder)

    def _remove(self, reminder: Reminder) -> None:
        if reminder.id is None:
            raise BackingStoreFailure('Reminder {} has never been saved.'.format(reminder.title))
        try:
            remote = self._find(reminder.id)
            if remote is None:
                raise BackingStoreFailure('Could not find remote reminder to delete: {0} ({1})'.format(reminder.title,
                                                                                                       reminder.id))
            remote.delete()
        except (error.DAVError, OSError) as e:
            raise BackingStoreFailure('Failed to delete remote reminder {0}: {1}'.format(reminder.title, e))
        logging.debug('Remote reminder deleted: {}'.format(reminder.title))

    def default_list_for_new_records(self) -> ReminderList:
        return self._task_calendar()


def _replace(comp, name: str, value) -> None:
    """
    Replace a property on an iCal component. A value of None removes the property.
    """
    if name in comp:
        del comp[name]
    if value is not None:
        comp.add(name, value)
