"""
Contains the ``Reminder`` class, which represents a reminder held by a backing reminders store, together with the
``ReminderPriority``, ``ReminderFilter`` and ``AccessState`` enumerations.
"""

from __future__ import annotations

import datetime
from enum import Enum
from typing import List

import caldav

from reminderstore import helpers
from reminderstore.helpers import DateUtil


class ReminderPriority(Enum):
    """
    Priority of a reminder as shown to the user. Reminders stores keep priority as an integer from 0 to 9, where 0 means
    no priority, 1-4 is high, 5 is medium and 6-9 is low.

    The mapping is lossy: only the canonical raw values (0, 1, 5 and 9) survive a round-trip. A raw value of 3 reads as
    ``HIGH``, and choosing ``HIGH`` again writes 1.
    """

    NONE = 'none'
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'

    @staticmethod
    def from_raw(raw_priority: int) -> ReminderPriority:
        """
        Map a raw store priority onto a ``ReminderPriority``.

        :param raw_priority: the integer priority used by the reminders store.

        :return: the matching priority. Anything outside 1-9 maps to ``NONE``.
        """
        if 1 <= raw_priority <= 4:
            return ReminderPriority.HIGH
        if raw_priority == 5:
            return ReminderPriority.MEDIUM
        if 6 <= raw_priority <= 9:
            return ReminderPriority.LOW
        return ReminderPriority.NONE

    @property
    def raw_value(self) -> int:
        """
        The canonical raw priority written to the reminders store for this priority.
        """
        return _CANONICAL_RAW[self]

    @property
    def label(self) -> str:
        """
        Short text label for display. Empty for ``NONE``.
        """
        return _LABELS[self]


_CANONICAL_RAW = {
    ReminderPriority.NONE: 0,
    ReminderPriority.HIGH: 1,
    ReminderPriority.MEDIUM: 5,
    ReminderPriority.LOW: 9,
}

_LABELS = {
    ReminderPriority.NONE: '',
    ReminderPriority.HIGH: 'High',
    ReminderPriority.MEDIUM: 'Medium',
    ReminderPriority.LOW: 'Low',
}


class ReminderFilter(Enum):
    """
    Which reminders to fetch from the backing store.
    """

    INCOMPLETE = 'incomplete'
    ALL = 'all'


class AccessState(Enum):
    """
    Whether the application may read and write the reminders store.
    """

    UNKNOWN = 'unknown'
    AUTHORIZED = 'authorized'
    DENIED = 'denied'


class Reminder:
    """
    Represents a reminder. Used for reminders read from the local Reminders app via AppleScript and for tasks read from
    a remote CalDav server.
    """

    def __init__(self,
                 reminder_id: str | None,
                 title: str,
                 notes: str | None = None,
                 due_at: datetime.datetime | None = None,
                 raw_priority: int = 0,
                 is_completed: bool = False,
                 list_id: str | None = None,
                 ):
        """
        Create a new reminder.

        :param reminder_id: the identifier assigned by the backing store, or None if the reminder hasn't been saved yet.
        :param title: the title (i.e. summary) of this reminder.
        :param notes: free text attached to the reminder.
        :param due_at: the datetime when the reminder is due. Truncated to the minute.
        :param raw_priority: the store's 0-9 priority.
        :param is_completed: True if this reminder has been completed.
        :param list_id: identifier of the list or calendar containing this reminder.
        """
        self._id: str | None = reminder_id
        self.title: str = title
        self.notes: str | None = notes
        self._due_at: datetime.datetime | None = helpers.truncate_to_minute(due_at)
        self.raw_priority: int = raw_priority
        self.is_completed: bool = is_completed
        self.list_id: str | None = list_id

    @property
    def id(self) -> str | None:
        """
        The identifier assigned by the backing store. It can be set once, when the reminder is first saved.
        """
        return self._id

    @id.setter
    def id(self, value: str) -> None:
        if self._id is not None and self._id != value:
            raise ValueError('Reminder {} already has identifier {}'.format(self.title, self._id))
        self._id = value

    @property
    def due_at(self) -> datetime.datetime | None:
        return self._due_at

    @due_at.setter
    def due_at(self, value: datetime.datetime | None) -> None:
        self._due_at = helpers.truncate_to_minute(value)

    @property
    def priority(self) -> ReminderPriority:
        return ReminderPriority.from_raw(self.raw_priority)

    @priority.setter
    def priority(self, value: ReminderPriority) -> None:
        self.raw_priority = value.raw_value

    def is_overdue(self, now: datetime.datetime | None = None) -> bool:
        """
        Check whether this reminder is past its due date without having been completed.

        :param now: the time to compare against. Defaults to the current local time.

        :return: True if the reminder is overdue.
        """
        if self.due_at is None or self.is_completed:
            return False
        if now is None:
            now = datetime.datetime.now()
        return self.due_at < now

    @staticmethod
    def create_from_local(values: List[str]) -> Reminder:
        """
        Creates a Reminder instance from the values exported by the Reminders app.

        The ``values`` list must be as follows (all strings):

        0. Reminder ID.
        1. Reminder name (i.e. title).
        2. True if reminder is completed.
        3. Reminder due date, or ``missing value``.
        4. Reminder priority (0-9).
        5. Body (i.e. notes) of the reminder, or ``missing value``.
        6. ID of the list containing the reminder.

        :param values: the list of values as described above.

        :return: a Reminder instance representing the content of the values given.
        """
        values = [v.strip() for v in values]
        due_at = None
        if values[3] != 'missing value':
            converted = DateUtil.convert(DateUtil.APPLE_DATETIME, values[3])
            due_at = converted if converted else None
        try:
            raw_priority = int(values[4])
        except ValueError:
            raw_priority = 0
        return Reminder(
            reminder_id=values[0],
            title=values[1],
            notes=values[5] if values[5] not in ('missing value', '') else None,
            due_at=due_at,
            raw_priority=raw_priority,
            is_completed=values[2] == 'true',
            list_id=values[6] if len(values) > 6 and values[6] != '' else None
        )

    @staticmethod
    def create_from_remote(caldav_task: caldav.CalendarObjectResource, list_id: str | None = None) -> Reminder:
        """
        Creates a Reminder instance from a CalDav task.

        :param caldav_task: a task fetched from the CalDav calendar.
        :param list_id: identifier of the calendar the task was fetched from.

        :return: a Reminder instance representing the CalDav task.
        """
        comp = caldav_task.icalendar_component

        due_at = None
        if 'DUE' in comp:
            due = comp['DUE'].dt
            if isinstance(due, datetime.datetime):
                due_at = DateUtil.to_local_naive(due)
            else:
                due_at = datetime.datetime(due.year, due.month, due.day)

        status = str(comp['STATUS']) if 'STATUS' in comp else ''

        return Reminder(
            reminder_id=str(comp['UID']) if 'UID' in comp else None,
            title=str(comp['SUMMARY']) if 'SUMMARY' in comp else '',
            notes=str(comp['DESCRIPTION']) if 'DESCRIPTION' in comp else None,
            due_at=due_at,
            raw_priority=int(comp['PRIORITY']) if 'PRIORITY' in comp else 0,
            is_completed='COMPLETED' in comp or status == 'COMPLETED',
            list_id=list_id
        )

    def get_ical_string(self, uid: str | None = None) -> str:
        """
        Returns a representation of this reminder as an iCal string. Used for adding new remote reminders.

        :param uid: the UID to write, for reminders which haven't been given an ``id`` yet.

        :return: the iCal string.
        """
        stamp = DateUtil.convert('', datetime.datetime.now(), DateUtil.CALDAV_DATETIME)

        ical_string = """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//ReminderStore//ReminderStore//NONSGML v1.0//EN
BEGIN:VTODO
"""
        if self.due_at is not None:
            ical_string += "DUE;VALUE=DATE-TIME:{}\n".format(DateUtil.convert('', self.due_at, DateUtil.CALDAV_DATETIME))

        ical_string += """DTSTAMP:{stamp}
LAST-MODIFIED:{stamp}
SUMMARY:{summary}
PRIORITY:{priority}
STATUS:{status}
UID:{id}
""".format(stamp=stamp,
           summary=_escape_text(self.title),
           priority=self.raw_priority,
           status='COMPLETED' if self.is_completed else 'NEEDS-ACTION',
           id=uid if uid is not None else self.id)

        if self.notes:
            ical_string += "DESCRIPTION:{}\n".format(_escape_text(self.notes))
        if self.is_completed:
            ical_string += "COMPLETED:{}\nPERCENT-COMPLETE:100\n".format(stamp)

        ical_string += """END:VTODO
END:VCALENDAR
"""
        return ical_string

    def __str__(self):
        return self.title

    def __repr__(self):
        return self.title


def _escape_text(text: str) -> str:
    """
    Escape a value for use as iCal TEXT.
    """
    return (text.replace('\\', '\\\\')
            .replace(';', '\\;')
            .replace(',', '\\,')
            .replace('\n', '\\n'))
