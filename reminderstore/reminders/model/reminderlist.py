"""
Contains the ``ReminderList`` class, which represents a list of reminders in the local Reminders app, or a calendar of
remote *VTODO* tasks.
"""

from __future__ import annotations

from caldav import Calendar

from reminderstore.reminders.model import reminderscript


class ReminderList:
    """
    Represents a list or calendar which holds reminders. New reminders are always placed in the store's default list.
    """

    def __init__(self, list_name: str, list_id: str | None = None, cal_obj: Calendar | None = None):
        """
        Create a new reminder list instance.

        :param list_name: the name of the list.
        :param list_id: the identifier of the list in the backing store.
        :param cal_obj: for remote calendars, the calendar object.
        """
        self.id: str | None = list_id
        self.name: str = list_name
        self.cal_obj: Calendar | None = cal_obj

    @staticmethod
    def create_from_local(output: str) -> ReminderList:
        """
        Create a ReminderList from the list ID and name returned by the Reminders app, separated by
        ``reminderscript.FIELD_SEPARATOR``.

        :param output: the script output.

        :return: the matching ReminderList.
        """
        list_id, _, list_name = output.strip().partition(reminderscript.FIELD_SEPARATOR)
        return ReminderList(list_name.strip(), list_id.strip())

    @staticmethod
    def create_from_remote(cal_obj: Calendar) -> ReminderList:
        """
        Create a ReminderList from a CalDav calendar.

        :param cal_obj: the calendar object.

        :return: the matching ReminderList.
        """
        return ReminderList(cal_obj.name, cal_obj.id, cal_obj)

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.name
