"""
Contains the ``AppleScriptReminderService``, which keeps reminders in the macOS Reminders app. Every request is an
AppleScript run through ``osascript`` in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List

from reminderstore import helpers
from reminderstore.helpers import DateUtil
from reminderstore.reminders.errors import BackingStoreFailure, PermissionDenied
from reminderstore.reminders.model import reminderscript
from reminderstore.reminders.model.reminder import AccessState, Reminder, ReminderFilter
from reminderstore.reminders.model.reminderlist import ReminderList


class AppleScriptReminderService:
    """
    Backing service for the local Reminders app.

    macOS asks the user whether ``osascript`` may control Reminders the first time a script talks to it. The answer
    can't be read without running a script, so the access state is ``UNKNOWN`` until ``request_full_access()`` runs.
    The access check also reads the default list, which is kept for new reminders.
    """

    def __init__(self):
        self.access_state: AccessState = AccessState.UNKNOWN
        self.default_list: ReminderList | None = None

    @staticmethod
    async def _run(script: str, *args) -> tuple[int, str, str]:
        """
        Run an AppleScript in a worker thread.

        :param script: the script to run.
        :param args: arguments for the script.

        :return: the script's return code, standard output and standard error.
        """
        try:
            return await asyncio.to_thread(helpers.run_applescript, script, *args)
        except OSError as e:
            raise BackingStoreFailure('Unable to run osascript: {}'.format(e))

    @staticmethod
    def _raise_for(return_code: int, stderr: str, action: str) -> None:
        """
        Raise the matching error if a script failed.

        :param return_code: the script's return code.
        :param stderr: standard error from the script.
        :param action: description of what the script was doing, used in the error message.
        """
        if return_code == 0:
            return
        if reminderscript.NOT_AUTHORIZED_ERROR in stderr:
            raise PermissionDenied('{0}: not allowed to control Reminders.'.format(action))
        raise BackingStoreFailure('{0}: {1}'.format(action, stderr.strip()))

    def get_authorization_status(self) -> AccessState:
        return self.access_state

    async def request_full_access(self) -> AccessState:
        return_code, stdout, stderr = await AppleScriptReminderService._run(reminderscript.get_default_list_script)
        if return_code == 0:
            self.default_list = ReminderList.create_from_local(stdout)
            self.access_state = AccessState.AUTHORIZED
        elif reminderscript.NOT_AUTHORIZED_ERROR in stderr:
            self.access_state = AccessState.DENIED
        else:
            raise BackingStoreFailure('Unable to request access to Reminders: {}'.format(stderr.strip()))
        logging.debug('Reminders access: {}'.format(self.access_state.value))
        return self.access_state

    async def fetch(self, matching: ReminderFilter) -> List[Reminder]:
        """
        Load reminders from every list in the Reminders app.

        :param matching: ``ALL`` to include completed reminders.

        :return: the reminders found, in no particular order.
        """
        return_code, stdout, stderr = await AppleScriptReminderService._run(reminderscript.get_reminders_script,
                                                                            matching.value)
        AppleScriptReminderService._raise_for(return_code, stderr, 'Unable to load local reminders')

        reminders = []
        for record in stdout.split(reminderscript.RECORD_SEPARATOR):
            values = record.split(reminderscript.FIELD_SEPARATOR)
            if len(values) >= 7 and values[0].strip() != '':
                reminders.append(Reminder.create_from_local(values))
        logging.debug('Loaded {} local reminders'.format(len(reminders)))
        return reminders

    async def save(self, reminder: Reminder) -> None:
        """
        Creates or updates a local reminder. New reminders take the ID assigned by the Reminders app. An empty body or
        due date clears the one held by the Reminders app.

        :param reminder: the reminder to save.
        """
        due_date = DateUtil.convert('', reminder.due_at, DateUtil.APPLE_DATETIME) if reminder.due_at else ''
        return_code, stdout, stderr = await AppleScriptReminderService._run(
            reminderscript.save_reminder_script,
            reminder.id if reminder.id else '',
            reminder.title,
            reminder.notes if reminder.notes is not None else '',
            'true' if reminder.is_completed else 'false',
            due_date if due_date else '',
            str(reminder.raw_priority),
            reminder.list_id if reminder.list_id else '')
        AppleScriptReminderService._raise_for(return_code, stderr,
                                              'Failed to save local reminder {}'.format(reminder.title))
        if reminder.id is None:
            reminder.id = stdout.strip()
        logging.debug('Saved local reminder {0} ({1})'.format(reminder.title, reminder.id))

    async def remove(self, reminder: Reminder) -> None:
        if reminder.id is None:
            raise BackingStoreFailure('Reminder {} has never been saved.'.format(reminder.title))
        return_code, stdout, stderr = await AppleScriptReminderService._run(reminderscript.delete_reminder_script,
                                                                            reminder.id)
        AppleScriptReminderService._raise_for(return_code, stderr,
                                              'Failed to delete local reminder {}'.format(reminder.title))
        logging.debug('Deleted local reminder {0} ({1})'.format(reminder.title, reminder.id))

    def default_list_for_new_records(self) -> ReminderList:
        """
        Get the Reminders app's default list, as read when access was granted.

        :return: the default list.
        """
        if self.default_list is None:
            raise BackingStoreFailure('The default reminder list is unknown until access to Reminders is granted.')
        return self.default_list
