"""
Backing services which hold reminders for the ``ReminderStore``. Here, you'll find the following:

- ``reminderservice.py`` - Contains the ``ReminderService`` protocol every backing service follows.
- ``applescriptservice.py`` - Contains the ``AppleScriptReminderService`` for the macOS Reminders app.
- ``caldavservice.py`` - Contains the ``CalDavReminderService`` for remote CalDav *VTODO* calendars.

"""

from . import reminderservice, applescriptservice, caldavservice

__all__ = ['reminderservice', 'applescriptservice', 'caldavservice', ]
