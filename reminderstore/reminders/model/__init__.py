"""
This is the model of ReminderStore. Here, you'll find the following:

- ``reminder.py`` - Contains the ``Reminder`` class which represents a reminder, and the ``ReminderPriority``,
``ReminderFilter`` and ``AccessState`` enumerations.
- ``reminderlist.py`` - Contains the ``ReminderList`` class which represents a local reminder list or a remote *VTODO*
calendar.
- ``reminderscript.py`` - Contains a list of AppleScript scripts for managing local reminders.

"""

from . import reminder, reminderlist, reminderscript

__all__ = ['reminder', 'reminderlist', 'reminderscript', ]
