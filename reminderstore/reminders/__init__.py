"""
This is the reminders package of ReminderStore. Here, you'll find the following:

- ``controller.py`` - Contains the ``ReminderStore``, which caches the reminders shown to the user.
- ``errors.py`` - Contains the errors raised by backing services.
- ``model`` - Contains the ``Reminder`` class and related types.
- ``service`` - Contains the backing services for the Reminders app and for CalDav.

"""

from . import model
from . import service
from . import controller

__all__ = ['model', 'service', 'controller', ]
