"""
This is the main package for ReminderStore.

- ``reminders`` - the reminder manager, its model and the backing services it talks to.
- ``cli`` - a command-line front-end for the reminder manager.
- ``helpers`` - helpers shared by the services and the CLI.

"""

from . import helpers

__all__ = ['helpers', ]
