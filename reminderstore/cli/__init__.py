"""
This is the CLI package for ReminderStore.

- ``rscli.py`` - Contains the ``ReminderStoreCli`` class and the ``reminderstore`` command.

"""
