"""
Exceptions raised by the reminder services. The ``ReminderStore`` catches all of these and turns them into a message in
its ``last_error`` field.
"""


class ReminderStoreError(Exception):
    """
    Base class for every error raised while talking to a reminders store.
    """

    def __init__(self, message: str):
        """
        :param message: a human-readable description of what went wrong.
        """
        super().__init__(message)
        self.message: str = message

    def __str__(self):
        return self.message


class PermissionDenied(ReminderStoreError):
    """
    The user or the operating system declined access to the reminders store.
    """


class BackingStoreFailure(ReminderStoreError):
    """
    A request to the reminders store (fetch, save, remove or access request) failed. Carries the underlying message.
    """
