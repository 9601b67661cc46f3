"""
This is a helper file for the reminder services and the CLI.
"""

from __future__ import annotations

import sys
import uuid
from datetime import datetime
from pathlib import Path
from subprocess import Popen, PIPE

DATA_LOCATION: Path = Path.home() / "Library" / "Application Support" / "ReminderStore"  #: Location where application
# data is stored.
LOG_LOCATION: Path = Path.home() / "Library" / "Logs" / "ReminderStore"  #: Default location for log files.


def run_applescript(script: str, *args) -> tuple[int, str, str]:
    """
    Runs an AppleScript script.

    :param script: the script to run.
    :param args: a list of arguments to send to the script.

    :returns:

        - return_code (:py:class:`int`) - the script's return code.
        - stdout (:py:class:`str`) - standard output from the script.
        - stderr (:py:class:`str`) - standard error from the script.

    """
    arguments = list(args)
    p = Popen(['osascript', '-'] + arguments, stdin=PIPE, stdout=PIPE, stderr=PIPE, universal_newlines=True)
    stdout, stderr = p.communicate(script)
    return p.returncode, stdout, stderr


def get_uuid() -> str:
    """
    Generates a UUID.

    :return: a UUID.
    """
    return str(uuid.uuid4())


def settings_folder() -> Path:
    """
    Get the location of the Application Data folder for ReminderStore.

    :return: path to the Application Data folder.
    """
    folder = DATA_LOCATION
    folder.mkdir(parents=True, exist_ok=True)
    return folder


def log_folder() -> Path:
    """
    Get the default location of the log folder for ReminderStore.

    :return: path to the log folder.
    """
    folder = LOG_LOCATION
    folder.mkdir(parents=True, exist_ok=True)
    return folder


def truncate_to_minute(when: datetime | None) -> datetime | None:
    """
    Drop seconds and microseconds from a datetime. Due dates are only ever stored to the minute.

    :param when: the datetime to truncate, or None.

    :return: the truncated datetime, or None if ``when`` is None.
    """
    if when is None:
        return None
    return when.replace(second=0, microsecond=0)


class DateUtil:
    """
    Utility class for converting between several date and date/time formats.
    """

    APPLE_DATETIME = "%A, %d %B %Y at %H:%M:%S"
    APPLE_DATETIME_ALT = "%A %d %B %Y at %H:%M:%S"  # Some locales drop the comma
    CALDAV_DATETIME = "%Y%m%dT%H%M%S"
    CALDAV_DATE = "%Y%m%d"
    CLI_DATETIME = "%Y-%m-%d %H:%M"

    @staticmethod
    def convert(source_format: str,
                obj: str | datetime,
                required_format: str = '') -> str | datetime | bool:
        """
        Convert one date/datetime format to another.

        :param source_format: the format of the source date/datetime. Can be left empty if ``obj`` is a :py:class:`datetime`
        object.
        :param obj: what to convert from. Can either be a string, or a :py:class:`datetime` object.
        :param required_format: the format required if the required output is of type :py:class:`str`.

        :return: the converted value, or False if the conversion failed.
        """
        if isinstance(obj, str):
            try:
                return datetime.strptime(obj, source_format)
            except ValueError:
                if source_format == DateUtil.APPLE_DATETIME:
                    try:
                        return datetime.strptime(obj, DateUtil.APPLE_DATETIME_ALT)
                    except ValueError:
                        return False
                return False
        if required_format == '':
            return obj
        else:
            try:
                return obj.strftime(required_format)
            except ValueError:
                print('Could not convert date to specified format {}'.format(required_format), file=sys.stderr)
                return False

    @staticmethod
    def to_local_naive(obj: datetime) -> datetime:
        """
        Convert a timezone-aware datetime into a naive datetime in local time. Naive datetimes are returned as they are.

        :param obj: the datetime to convert.

        :return: a naive datetime in local time.
        """
        if obj.tzinfo is None or obj.tzinfo.utcoffset(obj) is None:
            return obj
        return obj.astimezone().replace(tzinfo=None)


