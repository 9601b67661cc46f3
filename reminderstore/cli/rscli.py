import argparse
import asyncio
import json
import logging
import os
import pathlib
import sys
from datetime import datetime
from getpass import getpass
from pathlib import Path

import keyring

from reminderstore import helpers
from reminderstore.helpers import DateUtil
from reminderstore.reminders.controller import ReminderStore
from reminderstore.reminders.model import reminderscript
from reminderstore.reminders.model.reminder import AccessState, ReminderFilter, ReminderPriority
from reminderstore.reminders.service.applescriptservice import AppleScriptReminderService
from reminderstore.reminders.service.caldavservice import CalDavReminderService
from reminderstore.reminders.service.reminderservice import ReminderService


class ReminderStoreCli:
    """
    Defines the functionality of the ReminderStore CLI.
    """

    SETTINGS = {
        'backend': 'applescript',
        'caldav_url': '',
        'caldav_username': '',
        'caldav_calendar': '',
        'log_level': 'info',
    }

    LOG_LEVELS = {
        'debug': logging.DEBUG,
        'info': logging.INFO,
        'warning': logging.WARNING,
        'critical': logging.CRITICAL
    }

    def __init__(self, args):
        self.args = args
        self.logger = self.setup_logging()
        self.apply_settings()
        self.store = ReminderStore(self.create_service())

    @staticmethod
    def _fail(error: str, code: int) -> int:
        """
        Log an error and return the exit code the CLI should use.

        :param error: The error message to log.
        :param code: The exit code to use.

        :return: the exit code.
        """
        logging.critical(error)
        return code

    def create_service(self) -> ReminderService:
        """
        Create the backing service named in the ``backend`` setting. If the service can't be configured, the CLI exits.

        :return: the backing service.
        """
        if ReminderStoreCli.SETTINGS['backend'] == 'caldav':
            ReminderStoreCli.preflight_caldav()
            return CalDavReminderService(
                url=ReminderStoreCli.SETTINGS['caldav_url'],
                username=ReminderStoreCli.SETTINGS['caldav_username'],
                password=self.authenticate_caldav(),
                headers={},
                calendar_name=ReminderStoreCli.SETTINGS['caldav_calendar'] or None
            )
        return AppleScriptReminderService()

    @staticmethod
    def preflight_caldav() -> bool:
        """
        Perform pre-flight checks for the CalDAV backend. This includes ensuring a CalDAV URL and username have been set.

        :return: True if all pre-flight checks are successful.
        """
        if ReminderStoreCli.SETTINGS['caldav_url'] == '':
            logging.critical('CalDAV URL missing. Use --caldav-url to specify or add "caldav_url" to configuration file.')
            sys.exit(4)
        elif ReminderStoreCli.SETTINGS['caldav_username'] == '':
            logging.critical(
                'CalDAV username missing. Use --caldav-username to specify or add "caldav_username" in configuration file.')
            sys.exit(4)
        return True

    def authenticate_caldav(self) -> str:
        """
        Performs CalDAV authentication. If the --caldav-password option is used, this method will ask for a CalDAV password
        regardless of whether one is saved. If no password is saved, the CLI exits with an error.

        :return: the CalDAV password.
        """

        if 'caldav_password' in self.args:
            # User specifically wants to be asked for password
            new_password = getpass('CalDAV Password> ')
            keyring.set_password("ReminderStore", "CALDAV-PWD", new_password)
            return new_password

        # Check if password is in keyring
        password = keyring.get_password("ReminderStore", "CALDAV-PWD")
        if password is None:
            logging.critical('No CalDAV Password in keyring. Use --caldav-password to be prompted for a password.')
            sys.exit(3)
        return password

    async def ensure_access(self) -> int:
        """
        Check whether reminders may be read, asking for access if this hasn't been decided yet.

        :return: 0 if access is granted, otherwise the exit code to use.
        """
        state = self.store.check_access()
        if state == AccessState.UNKNOWN:
            logging.info('Requesting access to reminders...')
            await self.store.request_access()
            state = self.store.access_state

        if state == AccessState.DENIED:
            return ReminderStoreCli._fail(
                'Reminder access required. Allow access to Reminders in System Settings > Privacy & Security > '
                'Automation, or check your CalDAV credentials, then run this command again.', 3)
        if state != AccessState.AUTHORIZED:
            return ReminderStoreCli._fail(self.store.last_error or 'Unable to get access to reminders.', 5)
        return 0

    async def execute(self) -> int:
        """
        Run the sub-command given on the command line.

        :return: the exit code of the CLI.
        """
        command = self.args.command
        if command == 'status':
            state = self.store.check_access()
            if state == AccessState.UNKNOWN:
                await self.store.request_access()
                state = self.store.access_state
            print(state.value)
            if state == AccessState.UNKNOWN:
                return ReminderStoreCli._fail(self.store.last_error or 'Unable to get access to reminders.', 5)
            return 0

        code = await self.ensure_access()
        if code != 0:
            return code

        show = ReminderFilter.ALL if getattr(self.args, 'all', False) else ReminderFilter.INCOMPLETE

        if command == 'list':
            if not await self.store.list_reminders(show):
                return ReminderStoreCli._fail(self.store.last_error, 6)

        elif command == 'add':
            due_at = None
            if self.args.due is not None:
                due_at = DateUtil.convert(DateUtil.CLI_DATETIME, self.args.due)
                if not due_at:
                    return ReminderStoreCli._fail(
                        'Invalid due date {}. Use the format YYYY-MM-DD HH:MM.'.format(self.args.due), 7)
            if not await self.store.create_reminder(self.args.title.strip(),
                                                    due_at=due_at,
                                                    priority=ReminderPriority(self.args.priority),
                                                    notes=self.args.notes or None):
                return ReminderStoreCli._fail(self.store.last_error, 7)

        elif command in ('toggle', 'delete'):
            # Reminders are looked up in the cache, so make sure it matches the filter in use
            if not await self.store.list_reminders(show):
                return ReminderStoreCli._fail(self.store.last_error, 6)
            if command == 'toggle':
                if not await self.store.toggle_complete(self.args.id, show):
                    return ReminderStoreCli._fail(self.store.last_error, 8)
            elif not await self.store.delete_reminder(self.args.id, show):
                return ReminderStoreCli._fail(self.store.last_error, 9)

        self.print_reminders(show)
        return 0

    def print_reminders(self, show: ReminderFilter) -> None:
        """
        Print the cached reminders, one per line. Reminders past their due date are flagged as overdue, and the first
        line of any notes is printed underneath.

        :param show: the filter the reminders were loaded with.
        """
        if len(self.store.reminders) == 0:
            print("You don't have any reminders yet." if show == ReminderFilter.ALL
                  else "All caught up! No incomplete reminders.")
            return

        now = datetime.now()
        for reminder in self.store.reminders:
            due = DateUtil.convert('', reminder.due_at, DateUtil.CLI_DATETIME) if reminder.due_at else '(no due)'
            overdue = 'overdue' if reminder.is_overdue(now) else ''
            status = '[x]' if reminder.is_completed else '[ ]'
            print('  {0}  {1:16s}  {2:7s}  {3}  {4:6s}  {5}'.format(reminder.id, due, overdue, status,
                                                                    reminder.priority.label, reminder.title))
            if reminder.notes and reminder.notes.strip():
                print('      {}'.format(reminder.notes.strip().splitlines()[0]))

    def apply_settings(self) -> None:
        """
        Load settings from the configuration file, This is normally in ~/Library/Application Support/ReminderStore/conf.json,
        but may be overridden with the --config option. Any configuration options specified via command-line options will
        override the values in the configuration file.
        """

        # Load settings from file
        if 'config' in self.args:
            # Load settings from custom configuration file
            if os.path.exists(self.args.config):
                conf_file = self.args.config
                self.logger.info('Using custom config file: {}'.format(conf_file))
            else:
                self.logger.critical('Configuration file {} not found.'.format(self.args.config))
                sys.exit(2)
        else:
            # Load settings from default configuration file
            conf_file = helpers.settings_folder() / 'conf.json'
            self.logger.info('Using default config file: {}'.format(conf_file))

        ReminderStoreCli.merge_settings(conf_file)

        # Override settings from command line arguments
        self.override_config()

        if ReminderStoreCli.SETTINGS['log_level'] not in ReminderStoreCli.LOG_LEVELS:
            self.logger.critical(
                'Invalid log level {} in configuration file.'.format(ReminderStoreCli.SETTINGS['log_level']))
            sys.exit(20)
        self.logger.setLevel(ReminderStoreCli.LOG_LEVELS[ReminderStoreCli.SETTINGS['log_level']])

        logging.debug("Settings in use: {}".format(json.dumps(ReminderStoreCli.SETTINGS, indent=2)))

    @staticmethod
    def merge_settings(conf_file: str | Path) -> None:
        """
        Override any of the default settings of the ReminderStore CLI with settings found in a configuration file.
        """

        if os.path.exists(conf_file):
            with open(conf_file) as fp:
                try:
                    loaded_settings = json.loads(fp.read())
                    for key in ReminderStoreCli.SETTINGS.keys():
                        if key in loaded_settings.keys():
                            ReminderStoreCli.SETTINGS[key] = loaded_settings[key]
                except json.decoder.JSONDecodeError:
                    logging.critical("Your configuration file at {} is invalid. Please check syntax.".format(conf_file))
                    sys.exit(20)

    def override_config(self) -> None:
        """
        Override any settings (default or from configuration file) which have been specified as command-line options.
        """

        vargs = vars(self.args)
        for key in ReminderStoreCli.SETTINGS.keys():
            if key in self.args:
                ReminderStoreCli.SETTINGS[key] = vargs[key]

    def setup_logging(self) -> logging.Logger:
        """
        Sets up the logging system.

        :return: the logging helper for the CLI.
        """

        if 'log_dir' in self.args:
            if os.access(self.args.log_dir, os.W_OK | os.X_OK):
                log_folder = Path(self.args.log_dir)
            else:
                print("Specified log directory {} is not accessible.".format(self.args.log_dir))
                sys.exit(1)
        else:
            log_folder = helpers.log_folder()

        log_file = datetime.now().strftime("ReminderStore_%Y%m%d-%H%M%S") + '.log'
        log_level = ReminderStoreCli.LOG_LEVELS[self.args.log_level] if 'log_level' in self.args else logging.INFO

        logging.basicConfig(
            level=log_level,
            format='%(asctime)s %(levelname)s: %(message)s',
        )
        logging.getLogger().addHandler(logging.FileHandler(log_folder / log_file))
        return logging.getLogger()


def run(cli: ReminderStoreCli) -> int:
    """
    Run the CLI. With the AppleScript backend, the Reminders app is quit afterwards if it wasn't already running.

    :param cli: the configured CLI.

    :return: the exit code of the CLI.
    """
    if ReminderStoreCli.SETTINGS['backend'] != 'applescript':
        return asyncio.run(cli.execute())

    return_code, stdout, stderr = helpers.run_applescript(reminderscript.is_reminders_running_script)
    reminders_was_running = stdout.strip() == 'true'
    try:
        return asyncio.run(cli.execute())
    finally:
        if not reminders_was_running:
            helpers.run_applescript(reminderscript.quit_reminders_script)


def main():
    """
    Defines arguments accepted by the CLI.
    """

    parser = argparse.ArgumentParser(
        prog="reminderstore",
        description="View, create, complete and delete your reminders from the terminal.",
    )

    # Backend options
    parser.add_argument(
        "--backend",
        type=str,
        choices=['applescript', 'caldav'],
        default=argparse.SUPPRESS,
        help="where reminders are kept: the Reminders app (applescript) or a CalDAV server (caldav).")
    parser.add_argument(
        "--caldav-url",
        type=str,
        default=argparse.SUPPRESS,
        help="specify the URL of the CalDAV server, including the calendar path.")
    parser.add_argument(
        "--caldav-username",
        type=str,
        default=argparse.SUPPRESS,
        help="specify username for CalDAV server.")
    parser.add_argument(
        "--caldav-password",
        default=argparse.SUPPRESS,
        action='store_true',
        help="prompt for CalDAV password.")
    parser.add_argument(
        "--caldav-calendar",
        type=str,
        default=argparse.SUPPRESS,
        help="specify the CalDAV task calendar to use.")

    # Cli-specific options
    parser.add_argument(
        "--config",
        type=pathlib.Path,
        default=argparse.SUPPRESS,
        help="use to provide a path to a custom configuration file.")
    parser.add_argument(
        "--log-dir",
        type=pathlib.Path,
        default=argparse.SUPPRESS,
        help="specify a custom directory to use for logging.")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=['debug', 'info', 'critical', 'warning'],
        default=argparse.SUPPRESS,
        help="specify the logging level.")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="show whether reminders may be accessed")

    list_p = sub.add_parser("list", help="list reminders")
    list_p.add_argument("--all", action="store_true", help="include completed reminders")

    add_p = sub.add_parser("add", help="add a reminder")
    add_p.add_argument("title", help="reminder title")
    add_p.add_argument("--due", help="due date as YYYY-MM-DD HH:MM")
    add_p.add_argument("--priority", choices=[p.value for p in ReminderPriority], default=ReminderPriority.NONE.value,
                       help="reminder priority")
    add_p.add_argument("--notes", help="reminder notes")

    toggle_p = sub.add_parser("toggle", help="mark a reminder as completed, or as not completed")
    toggle_p.add_argument("id", help="reminder ID")
    toggle_p.add_argument("--all", action="store_true", help="include completed reminders")

    delete_p = sub.add_parser("delete", help="delete a reminder")
    delete_p.add_argument("id", help="reminder ID")
    delete_p.add_argument("--all", action="store_true", help="include completed reminders")

    sys.exit(run(ReminderStoreCli(parser.parse_args())))


if __name__ == "__main__":
    main()
