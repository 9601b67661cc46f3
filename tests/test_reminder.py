import datetime

import caldav
import pytest

from reminderstore.reminders.model.reminder import Reminder, ReminderPriority


class TestReminderPriority:

    def test_from_raw(self):
        expected = {
            0: ReminderPriority.NONE,
            1: ReminderPriority.HIGH,
            2: ReminderPriority.HIGH,
            3: ReminderPriority.HIGH,
            4: ReminderPriority.HIGH,
            5: ReminderPriority.MEDIUM,
            6: ReminderPriority.LOW,
            7: ReminderPriority.LOW,
            8: ReminderPriority.LOW,
            9: ReminderPriority.LOW,
        }
        for raw, priority in expected.items():
            assert ReminderPriority.from_raw(raw) == priority

    def test_from_raw_out_of_range(self):
        assert ReminderPriority.from_raw(-1) == ReminderPriority.NONE
        assert ReminderPriority.from_raw(10) == ReminderPriority.NONE

    def test_raw_value(self):
        assert ReminderPriority.NONE.raw_value == 0
        assert ReminderPriority.HIGH.raw_value == 1
        assert ReminderPriority.MEDIUM.raw_value == 5
        assert ReminderPriority.LOW.raw_value == 9

        # Only canonical values survive a round-trip
        assert ReminderPriority.from_raw(3).raw_value == 1
        assert ReminderPriority.from_raw(7).raw_value == 9

    def test_label(self):
        assert ReminderPriority.NONE.label == ''
        assert ReminderPriority.HIGH.label == 'High'
        assert ReminderPriority.MEDIUM.label == 'Medium'
        assert ReminderPriority.LOW.label == 'Low'


class TestReminder:

    @staticmethod
    def __create_reminder_from_local() -> Reminder:
        reminder_id = "x-apple-reminder://1234-5678-9012"
        name = "Test reminder"
        completed = 'false'
        due_date = "Thursday, 18 April 2024 at 18:00:00"
        priority = '5'
        body = "Test reminder body."
        list_id = "x-apple-reminderkit://REMCDList/1234"

        values = [reminder_id, name, completed, due_date, priority, body, list_id]
        reminder = Reminder.create_from_local(values)
        return reminder

    # noinspection SpellCheckingInspection
    @staticmethod
    def __create_reminder_from_remote() -> Reminder:
        obj = caldav.CalendarObjectResource(data="""BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Nextcloud Tasks v0.15.0
BEGIN:VTODO
CREATED:20240418T084019
DESCRIPTION:Test reminder body\\, with a comma
DTSTAMP:20240418T084042
DUE:20240418T180000
LAST-MODIFIED:20240418T084042
PRIORITY:3
SUMMARY:Test reminder
UID:f4a682ac-86f2-4f81-a08e-ccbff061d7da
END:VTODO
END:VCALENDAR
""")
        reminder = Reminder.create_from_remote(obj, "tasks-calendar")
        return reminder

    def test_create_from_local(self):
        reminder = TestReminder.__create_reminder_from_local()

        assert reminder.id == "x-apple-reminder://1234-5678-9012"
        assert reminder.title == "Test reminder"
        assert reminder.is_completed is False
        assert reminder.due_at == datetime.datetime(2024, 4, 18, 18, 0)
        assert reminder.raw_priority == 5
        assert reminder.priority == ReminderPriority.MEDIUM
        assert reminder.notes == "Test reminder body."
        assert reminder.list_id == "x-apple-reminderkit://REMCDList/1234"

    def test_create_from_local_missing_values(self):
        values = ["id-1", "Test reminder", "true", "missing value", "", "missing value", "list-1"]
        reminder = Reminder.create_from_local(values)

        assert reminder.is_completed is True
        assert reminder.due_at is None
        assert reminder.raw_priority == 0
        assert reminder.notes is None

    def test_create_from_remote(self):
        reminder = TestReminder.__create_reminder_from_remote()

        assert reminder.id == "f4a682ac-86f2-4f81-a08e-ccbff061d7da"
        assert reminder.title == "Test reminder"
        assert reminder.notes == "Test reminder body, with a comma"
        assert reminder.due_at == datetime.datetime(2024, 4, 18, 18, 0)
        assert reminder.raw_priority == 3
        assert reminder.priority == ReminderPriority.HIGH
        assert reminder.is_completed is False
        assert reminder.list_id == "tasks-calendar"

    def test_create_from_remote_completed(self):
        obj = caldav.CalendarObjectResource(data="""BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Nextcloud Tasks v0.15.0
BEGIN:VTODO
DTSTAMP:20240418T084042
DUE;VALUE=DATE:20241231
STATUS:COMPLETED
SUMMARY:Completed reminder
UID:completed-uid
END:VTODO
END:VCALENDAR
""")
        reminder = Reminder.create_from_remote(obj)

        assert reminder.is_completed is True
        assert reminder.due_at == datetime.datetime(2024, 12, 31, 0, 0)
        assert reminder.notes is None
        assert reminder.priority == ReminderPriority.NONE

    def test_due_at_truncated(self):
        reminder = Reminder(None, "Test reminder", due_at=datetime.datetime(2024, 4, 18, 18, 0, 45, 500))
        assert reminder.due_at == datetime.datetime(2024, 4, 18, 18, 0)

        reminder.due_at = datetime.datetime(2024, 4, 19, 9, 30, 15)
        assert reminder.due_at == datetime.datetime(2024, 4, 19, 9, 30)

    def test_id(self):
        reminder = Reminder(None, "Test reminder")
        assert reminder.id is None

        reminder.id = "new-id"
        assert reminder.id == "new-id"

        # Setting the same ID again is harmless
        reminder.id = "new-id"

        with pytest.raises(ValueError):
            reminder.id = "other-id"
        assert reminder.id == "new-id"

    def test_priority(self):
        reminder = Reminder(None, "Test reminder", raw_priority=7)
        assert reminder.priority == ReminderPriority.LOW

        reminder.priority = ReminderPriority.HIGH
        assert reminder.raw_priority == 1

    def test_is_overdue(self):
        now = datetime.datetime(2024, 4, 18, 12, 0)
        reminder = Reminder('id-1', 'Test reminder', due_at=datetime.datetime(2024, 4, 18, 9, 0))
        assert reminder.is_overdue(now) is True

        reminder.is_completed = True
        assert reminder.is_overdue(now) is False

        reminder2 = Reminder('id-2', 'Test reminder', due_at=datetime.datetime(2024, 4, 18, 18, 0))
        assert reminder2.is_overdue(now) is False

        reminder3 = Reminder('id-3', 'Test reminder')
        assert reminder3.is_overdue(now) is False

        reminder4 = Reminder('id-4', 'Test reminder', due_at=datetime.datetime(2000, 1, 1, 0, 0))
        assert reminder4.is_overdue() is True

    def test_get_ical_string(self):
        reminder = TestReminder.__create_reminder_from_local()
        ical_string = reminder.get_ical_string()

        assert ical_string.startswith("BEGIN:VCALENDAR\nVERSION:2.0\n")
        assert "DUE;VALUE=DATE-TIME:20240418T180000\n" in ical_string
        assert "SUMMARY:Test reminder\n" in ical_string
        assert "PRIORITY:5\n" in ical_string
        assert "STATUS:NEEDS-ACTION\n" in ical_string
        assert "UID:x-apple-reminder://1234-5678-9012\n" in ical_string
        assert "DESCRIPTION:Test reminder body.\n" in ical_string
        assert "COMPLETED:" not in ical_string
        assert ical_string.endswith("END:VTODO\nEND:VCALENDAR\n")

        # New reminder, completed, without due date, with text that needs escaping
        reminder2 = Reminder(None, "Milk, eggs; bread", notes="Line one\nLine two", is_completed=True)
        ical_string = reminder2.get_ical_string("NEW-UID-1234")
        assert "DUE" not in ical_string
        assert "UID:NEW-UID-1234\n" in ical_string
        assert "SUMMARY:Milk\\, eggs\\; bread\n" in ical_string
        assert "DESCRIPTION:Line one\\nLine two\n" in ical_string
        assert "STATUS:COMPLETED\n" in ical_string
        assert "PERCENT-COMPLETE:100\n" in ical_string

        obj = caldav.CalendarObjectResource(data=ical_string)
        parsed = Reminder.create_from_remote(obj)
        assert parsed.id == "NEW-UID-1234"
        assert parsed.title == "Milk, eggs; bread"
        assert parsed.notes == "Line one\nLine two"
        assert parsed.is_completed is True

    def test___str__(self):
        reminder = TestReminder.__create_reminder_from_local()
        name = reminder.__str__()
        assert name == "Test reminder"

    def test___repr__(self):
        reminder = TestReminder.__create_reminder_from_local()
        name = reminder.__repr__()
        assert name == "Test reminder"
