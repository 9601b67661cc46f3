from unittest import mock

from reminderstore.reminders.model import reminderscript
from reminderstore.reminders.model.reminderlist import ReminderList


class TestReminderList:

    def test_create_from_local(self):
        output = "x-apple-reminderkit://REMCDList/1234" + reminderscript.FIELD_SEPARATOR + "Reminders\n"
        lst = ReminderList.create_from_local(output)
        assert lst.id == "x-apple-reminderkit://REMCDList/1234"
        assert lst.name == "Reminders"
        assert lst.cal_obj is None

    def test_create_from_remote(self):
        cal_obj = mock.MagicMock()
        cal_obj.name = "Tasks"
        cal_obj.id = "tasks-calendar"
        lst = ReminderList.create_from_remote(cal_obj)
        assert lst.id == "tasks-calendar"
        assert lst.name == "Tasks"
        assert lst.cal_obj is cal_obj

    def test___str__(self):
        lst = ReminderList("Test_List")
        name = lst.__str__()
        assert name == "Test_List"

    def test___repr__(self):
        lst = ReminderList("Test_List")
        name = lst.__repr__()
        assert name == "Test_List"
