"""
AppleScripts for Apple Reminders.

Scripts which return several values separate fields with ``FIELD_SEPARATOR`` and reminders with ``RECORD_SEPARATOR``,
since names and bodies may contain any printable character.
"""

#: Separates the fields of an exported reminder (ASCII unit separator).
FIELD_SEPARATOR = '\x1f'
#: Separates exported reminders (ASCII record separator).
RECORD_SEPARATOR = '\x1e'
#: Error number returned by ``osascript`` when the user has not allowed it to control Reminders.
NOT_AUTHORIZED_ERROR = '-1743'

#: Get the ID and name of the list new reminders are added to. Also used to check whether the Reminders app may be
#: controlled.
get_default_list_script = '''tell application "Reminders"
    set theList to default list
    return (id of theList) & (character id 31) & (name of theList)
end tell'''

#: Get reminders in every list. Pass "all" to include completed reminders.
get_reminders_script = '''on run argv
set show_all to item 1 of argv
set us to character id 31
set rs to character id 30
tell application "Reminders"
    if show_all is "all" then
        set theReminders to every reminder
    else
        set theReminders to every reminder whose completed is false
    end if
    set output to ""
    repeat with currentRem in theReminders
        set rId to id of currentRem
        set rName to name of currentRem
        set rCompleted to (completed of currentRem) as text
        set rDueDate to (due date of currentRem) as text
        set rPriority to (priority of currentRem) as text
        set rBody to (body of currentRem) as text
        set rList to id of container of currentRem
        set csvLine to rId & us & rName & us & rCompleted & us & rDueDate & us & rPriority & us
        set output to output & csvLine & rBody & us & rList & rs
    end repeat
    return output
end tell
end run'''

#: Add a new reminder, or update the reminder with the given ID. An empty body or due date clears it. Returns the
#: reminder's ID.
save_reminder_script = '''on run argv
set {r_id, r_name, r_body, r_completed} to {item 1, item 2, item 3, item 4} of argv
set {r_due_date, r_priority, r_list} to {item 5, item 6, item 7} of argv
tell application "Reminders"
    if r_id is equal to "" then
        if r_list is equal to "" then
            set theList to default list
        else
            set theList to list id r_list
        end if
        set theReminder to make new reminder at end of theList
    else
        set theReminder to reminder id r_id
    end if
    set name of theReminder to r_name
    set body of theReminder to r_body
    set completed of theReminder to (r_completed is "true")
    set priority of theReminder to (r_priority as integer)
    if r_due_date is equal to "" then
        set due date of theReminder to missing value
    else
        set due date of theReminder to my stringToDate(r_due_date)
    end if
    return id of theReminder
end tell
end run

on stringToDate(theDateStr)
    set theDate to date theDateStr
    return theDate
end stringToDate
'''

#: Delete the reminder with the given ID.
delete_reminder_script = '''on run argv
set r_id to item 1 of argv
tell application "Reminders"
    delete reminder id r_id
end tell
end run'''

#: Check if the Reminders app is running
is_reminders_running_script = '''tell application "System Events"
if (get name of every application process) contains "Reminders" then
    return true
else
    return false
end if
end tell'''

#: Quit the Reminders app
quit_reminders_script = '''tell application "Reminders" to if it is running then quit'''
