"""todo-alarm: a console task list with due-time alarms."""

__version__ = "0.1.0"
