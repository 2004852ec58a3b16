"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskCategory, TaskView, AlarmEvent)
- task_store.py: in-memory task collection + commands + state-changed events
- task_scheduler.py: polling scheduler that raises due-time alarms
- task_api.py: text rendering helpers used by the rest of the app
"""
