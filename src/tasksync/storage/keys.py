# src/tasksync/storage/keys.py

"""Names of the persisted key/value slots."""

TASKS_KEY = "tasksync:tasks"
PROJECTS_KEY = "tasksync:projects"
SYNC_QUEUE_KEY = "tasksync:sync_queue"
ONBOARDED_KEY = "tasksync:onboarded"
SETTINGS_KEY = "tasksync:settings"

# Server-side durable snapshot (only used when the service gets a backend).
REMOTE_TASKS_KEY = "tasksync:remote_tasks"
