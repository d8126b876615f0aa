"""Event topics that shims publish to containerd."""

TASK_CREATE_EVENT_TOPIC = "/tasks/create"
TASK_START_EVENT_TOPIC = "/tasks/start"
TASK_OOM_EVENT_TOPIC = "/tasks/oom"
TASK_EXIT_EVENT_TOPIC = "/tasks/exit"
TASK_DELETE_EVENT_TOPIC = "/tasks/delete"
TASK_EXEC_ADDED_EVENT_TOPIC = "/tasks/exec-added"
TASK_EXEC_STARTED_EVENT_TOPIC = "/tasks/exec-started"
TASK_PAUSED_EVENT_TOPIC = "/tasks/paused"
TASK_RESUMED_EVENT_TOPIC = "/tasks/resumed"
TASK_CHECKPOINTED_EVENT_TOPIC = "/tasks/checkpointed"
TASK_UNKNOWN_TOPIC = "/tasks/?"