DATA_FILE = "data.json"
LOCK_SUFFIX = ".lock"
CONFIG_FILE = "task_tracker.yaml"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_LOG_LEVEL = "INFO"

ENV_DATA_FILE = "TASK_TRACKER_DATA_FILE"
ENV_HOST = "TASK_TRACKER_HOST"
ENV_PORT = "TASK_TRACKER_PORT"
ENV_LOG_LEVEL = "TASK_TRACKER_LOG_LEVEL"

YAML_SUFFIXES = {".yaml", ".yml"}
