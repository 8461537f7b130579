# Conversation history
HISTORY_CAPACITY = 10
PROMPT_HISTORY_WINDOW = 3

# Generation limits shared by every wire format
DEFAULT_TEMPERATURE = 0.1
DEFAULT_TOP_P = 0.9
DEFAULT_MAX_TOKENS = 1000

# Request timeouts (seconds)
CLOUD_REQUEST_TIMEOUT = 30.0
LOCAL_REQUEST_TIMEOUT = 120.0

# Configuration
CONFIG_DIRNAME = ".aicc"
CONFIG_FILENAME = "config.yml"
DEFAULT_PROVIDER_ID = "deepseek"

# Execution
SCRIPT_PREFIX = "aicc_script_"
SCRIPT_SUFFIX = ".py"
SUCCESS_MESSAGE = "Operation completed successfully"
ERROR_PREFIX = "Error: "
GENERATED_DESCRIPTION = "Generated Python code"

MODEL_LIST_TIMEOUT = 10.0
