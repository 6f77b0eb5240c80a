# entity_assets/services/logger/constants.py
"""
Logger Service Constants
"""

CONSOLE_LOG_FORMAT = (
    "<dim>[{time:YYYY-MM-DD HH:mm:ss}]</dim> "
    "<level>{level: <8}</level> "
    "<cyan>{extra[source]}/{extra[logger_name]}</cyan> "
    "{message}"
)

FILE_LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{extra[source]}/{extra[logger_name]} | {message} | {extra[context]}"
)

# Rotating file sink
FILE_ROTATION = "10 MB"
FILE_RETENTION = 5

# Defaults bound to every record so sinks never miss a key
DEFAULT_EXTRA = {
    "source": "-",
    "logger_name": "-",
    "context": {},
}
