# config.example.py

"""
Documentation-only module (safe to commit).

Configuration is read from environment variables, optionally via a local .env file
in the working directory. This file lists what quantum understands.
"""

ENV_VARS = {
    "QUANTUM_APP_NAME": "Name used in log lines (default: quantum).",
    "QUANTUM_DATA_DIR": "Store directory holding tasks/ and inprogress/ (default: ~/.quantum).",
    "QUANTUM_LOG_LEVEL": "Console log level on stderr (default: WARNING).",
    "QUANTUM_LOG_FILE": (
        "Log file name inside the data directory (default: quantum.log; empty disables it)."
    ),
}
