"""
Shared test setup: the configuration module loads at import time, so the
environment it reads must be in place before any tripcast module is imported.
"""

import os
import tempfile

_TEST_DIR = tempfile.mkdtemp(prefix="tripcast-tests-")

os.environ.setdefault("OPENWEATHER_API_KEY", "test-weather-key")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ["LOG_FILE_PATH"] = os.path.join(_TEST_DIR, "logs", "app.log")
os.environ["ERROR_LOG_PATH"] = os.path.join(_TEST_DIR, "logs", "errors.log")
os.environ["PREFERENCES_FILE_PATH"] = os.path.join(_TEST_DIR, "data", "preferences.json")
os.environ["DEVICE_LOCATION_ENABLED"] = "false"
