"""Core constants used across bundlerun modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

BUNDLE_DELIMITER = "|~|~|~|~|~|~|~|~|~|~|~|"
BUNDLE_HEADER_PREFIX = "FILE: "
BUNDLE_ENCODING = "utf-8"
DEFAULT_BUNDLE_FILE_NAME = "bundle.txt"
DEFAULT_PROFILE_FILE_NAME = "bundlerun.yaml"
DEFAULT_STATE_DIR_NAME = ".bundlerun"
DEFAULT_RECORDER_STORE_FILE_NAME = "requests.json"
DEFAULT_WORK_DIR = Path(".")
DEFAULT_COMPILER_COMMAND = ("javac",)
DEFAULT_RUNNER_COMMAND = ("java",)
DEFAULT_SOURCE_SUFFIX = ".java"
DEFAULT_ARTIFACT_SUFFIX = ".class"
DEFAULT_ENTRY_ARTIFACT = "ConversationCLI.class"
DEFAULT_ENTRY_POINT = "ConversationCLI"
DEFAULT_RECURSIVE_SCAN = True
DEFAULT_LOG_LEVEL = "info"
SUPPORTED_LOG_LEVELS = ("debug", "info", "warning", "error")
SUPPORTED_PROFILE_VERSION = 1
RECORDER_STORAGE_KEY = "intercepted_requests"
DEFAULT_RECORDER_KEYWORDS = ("chat", "completions", "completed", "new")
DEFAULT_REPLAY_DELAY_SECONDS = 0.1
DEFAULT_REPLAY_METHOD = "GET"
