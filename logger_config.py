# -*- coding: utf-8 -*-

# ===================================================================================
# Logon Logger - configuration
#
# Built-in defaults point at the deployment share. An optional plain ini file
# placed next to the program overrides any of them.
# ===================================================================================

import os
import sys
import logging
import tempfile
import configparser
from dataclasses import dataclass, fields
from pathlib import Path

from log_records import DEFAULT_SHEET_NAME, LogonLoggerError

# ===================================================================================
# --- DEFAULTS ---
# ===================================================================================
WORKSTATION_BASE_PATH = r"\\Server\LogonLogger$\Logs\ComputerNEW"
USER_BASE_PATH = r"\\Server\LogonLogger$\Logs\UserNEW"
LOG_FILENAME = "logon_logger.log"
DEFAULT_LOG_FILE = os.path.join(tempfile.gettempdir(), LOG_FILENAME)
CONFIG_FILENAME = "logon_logger.config.ini"
CONFIG_SECTION = "logon_logger"


class ConfigError(LogonLoggerError):
    pass


@dataclass(frozen=True)
class LoggerConfig:
    workstation_root: str = WORKSTATION_BASE_PATH
    user_root: str = USER_BASE_PATH
    sheet_name: str = DEFAULT_SHEET_NAME
    log_file: str = DEFAULT_LOG_FILE


def program_dir():
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    return Path(os.path.dirname(os.path.abspath(__file__)))


def default_config_path():
    return program_dir() / CONFIG_FILENAME


def load_config(path=None):
    """Return a LoggerConfig, applying overrides from the ini file when present.

    Only the ``[logon_logger]`` section is read and keys that do not name a
    setting are ignored. Empty values keep the default.
    """
    path = Path(path) if path is not None else default_config_path()
    if not path.exists():
        return LoggerConfig()

    parser = configparser.ConfigParser(interpolation=None)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            parser.read_file(f)
    except configparser.Error as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e

    if not parser.has_section(CONFIG_SECTION):
        logging.warning(f"No [{CONFIG_SECTION}] section in {path}, using defaults.")
        return LoggerConfig()

    known = {f.name for f in fields(LoggerConfig)}
    overrides = {}
    for key, value in parser.items(CONFIG_SECTION):
        if key not in known:
            logging.warning(f"Ignoring unknown config key '{key}' in {path}.")
            continue
        if value.strip():
            overrides[key] = value.strip()
    return LoggerConfig(**overrides)
