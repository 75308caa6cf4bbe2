# -*- coding: utf-8 -*-

# ===================================================================================
# Logon Logger - PowerShell executor
#
# Commands are queued onto a single worker thread, so at most one powershell.exe
# runs at a time no matter how many lookups are submitted together.
# ===================================================================================

import logging
import subprocess
from concurrent.futures import ThreadPoolExecutor

from log_records import LogonLoggerError

POWERSHELL = "powershell.exe"
CREATE_NO_WINDOW = getattr(subprocess, "CREATE_NO_WINDOW", 0)


class PowerShellError(LogonLoggerError):
    pass


def quote(value):
    """Single-quoted PowerShell string literal."""
    return "'" + str(value).replace("'", "''") + "'"


class PsExecutor:
    def __init__(self, shell=POWERSHELL):
        self.shell = shell
        self._pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="powershell")

    def _run(self, command):
        try:
            result = subprocess.run(
                [self.shell, "-NoProfile", "-Command", command],
                capture_output=True, text=True, creationflags=CREATE_NO_WINDOW,
            )
        except OSError as e:
            raise PowerShellError(f"PowerShell spawn failed: {e}") from e

        if result.returncode != 0:
            logging.error(f"PowerShell command failed. Stderr: {result.stderr}")
            raise PowerShellError(f"PowerShell command failed: {result.stderr.strip()}")
        return result.stdout.strip()

    def submit(self, command):
        """Queue *command*; the returned future resolves to its trimmed stdout."""
        return self._pool.submit(self._run, command)

    def execute(self, command):
        return self.submit(command).result()

    def close(self):
        self._pool.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
