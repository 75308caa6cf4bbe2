# -*- coding: utf-8 -*-

# ===================================================================================
# Logon Logger
#
# Description: Runs once per logon. Gathers who logged on where (Active Directory
#              identity, hardware and OS facts) and appends one row to the day's
#              workstation log and the day's user log, both Excel workbooks.
# ===================================================================================

import sys
import logging
from concurrent.futures import ThreadPoolExecutor

from log_append import append_logs
from logger_config import DEFAULT_LOG_FILE, load_config
from periods import current_period
from ps_executor import PsExecutor
from system_info import build_record, collect_base_info, collect_hardware, collect_os_info

# ===================================================================================
# ⚙️ SETUP
# ===================================================================================
#<editor-fold desc="SETUP">
def setup_logger(log_path):
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s', filename=log_path, filemode='a', force=True)
#</editor-fold>

# ===================================================================================
# 🖥️ DATA COLLECTION
# ===================================================================================
#<editor-fold desc="DATA COLLECTION">
def collect_record(executor):
    """Run the three probes side by side and combine their facts into one record."""
    with ThreadPoolExecutor(max_workers=3, thread_name_prefix="collect") as pool:
        base_future = pool.submit(collect_base_info, executor)
        hardware_future = pool.submit(collect_hardware)
        os_future = pool.submit(collect_os_info)
        base_info = base_future.result()
        hardware_info = hardware_future.result()
        os_info = os_future.result()

    period = current_period(base_info.now)
    logging.info(f"Collected logon of '{base_info.username}' on '{base_info.computer_name}' ({period}).")
    return build_record(base_info, hardware_info, os_info, period)
#</editor-fold>

# ===================================================================================
# 🚀 MAIN EXECUTION
# ===================================================================================
#<editor-fold desc="Main Execution">
def main():
    # Config problems are reported to the default log until the real one is known.
    setup_logger(DEFAULT_LOG_FILE)

    try:
        config = load_config()
        if config.log_file != DEFAULT_LOG_FILE:
            setup_logger(config.log_file)
        with PsExecutor() as executor:
            record = collect_record(executor)
        rows = append_logs(config, record)
        logging.info(f"Logon recorded: {rows}")
    except Exception as e:
        logging.critical(f"Failed to record logon: {e}", exc_info=True)
        sys.exit(1)

if __name__ == "__main__":
    main()

#</editor-fold>
