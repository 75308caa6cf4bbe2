# -*- coding: utf-8 -*-

# ===================================================================================
# Logon Logger - identity, hardware and OS facts
#
# Everything here is Windows specific: environment variables of the logon
# session, Active Directory lookups through PowerShell, WMI and the registry.
# ===================================================================================

import os
import datetime
import logging
from dataclasses import dataclass

from directory_names import (
    DistinguishedNameError, common_name, format_rdn, ou_segment, parent_rdn,
)
from log_records import LogonLoggerError, LogonRecord
from ps_executor import quote

UNKNOWN = "Unknown"
OS_REG_PATH = r"SOFTWARE\Microsoft\Windows NT\CurrentVersion"


class CollectionError(LogonLoggerError):
    pass


@dataclass
class BaseInfo:
    computer_name: str
    username: str
    now: datetime.datetime
    user_ou: str
    full_ou: str
    ws_ou: str


@dataclass
class HardwareInfo:
    make: str
    model: str
    uuid: str
    serial_number: str
    os_description: str


@dataclass
class OsInfo:
    os_version: str
    os_name: str


# ===================================================================================
# --- IDENTITY & DIRECTORY ---
# ===================================================================================
def _require_env(environ, name):
    value = environ.get(name)
    if not value:
        raise CollectionError(f"{name} env var not found")
    return value


def _or_unknown(extract, what, fallback=UNKNOWN):
    try:
        return extract()
    except DistinguishedNameError as e:
        logging.warning(f"Could not read {what}: {e}")
        return fallback


def collect_base_info(executor, environ=None, now=None):
    environ = os.environ if environ is None else environ
    computer_name = _require_env(environ, "COMPUTERNAME")
    logon_name = _require_env(environ, "USERNAME")
    now = now or datetime.datetime.now()

    user_cmd = f"(Get-ADUser -Identity {quote(logon_name)} -Properties DistinguishedName).DistinguishedName"
    comp_cmd = f"(Get-ADComputer -Identity {quote(computer_name)} -Properties DistinguishedName).DistinguishedName"
    user_future, comp_future = executor.submit(user_cmd), executor.submit(comp_cmd)
    try:
        user_dn, comp_dn = user_future.result(), comp_future.result()
    except LogonLoggerError as e:
        raise CollectionError(f"Failed to get DN: {e}") from e

    username = _or_unknown(lambda: common_name(user_dn), "username from user DN", fallback=logon_name)
    user_ou = _or_unknown(lambda: ou_segment(parent_rdn(user_dn)[1], 1), "user OU")
    full_ou = _or_unknown(lambda: format_rdn(parent_rdn(comp_dn)), "workstation OU")
    ws_ou = _or_unknown(lambda: ou_segment(parent_rdn(comp_dn)[1], -1), "workstation OU suffix")

    return BaseInfo(computer_name, username, now, user_ou, full_ou, ws_ou)


# ===================================================================================
# --- HARDWARE (WMI) ---
# ===================================================================================
def _first_attr(items, name):
    if not items:
        return ""
    return getattr(items[0], name, None) or ""


def collect_hardware(wmi_con=None):
    if wmi_con is not None:
        return _query_hardware(wmi_con)

    # Runs on a worker thread, which needs its own COM apartment for WMI.
    try:
        import pythoncom
        import wmi
    except ImportError as e:
        raise CollectionError(f"WMI is not available on this platform: {e}") from e
    pythoncom.CoInitialize()
    try:
        return _query_hardware(wmi.WMI())
    except CollectionError:
        raise
    except Exception as e:
        raise CollectionError(f"WMI connection failed: {e}") from e
    finally:
        pythoncom.CoUninitialize()


def _query_hardware(wmi_con):
    try:
        cs = wmi_con.Win32_ComputerSystem()
        product = wmi_con.Win32_ComputerSystemProduct()
        bios = wmi_con.Win32_BIOS()
        os_info = wmi_con.Win32_OperatingSystem()
    except Exception as e:
        raise CollectionError(f"WMI hardware query failed: {e}") from e

    return HardwareInfo(
        make=_first_attr(cs, "Manufacturer"),
        model=_first_attr(cs, "Model"),
        uuid=_first_attr(product, "UUID"),
        serial_number=_first_attr(bios, "SerialNumber"),
        os_description=_first_attr(os_info, "Description"),
    )


# ===================================================================================
# --- OPERATING SYSTEM (REGISTRY) ---
# ===================================================================================
def collect_os_info(registry=None):
    if registry is None:
        try:
            import winreg as registry
        except ImportError as e:
            raise CollectionError(f"Registry is not available on this platform: {e}") from e

    try:
        with registry.OpenKey(registry.HKEY_LOCAL_MACHINE, OS_REG_PATH, 0, registry.KEY_READ) as key:
            os_name = registry.QueryValueEx(key, "ProductName")[0]
            try:
                os_version = registry.QueryValueEx(key, "DisplayVersion")[0]
            except FileNotFoundError:
                os_version = ""
    except OSError as e:
        raise CollectionError(f"Failed to read OS info from registry: {e}") from e

    return OsInfo(os_version=os_version, os_name=os_name)


# ===================================================================================
# --- RECORD ---
# ===================================================================================
def build_record(base, hardware, os_info, period):
    """Copy every collected fact, unchanged, into one LogonRecord."""
    return LogonRecord(
        timestamp=base.now,
        computer_name=base.computer_name,
        username=base.username,
        user_ou=base.user_ou,
        full_ou=base.full_ou,
        ws_ou=base.ws_ou,
        period=period,
        description=hardware.os_description,
        os_version=os_info.os_version,
        model=hardware.model,
        os=os_info.os_name,
        make=hardware.make,
        uuid=hardware.uuid,
        serial_number=hardware.serial_number,
    )
