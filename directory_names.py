# -*- coding: utf-8 -*-

# ===================================================================================
# Logon Logger - Active Directory distinguished names
#
# Grammar accepted here:
#   dn      := rdn ("," rdn)*
#   rdn     := attr "=" value
#   attr    := letters, digits or "-", non-empty
#   value   := any characters, "\" escapes the next one, non-empty
# Organizational unit names are further split on "_" into segments, e.g.
# "Staff_Teachers" -> ["Staff", "Teachers"].
# ===================================================================================

import re

from log_records import LogonLoggerError

_ATTR_RE = re.compile(r"^[A-Za-z][A-Za-z0-9-]*$")


class DistinguishedNameError(LogonLoggerError):
    pass


def _split_unescaped(text, sep):
    parts, current, escaped = [], [], False
    for ch in text:
        if escaped:
            current.append(ch)
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == sep:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    if escaped:
        raise DistinguishedNameError(f"Dangling escape at end of '{text}'")
    parts.append("".join(current))
    return parts


def parse_dn(dn):
    """Split a DN into (ATTR, value) pairs, attribute names upper-cased."""
    if dn is None or not dn.strip():
        raise DistinguishedNameError("Empty distinguished name")

    rdns = []
    for raw in _split_unescaped(dn.strip(), ","):
        attr, sep, value = raw.partition("=")
        attr, value = attr.strip(), value.strip()
        if not sep:
            raise DistinguishedNameError(f"Component '{raw}' of '{dn}' has no '='")
        if not _ATTR_RE.match(attr):
            raise DistinguishedNameError(f"Bad attribute name '{attr}' in '{dn}'")
        if not value:
            raise DistinguishedNameError(f"Empty value for '{attr}' in '{dn}'")
        rdns.append((attr.upper(), value))
    return rdns


def common_name(dn):
    """CN of the object a DN names (its first component)."""
    attr, value = parse_dn(dn)[0]
    if attr != "CN":
        raise DistinguishedNameError(f"'{dn}' does not start with a CN component")
    return value


def parent_rdn(dn):
    """The container directly holding the object, as an (ATTR, value) pair."""
    rdns = parse_dn(dn)
    if len(rdns) < 2:
        raise DistinguishedNameError(f"'{dn}' has no parent container")
    return rdns[1]


def format_rdn(rdn):
    attr, value = rdn
    return f"{attr}={value}"


def ou_segment(ou_name, index):
    """One "_"-separated segment of an OU name; negative indices count from the end."""
    segments = ou_name.split("_")
    try:
        segment = segments[index]
    except IndexError:
        raise DistinguishedNameError(f"OU '{ou_name}' has no segment {index}") from None
    if not segment:
        raise DistinguishedNameError(f"OU '{ou_name}' has an empty segment {index}")
    return segment
