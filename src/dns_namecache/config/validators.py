"""
Configuration Validators

This module provides validation functions for name cache configuration parameters.
"""

import ipaddress
import re
from pathlib import Path
from typing import List


def validate_file_path(path: str) -> bool:
    """Validate file path format."""
    if not path:
        return False

    try:
        Path(path)
        return True
    except (TypeError, ValueError):
        return False


def validate_ip_address(address: str) -> bool:
    """Validate IP address format."""
    try:
        ipaddress.ip_address(address)
        return True
    except ValueError:
        return False


def validate_log_level(level: str) -> bool:
    """Validate log level."""
    valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    return isinstance(level, str) and level.upper() in valid_levels


def validate_positive_float(value: float) -> bool:
    """Validate positive float."""
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def validate_positive_int(value: int) -> bool:
    """Validate positive integer."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_regex(pattern: str) -> bool:
    """Validate that a regular expression compiles."""
    if not isinstance(pattern, str):
        return False
    try:
        re.compile(pattern)
        return True
    except re.error:
        return False


def validate_nameservers(servers: List[str]) -> bool:
    """Validate list of nameserver IP addresses (may be empty)."""
    if not isinstance(servers, list):
        return False
    return all(isinstance(s, str) and validate_ip_address(s) for s in servers)
