"""System module for power-management queries and privileged writes."""

# Re-export commonly used classes for cleaner imports
from batterystatus.system.pmset import PmsetQueries, SudoPmsetWriter
from batterystatus.system.protocols import (
    MockPowerQueries,
    MockPrivilegedWriter,
    PowerQueries,
    PrivilegedWriter,
)

# Define the public API
__all__ = [
    "MockPowerQueries",
    "MockPrivilegedWriter",
    "PmsetQueries",
    "PowerQueries",
    "PrivilegedWriter",
    "SudoPmsetWriter",
]
