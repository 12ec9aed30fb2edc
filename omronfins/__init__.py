"""Client commands for Omron PLCs over the FINS protocol."""

__version__ = "0.1.0"