"""Autogenerate missing SELinux file_contexts entries for extracted Android partitions"""

__version__ = "0.1.0"
