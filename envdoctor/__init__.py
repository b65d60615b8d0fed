"""
EnvDoctor — Development environment diagnostic tool.

Runs an ordered set of checks against the local machine (tool versions,
project files, validation commands), prints what is missing or outdated
along with how to fix it, and exits non-zero when a required check fails.
"""

__version__ = "0.1.0"
