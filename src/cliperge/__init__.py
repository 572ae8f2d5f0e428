"""
Cliperge - merge files into one fenced document on the clipboard.

This package reads an ordered list of files, drops the ones matching
exclusion patterns, renders each file's name as a basename, a cwd-relative
path or a home-relative path, and hands the combined text to the platform
clipboard helper (pbcopy on macOS, xclip on Linux).
"""

__version__ = "0.1.0"
__author__ = "Cliperge Team"
