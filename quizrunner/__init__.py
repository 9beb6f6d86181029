"""
Timed Quiz Runner - Core Package

This package contains the components for running a timed command-line quiz:
- models: Data structures for questions, scoring and configuration
- loader: CSV and encrypted quiz file loading
- session: Interaction loop, deadline timer and session race
- reporter: Result line formatting
"""

__version__ = "1.0.0"
