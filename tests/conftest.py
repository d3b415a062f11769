"""
Shared test configuration.

Adds src/ to sys.path so the flat engine modules (correlation_engine,
lag_analyzer, regression, ...) import the same way they import each
other, with or without an editable install.
"""

import os
import sys

_project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_src_dir = os.path.join(_project_root, "src")

if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)
