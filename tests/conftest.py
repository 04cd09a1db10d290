"""
Pytest configuration for the show scheduler test suite.

Puts the project root on the Python path so tests can import `src.*`.
"""
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))
