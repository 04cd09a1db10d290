"""Natural-Language Radio Show Scheduling

Turns a free-text request ("build a 3-hour morning show with rock and breaks
every 20 minutes") into a timed broadcast schedule: library candidates are
offered to an LLM, its selection is parsed (with a library fallback) and a
timeline with start/end times and breaks is assembled.
"""

from src.show_scheduler.generator import ScheduleGenerator, GenerationResult
from src.show_scheduler.timeline import assemble
from src.show_scheduler.workspace import ScheduleWorkspace

__version__ = "1.0.0"

__all__ = [
    "ScheduleGenerator",
    "GenerationResult",
    "ScheduleWorkspace",
    "assemble",
]
