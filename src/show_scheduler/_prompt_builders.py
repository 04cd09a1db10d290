"""
Prompt building helpers for schedule generation.

Builds the system prompt (library context plus the required JSON shape) and
the user prompt (instructions plus hints). Pure string construction.
"""

import json
from typing import Optional, Sequence, Tuple

from .config import PromptDefaults
from .models import ScheduleRequest, Track

MAX_PROMPT_CANDIDATES = 100

OUTPUT_SHAPE = """{
  "title": "Show title",
  "selectedSongs": [
    {"id": "track id from the library", "title": "Song title", "artist": "Artist", "duration": "M:SS", "reason": "Why this track fits here"}
  ],
  "breaks": [
    {"afterTrack": 3, "duration": "M:SS", "type": "Station ID", "notes": "What happens in the break"}
  ],
  "notes": "Overall programming notes"
}"""


def format_library_context(candidates: Sequence[Track], max_candidates: int = MAX_PROMPT_CANDIDATES) -> str:
    """Serialize the first `max_candidates` tracks as a JSON block."""
    subset = [track.to_prompt_dict() for track in list(candidates)[:max_candidates]]
    return json.dumps(subset, indent=2, default=str)


def build_system_prompt(candidates: Sequence[Track], max_candidates: int = MAX_PROMPT_CANDIDATES) -> str:
    """Build the system prompt: role, library context and required output shape."""
    shown = min(len(candidates), max_candidates)
    if shown:
        library_note = f"You have {shown} tracks available from the station library:"
    else:
        library_note = (
            "The station library could not be loaded. Suggest well-known tracks that fit "
            "the request and give each one a short unique id."
        )

    return f"""You are Music Matrix, an expert radio show scheduler for a broadcast radio station.

**YOUR ROLE:**
Build structured radio show schedules: pick tracks, order them for good flow and place breaks (station IDs, news, commercials, interstitials) where the request asks for them.

**LIBRARY CONTEXT:**
{library_note}
{format_library_context(candidates, max_candidates)}

**RULES:**
- Select track ids ONLY from the library above when it is available. Do not invent ids.
- Keep each track's duration exactly as listed.
- "afterTrack" is the 1-based position in selectedSongs after which the break airs.
- Break durations use M:SS.

**OUTPUT FORMAT:**
Respond with a single JSON object and nothing else, shaped exactly like this:
{OUTPUT_SHAPE}
"""


def _hint_or_default(value: Optional[str], default: str) -> str:
    return value if value else default


def build_user_prompt(request: ScheduleRequest, defaults: PromptDefaults) -> str:
    """Build the user prompt. Missing hints are substituted, never omitted."""
    return f"""Create a radio show schedule for this request:

"{request.instructions}"

**Show parameters:**
- Duration: {_hint_or_default(request.duration_hint, defaults.duration_default)}
- Genre: {_hint_or_default(request.genre_hint, defaults.genre_default)}
- Energy: {_hint_or_default(request.energy_hint, defaults.energy_default)}

Return the JSON object described in the system instructions.
"""


def build_prompts(
    request: ScheduleRequest,
    candidates: Sequence[Track],
    defaults: Optional[PromptDefaults] = None,
) -> Tuple[str, str]:
    """Build (system_prompt, user_prompt) for one generation request."""
    defaults = defaults or PromptDefaults()
    return build_system_prompt(candidates), build_user_prompt(request, defaults)
