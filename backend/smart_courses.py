"""Language-model course path: prompt building, response hydration and fallback.

The model call itself is injected (`complete(prompt, use_tools)` coroutine);
nothing here talks to the network. `plan_courses` is the entry point callers
use: it tries the injected generator first and falls back to the
deterministic engine when it raises, times out or returns nothing.
"""

import asyncio
import json
import logging
import random
import re
from typing import Any, Awaitable, Callable

import config
from course_generator import dining_cap, generate_courses, stay_minutes, usable_spots, walk_minutes
from geo import haversine
from models import Center, Course, Spot
from themes import Theme, select_themes

logger = logging.getLogger(__name__)

CompleteFn = Callable[[str, bool], Awaitable[str]]
CourseGenerator = Callable[[list[Spot], Center, int], Awaitable[list[Course]]]

_ARRAY_RE = re.compile(r"\[[\s\S]*\]")
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")


def sample_candidates(
    spots: list[Spot],
    rng: random.Random,
    limit: int = config.LLM_MAX_CANDIDATES,
) -> list[Spot]:
    """Shuffled slice of the pool, so wider radii still give varied prompts."""
    shuffled = list(spots)
    rng.shuffle(shuffled)
    return shuffled[:limit]


def build_course_prompt(
    candidates: list[Spot],
    duration_minutes: int,
    themes: list[Theme],
    use_tools: bool = True,
) -> str:
    candidate_list = "\n".join(f"{i}: {s.name} ({s.category})" for i, s in enumerate(candidates))
    theme_lines = "\n".join(
        f'   Course {i + 1}: theme id "{t.id}", based strictly on "{t.label}"'
        for i, t in enumerate(themes)
    )
    max_dining = dining_cap(duration_minutes)
    research = (
        "Use the search tool to find local legends, hidden stories or unusual details about these spots."
        if use_tools
        else "Draw on your own knowledge for unusual details about these spots."
    )

    return f"""
You are a travel concierge planning walking courses.
The client has {duration_minutes} minutes, starting from a fixed location.

Candidate spots nearby (ID: Name (Category)):
{candidate_list}

Create {len(themes)} distinct walking courses, one per theme:
{theme_lines}

Constraints:
- At most {max_dining} food/drink spot(s) per course.
- A spot used in one course must not appear in any other course.
- Mix categories; do not build a course from restaurants or parks only.
- Keep each course within {duration_minutes} minutes including walking at about {config.WALK_SPEED_M_PER_MIN:.0f} m/min.

{research}

Write titles and descriptions in natural, polite Japanese.
Use the exact integer IDs listed above for spots.
End your answer with a JSON array of this shape:
[
  {{
    "id": "theme id",
    "title": "course title",
    "theme": "theme label",
    "description": "course description",
    "totalTime": {duration_minutes},
    "spots": [
      {{"id": 0, "stayTime": 45, "travel_time_minutes": 10,
        "recommendation_reason": "...", "must_see": "...", "pro_tip": "..."}}
    ]
  }}
]
"""


def _extract_json_array(text: str) -> str:
    match = _ARRAY_RE.search(text)
    raw = match.group(0) if match else text.replace("```json", "").replace("```", "").strip()
    return _TRAILING_COMMA_RE.sub(r"\1", raw)


def _as_minutes(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _spot_index(value: Any) -> int | None:
    """Candidate index from the model's answer; quoted digits and 3.0 count too."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _hydrate_course(data: dict, n: int, candidates: list[Spot], center: Center) -> Course | None:
    spots: list[Spot] = []
    seen: set[int] = set()
    for item in data.get("spots") or []:
        raw = item.get("id") if isinstance(item, dict) else None
        idx = _spot_index(raw)
        if idx is None or not 0 <= idx < len(candidates):
            logger.warning("Course generator returned invalid spot id: %r", raw)
            continue
        if idx in seen:
            continue
        seen.add(idx)
        spots.append(candidates[idx].model_copy(update={
            "stay_time": _as_minutes(item.get("stayTime")),
            "ai_description": item.get("recommendation_reason") or item.get("description"),
        }))

    if not spots:
        return None

    total_time = 0.0
    total_distance = 0.0
    lat, lon = center.lat, center.lon
    for s in spots:
        d = haversine(lat, lon, s.lat, s.lon) if s.routable else 0.0
        total_distance += d
        total_time += walk_minutes(d) + (s.stay_time if s.stay_time is not None else stay_minutes(s.category))
        if s.routable:
            lat, lon = s.lat, s.lon

    reported = _as_minutes(data.get("totalTime"))
    return Course(
        id=str(data.get("id") or f"smart_{n}"),
        title=str(data.get("title") or ""),
        description=str(data.get("description") or ""),
        theme=str(data.get("theme") or ""),
        spots=spots,
        total_time=round(reported if reported is not None else total_time, 1),
        total_distance=round(total_distance),
    )


def parse_course_response(text: str, candidates: list[Spot], center: Center) -> list[Course]:
    """Hydrate the model's JSON answer into Course objects.

    Spot ids in the answer are indices into `candidates`. Unparsable text
    yields an empty list.
    """
    try:
        data = json.loads(_extract_json_array(text))
    except json.JSONDecodeError as exc:
        logger.warning("Could not parse course generator response: %s", exc)
        return []
    if not isinstance(data, list):
        logger.warning("Course generator response is not a list")
        return []

    courses = []
    for n, item in enumerate(data):
        if not isinstance(item, dict):
            continue
        course = _hydrate_course(item, n, candidates, center)
        if course is not None:
            courses.append(course)
    return courses


class SmartCourseGenerator:
    """Course generator backed by an injected text-completion coroutine.

    The first attempt lets the model use tools (e.g. web search); if that
    raises, a second attempt goes without. Both failing gives [].
    """

    def __init__(self, complete: CompleteFn, rng: random.Random | None = None) -> None:
        self._complete = complete
        self._rng = rng or random.Random()

    async def __call__(self, candidates: list[Spot], center: Center, duration_minutes: int) -> list[Course]:
        themes = select_themes(self._rng)
        text = None
        for use_tools in (True, False):
            prompt = build_course_prompt(candidates, duration_minutes, themes, use_tools)
            try:
                text = await self._complete(prompt, use_tools)
                break
            except Exception as exc:
                logger.warning("Completion failed (use_tools=%s): %s", use_tools, exc)
        if text is None:
            return []
        return parse_course_response(text, candidates, center)


async def plan_courses(
    center: Center,
    spots: list[Spot],
    duration_minutes: int,
    generator: CourseGenerator | None = None,
    rng: random.Random | None = None,
    timeout: float = config.LLM_TIMEOUT_S,
) -> list[Course]:
    """Courses from `generator` if it yields any, else from the heuristic engine."""
    rng = rng or random.Random()

    if generator is not None:
        candidates = sample_candidates(usable_spots(spots), rng)
        try:
            courses = await asyncio.wait_for(generator(candidates, center, duration_minutes), timeout)
        except asyncio.TimeoutError:
            logger.warning("Course generator timed out after %.0fs", timeout)
            courses = []
        except Exception as exc:
            logger.warning("Course generator failed: %s", exc)
            courses = []

        if courses:
            logger.info("Course generator returned %d courses", len(courses))
            return courses
        logger.info("Falling back to heuristic course generation")

    return generate_courses(center, spots, duration_minutes, rng)
