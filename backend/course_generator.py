"""Course generator: themed, time-bounded walking routes from a spot pool.

Per batch:
- Draw themes (see themes.select_themes).
- For each theme, narrow the pool with relaxation (strict -> pool -> reuse).
- Walk the candidates greedily by nearest neighbor under the time budget.
- Record visited ids so later themes start from fresh spots.

Distances are great-circle meters; walking time is distance / 80 m per minute.
The full candidate list is re-sorted on every step. This is O(n^2 log n) per
course, fine for <= ~150 candidates and <= 8 stops, and keeps the stable-sort
tie-break (shuffled order wins among equal distances).
"""

import logging
import random

import config
from geo import haversine
from models import Center, Course, Spot
from themes import THEMES, Theme, select_themes

logger = logging.getLogger(__name__)

STRICT = "strict"
POOL = "pool"
REUSE = "reuse"


def dining_cap(duration_minutes: float) -> int:
    """Max dining spots per course for a given total duration."""
    for limit, cap in config.DINING_CAP_BUCKETS:
        if duration_minutes <= limit:
            return cap
    return config.DINING_CAP_MAX


def stay_minutes(category: str) -> float:
    return config.STAY_MINUTES.get(category, config.DEFAULT_STAY_MINUTES)


def walk_minutes(distance_m: float) -> float:
    return distance_m / config.WALK_SPEED_M_PER_MIN


def usable_spots(spots: list[Spot]) -> list[Spot]:
    """Drop spots without a finite coordinate."""
    return [s for s in spots if s.routable]


def filter_candidates(
    theme: Theme,
    spots: list[Spot],
    used_ids: frozenset | set,
    minimum: int = config.MIN_THEME_CANDIDATES,
) -> tuple[list[Spot], str | None]:
    """Return (candidates, rule) for a theme, or ([], None) if every rule is too thin.

    Rules are tried in order and the first one with at least `minimum` spots wins:
    strict (theme match, unused), pool (any unused), reuse (theme match, used or not).
    """
    strict = [s for s in spots if theme.matches(s) and s.id not in used_ids]
    if len(strict) >= minimum:
        return strict, STRICT

    pool = [s for s in spots if s.id not in used_ids]
    if len(pool) >= minimum:
        return pool, POOL

    reuse = [s for s in spots if theme.matches(s)]
    if len(reuse) >= minimum:
        return reuse, REUSE

    return [], None


def build_course(
    theme: Theme,
    center: Center,
    candidates: list[Spot],
    duration_minutes: float,
    rng: random.Random,
) -> Course | None:
    """Greedy nearest-neighbor walk over `candidates`. None if no spot fits."""
    max_dining = dining_cap(duration_minutes)
    ceiling = duration_minutes * config.OVERRUN_ALLOWANCE

    available = [s for s in candidates if s.routable]
    rng.shuffle(available)

    cur_lat, cur_lon = center.lat, center.lon
    time_used = 0.0
    dist_used = 0.0
    dining_count = 0
    visited: list[Spot] = []

    while (
        time_used < duration_minutes
        and len(visited) < config.MAX_SPOTS_PER_COURSE
        and available
    ):
        # list.sort is stable: shuffled order breaks distance ties.
        available.sort(key=lambda s: haversine(cur_lat, cur_lon, s.lat, s.lon))
        proposal = available[0]
        dist = haversine(cur_lat, cur_lon, proposal.lat, proposal.lon)
        step = walk_minutes(dist) + stay_minutes(proposal.category)

        is_dining = proposal.category == config.DINING_CATEGORY
        over_cap = is_dining and dining_count >= max_dining

        if not over_cap and time_used + step <= ceiling:
            visited.append(proposal)
            time_used += step
            dist_used += dist
            if is_dining:
                dining_count += 1
            cur_lat, cur_lon = proposal.lat, proposal.lon
            available = [s for s in available if s.id != proposal.id]
        else:
            available.pop(0)

    if not visited:
        return None

    return Course(
        id=theme.id,
        title=theme.title,
        description=theme.description,
        theme=theme.label,
        spots=visited,
        total_time=round(time_used, 1),
        total_distance=round(dist_used),
    )


def generate_courses(
    center: Center,
    spots: list[Spot],
    duration_minutes: float,
    rng: random.Random | None = None,
    catalog: list[Theme] = THEMES,
) -> list[Course]:
    """Generate up to THEMES_PER_BATCH distinct themed courses.

    A spot visited by one course is excluded from later ones unless the
    reuse rule is the only way to reach the minimum candidate count.
    """
    rng = rng or random.Random()
    pool = usable_spots(spots)
    if len(pool) < len(spots):
        logger.debug("Dropped %d spots without coordinates", len(spots) - len(pool))

    themes = select_themes(rng, catalog)
    used_ids: set = set()
    courses: list[Course] = []

    for theme in themes:
        candidates, rule = filter_candidates(theme, pool, used_ids)
        if rule is None:
            logger.debug("Theme %s: too few candidates, skipped", theme.id)
            continue
        logger.debug("Theme %s: %d candidates (%s)", theme.id, len(candidates), rule)

        course = build_course(theme, center, candidates, duration_minutes, rng)
        if course is None:
            logger.debug("Theme %s: no spot fits %d min", theme.id, duration_minutes)
            continue

        used_ids.update(s.id for s in course.spots)
        courses.append(course)

    logger.info(
        "Generated %d/%d courses from %d spots for %d min",
        len(courses), len(themes), len(pool), duration_minutes,
    )
    return courses
