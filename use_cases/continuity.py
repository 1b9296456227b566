"""
Continuity resolution (application layer).

Decides where a freshly authenticated user lands. Precedence, first match wins:

1. merge-anonymous: unsaved pre-login work becomes a new project and the
   anonymous-work tracker is cleared.
2. resume-existing: the first project of the service's list, which the project
   service guarantees is the most recently active one.
3. create-fresh: a new empty project with a random number in its name.

The resolver is pure: clock and random source are passed in, and side effects
are described in the returned plan for the caller to execute.
"""

import random
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from use_cases.domain_models import (
    AnonWorkSnapshot,
    ContinuityOutcome,
    NavigationTarget,
    Project,
    ProjectCreateInput,
    has_anon_work,
)

FRESH_PROJECT_NUMBER_LIMIT = 100_000


@dataclass(frozen=True)
class ContinuityPlan:
    outcome: ContinuityOutcome
    target: Optional[NavigationTarget] = None
    create: Optional[ProjectCreateInput] = None
    clear_anon: bool = False


def format_clock_time(moment: datetime) -> str:
    """H:MM:SS on a 24-hour clock, hour without a leading zero."""
    return f"{moment.hour}:{moment.minute:02d}:{moment.second:02d}"


def anon_project_name(moment: datetime) -> str:
    return f"Design from {format_clock_time(moment)}"


def fresh_project_name(rng: random.Random) -> str:
    return f"New Design #{rng.randrange(FRESH_PROJECT_NUMBER_LIMIT)}"


def resolve(
    anon_snapshot: Optional[AnonWorkSnapshot],
    existing_projects: Sequence[Project],
    *,
    now: datetime,
    rng: random.Random,
) -> ContinuityPlan:
    if has_anon_work(anon_snapshot):
        return ContinuityPlan(
            outcome="merge-anonymous",
            create=ProjectCreateInput(
                name=anon_project_name(now),
                messages=list(anon_snapshot.messages),
                data=anon_snapshot.file_system_data,
            ),
            clear_anon=True,
        )

    if existing_projects:
        return ContinuityPlan(
            outcome="resume-existing",
            target=NavigationTarget(project_id=existing_projects[0].id),
        )

    return ContinuityPlan(
        outcome="create-fresh",
        create=ProjectCreateInput(name=fresh_project_name(rng), messages=[], data={}),
    )
