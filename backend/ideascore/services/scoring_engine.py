"""Deterministic Scoring Engine.

Maps the six free-text idea fields to a 0-100 viability score and a
templated feedback block.

Rules
-----
- NO API calls
- NO DB writes
- Length-based heuristics only: ``min(cap, len(text) // divisor + base)``
- An absent field scores 0 and produces no note; a present empty string
  scores its base and is always flagged for improvement
- The feedback text format is consumed by clients, keep it byte-stable
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional

FEEDBACK_BULLET = "• "
STRENGTHS_HEADER = "Strengths:"
IMPROVEMENTS_HEADER = "Areas for Improvement:"
NEXT_STEPS_HEADER = "Recommended Next Steps:"


@dataclass(frozen=True)
class FieldRule:
    name: str
    cap: int
    divisor: int
    base: int
    threshold: int
    strength: str
    improvement: str

    def points(self, text: str) -> int:
        return min(self.cap, len(text) // self.divisor + self.base)


# Order matters: it fixes the order of strengths/improvements in the feedback.
FIELD_RULES: tuple[FieldRule, ...] = (
    FieldRule(
        "problem", cap=20, divisor=10, base=5, threshold=15,
        strength="Well-defined problem statement",
        improvement="Provide more detailed problem description",
    ),
    FieldRule(
        "solution", cap=25, divisor=8, base=5, threshold=20,
        strength="Comprehensive solution approach",
        improvement="Elaborate on your solution's unique features",
    ),
    FieldRule(
        "target_market", cap=20, divisor=6, base=5, threshold=15,
        strength="Clear target market definition",
        improvement="Define your target market more specifically",
    ),
    FieldRule(
        "business_model", cap=15, divisor=8, base=3, threshold=12,
        strength="Solid monetization strategy",
        improvement="Strengthen your revenue model",
    ),
    FieldRule(
        "competition", cap=10, divisor=10, base=2, threshold=8,
        strength="Thorough competitive analysis",
        improvement="Research competitors more thoroughly",
    ),
    FieldRule(
        "team", cap=10, divisor=8, base=2, threshold=8,
        strength="Strong team composition",
        improvement="Highlight relevant team experience",
    ),
)

SCORED_FIELDS: tuple[str, ...] = tuple(rule.name for rule in FIELD_RULES)
MAX_SCORE = sum(rule.cap for rule in FIELD_RULES)


@dataclass(frozen=True)
class ScoreBand:
    floor: int
    category: str
    next_steps: tuple[str, str, str, str]


# Highest floor first; the first band whose floor the score reaches wins.
SCORE_BANDS: tuple[ScoreBand, ...] = (
    ScoreBand(
        80,
        "Excellent viability with high market potential",
        (
            "Create detailed MVP roadmap",
            "Conduct user interviews",
            "Develop go-to-market strategy",
            "Seek initial funding",
        ),
    ),
    ScoreBand(
        60,
        "Good potential with some areas for improvement",
        (
            "Validate assumptions with target users",
            "Refine value proposition",
            "Build prototype",
            "Test market demand",
        ),
    ),
    ScoreBand(
        40,
        "Moderate potential, needs significant development",
        (
            "Conduct market research",
            "Clarify unique selling proposition",
            "Validate problem-solution fit",
            "Strengthen business model",
        ),
    ),
    ScoreBand(
        0,
        "Low viability, major improvements needed",
        (
            "Redefine core problem",
            "Research market thoroughly",
            "Develop unique solution approach",
            "Consider pivot opportunities",
        ),
    ),
)


@dataclass
class ScoreResult:
    viability_score: int
    category: str
    strengths: list[str] = field(default_factory=list)
    improvements: list[str] = field(default_factory=list)
    next_steps: list[str] = field(default_factory=list)
    field_scores: dict[str, int] = field(default_factory=dict)

    @property
    def feedback(self) -> str:
        return format_feedback(
            self.viability_score,
            self.category,
            self.strengths,
            self.improvements,
            self.next_steps,
        )


@dataclass
class ParsedFeedback:
    score: Optional[int]
    category: str
    strengths: list[str] = field(default_factory=list)
    improvements: list[str] = field(default_factory=list)
    next_steps: list[str] = field(default_factory=list)


def band_for(score: int) -> ScoreBand:
    """Return the score band containing *score*."""
    for band in SCORE_BANDS:
        if score >= band.floor:
            return band
    return SCORE_BANDS[-1]


def score_idea(fields: Mapping[str, Optional[str]]) -> ScoreResult:
    """Score an idea from its text fields.

    Parameters
    ----------
    fields : Mapping[str, Optional[str]]
        Keys among ``SCORED_FIELDS``. Unknown keys are ignored; a key that is
        missing or maps to ``None`` counts as absent.

    Returns
    -------
    ScoreResult
        Total score (0-100), the matched band's category and next steps, and
        one strength or improvement note per present field.
    """
    total = 0
    strengths: list[str] = []
    improvements: list[str] = []
    field_scores: dict[str, int] = {}

    for rule in FIELD_RULES:
        text = fields.get(rule.name)
        if text is None:
            continue
        points = rule.points(text)
        field_scores[rule.name] = points
        total += points
        if points >= rule.threshold:
            strengths.append(rule.strength)
        else:
            improvements.append(rule.improvement)

    band = band_for(total)
    return ScoreResult(
        viability_score=total,
        category=band.category,
        strengths=strengths,
        improvements=improvements,
        next_steps=list(band.next_steps),
        field_scores=field_scores,
    )


def _bullets(items: list[str]) -> str:
    return "\n".join(f"{FEEDBACK_BULLET}{item}" for item in items)


def format_feedback(
    score: int,
    category: str,
    strengths: list[str],
    improvements: list[str],
    next_steps: list[str],
) -> str:
    """Render the feedback block.

    Four sections separated by blank lines: the ``Score: N/100 - category``
    header, then Strengths, Areas for Improvement and Recommended Next
    Steps, each a header line followed by ``• `` bullets. An empty section
    leaves an empty line under its header.
    """
    return (
        f"Score: {score}/100 - {category}\n"
        f"\n"
        f"{STRENGTHS_HEADER}\n"
        f"{_bullets(strengths)}\n"
        f"\n"
        f"{IMPROVEMENTS_HEADER}\n"
        f"{_bullets(improvements)}\n"
        f"\n"
        f"{NEXT_STEPS_HEADER}\n"
        f"{_bullets(next_steps)}"
    )


def parse_feedback(text: str) -> ParsedFeedback:
    """Read a feedback block back into its sections.

    Lines that are neither a known header nor a bullet are ignored, so the
    parser tolerates blank lines and stray whitespace.
    """
    sections: dict[str, list[str]] = {
        STRENGTHS_HEADER: [],
        IMPROVEMENTS_HEADER: [],
        NEXT_STEPS_HEADER: [],
    }
    score: Optional[int] = None
    category = ""
    current: Optional[list[str]] = None

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if line.startswith("Score:") and current is None:
            head, _, tail = line[len("Score:"):].partition(" - ")
            number = head.strip().split("/", 1)[0]
            if number.isdigit():
                score = int(number)
            category = tail.strip()
        elif line in sections:
            current = sections[line]
        elif current is not None and line.startswith(FEEDBACK_BULLET.strip()):
            item = line[len(FEEDBACK_BULLET.strip()):].strip()
            if item:
                current.append(item)

    return ParsedFeedback(
        score=score,
        category=category,
        strengths=sections[STRENGTHS_HEADER],
        improvements=sections[IMPROVEMENTS_HEADER],
        next_steps=sections[NEXT_STEPS_HEADER],
    )
