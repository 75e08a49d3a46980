"""
Deal Recommendation

Scores DSCR, year-1 cash-on-cash and levered IRR against fixed underwriting
benchmarks and rolls the three scores into a headline verdict.
"""

import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional


class Tone(str, enum.Enum):
    good = "good"
    warning = "warning"
    bad = "bad"


BENCHMARKS = {"dscr": 1.25, "coc": 0.08, "irr": 0.12}
WARNING_FLOORS = {"dscr": 1.05, "coc": 0.04, "irr": 0.08}

HEADLINE_PURSUE = "Likely worth pursuing"
HEADLINE_PASS = "Likely not worth it"
HEADLINE_BORDERLINE = "Borderline — needs diligence"


@dataclass(frozen=True)
class RecommendationNote:
    metric: str
    tone: Tone
    title: str
    text: str
    missing: bool = False


@dataclass(frozen=True)
class RecommendationResult:
    headline: str
    tone: Tone
    notes: List[RecommendationNote]
    benchmarks: Dict[str, float] = field(default_factory=lambda: dict(BENCHMARKS))


def _fmt2(value: float) -> str:
    return f"{value:,.2f}"


def _fmt_pct(value: float) -> str:
    return f"{value * 100:,.2f}%"


def _score_dscr(dscr: Optional[float]) -> RecommendationNote:
    if dscr is None:
        return RecommendationNote(
            "dscr", Tone.bad, "DSCR missing", "Debt or NOI inputs are incomplete.", missing=True
        )
    if dscr >= BENCHMARKS["dscr"]:
        return RecommendationNote(
            "dscr",
            Tone.good,
            "Healthy DSCR",
            f"DSCR {_fmt2(dscr)} ≥ ~{_fmt2(BENCHMARKS['dscr'])}.",
        )
    if dscr >= WARNING_FLOORS["dscr"]:
        return RecommendationNote(
            "dscr", Tone.warning, "Tight DSCR", f"DSCR {_fmt2(dscr)} leaves less cushion."
        )
    return RecommendationNote(
        "dscr", Tone.bad, "Weak DSCR", f"DSCR {_fmt2(dscr)} may be hard to finance."
    )


def _score_coc(coc: Optional[float]) -> RecommendationNote:
    if coc is None:
        return RecommendationNote(
            "coc", Tone.bad, "CoC missing", "Equity or cash flow inputs are incomplete.", missing=True
        )
    if coc >= BENCHMARKS["coc"]:
        return RecommendationNote("coc", Tone.good, "Competitive cash yield", f"CoC {_fmt_pct(coc)}.")
    if coc >= WARNING_FLOORS["coc"]:
        return RecommendationNote(
            "coc",
            Tone.warning,
            "Modest cash yield",
            f"CoC {_fmt_pct(coc)} (could still work with growth).",
        )
    return RecommendationNote(
        "coc", Tone.bad, "Low cash yield", f"CoC {_fmt_pct(coc)} is very low for the risk."
    )


def _score_irr(levered_irr: Optional[float]) -> RecommendationNote:
    if levered_irr is None:
        return RecommendationNote(
            "irr", Tone.bad, "IRR missing", "Cash flows don't produce a valid IRR.", missing=True
        )
    if levered_irr >= BENCHMARKS["irr"]:
        return RecommendationNote("irr", Tone.good, "Strong IRR", f"IRR {_fmt_pct(levered_irr)}.")
    if levered_irr >= WARNING_FLOORS["irr"]:
        return RecommendationNote(
            "irr",
            Tone.warning,
            "OK IRR",
            f"IRR {_fmt_pct(levered_irr)}, depends on risk and market.",
        )
    return RecommendationNote(
        "irr",
        Tone.bad,
        "Weak IRR",
        f"IRR {_fmt_pct(levered_irr)}, likely overpaying or weak assumptions.",
    )


def build_recommendation(
    dscr: Optional[float],
    coc: Optional[float],
    levered_irr: Optional[float],
) -> RecommendationResult:
    """
    Classify a deal from its year-1 DSCR, year-1 cash-on-cash and levered IRR.

    A missing metric counts as bad. Two or more bad scores fail the deal; two
    or more good scores with no bad ones pass it; anything else is borderline.
    """
    notes = [_score_dscr(dscr), _score_coc(coc), _score_irr(levered_irr)]

    good = sum(1 for note in notes if note.tone == Tone.good)
    bad = sum(1 for note in notes if note.tone == Tone.bad)

    if bad >= 2:
        return RecommendationResult(headline=HEADLINE_PASS, tone=Tone.bad, notes=notes)
    if good >= 2 and bad == 0:
        return RecommendationResult(headline=HEADLINE_PURSUE, tone=Tone.good, notes=notes)
    return RecommendationResult(headline=HEADLINE_BORDERLINE, tone=Tone.warning, notes=notes)
