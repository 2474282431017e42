from athlete_analytics.services.athlete_analysis import (
    analyze_nutrition,
    latest_readiness,
    summarize_athlete,
    triage_roster,
)

__all__ = ["analyze_nutrition", "latest_readiness", "summarize_athlete", "triage_roster"]
