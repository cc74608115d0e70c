"""Rendering of the e-mail notification."""

from __future__ import annotations

import pytest

from app.domain.models import TaskAnalysis
from app.pipelines.analysis.notification import priority_marker, render_notification


def make_analysis(**overrides) -> TaskAnalysis:
    data = {
        "priority": 3,
        "isParetoTask": False,
        "firstStep": "Otevřít dokument",
        "timeEstimate": "2 hodiny",
        "category": "práce",
        "analysis": "Důležité pro kvartální cíle.",
        "actionPlan": ["Sepsat osnovu", "Doplnit čísla", "Odeslat šéfovi"],
    }
    data.update(overrides)
    return TaskAnalysis.model_validate(data)


@pytest.mark.parametrize(
    "priority, marker",
    [(5, "🔥"), (4, "🔥"), (3, "⚡"), (2, "📝"), (1, "📝")],
)
def test_priority_marker_tiers(priority, marker):
    assert priority_marker(priority) == marker
    message = render_notification(make_analysis(priority=priority), "úkol")
    assert message.subject.startswith(f"{marker} Úkol analyzován: Priorita {priority}/5")
    assert message.body.startswith(f"{marker} ANALÝZA ÚKOLU")


def test_body_sections_appear_in_order():
    body = render_notification(make_analysis(), "napsat report").body

    anchors = [
        "ANALÝZA ÚKOLU",
        'Původní text: "napsat report"',
        "Priorita: 3/5",
        "PRVNÍ KROK",
        "Otevřít dokument",
        "Odhad času: 2 hodiny",
        "Kategorie: práce",
        "AKČNÍ PLÁN:",
        "1. Sepsat osnovu",
        "2. Doplnit čísla",
        "3. Odeslat šéfovi",
        "Důležité pro kvartální cíle.",
        "Produktivní tipy",
    ]
    positions = [body.index(anchor) for anchor in anchors]
    assert positions == sorted(positions)


def test_conditional_sections_absent_by_default():
    message = render_notification(make_analysis(), "napsat report")

    assert "PARETO" not in message.subject
    assert "PARETO ÚKOL" not in message.body
    assert "PARETO² ANALÝZA" not in message.body
    assert "CHAMPIONSHIP VS GAME" not in message.body
    assert "Navrhovaný čas" not in message.body


def test_pareto_and_extended_sections_when_present():
    analysis = make_analysis(
        priority=4,
        isParetoTask=True,
        paretoSquared="Osnova je těch 20 %.",
        championshipVsGame="Šampionát",
        needsCalendarEvent=True,
        suggestedDateTime="2026-10-21 08:30",
    )

    message = render_notification(analysis, "napsat report")

    assert message.subject == "🔥 Úkol analyzován: Priorita 4/5 ⭐ PARETO ÚKOL!"
    body = message.body
    assert "⭐ JE TO PARETO ÚKOL (top 20%)!" in body
    assert body.index("Kategorie: práce") < body.index("PARETO² ANALÝZA:\nOsnova je těch 20 %.")
    assert body.index("CHAMPIONSHIP VS GAME:\nŠampionát") < body.index("AKČNÍ PLÁN:")
    assert "📅 Navrhovaný čas: 2026-10-21 08:30" in body
    assert body.index("Zdůvodnění priority") < body.index("Navrhovaný čas")


def test_calendar_event_without_time_is_marked_unknown():
    body = render_notification(make_analysis(needsCalendarEvent=True), "x").body

    assert "📅 Navrhovaný čas: neurčen" in body


def test_rendering_is_deterministic():
    analysis = make_analysis(isParetoTask=True)

    assert render_notification(analysis, "stejný text") == render_notification(analysis, "stejný text")
