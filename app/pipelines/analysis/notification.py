"""Notification formatting stage (Stage 04).

Pure rendering of a :class:`TaskAnalysis` into the e-mail subject and body.
No I/O happens here; dispatch is the orchestrator's job.
"""

from __future__ import annotations

from app.domain.models import NotificationMessage, TaskAnalysis

HIGH_PRIORITY_MARKER = "🔥"
MEDIUM_PRIORITY_MARKER = "⚡"
LOW_PRIORITY_MARKER = "📝"
PARETO_FLAG = "⭐ PARETO ÚKOL!"

_TIPS_FOOTER = (
    "---\n"
    "🚀 Produktivní tipy:\n"
    "• Začni prvním krokem během 2 minut (Zeigarnik efekt)\n"
    "• Zaměř se na Pareto úkoly (80% výsledku z 20% času)\n"
    '• Pamatuj na dlouhodobé cíle vs. krátkodobé "hry"'
)


def priority_marker(priority: int) -> str:
    if priority >= 4:
        return HIGH_PRIORITY_MARKER
    if priority >= 3:
        return MEDIUM_PRIORITY_MARKER
    return LOW_PRIORITY_MARKER


def render_subject(analysis: TaskAnalysis) -> str:
    subject = f"{priority_marker(analysis.priority)} Úkol analyzován: Priorita {analysis.priority}/5"
    if analysis.is_pareto_task:
        subject += f" {PARETO_FLAG}"
    return subject


def render_body(analysis: TaskAnalysis, original_text: str) -> str:
    heading = f"{priority_marker(analysis.priority)} ANALÝZA ÚKOLU"
    if analysis.is_pareto_task:
        heading += f" {PARETO_FLAG}"

    sections = [
        heading,
        f'📋 Původní text: "{original_text}"',
    ]

    priority_lines = [f"🎯 Priorita: {analysis.priority}/5"]
    if analysis.is_pareto_task:
        priority_lines.append("⭐ JE TO PARETO ÚKOL (top 20%)!")
    sections.append("\n".join(priority_lines))

    sections.append(f"✅ PRVNÍ KROK (začni hned):\n{analysis.first_step}")
    sections.append(
        f"⏱️ Odhad času: {analysis.time_estimate}\n"
        f"📂 Kategorie: {analysis.category}"
    )

    if analysis.pareto_squared:
        sections.append(f"🧠 PARETO² ANALÝZA:\n{analysis.pareto_squared}")
    if analysis.championship_vs_game:
        sections.append(f"🏆 CHAMPIONSHIP VS GAME:\n{analysis.championship_vs_game}")

    steps = "\n".join(
        f"{index}. {step}" for index, step in enumerate(analysis.action_plan, start=1)
    )
    sections.append(f"📝 AKČNÍ PLÁN:\n{steps}")
    sections.append(f"📊 Zdůvodnění priority:\n{analysis.analysis}")

    if analysis.needs_calendar_event:
        sections.append(f"📅 Navrhovaný čas: {analysis.suggested_date_time or 'neurčen'}")

    sections.append(_TIPS_FOOTER)
    return "\n\n".join(sections) + "\n"


def render_notification(analysis: TaskAnalysis, original_text: str) -> NotificationMessage:
    return NotificationMessage(
        subject=render_subject(analysis),
        body=render_body(analysis, original_text),
    )


__all__ = [
    "priority_marker",
    "render_body",
    "render_notification",
    "render_subject",
]
