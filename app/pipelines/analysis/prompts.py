"""Prompt construction stage (Stage 02) of the task analysis pipeline.

The prompt is a pure function of the canonical text and the variant schema,
so identical submissions always produce byte-identical prompts.
"""

from __future__ import annotations

from app.domain.models import AnalysisSchema

# One line per JSON field, in the order the model should emit them.
_BASE_FIELD_LINES = (
    '  "priority": 1-5 (5 = nejvyšší),',
    '  "isParetoTask": true/false (je to v top 20% důležitých věcí?),',
    '  "firstStep": "Konkrétní malý první krok (Zeigarnik efekt)",',
    '  "timeEstimate": "Odhad času",',
    '  "category": "{categories}",',
    '  "needsCalendarEvent": true/false,',
    '  "suggestedDateTime": "YYYY-MM-DD HH:MM" nebo null,',
    '  "analysis": "Krátké zdůvodnění priority podle Pareto principu",',
    '  "actionPlan": ["krok 1", "krok 2", "krok 3"]',
)

_EXTENDED_FIELD_LINES = (
    '  "paretoSquared": "Co je 20% z tohoto úkolu, co přinese 80% výsledku?",',
    '  "championshipVsGame": "Je to dlouhodobý cíl (šampionát) nebo krátkodobý úkol (hra)?"',
)

_BASE_FOCUS_LINES = (
    "- Pareto princip: Je to ve 20% nejdůležitějších aktivit?",
    "- Zeigarnik efekt: Jaký je nejmenší možný první krok?",
    '- Championship mentality: Je lepší "prohrát hru aby vyhrál šampionát"?',
)

_EXTENDED_FOCUS_LINES = ("- Rozděl na menší části podle Pareto²",)


def _field_block(schema: AnalysisSchema) -> str:
    lines = [line.replace("{categories}", "/".join(schema.categories)) for line in _BASE_FIELD_LINES]
    if schema.extended_fields:
        lines[-1] += ","
        lines.extend(_EXTENDED_FIELD_LINES)
    return "{\n" + "\n".join(lines) + "\n}"


def build_analysis_prompt(text: str, schema: AnalysisSchema) -> str:
    """Embed ``text`` verbatim in the fixed instruction block for ``schema``."""

    focus_lines = list(_BASE_FOCUS_LINES)
    if schema.extended_fields:
        focus_lines.extend(_EXTENDED_FOCUS_LINES)

    return (
        f'Uživatel nadiktoval úkol: "{text}"\n'
        "\n"
        "Aplikuj produktivní principy (Pareto princip, Zeigarnik efekt, "
        "Championship mentality) a odpověz v JSON formátu:\n"
        "\n"
        f"{_field_block(schema)}\n"
        "\n"
        "Zaměř se na:\n"
        + "\n".join(focus_lines)
        + "\n\n"
        "Odpověz pouze JSON, bez dalšího textu.\n"
    )


__all__ = ["build_analysis_prompt"]
