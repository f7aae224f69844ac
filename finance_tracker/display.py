"""
HTML fragments and table rows for the Streamlit shell.

Category names and icons are user input and are persisted, so they are
always escaped before they reach `unsafe_allow_html` markup.
"""

import html

from finance_tracker.models.audit import AuditEvent
from finance_tracker.models.finance import Category


def category_row_html(category: Category) -> str:
    """One category line: icon, bold name and a color dot."""
    # color is pattern-checked on the model (#RRGGBB), escaped anyway
    return (
        '<div class="category-row">'
        f'<span style="font-size: 1.2em">{html.escape(category.icon)}</span> '
        f'<strong>{html.escape(category.name)}</strong>'
        f'<span class="color-dot" style="background-color: {html.escape(category.color)}"></span>'
        '</div>'
    )


def audit_history_rows(events: list[AuditEvent]) -> list[dict]:
    """Rows for the settings page history table, in the order given."""
    return [
        {
            "Quando (UTC)": event.timestamp.strftime("%d/%m/%Y %H:%M:%S"),
            "Evento": event.event_type.value,
            "Nível": event.severity.value,
            "Descrição": event.description,
        }
        for event in events
    ]
