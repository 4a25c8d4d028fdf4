"""Static HTML rendering of grouped calendar events."""

import logging
from collections.abc import Sequence
from datetime import tzinfo
from typing import Optional

from .datetime_utils import format_heading, format_time_range
from .event_grouper import group_events
from .models import CalendarEvent, EventGroup, RenderOptions

logger = logging.getLogger(__name__)

DATE_PLACEHOLDER = "Date TBD"

# Body class added for each disabled content toggle
TOGGLE_CLASSES = (
    ("include_summary", "hide-summary"),
    ("include_meta", "hide-meta"),
    ("include_desc", "hide-desc"),
    ("include_uid", "hide-uid"),
)

STYLESHEET = """
        :root {
            --text-primary: #212529;
            --text-secondary: #6c757d;
            --rule: #dee2e6;
            --accent: #007bff;
        }
        * { box-sizing: border-box; }
        body {
            margin: 0 auto;
            max-width: 48rem;
            padding: 2rem 1.5rem;
            font-family: -apple-system, "Segoe UI", Helvetica, Arial, sans-serif;
            font-size: 14px;
            line-height: 1.45;
            color: var(--text-primary);
            background: #ffffff;
        }
        .calendar-title { font-size: 24px; margin: 0 0 1.5rem; }
        .month-group { margin-bottom: 2rem; }
        .month-title {
            font-size: 18px;
            margin: 0 0 0.75rem;
            padding-bottom: 0.25rem;
            border-bottom: 2px solid var(--accent);
        }
        .event {
            padding: 0.5rem 0;
            border-bottom: 1px solid var(--rule);
            break-inside: avoid;
            page-break-inside: avoid;
        }
        .event-date { font-weight: 600; }
        .event-summary { font-size: 16px; margin: 0.25rem 0 0; }
        .event-meta, .event-uid { color: var(--text-secondary); font-size: 12px; }
        .event-location + .event-time::before { content: " | "; }
        .event-desc { white-space: pre-line; margin-top: 0.25rem; }
        .no-events { color: var(--text-secondary); font-style: italic; }
        .hide-summary .event-summary,
        .hide-meta .event-meta,
        .hide-desc .event-desc,
        .hide-uid .event-uid { display: none; }
        @media print {
            body { padding: 0; max-width: none; }
            .month-title { break-after: avoid; page-break-after: avoid; }
        }
"""


class HTMLRenderer:
    """Renders grouped calendar events to a self-contained HTML document."""

    def __init__(self, display_timezone: tzinfo, log: Optional[logging.Logger] = None) -> None:
        """Initialize HTML renderer.

        Args:
            display_timezone: Zone used for headings, time ranges and month keys
            log: Logger for diagnostics (module logger when None)
        """
        self.display_timezone = display_timezone
        self.log = log or logger

    def render(self, title: str, events: Sequence[CalendarEvent], options: RenderOptions) -> str:
        """Render sorted events to a complete HTML document.

        Args:
            title: Document title
            events: Events in display order
            options: Content toggles

        Returns:
            HTML document string
        """
        groups = group_events(events, self.display_timezone, log=self.log)
        return self.render_groups(title, groups, options)

    def render_groups(self, title: str, groups: list[EventGroup], options: RenderOptions) -> str:
        """Render already formed groups to a complete HTML document."""
        content = self._render_groups(groups)
        self.log.debug(
            "Rendered %d events in %d groups", sum(len(g.events) for g in groups), len(groups)
        )
        return self._build_html_template(title, content, self._body_classes(options))

    def _body_classes(self, options: RenderOptions) -> list[str]:
        return [css_class for field, css_class in TOGGLE_CLASSES if not getattr(options, field)]

    def _render_groups(self, groups: list[EventGroup]) -> str:
        if not groups:
            return '        <p class="no-events">No events</p>'

        content_parts = []
        for group in groups:
            content_parts.append('        <section class="month-group">')
            content_parts.append(
                f'            <h2 class="month-title">{self._escape_html(group.key)}</h2>'
            )
            content_parts.extend(self._format_event_html(event) for event in group.events)
            content_parts.append("        </section>")
        return "\n".join(content_parts)

    def _format_event_html(self, event: CalendarEvent) -> str:
        """Format a single event entry.

        Summary and meta blocks are always emitted; visibility is handled by the
        stylesheet. The description block only exists when there is a
        description, and the UID block only when there is a UID.
        """
        tz = self.display_timezone
        heading = format_heading(event.start, tz, event.is_all_day) or DATE_PLACEHOLDER

        meta_parts = []
        if event.location:
            meta_parts.append(
                f'<span class="event-location">{self._escape_html(event.location)}</span>'
            )
        time_range = format_time_range(event.start, event.end, tz, event.is_all_day)
        if time_range:
            meta_parts.append(f'<span class="event-time">{self._escape_html(time_range)}</span>')

        lines = [
            '            <article class="event">',
            f'                <div class="event-date">{self._escape_html(heading)}</div>',
            f'                <h3 class="event-summary">{self._escape_html(event.summary)}</h3>',
            f'                <div class="event-meta">{"".join(meta_parts)}</div>',
        ]
        if event.description:
            lines.append(
                f'                <div class="event-desc">{self._escape_html(event.description)}</div>'
            )
        if event.uid is not None:
            lines.append(f'                <div class="event-uid">{self._escape_html(event.uid)}</div>')
        lines.append("            </article>")
        return "\n".join(lines)

    def _build_html_template(self, title: str, content: str, body_classes: list[str]) -> str:
        """Build the complete HTML document around the rendered content."""
        safe_title = self._escape_html(title)
        body_open = f'<body class="{" ".join(body_classes)}">' if body_classes else "<body>"

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{safe_title}</title>
    <style>{STYLESHEET}    </style>
</head>
{body_open}
    <header class="calendar-header">
        <h1 class="calendar-title">{safe_title}</h1>
    </header>
    <main class="calendar-content">
{content}
    </main>
</body>
</html>
"""

    def _escape_html(self, text: str) -> str:
        """Escape HTML special characters.

        Args:
            text: Text to escape

        Returns:
            HTML-escaped text
        """
        if not text:
            return ""

        return (
            text.replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;")
            .replace('"', "&quot;")
            .replace("'", "&#x27;")
        )
