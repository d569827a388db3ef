"""Markdown document exporter."""

from pathlib import Path

from daybook.core.entries import Entry, sort_chronological
from daybook.errors import ValidationError


class MarkdownExporter:
    """
    Markdown journal export.

    Implements DocumentExporter protocol. Entries are written oldest first,
    one section per day.
    """

    def __init__(self, title: str = "My Journal"):
        self.title = title

    def export(self, entries: list[Entry], path: Path | str) -> Path:
        """Write entries to path and return it."""
        if not path or not str(path).strip():
            raise ValidationError("Export path cannot be empty.")

        target = Path(path).expanduser()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.render([e for e in entries if e is not None]), encoding="utf-8")
        return target

    def render(self, entries: list[Entry]) -> str:
        lines = [f"# {self.title}", ""]
        if not entries:
            lines.append("_No entries._")
            return "\n".join(lines) + "\n"

        for entry in sort_chronological(entries):
            lines.append(f"## {entry.date.isoformat()}")
            lines.append("")
            lines.append(format_mood_line(entry))
            if entry.category:
                lines.append(f"Category: {entry.category}")
            if entry.tags:
                lines.append(f"Tags: {', '.join(entry.tag_names)}")
            lines.append("")
            lines.append(entry.content.strip())
            lines.append("")
        return "\n".join(lines)


def format_mood_line(entry: Entry) -> str:
    """Mood: Happy (Also: Calm, Grateful)"""
    primary = entry.primary_mood
    text = f"Mood: {primary.kind.label}" if primary else "Mood: None"
    secondary = entry.secondary_moods
    if secondary:
        text += f" (Also: {', '.join(m.kind.label for m in secondary)})"
    return text
