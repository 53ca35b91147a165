"""Append-only ledger of every prompt surfaced to the user."""

from datetime import datetime, timezone

from mvp_studio.state import EntryType, HistoryEntry


class HistoryRecorder:
    """Ordered, oldest-first record of displayed prompts.

    Entries are never removed or rewritten. Revisiting a stage after Back may
    add a second entry for it; that duplicate is kept.
    """

    def __init__(self):
        self._entries: list[HistoryEntry] = []

    def record(self, entry: HistoryEntry) -> None:
        if entry["type"] == "page" and "page_index" not in entry:
            raise ValueError("Page history entries require a page_index.")
        if entry["type"] != "page" and "page_index" in entry:
            raise ValueError("Only page history entries carry a page_index.")
        self._entries.append(dict(entry))

    def all(self) -> list[HistoryEntry]:
        """Return a copy of every entry, oldest first."""
        return [dict(e) for e in self._entries]

    def __len__(self) -> int:
        return len(self._entries)


def make_entry(
    entry_type: EntryType,
    title: str,
    prompt: str,
    page_index: int | None = None,
    timestamp: datetime | None = None,
) -> HistoryEntry:
    """Build a HistoryEntry, stamping it with the current UTC time by default."""
    entry: HistoryEntry = {
        "type": entry_type,
        "title": title,
        "prompt": prompt,
        "timestamp": timestamp or datetime.now(timezone.utc),
    }
    if page_index is not None:
        entry["page_index"] = page_index
    return entry


def render_history(entries: list[HistoryEntry]) -> str:
    """Render the ledger as Markdown for a review-all-prompts view."""
    if not entries:
        return "*No prompts generated yet.*"

    lines = ["# Prompt History", ""]
    for i, entry in enumerate(entries, 1):
        label = entry["type"]
        if entry["type"] == "page":
            label = f"page {entry['page_index'] + 1}"
        lines.append(f"## {i}. {entry['title']} ({label})")
        lines.append("")
        lines.append(f"*{entry['timestamp'].isoformat()}*")
        lines.append("")
        lines.append("~~~")
        lines.append(entry["prompt"])
        lines.append("~~~")
        lines.append("")
    return "\n".join(lines)
