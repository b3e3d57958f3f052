"""
Persistence - Record mapping and backup/restore

Converts cards and decks to plain JSON-ready dicts and back.

Record layout (per card):
- id, templateId, fieldValues: opaque payload
- due, last_review: ISO-8601 timestamps (last_review optional)
- s, d, lapses, reps, state (0-3), step_index (optional)
- review_logs: [{rating, state, due, elapsed_days, scheduled_days, review}]

Deck settings keep their camelCase keys. Timestamps without an offset are
read as UTC.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

import structlog
from pydantic import ValidationError

from philia.errors import BackupFormatError
from philia.fsrs.constants import Rating, State
from philia.fsrs.models import Card, Deck, ReviewLog
from philia.schemas import DeckSettings

logger = structlog.get_logger()

BACKUP_VERSION = "1.0"


def _dump_time(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _load_time(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None

    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def review_log_to_record(log: ReviewLog) -> dict[str, Any]:
    return {
        "rating": int(log.rating),
        "state": int(log.state),
        "due": _dump_time(log.due),
        "elapsed_days": log.elapsed_days,
        "scheduled_days": log.scheduled_days,
        "review": _dump_time(log.review),
    }


def review_log_from_record(record: dict[str, Any]) -> ReviewLog:
    return ReviewLog(
        rating=Rating(record["rating"]),
        state=State(record["state"]),
        due=_load_time(record["due"]),
        elapsed_days=float(record.get("elapsed_days", 0)),
        scheduled_days=float(record.get("scheduled_days", 0)),
        review=_load_time(record["review"]),
    )


def card_to_record(card: Card) -> dict[str, Any]:
    """Serialize a card to its persisted field set."""
    return {
        "id": card.id,
        "templateId": card.template_id,
        "fieldValues": dict(card.field_values),
        "due": _dump_time(card.due),
        "s": card.s,
        "d": card.d,
        "lapses": card.lapses,
        "reps": card.reps,
        "state": int(card.state),
        "last_review": _dump_time(card.last_review),
        "step_index": card.step_index,
        "review_logs": [review_log_to_record(log) for log in card.review_logs],
    }


def card_from_record(record: dict[str, Any]) -> Card:
    """
    Rebuild a card from a persisted record.

    Raises:
        KeyError: Required field missing
        ValueError: Unknown state/rating or unparseable timestamp
    """
    step_index = record.get("step_index")
    return Card(
        id=str(record["id"]),
        due=_load_time(record["due"]),
        template_id=record.get("templateId", ""),
        field_values=dict(record.get("fieldValues") or {}),
        s=float(record.get("s", 0.0)),
        d=float(record.get("d", 0.0)),
        lapses=int(record.get("lapses", 0)),
        reps=int(record.get("reps", 0)),
        state=State(record.get("state", State.NEW)),
        last_review=_load_time(record.get("last_review")),
        step_index=int(step_index) if step_index is not None else None,
        review_logs=[review_log_from_record(r) for r in record.get("review_logs", [])],
    )


def deck_to_record(deck: Deck) -> dict[str, Any]:
    return {
        "id": deck.id,
        "name": deck.name,
        "description": deck.description,
        "settings": deck.settings.to_record(),
        "cards": [card_to_record(card) for card in deck.cards],
    }


def deck_from_record(record: dict[str, Any]) -> Deck:
    return Deck(
        id=str(record["id"]),
        name=record["name"],
        description=record.get("description", ""),
        settings=DeckSettings.model_validate(record.get("settings") or {}),
        cards=[card_from_record(c) for c in record.get("cards", [])],
    )


def export_backup(decks: Iterable[Deck], now: Optional[datetime] = None) -> str:
    """
    Serialize decks to a backup JSON document.

    Args:
        decks: Decks to export
        now: Export timestamp (defaults to now, UTC)

    Returns:
        JSON text with `decks`, `version` and `exportDate`
    """
    if now is None:
        now = datetime.now(timezone.utc)

    records = [deck_to_record(deck) for deck in decks]
    logger.info("backup_exported", decks=len(records))
    return json.dumps(
        {
            "decks": records,
            "version": BACKUP_VERSION,
            "exportDate": _dump_time(now),
        },
        indent=2,
    )


def import_backup(text: str) -> list[Deck]:
    """
    Restore decks from a backup JSON document.

    Raises:
        BackupFormatError: Invalid JSON, no `decks` list, or a malformed deck
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise BackupFormatError(f"Backup is not valid JSON: {exc}") from exc

    if not isinstance(data, dict) or not isinstance(data.get("decks"), list):
        raise BackupFormatError("Invalid backup file format: missing decks list")

    try:
        decks = [deck_from_record(record) for record in data["decks"]]
    except (KeyError, TypeError, ValueError, ValidationError) as exc:
        raise BackupFormatError(f"Invalid deck record: {exc}") from exc

    logger.info("backup_imported", decks=len(decks))
    return decks
