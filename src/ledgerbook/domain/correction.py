"""Entry correction workflow: supersede a posted entry with a replacement."""

from datetime import date, datetime, timedelta, UTC
from typing import Optional, Sequence

from ledgerbook.config import LedgerSettings, load_settings
from ledgerbook.database.base import Database
from ledgerbook.domain.currency import Number
from ledgerbook.domain.entities import EditWindow, JournalEntry, ProposedMovement
from ledgerbook.domain.errors import AlreadySuperseded, EntryLocked
from ledgerbook.domain.journal import Clock, JournalService, utc_now
from ledgerbook.logging_config import get_logger

logger = get_logger("correction")


def _as_utc(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were stored as UTC.
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


class CorrectionService:
    """Service for correcting posted entries.

    A correction never edits rows in place: the original is marked
    superseded and a replacement with a new number points back to it.
    """

    def __init__(
        self,
        db: Database,
        settings: Optional[LedgerSettings] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize correction service.

        Args:
            db: Database instance
            settings: Ledger settings (defaults to load_settings())
            clock: Callable returning the current UTC time
        """
        self.db = db
        self.settings = settings or load_settings()
        self.clock = clock or utc_now
        self.journal = JournalService(db, self.settings, self.clock)

    def _window_for(self, entry: JournalEntry, override: bool) -> EditWindow:
        window_days = self.settings.correction_window_days
        elapsed = self.clock() - _as_utc(entry.created_at)
        days_elapsed = max(elapsed.days, 0)

        if override:
            return EditWindow(entry.is_posted, days_elapsed, None, window_days)

        within = elapsed <= timedelta(days=window_days)
        return EditWindow(
            editable=entry.is_posted and within,
            days_elapsed=days_elapsed,
            days_remaining=max(window_days - days_elapsed, 0) if within else 0,
            window_days=window_days,
        )

    def edit_window(self, entry_id: int, override: bool = False) -> EditWindow:
        """Report whether an entry can still be corrected.

        Args:
            entry_id: Journal entry ID
            override: Administrator override; ignores the time window

        Raises:
            NotFoundError: If entry not found
        """
        return self._window_for(self.journal.get_entry(entry_id), override)

    def correct_entry(
        self,
        entry_id: int,
        movements: Sequence[ProposedMovement],
        entry_date: Optional[date] = None,
        description: Optional[str] = None,
        notes: Optional[str] = None,
        exchange_rate: Optional[Number] = None,
        override: bool = False,
    ) -> JournalEntry:
        """Replace a posted entry with corrected movements.

        Header fields that are not given are copied from the original.

        Args:
            entry_id: ID of the entry to correct
            movements: Replacement movements, validated like a new entry
            entry_date: Optional new entry date
            description: Optional new description
            notes: Optional new notes
            exchange_rate: Optional new entry-level rate
            override: Administrator override of the correction window

        Returns:
            The replacement JournalEntry

        Raises:
            NotFoundError: If entry not found
            AlreadySuperseded: If the entry was already corrected
            EntryLocked: If the correction window has passed and override is False
            ValidationError: If the replacement is invalid or unbalanced
        """
        original = self.journal.get_entry(entry_id)
        if not original.is_posted:
            raise AlreadySuperseded(original.number)

        window = self._window_for(original, override)
        if not window.editable:
            raise EntryLocked(original.number, window.days_elapsed, window.window_days)

        replacement = self.journal.prepare_entry(
            entry_date=entry_date or original.entry_date,
            description=description if description is not None else original.description,
            movements=movements,
            notes=notes if notes is not None else original.notes,
            exchange_rate=exchange_rate if exchange_rate is not None else original.exchange_rate,
            kind=original.kind,
        )
        corrected = self.db.supersede_entry(original.id, replacement)
        logger.info(
            "Journal entry superseded",
            extra={"original": original.number, "replacement": corrected.number, "override": override},
        )
        return corrected

    def history(self, entry_id: int) -> list[JournalEntry]:
        """Return every version of an entry, oldest first.

        Raises:
            NotFoundError: If entry not found
        """
        entry = self.journal.get_entry(entry_id)
        while entry.supersedes_id is not None:
            entry = self.journal.get_entry(entry.supersedes_id)

        chain = [entry]
        while entry.superseded_by_id is not None:
            entry = self.journal.get_entry(entry.superseded_by_id)
            chain.append(entry)
        return chain
