"""Time tracking session state machine.

Each user has at most one live session, either active or paused. Starting a
session closes the user's previous one into a time entry first. Stopping a
session produces a closed entry whose duration runs from the session start to
the moment it was stopped.
"""

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from .models import (
    TimeEntry,
    TimeEntryFilter,
    TimeEntryUpdate,
    TimeReport,
    TimeSession,
    TimeTrackingSnapshot,
    ensure_utc,
)
from .report import build_report

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, rounded to the nearest minute."""
    return round((end - start).total_seconds() / 60)


class TimeSessionManager:
    """Owns live sessions and closed time entries for a process.

    All state changes happen under one lock, so a start closes the previous
    session completely before any other call sees the user's sessions.
    """

    def __init__(self, clock: Clock | None = None):
        self._clock = clock or utc_now
        self._sessions: dict[str, TimeSession] = {}
        self._entries: list[TimeEntry] = []
        self._lock = threading.RLock()

    def now(self) -> datetime:
        return ensure_utc(self._clock())

    def start_session(
        self,
        issue_number: int,
        repository: str,
        user_id: str,
        description: str | None = None,
    ) -> TimeSession:
        """Start tracking time for a user on an issue.

        Any live session the user already has, on any issue and whether
        active or paused, is closed into a time entry before the new session
        is created.
        """
        with self._lock:
            previous = self._sessions.get(user_id)
            if previous is not None:
                logger.info(
                    f"Stopping session on {previous.repository}#"
                    f"{previous.issue_number} for {user_id} before starting a new one"
                )
                self._close(previous)

            session = TimeSession(
                issue_number=issue_number,
                repository=repository,
                user_id=user_id,
                description=description,
                start_time=self.now(),
                is_active=True,
            )
            self._sessions[user_id] = session
        logger.debug(f"Started session {session.id} on {repository}#{issue_number}")
        return session

    def _find(
        self, issue_number: int, repository: str, user_id: str
    ) -> TimeSession | None:
        session = self._sessions.get(user_id)
        if session is not None and session.matches(issue_number, repository, user_id):
            return session
        return None

    def pause_session(
        self, issue_number: int, repository: str, user_id: str
    ) -> TimeSession | None:
        """Pause the user's active session on the issue, if there is one."""
        with self._lock:
            session = self._find(issue_number, repository, user_id)
            if session is None or not session.is_active:
                return None
            session.is_active = False
            return session

    def resume_session(
        self, issue_number: int, repository: str, user_id: str
    ) -> TimeSession | None:
        """Resume the user's paused session on the issue, if there is one."""
        with self._lock:
            session = self._find(issue_number, repository, user_id)
            if session is None or session.is_active:
                return None
            session.is_active = True
            return session

    def stop_session(
        self,
        issue_number: int,
        repository: str,
        user_id: str,
        description: str | None = None,
    ) -> TimeEntry | None:
        """Stop the user's live session on the issue and record its entry.

        Args:
            description: Replaces the session's description when given

        Returns:
            The closed entry, or None when no matching session exists
        """
        with self._lock:
            session = self._find(issue_number, repository, user_id)
            if session is None:
                return None
            return self._close(session, description)

    def _close(self, session: TimeSession, description: str | None = None) -> TimeEntry:
        with self._lock:
            end_time = self.now()
            entry = TimeEntry(
                issue_number=session.issue_number,
                repository=session.repository,
                user_id=session.user_id,
                description=description or session.description,
                start_time=session.start_time,
                end_time=end_time,
                duration=max(0, minutes_between(session.start_time, end_time)),
                created_at=end_time,
            )
            del self._sessions[session.user_id]
            self._entries.append(entry)
        logger.debug(f"Closed session {session.id} after {entry.duration} minutes")
        return entry

    def add_manual_entry(
        self,
        issue_number: int,
        repository: str,
        user_id: str,
        duration_minutes: int,
        description: str | None = None,
        start_time: datetime | None = None,
        tags: list[str] | None = None,
    ) -> TimeEntry:
        """Record a closed entry without touching live sessions."""
        now = self.now()
        start = ensure_utc(start_time) if start_time else now
        entry = TimeEntry(
            issue_number=issue_number,
            repository=repository,
            user_id=user_id,
            description=description,
            start_time=start,
            end_time=start + timedelta(minutes=duration_minutes),
            duration=duration_minutes,
            tags=tags,
            created_at=now,
        )
        with self._lock:
            self._entries.append(entry)
        return entry

    def get_active_session(self, user_id: str) -> TimeSession | None:
        """The user's live session, active or paused."""
        with self._lock:
            return self._sessions.get(user_id)

    def get_user_sessions(self, user_id: str) -> list[TimeSession]:
        """The user's sessions that are currently active.

        Paused sessions are not included.
        """
        with self._lock:
            return [
                session
                for session in self._sessions.values()
                if session.user_id == user_id and session.is_active
            ]

    def get_time_entry(self, entry_id: str) -> TimeEntry | None:
        with self._lock:
            for entry in self._entries:
                if entry.id == entry_id:
                    return entry
            return None

    def update_time_entry(
        self, entry_id: str, update: TimeEntryUpdate
    ) -> TimeEntry | None:
        """Apply changes to an entry.

        When either time changes, the duration is recomputed from the times.
        When only the duration changes, the end time moves to match it.

        Raises:
            ValueError: If the resulting end time is before the start time
        """
        changes = {
            field: value
            for field, value in update.model_dump(exclude_unset=True).items()
            if value is not None or field == "description"
        }
        with self._lock:
            index = next(
                (i for i, entry in enumerate(self._entries) if entry.id == entry_id),
                None,
            )
            if index is None:
                return None

            entry = self._entries[index]
            start = changes.get("start_time", entry.start_time)
            end = changes.get("end_time", entry.end_time)

            if "start_time" in changes or "end_time" in changes:
                if end < start:
                    raise ValueError("End time must not be before start time")
                changes["duration"] = minutes_between(start, end)
            elif changes.get("duration") is not None:
                changes["end_time"] = start + timedelta(minutes=changes["duration"])

            changes["updated_at"] = self.now()
            updated = entry.model_copy(update=changes)
            self._entries[index] = updated
            return updated

    def delete_time_entry(self, entry_id: str) -> bool:
        with self._lock:
            for i, entry in enumerate(self._entries):
                if entry.id == entry_id:
                    del self._entries[i]
                    return True
            return False

    def get_time_entries(
        self, filter: TimeEntryFilter | None = None
    ) -> list[TimeEntry]:
        """Entries matching the filter, newest start time first."""
        with self._lock:
            entries = [e for e in self._entries if filter is None or filter.matches(e)]
        return sorted(entries, key=lambda entry: entry.start_time, reverse=True)

    def generate_report(
        self,
        start: datetime,
        end: datetime,
        filter: TimeEntryFilter | None = None,
    ) -> TimeReport:
        return build_report(self.get_time_entries(filter), start, end)

    def snapshot(self) -> TimeTrackingSnapshot:
        with self._lock:
            return TimeTrackingSnapshot(
                sessions=[s.model_copy() for s in self._sessions.values()],
                entries=[e.model_copy() for e in self._entries],
            )

    def restore(self, snapshot: TimeTrackingSnapshot) -> None:
        """Replace all state with the contents of a snapshot."""
        sessions = {s.user_id: s.model_copy() for s in snapshot.sessions}
        entries = [e.model_copy() for e in snapshot.entries]
        with self._lock:
            self._sessions = sessions
            self._entries = entries
