"""
Per-actor flow sessions
Which step each user is on, kept in memory with a time-to-live
"""
import asyncio
import time
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Optional

from states import FlowStep


@dataclass(frozen=True)
class FlowSession:
    """One actor's in-progress flow"""
    actor_id: int
    step: FlowStep
    prompt_id: Optional[int] = None
    pending_selection: Optional[str] = None
    updated_at: float = field(default=0.0, compare=False)


class FlowSessionStore:
    """In-memory session map; nothing here survives a restart"""

    def __init__(self, ttl: float = 900, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            ttl: Seconds a session stays valid after its last update
            clock: Time source, monotonic seconds
        """
        self.ttl = ttl
        self.clock = clock
        self.sessions: Dict[int, FlowSession] = {}
        self.lock = asyncio.Lock()

    def _expired(self, session: FlowSession, now: float) -> bool:
        return now - session.updated_at >= self.ttl

    async def get(self, actor_id: int) -> Optional[FlowSession]:
        """Live session for the actor, or None"""
        async with self.lock:
            session = self.sessions.get(actor_id)
            if session is None:
                return None
            if self._expired(session, self.clock()):
                del self.sessions[actor_id]
                return None
            return session

    async def start(self, actor_id: int, step: FlowStep, prompt_id: Optional[int] = None) -> FlowSession:
        """Start a fresh session, replacing whatever the actor had"""
        async with self.lock:
            session = FlowSession(
                actor_id=actor_id,
                step=step,
                prompt_id=prompt_id,
                updated_at=self.clock(),
            )
            self.sessions[actor_id] = session
            return session

    async def advance(
        self,
        actor_id: int,
        step: FlowStep,
        pending_selection: Optional[str] = None
    ) -> Optional[FlowSession]:
        """Move a live session to the next step"""
        async with self.lock:
            session = self.sessions.get(actor_id)
            if session is None:
                return None
            session = replace(
                session,
                step=step,
                pending_selection=pending_selection or session.pending_selection,
                updated_at=self.clock(),
            )
            self.sessions[actor_id] = session
            return session

    async def discard(self, actor_id: int) -> Optional[FlowSession]:
        """Drop the actor's session"""
        async with self.lock:
            return self.sessions.pop(actor_id, None)

    async def prune(self) -> int:
        """Drop every expired session, returns how many were removed"""
        async with self.lock:
            now = self.clock()
            expired = [actor_id for actor_id, s in self.sessions.items() if self._expired(s, now)]
            for actor_id in expired:
                del self.sessions[actor_id]
            return len(expired)
