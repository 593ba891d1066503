"""Core module - shared state and helper functions."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Optional

from quiz.config import get_settings

if TYPE_CHECKING:
    from agentfs_sdk import AgentFS

logger = logging.getLogger(__name__)

# Global AgentFS instance (KV store used by QuizStore)
agentfs: Optional[AgentFS] = None

# Serializa escritas read-modify-write no KV (ids e definicoes de quiz)
store_lock: Optional[asyncio.Lock] = None


async def get_agentfs() -> AgentFS:
    """Get AgentFS instance, opening it on first use."""
    global agentfs

    if agentfs is None:
        from agentfs_sdk import AgentFS, AgentFSOptions

        agentfs_id = get_settings().agentfs_id
        agentfs = await AgentFS.open(AgentFSOptions(id=agentfs_id))
        logger.info(f"AgentFS aberto: {agentfs_id}")

    return agentfs


def get_store_lock() -> asyncio.Lock:
    """Get the lock shared by every QuizStore of this process."""
    global store_lock

    if store_lock is None:
        store_lock = asyncio.Lock()

    return store_lock


async def cleanup():
    """Cleanup resources on shutdown."""
    global agentfs, store_lock

    if agentfs is not None:
        try:
            await agentfs.close()
            logger.info("AgentFS closed!")
        except Exception as e:
            logger.warning(f"Error closing agentfs: {e}")
        agentfs = None
    store_lock = None
