"""Queue builders for study and cram sessions."""

from philia.session_builders.pool_types import QueuePools
from philia.session_builders.pool_utils import requeue_card, start_of_day
from philia.session_builders.study_builder import (
    build_queue_pools,
    build_study_queue,
)
from philia.session_builders.cram_builder import build_cram_queue

__all__ = [
    "QueuePools",
    "requeue_card",
    "start_of_day",
    "build_queue_pools",
    "build_study_queue",
    "build_cram_queue",
]
