"""Utility functions for familypoints."""

from familypoints.utils.byte_format import format_bytes
from familypoints.utils.clock import cutoff_ms, new_id, now_ms
from familypoints.utils.resolver import resolve_reward_item, resolve_score_item, resolve_user

__all__ = [
    "format_bytes",
    "cutoff_ms",
    "new_id",
    "now_ms",
    "resolve_reward_item",
    "resolve_score_item",
    "resolve_user",
]
