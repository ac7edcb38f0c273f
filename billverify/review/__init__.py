"""Post-pipeline review actions (approve, write off, confirm, split)."""

from billverify.review.service import (
    apply_split,
    approve_all,
    set_review_status,
    toggle_approval,
    toggle_write_off,
    update_entry,
)

__all__ = [
    "apply_split",
    "approve_all",
    "set_review_status",
    "toggle_approval",
    "toggle_write_off",
    "update_entry",
]
