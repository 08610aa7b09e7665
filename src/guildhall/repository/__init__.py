"""Disk persistence for guild campaigns."""

from guildhall.repository.save_slots import (
    InvalidSaveNameError,
    SaveSlotRepository,
    normalize_save_name,
)

__all__ = ["InvalidSaveNameError", "SaveSlotRepository", "normalize_save_name"]
