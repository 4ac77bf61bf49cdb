"""Snapshot persistence."""

from .snapshot import from_dict, load_snapshot, save_snapshot, to_dict

__all__ = ['to_dict', 'from_dict', 'save_snapshot', 'load_snapshot']
