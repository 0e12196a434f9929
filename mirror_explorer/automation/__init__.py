"""Keyboard input helpers for driving the mirrored app."""

from .keymap import KeyFlag, KeyMap, KeyMapping, KeySequence, TypeMethod, TypeSegment, build_type_segments, sequences_for_text

__all__ = [
    "KeyFlag",
    "KeyMap",
    "KeyMapping",
    "KeySequence",
    "TypeMethod",
    "TypeSegment",
    "build_type_segments",
    "sequences_for_text",
]
