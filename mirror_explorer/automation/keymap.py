"""Character to macOS virtual keycode mapping for synthetic keyboard input.

US QWERTY layout. Keycodes are the Carbon ``kVK_*`` values, which are also the
codes accepted by Quartz keyboard events.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Dict, List, Mapping, Optional, Tuple

from ..core.logger import log


class KeyFlag(IntFlag):
    """Modifier flags, valued like the matching Quartz event masks."""

    NONE = 0
    SHIFT = 0x00020000
    OPTION = 0x00080000


@dataclass(frozen=True, slots=True)
class KeyMapping:
    keycode: int
    flags: KeyFlag = KeyFlag.NONE


@dataclass(frozen=True, slots=True)
class KeySequence:
    """Key presses needed to produce one character.

    Plain characters have one step. Dead-key accented characters have two:
    the Option-modified trigger, then the base letter.
    """

    steps: Tuple[KeyMapping, ...]


# ----------------------------------------------------------------------
# Virtual keycodes (Carbon Events.h)
# ----------------------------------------------------------------------
_LETTER_CODES: Dict[str, int] = {
    "a": 0x00, "s": 0x01, "d": 0x02, "f": 0x03, "h": 0x04, "g": 0x05,
    "z": 0x06, "x": 0x07, "c": 0x08, "v": 0x09, "b": 0x0B, "q": 0x0C,
    "w": 0x0D, "e": 0x0E, "r": 0x0F, "y": 0x10, "t": 0x11, "o": 0x1F,
    "u": 0x20, "i": 0x22, "p": 0x23, "l": 0x25, "j": 0x26, "k": 0x28,
    "n": 0x2D, "m": 0x2E,
}

_DIGIT_CODES: Dict[str, int] = {
    "1": 0x12, "2": 0x13, "3": 0x14, "4": 0x15, "6": 0x16,
    "5": 0x17, "9": 0x19, "7": 0x1A, "8": 0x1C, "0": 0x1D,
}

_SHIFTED_DIGITS = dict(zip("!@#$%^&*()", "1234567890"))

KC_EQUAL = 0x18
KC_MINUS = 0x1B
KC_RIGHT_BRACKET = 0x1E
KC_LEFT_BRACKET = 0x21
KC_RETURN = 0x24
KC_QUOTE = 0x27
KC_SEMICOLON = 0x29
KC_BACKSLASH = 0x2A
KC_COMMA = 0x2B
KC_SLASH = 0x2C
KC_PERIOD = 0x2F
KC_TAB = 0x30
KC_SPACE = 0x31
KC_GRAVE = 0x32

# (unshifted, shifted, keycode)
_PUNCTUATION: Tuple[Tuple[str, str, int], ...] = (
    ("-", "_", KC_MINUS),
    ("=", "+", KC_EQUAL),
    ("[", "{", KC_LEFT_BRACKET),
    ("]", "}", KC_RIGHT_BRACKET),
    ("\\", "|", KC_BACKSLASH),
    (";", ":", KC_SEMICOLON),
    ("'", '"', KC_QUOTE),
    ("`", "~", KC_GRAVE),
    (",", "<", KC_COMMA),
    (".", ">", KC_PERIOD),
    ("/", "?", KC_SLASH),
)


def _build_character_map() -> Dict[str, KeyMapping]:
    table: Dict[str, KeyMapping] = {}
    for char, code in _LETTER_CODES.items():
        table[char] = KeyMapping(code)
        table[char.upper()] = KeyMapping(code, KeyFlag.SHIFT)
    for char, code in _DIGIT_CODES.items():
        table[char] = KeyMapping(code)
    for char, digit in _SHIFTED_DIGITS.items():
        table[char] = KeyMapping(_DIGIT_CODES[digit], KeyFlag.SHIFT)
    for plain, shifted, code in _PUNCTUATION:
        table[plain] = KeyMapping(code)
        table[shifted] = KeyMapping(code, KeyFlag.SHIFT)

    table["\n"] = KeyMapping(KC_RETURN)
    table["\r"] = KeyMapping(KC_RETURN)
    table["\t"] = KeyMapping(KC_TAB)
    table[" "] = KeyMapping(KC_SPACE)
    return table


# Dead-key families: trigger keycode -> composed lowercase characters by base letter
_DEAD_KEY_FAMILIES: Tuple[Tuple[int, Dict[str, str]], ...] = (
    # acute, Option+e
    (_LETTER_CODES["e"], {"é": "e", "á": "a", "í": "i", "ó": "o", "ú": "u"}),
    # grave, Option+`
    (KC_GRAVE, {"è": "e", "à": "a", "ì": "i", "ò": "o", "ù": "u"}),
    # umlaut, Option+u
    (_LETTER_CODES["u"], {"ü": "u", "ö": "o", "ä": "a", "ë": "e", "ï": "i", "ÿ": "y"}),
    # circumflex, Option+i
    (_LETTER_CODES["i"], {"ê": "e", "â": "a", "î": "i", "ô": "o", "û": "u"}),
    # tilde, Option+n
    (_LETTER_CODES["n"], {"ñ": "n", "ã": "a", "õ": "o"}),
)


def _build_dead_key_map() -> Dict[str, KeySequence]:
    table: Dict[str, KeySequence] = {}
    for trigger_code, family in _DEAD_KEY_FAMILIES:
        trigger = KeyMapping(trigger_code, KeyFlag.OPTION)
        for composed, base in family.items():
            code = _LETTER_CODES[base]
            table[composed] = KeySequence((trigger, KeyMapping(code)))
            # "ÿ".upper() is "Ÿ", a single code point like the others
            table[composed.upper()] = KeySequence((trigger, KeyMapping(code, KeyFlag.SHIFT)))

    table["ç"] = KeySequence((KeyMapping(_LETTER_CODES["c"], KeyFlag.OPTION),))
    table["Ç"] = KeySequence((KeyMapping(_LETTER_CODES["c"], KeyFlag.OPTION | KeyFlag.SHIFT),))
    return table


class KeyMap:
    """US QWERTY lookup table. Immutable after import."""

    _characters: Dict[str, KeyMapping] = _build_character_map()
    _dead_keys: Dict[str, KeySequence] = _build_dead_key_map()

    @classmethod
    def lookup(cls, char: str) -> Optional[KeyMapping]:
        """Direct mapping for ``char``, or None (dead-key characters included)."""
        return cls._characters.get(char)

    @classmethod
    def lookup_sequence(cls, char: str) -> Optional[KeySequence]:
        """Full key sequence for ``char``, or None when it cannot be typed."""
        mapping = cls._characters.get(char)
        if mapping is not None:
            return KeySequence((mapping,))
        return cls._dead_keys.get(char)

    @classmethod
    def count(cls) -> int:
        """Number of directly mapped characters."""
        return len(cls._characters)

    @classmethod
    def dead_key_count(cls) -> int:
        return len(cls._dead_keys)


# ----------------------------------------------------------------------
# Text segmentation
# ----------------------------------------------------------------------
class TypeMethod(Enum):
    KEY_EVENT = "key_event"
    SKIP = "skip"


@dataclass(frozen=True, slots=True)
class TypeSegment:
    text: str
    method: TypeMethod


def build_type_segments(text: str, substitutions: Optional[Mapping[str, str]] = None) -> List[TypeSegment]:
    """Split ``text`` into runs that can be typed and runs that must be skipped.

    ``substitutions`` maps characters of the active keyboard layout to their
    US QWERTY equivalent. Typeable runs hold the substituted characters, skip
    runs hold the original ones.
    """
    substitutions = substitutions or {}
    segments: List[TypeSegment] = []
    current: List[str] = []
    current_method = TypeMethod.KEY_EVENT

    for char in text:
        substituted = substitutions.get(char, char)
        if KeyMap.lookup_sequence(substituted) is not None:
            method, output = TypeMethod.KEY_EVENT, substituted
        else:
            method, output = TypeMethod.SKIP, char

        if method is not current_method:
            if current:
                segments.append(TypeSegment("".join(current), current_method))
            current = []
            current_method = method
        current.append(output)

    if current:
        segments.append(TypeSegment("".join(current), current_method))
    return segments


def sequences_for_text(
    text: str, substitutions: Optional[Mapping[str, str]] = None
) -> Tuple[List[KeySequence], str]:
    """Key sequences to replay for ``text`` plus the characters that were skipped."""
    sequences: List[KeySequence] = []
    skipped: List[str] = []
    for segment in build_type_segments(text, substitutions):
        if segment.method is TypeMethod.SKIP:
            skipped.append(segment.text)
            continue
        for char in segment.text:
            sequence = KeyMap.lookup_sequence(char)
            if sequence is not None:
                sequences.append(sequence)

    skipped_text = "".join(skipped)
    if skipped_text:
        log.debug(f"Skipping {len(skipped_text)} character(s) with no key mapping")
    return sequences, skipped_text
