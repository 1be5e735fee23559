"""
Classification of runtime diagnostic text.

The docker CLI reports failures only as free text on stderr, so the kind of a
failure is recovered by case-insensitive substring matching against a phrase
table. The first matching phrase wins; unmatched text falls back to the
default kind chosen by the calling operation.

=====================================  =======================  ==========================
Phrase                                 Kind                     Applies to
=====================================  =======================  ==========================
``no such container``                  ContainerNotFound        every operation but run
``no such object``                     ContainerNotFound        every operation but run
``cannot connect to the docker daemon``  RuntimeCommandFailed   inspect, remove, logs, list
``is the docker daemon running``       RuntimeCommandFailed     inspect, remove, logs, list
=====================================  =======================  ==========================

``run`` matches no phrase at all: any non-zero exit is ``Unexpected``, and
only a missing binary counts as the runtime being unavailable. ``start`` and
``stop`` match only the not-found phrases.

Nothing outside :mod:`lightshuttle.core.runtime` should match on runtime text.
"""

from __future__ import annotations

from typing import Tuple, Type

from lightshuttle.core.errors import (
    ContainerNotFound,
    LightShuttleError,
    RuntimeCommandFailed,
    Unexpected,
)

PhraseTable = Tuple[Tuple[str, Type[LightShuttleError]], ...]

NOT_FOUND_PHRASES: PhraseTable = (
    ("no such container", ContainerNotFound),
    ("no such object", ContainerNotFound),
)

DAEMON_DOWN_PHRASES: PhraseTable = (
    ("cannot connect to the docker daemon", RuntimeCommandFailed),
    ("is the docker daemon running", RuntimeCommandFailed),
)

PHRASE_TABLE: PhraseTable = NOT_FOUND_PHRASES + DAEMON_DOWN_PHRASES


def classify_failure(
    diagnostic: str,
    default: Type[LightShuttleError] = Unexpected,
    phrases: PhraseTable = PHRASE_TABLE,
) -> LightShuttleError:
    """Turn runtime stderr into an error instance carrying the trimmed text."""
    text = (diagnostic or "").strip()
    lowered = text.lower()
    for phrase, kind in phrases:
        if phrase in lowered:
            return kind(text or None)
    return default(text or None)


__all__ = [
    "DAEMON_DOWN_PHRASES",
    "NOT_FOUND_PHRASES",
    "PHRASE_TABLE",
    "PhraseTable",
    "classify_failure",
]
