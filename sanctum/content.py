"""Devotional content capability.

Generated content is decoration: streak and plan mutations never wait on it.
Any generator failure degrades to templated, non-AI content.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Protocol

from sanctum.clock import ClockSource, SystemClock
from sanctum.logger import get_logger


log = get_logger("content")


VERSES: list[dict[str, str]] = [
    {"text": "The Lord is my shepherd; I shall not want.", "reference": "Psalm 23:1"},
    {"text": "Trust in the Lord with all your heart and lean not on your own understanding.", "reference": "Proverbs 3:5"},
    {"text": "For I know the plans I have for you, declares the Lord.", "reference": "Jeremiah 29:11"},
    {"text": "Be strong and courageous. Do not be afraid; do not be discouraged.", "reference": "Joshua 1:9"},
    {"text": "Cast all your anxiety on him because he cares for you.", "reference": "1 Peter 5:7"},
    {"text": "Come to me, all you who are weary and burdened, and I will give you rest.", "reference": "Matthew 11:28"},
    {"text": "But those who hope in the Lord will renew their strength.", "reference": "Isaiah 40:31"},
    {"text": "Do not be anxious about anything, but in every situation, by prayer and petition, present your requests to God.", "reference": "Philippians 4:6"},
    {"text": "The Lord is close to the brokenhearted and saves those who are crushed in spirit.", "reference": "Psalm 34:18"},
    {"text": "Be still, and know that I am God.", "reference": "Psalm 46:10"},
    {"text": "Draw near to God, and he will draw near to you.", "reference": "James 4:8"},
    {"text": "Your word is a lamp for my feet, a light on my path.", "reference": "Psalm 119:105"},
    {"text": "This is the day the Lord has made; let us rejoice and be glad in it.", "reference": "Psalm 118:24"},
]

PRAYER_PROMPTS = [
    "Focus your heart on God.",
    "Speak what is on your mind.",
    "Listen to His still small voice.",
]


class ContentGenerator(Protocol):
    def generate(self, kind: str, context: dict[str, Any]) -> dict[str, Any]:
        ...


class TemplateContentGenerator:
    """Deterministic content that needs no network access.

    Requests without a ``date`` in their context use the clock's today.
    """

    def __init__(self, clock: ClockSource | None = None):
        self.clock = clock or SystemClock()

    def generate(self, kind: str, context: dict[str, Any]) -> dict[str, Any]:
        if kind == "daily_verse":
            return self._verse_for(context.get("date"))
        if kind == "scripture_seal":
            verse = self._verse_for(context.get("date"))
            return {
                "verseText": verse["text"],
                "reference": verse["reference"],
                "prayer": "Lord, I entrust this to You until the day it is opened. Amen.",
            }
        if kind == "prayer_prompts":
            return {"prompts": list(PRAYER_PROMPTS)}
        return {"text": "Rest in His presence."}

    def _verse_for(self, day: date | str | None) -> dict[str, str]:
        if isinstance(day, str):
            day = date.fromisoformat(day)
        if day is None:
            day = self.clock.today()
        return dict(VERSES[day.timetuple().tm_yday % len(VERSES)])


class GuardedContentGenerator:
    """Wraps a primary generator; never raises, never returns empty content."""

    def __init__(self, primary: ContentGenerator | None, fallback: ContentGenerator | None = None):
        self.primary = primary
        self.fallback = fallback or TemplateContentGenerator()

    def generate(self, kind: str, context: dict[str, Any]) -> dict[str, Any]:
        if self.primary is not None:
            try:
                result = self.primary.generate(kind, context)
                if result:
                    return result
                log.warning("content generator returned nothing for %s; using template", kind)
            except Exception as e:
                log.warning("content generator failed for %s: %s; using template", kind, e)
        return self.fallback.generate(kind, context)
