"""Tests for sanctum/content.py — templated content and generator fallback."""

from datetime import datetime, timezone

from sanctum.clock import FixedClock
from sanctum.content import VERSES, GuardedContentGenerator, TemplateContentGenerator


class ExplodingGenerator:
    def generate(self, kind, context):
        raise RuntimeError("model unavailable")


class EmptyGenerator:
    def generate(self, kind, context):
        return {}


class CannedGenerator:
    def generate(self, kind, context):
        return {"text": "canned", "reference": "Test 1:1"}


def test_daily_verse_rotates_by_day_of_year():
    gen = TemplateContentGenerator()
    a = gen.generate("daily_verse", {"date": "2026-02-09"})
    b = gen.generate("daily_verse", {"date": "2026-02-10"})
    assert a in VERSES and b in VERSES
    assert a != b
    assert gen.generate("daily_verse", {"date": "2026-02-09"}) == a


def test_scripture_seal_shape():
    seal = TemplateContentGenerator().generate("scripture_seal", {"date": "2026-02-09"})
    assert set(seal) == {"verseText", "reference", "prayer"}


def test_guarded_falls_back_on_exception():
    gen = GuardedContentGenerator(ExplodingGenerator())
    verse = gen.generate("daily_verse", {"date": "2026-02-09"})
    assert verse in VERSES


def test_guarded_falls_back_on_empty_result():
    gen = GuardedContentGenerator(EmptyGenerator())
    assert gen.generate("prayer_prompts", {})["prompts"]


def test_guarded_uses_primary_when_it_works():
    gen = GuardedContentGenerator(CannedGenerator())
    assert gen.generate("daily_verse", {})["text"] == "canned"


def test_guarded_without_primary():
    assert GuardedContentGenerator(None).generate("unknown", {})["text"]


def test_verse_without_date_uses_clock():
    clock = FixedClock(datetime(2026, 2, 10, 12, 0, tzinfo=timezone.utc))
    gen = TemplateContentGenerator(clock)
    assert gen.generate("daily_verse", {}) == gen.generate("daily_verse", {"date": "2026-02-10"})
    clock.advance(days=1)
    assert gen.generate("daily_verse", {}) == gen.generate("daily_verse", {"date": "2026-02-11"})


def test_guarded_fallback_follows_clock():
    clock = FixedClock(datetime(2026, 2, 10, 12, 0, tzinfo=timezone.utc))
    gen = GuardedContentGenerator(ExplodingGenerator(), TemplateContentGenerator(clock))
    assert gen.generate("daily_verse", {}) == TemplateContentGenerator().generate(
        "daily_verse", {"date": "2026-02-10"}
    )
