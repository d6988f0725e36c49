import pytest

from transcript_finder.acquisition.language import (
    UNKNOWN,
    LanguagePrioritizer,
    normalize_tag,
    prioritize,
    score_languages,
)
from transcript_finder.acquisition.schema import AUTOMATIC, LanguagePriority, VideoMetadata


def meta(**kwargs) -> VideoMetadata:
    return VideoMetadata(video_id="abc12345678", **kwargs)


SPANISH = meta(
    title="Cómo hacer pan casero en casa",
    description="En este video te enseño la receta más fácil para que el pan quede muy esponjoso. ¿Listos?",
)
ENGLISH = meta(
    title="How to bake bread at home",
    description="In this video you will learn what makes the crust crisp and why the dough is so soft. "
    "This is the easiest recipe for your kitchen.",
)


def test_declared_language_is_the_sole_basis():
    assert prioritize(meta(default_language="en")).languages == ("en", AUTOMATIC)


def test_declared_audio_language_wins_over_content_language():
    priority = prioritize(meta(default_language="en", default_audio_language="es-419"))
    assert priority.languages == ("es", AUTOMATIC)


def test_declared_primary_language_never_falls_back_to_secondary():
    priority = prioritize(meta(default_language="es", title=ENGLISH.title, description=ENGLISH.description))
    assert "en" not in priority.languages


def test_declared_other_language_is_kept():
    assert prioritize(meta(default_audio_language="fr-CA")).languages == ("fr", AUTOMATIC)


def test_heuristic_detects_primary_language():
    assert prioritize(SPANISH).languages == ("es", AUTOMATIC)


def test_heuristic_detects_secondary_language():
    assert prioritize(ENGLISH).languages == ("en", AUTOMATIC)


def test_low_signal_is_unknown():
    priority = prioritize(meta(title="Vlog #12", description="2024"))
    assert priority.languages == (AUTOMATIC, "es", "en")


def test_tie_is_unknown():
    prioritizer = LanguagePrioritizer(scorer=lambda text: {"es": 5, "en": 4})
    assert prioritizer.detect(SPANISH) == UNKNOWN


def test_excerpt_is_bounded():
    seen = []

    def scorer(text):
        seen.append(text)
        return {}

    LanguagePrioritizer(scorer=scorer).prioritize(meta(title="t", description="x" * 5000))
    assert len(seen[0]) == 500


def test_scorer_is_swappable():
    prioritizer = LanguagePrioritizer(scorer=lambda text: {"es": 0, "en": 50})
    assert prioritizer.prioritize(SPANISH).languages == ("en", AUTOMATIC)


@pytest.mark.parametrize("metadata", [SPANISH, ENGLISH, meta(), meta(default_language="es"), meta(default_language="und")])
def test_priority_is_deterministic_and_well_formed(metadata):
    first = prioritize(metadata)
    second = prioritize(metadata)
    assert first == second
    assert len(set(first.languages)) == len(first.languages)
    assert first.languages.count(AUTOMATIC) == 1


def test_priority_rejects_duplicates_and_empty():
    with pytest.raises(ValueError):
        LanguagePriority(languages=("es", "es"))
    with pytest.raises(ValueError):
        LanguagePriority(languages=(AUTOMATIC, AUTOMATIC))
    with pytest.raises(ValueError):
        LanguagePriority(languages=())


def test_score_counts_words_and_diacritics():
    scores = score_languages("¿Qué es esto? The cat and the dog")
    assert scores["es"] >= 2
    assert scores["en"] == 3


@pytest.mark.parametrize("tag, expected", [("en-US", "en"), ("ES", "es"), ("pt_BR", "pt"), ("und", None), ("", None), (None, None)])
def test_normalize_tag(tag, expected):
    assert normalize_tag(tag) == expected
