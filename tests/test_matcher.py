"""Tests du moteur de vérification."""

import pytest

from reviewmatch.config import MatchConfig
from reviewmatch.matching.matcher import ReviewMatcher, eligible_reviews, sort_results
from reviewmatch.matching.schema import ExternalReview, GeneratedReview, MatchResult

SEVEN = "alpha bravo charlie delta echo foxtrot golf"


@pytest.fixture
def matcher() -> ReviewMatcher:
    return ReviewMatcher(MatchConfig())


def gen(customer_id: str, text: str, stars: int | None = 5, submitted: bool = True) -> GeneratedReview:
    return GeneratedReview(customer_id=customer_id, text=text, stars=stars, submitted_to_marketplace=submitted)


def test_classify_boundaries(matcher: ReviewMatcher) -> None:
    assert matcher.classify(0.7) == "confirmed"
    assert matcher.classify(1.0) == "confirmed"
    assert matcher.classify(0.6999) == "probable"
    assert matcher.classify(0.4) == "probable"
    assert matcher.classify(0.3999) == "not_found"
    assert matcher.classify(0.0) == "not_found"


def test_threshold_exactly_070_is_confirmed(matcher: ReviewMatcher) -> None:
    external = [ExternalReview(text=SEVEN + " hotel india juliet")]
    results = matcher.run([gen("c1", SEVEN)], external)
    assert results[0].score == 0.7
    assert results[0].status == "confirmed"


def test_threshold_exactly_040_is_probable(matcher: ReviewMatcher) -> None:
    external = [ExternalReview(text="alpha bravo charlie delta echo")]
    results = matcher.run([gen("c1", "alpha bravo")], external)
    assert results[0].score == 0.4
    assert results[0].status == "probable"


def test_below_040_is_not_found(matcher: ReviewMatcher) -> None:
    external = [ExternalReview(text="alpha bravo charlie delta echo foxtrot")]
    results = matcher.run([gen("c1", "alpha bravo")], external)
    assert results[0].status == "not_found"
    assert results[0].best_match is not None


def test_end_to_end_goat_stand(matcher: ReviewMatcher) -> None:
    review = gen("c1", "This stand is sturdy and easy to assemble for my goats", stars=5)
    external = [
        ExternalReview(text="Terrible hay feeder, broke quickly", rating=1),
        ExternalReview(text="Sturdy stand, easy to assemble, my goats love it", rating=5),
    ]
    results = matcher.run([review], external)
    r = results[0]
    assert r.score > 0.4
    assert r.status in ("probable", "confirmed")
    assert r.best_match is external[1]
    assert r.stars_match is True


def test_empty_external_set(matcher: ReviewMatcher) -> None:
    results = matcher.run([gen("c1", "great stand"), gen("c2", "solid build")], [])
    assert len(results) == 2
    for r in results:
        assert r.status == "not_found"
        assert r.score == 0.0
        assert r.best_match is None
        assert r.stars_match is None


def test_no_overlap_has_no_best_match(matcher: ReviewMatcher) -> None:
    results = matcher.run([gen("c1", "great stand")], [ExternalReview(text="terrible feeder")])
    assert results[0].best_match is None
    assert results[0].score == 0.0


def test_unsubmitted_reviews_excluded(matcher: ReviewMatcher) -> None:
    text = "Sturdy stand, easy to assemble"
    results = matcher.run(
        [gen("hidden", text, submitted=False), gen("shown", text)],
        [ExternalReview(text=text)],
    )
    assert [r.generated_review.customer_id for r in results] == ["shown"]


def test_empty_text_excluded() -> None:
    reviews = [gen("a", ""), gen("b", "   "), gen("c", "ok review text")]
    assert [g.customer_id for g in eligible_reviews(reviews)] == ["b", "c"]


def test_whitespace_text_reported_not_found(matcher: ReviewMatcher) -> None:
    """Un avis fait d'espaces est vérifié : aucun mot, donc non trouvé."""
    results = matcher.run([gen("ws", "   ")], [ExternalReview(text="great goat stand")])
    assert len(results) == 1
    assert results[0].status == "not_found"
    assert results[0].score == 0
    assert results[0].best_match is None


def test_tie_keeps_first_encountered(matcher: ReviewMatcher) -> None:
    first = ExternalReview(text="great goat stand", rating=4)
    second = ExternalReview(text="great goat stand", rating=5)
    results = matcher.run([gen("c1", "great goat stand")], [first, second])
    assert results[0].best_match is first
    assert results[0].stars_match is False


def test_stars_match_unknown_without_rating(matcher: ReviewMatcher) -> None:
    results = matcher.run([gen("c1", "great goat stand")], [ExternalReview(text="great goat stand")])
    assert results[0].stars_match is None
    assert results[0].stars_match_label == "unknown"


def test_stars_match_unknown_without_stars(matcher: ReviewMatcher) -> None:
    results = matcher.run(
        [gen("c1", "great goat stand", stars=None)],
        [ExternalReview(text="great goat stand", rating=5)],
    )
    assert results[0].stars_match is None


def test_each_review_gets_global_best(matcher: ReviewMatcher) -> None:
    external = [
        ExternalReview(text="wheels feeder bowl"),
        ExternalReview(text="adjustable headpiece nigerian dwarf"),
    ]
    results = matcher.run(
        [gen("w", "wheels and feeder bowl"), gen("h", "adjustable headpiece for nigerian dwarf")],
        external,
    )
    best = {r.generated_review.customer_id: r.best_match for r in results}
    assert best["w"] is external[0]
    assert best["h"] is external[1]


def test_results_sorted_by_status_then_score(matcher: ReviewMatcher) -> None:
    external = [ExternalReview(text=SEVEN + " hotel india juliet")]
    reviews = [
        gen("none", "zulu yankee"),
        gen("probable", "alpha bravo charlie delta"),  # 4/10
        gen("confirmed", SEVEN),  # 7/10
        gen("perfect", SEVEN + " hotel india juliet"),  # 10/10
    ]
    results = matcher.run(reviews, external)
    assert [r.generated_review.customer_id for r in results] == ["perfect", "confirmed", "probable", "none"]


def test_sort_results_stable_for_equal_scores() -> None:
    a = MatchResult(gen("a", "x"), None, 0.0, "not_found")
    b = MatchResult(gen("b", "y"), None, 0.0, "not_found")
    assert sort_results([a, b]) == [a, b]


def test_custom_thresholds() -> None:
    matcher = ReviewMatcher(MatchConfig(confirmed_threshold=0.5, probable_threshold=0.2))
    assert matcher.classify(0.5) == "confirmed"
    assert matcher.classify(0.25) == "probable"


def test_generator_input(matcher: ReviewMatcher) -> None:
    results = matcher.run((g for g in [gen("c1", "great goat stand")]), [ExternalReview(text="great goat stand")])
    assert results[0].status == "confirmed"
