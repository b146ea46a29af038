import pytest

from skillgap.services.reconciliation import (
    UNRATED,
    GapSignal,
    Rating,
    ReviewNavigator,
    SkillReview,
    apply_expectation,
    apply_manager_rating,
    group_sections,
    merge_expectation,
    reconcile,
    skills_to_review,
    summarize,
    to_persistable,
)
from skillgap.services.taxonomy import OTHER, SkillTaxonomy


def make_response(ratings=None, selected=None, **review):
    ratings = ratings or {}
    response = {
        "id": "r1",
        "selected_skills": list(ratings) if selected is None else selected,
        "skill_ratings": [{"skill": s, "rating": r} for s, r in ratings.items()],
        "manager_ratings": [],
        "company_expectations": [],
        "rating_gaps": [],
        "overall_manager_review": None,
    }
    response.update(review)
    return response

def by_skill(reviews):
    return {r.skill: r for r in reviews}


# --- Rating ---

def test_rating_tolerant_conversion():
    assert Rating.of(None) is UNRATED
    assert Rating.of(0) is UNRATED
    assert Rating.of(-2) is UNRATED
    assert Rating.of("abc") is UNRATED
    assert Rating.of(True) is UNRATED
    assert Rating.of(7) == Rating(5)
    assert Rating.of("3") == Rating(3)

def test_rating_constructor_enforces_bounds():
    with pytest.raises(ValueError):
        Rating(0)
    with pytest.raises(ValueError):
        Rating(6)
    assert Rating(1).is_rated
    assert UNRATED.as_int() == 0
    assert repr(UNRATED) == "UNRATED"

def test_rating_rounds_fractions_half_up():
    assert Rating.of(4.9) == Rating(5)
    assert Rating.of(4.4) == Rating(4)
    assert Rating.of(2.5) == Rating(3)
    assert Rating.of("3.6") == Rating(4)
    assert Rating.of(0.4) is UNRATED
    assert Rating.of(float("nan")) is UNRATED


# --- Build step ---

def test_unreviewed_response_has_no_gaps(taxonomy):
    reviews = by_skill(reconcile(make_response({"Python": 4, "SQL": 2}), taxonomy))

    assert reviews["Python"].expectation == Rating(4)
    assert reviews["SQL"].expectation == Rating(2)
    for review in reviews.values():
        assert review.manager_rating is UNRATED
        assert review.gap is None
        assert review.gap_signal == GapSignal.NOT_RATED

def test_manager_rating_computes_gap(taxonomy):
    reviews = reconcile(make_response({"Python": 4, "SQL": 2}), taxonomy)
    reviews = by_skill(apply_manager_rating(reviews, "Python", "programming", 5))

    assert reviews["Python"].gap == 1
    assert reviews["Python"].gap_signal == GapSignal.EXCEEDS
    assert reviews["SQL"].gap is None
    assert reviews["SQL"].gap_signal == GapSignal.NOT_RATED

def test_editing_completed_review_keeps_untouched_expectations(taxonomy):
    response = make_response(
        {"Python": 4, "SQL": 2},
        manager_ratings=[{"skill": "Python", "rating": 5}],
        company_expectations=[{"skill": "Python", "expectation": 4}, {"skill": "SQL", "expectation": 3}],
        rating_gaps=[{"skill": "Python", "gap": 1}],
    )
    reviews = reconcile(response, taxonomy)
    assert by_skill(reviews)["Python"].manager_rating == Rating(5)

    reviews = apply_manager_rating(reviews, "Python", "programming", 3)
    python = by_skill(reviews)["Python"]
    assert python.gap == -1
    assert python.gap_signal == GapSignal.BELOW

    payload = to_persistable(reviews, "Solid fundamentals")
    assert payload.manager_ratings == [{"skill": "Python", "rating": 3}]
    assert payload.rating_gaps == [{"skill": "Python", "gap": -1}]
    assert {"skill": "SQL", "expectation": 3} in payload.company_expectations

def test_skill_outside_taxonomy_falls_back_to_other():
    taxonomy = SkillTaxonomy.from_dict({
        "sections": [{"key": "programming", "title": "Programming", "skills": ["Python"]}],
        "expectations": {"Python": 4},
    })
    reviews = by_skill(reconcile(make_response({"Python": 4, "Rust": 3}), taxonomy))

    assert reviews["Rust"].section == OTHER
    assert reviews["Rust"].expectation == Rating(3)

def test_selected_and_rated_skills_are_unioned_once(taxonomy):
    response = make_response({"Python": 4, "SQL": 2}, selected=["React", "Python", "React"])
    assert skills_to_review(response) == ["React", "Python", "SQL"]

    reviews = reconcile(response, taxonomy)
    assert [r.skill for r in reviews].count("Python") == 1
    assert by_skill(reviews)["React"].self_rating is UNRATED
    # Unrated self-assessment falls back to the taxonomy default
    assert by_skill(reviews)["React"].expectation == Rating(4)

def test_records_follow_taxonomy_order_then_other(taxonomy):
    response = make_response({"Zig": 2, "React": 3, "SQL": 2, "Cobol": 1, "Python": 5})
    reviews = reconcile(response, taxonomy)

    assert [r.skill for r in reviews] == ["Python", "SQL", "React", "Zig", "Cobol"]
    assert [r.section for r in reviews] == ["programming", "programming", "frontend", OTHER, OTHER]

def test_expectation_precedence():
    assert merge_expectation(5, 2, Rating(1)) == Rating(5)
    assert merge_expectation(None, 2, Rating(1)) == Rating(2)
    assert merge_expectation(0, None, Rating(1)) == Rating(1)
    assert merge_expectation(None, None, UNRATED) is UNRATED

def test_manager_ratings_ignored_until_review_completed(taxonomy):
    # Expectations can exist without any manager rating; that is not a completed review.
    response = make_response({"Python": 4}, company_expectations=[{"skill": "Python", "expectation": 2}])
    python = by_skill(reconcile(response, taxonomy))["Python"]
    assert python.expectation == Rating(2)
    assert python.manager_rating is UNRATED

def test_reconcile_is_idempotent(taxonomy):
    response = make_response(
        {"Python": 4, "SQL": 2, "Go": 3},
        manager_ratings=[{"skill": "SQL", "rating": 4}],
    )
    assert reconcile(response, taxonomy) == reconcile(response, taxonomy)

def test_persisted_review_reconciles_back(taxonomy):
    response = make_response({"Python": 4, "SQL": 2, "React": 1})
    reviews = reconcile(response, taxonomy)
    reviews = apply_manager_rating(reviews, "Python", "programming", 3)
    reviews = apply_manager_rating(reviews, "React", "frontend", 2)
    reviews = apply_expectation(reviews, "SQL", "programming", 5)

    saved = dict(response, **to_persistable(reviews, "ok").to_dict())
    assert reconcile(saved, taxonomy) == reviews

def test_self_unrated_skill_reports_missing_self_assessment(taxonomy):
    reviews = reconcile(make_response({"Python": 4}, selected=["Python", "Docker"]), taxonomy)
    docker = by_skill(apply_manager_rating(reviews, "Docker", "dataEngineering", 3))["Docker"]

    assert docker.gap == 3
    assert docker.gap_signal == GapSignal.NO_SELF_ASSESSMENT

def test_matching_rating_signal():
    review = SkillReview("Python", "programming", Rating(3), Rating(3), Rating(3))
    assert review.gap == 0
    assert review.gap_signal == GapSignal.MATCHES


# --- Edit step ---

def test_edit_on_unknown_skill_is_a_noop(taxonomy):
    reviews = reconcile(make_response({"Python": 4}), taxonomy)
    assert apply_manager_rating(reviews, "Java", "programming", 5) == reviews
    assert apply_manager_rating(reviews, "Python", "frontend", 5) == reviews

def test_manager_rating_is_clamped_or_cleared(taxonomy):
    reviews = reconcile(make_response({"Python": 4}), taxonomy)

    rated = apply_manager_rating(reviews, "Python", "programming", 9)
    assert rated[0].manager_rating == Rating(5)

    cleared = apply_manager_rating(rated, "Python", "programming", 0)
    assert cleared[0].manager_rating is UNRATED
    assert cleared[0].gap is None

def test_edits_do_not_mutate_input(taxonomy):
    reviews = reconcile(make_response({"Python": 4}), taxonomy)
    apply_manager_rating(reviews, "Python", "programming", 2)
    assert reviews[0].manager_rating is UNRATED

def test_non_positive_expectation_is_ignored(taxonomy):
    reviews = reconcile(make_response({"Python": 4}), taxonomy)
    assert apply_expectation(reviews, "Python", "programming", 0) == reviews
    assert apply_expectation(reviews, "Python", "programming", 1)[0].expectation == Rating(1)


# --- Persist step ---

def test_to_persistable_lists_only_rated_skills(taxonomy):
    reviews = reconcile(make_response({"Python": 4, "SQL": 2}), taxonomy)
    reviews = apply_manager_rating(reviews, "SQL", "programming", 1)
    payload = to_persistable(reviews, None)

    assert payload.manager_ratings == [{"skill": "SQL", "rating": 1}]
    assert payload.rating_gaps == [{"skill": "SQL", "gap": -1}]
    assert payload.company_expectations == [
        {"skill": "Python", "expectation": 4},
        {"skill": "SQL", "expectation": 2},
    ]
    assert payload.overall_manager_review == ""

def test_to_persistable_skips_unrated_expectation():
    taxonomy = SkillTaxonomy.from_dict({"sections": []})
    reviews = reconcile(make_response({}, selected=["Go"]), taxonomy)
    assert to_persistable(reviews, "").company_expectations == []

def test_summary(taxonomy):
    reviews = reconcile(make_response({"Python": 4, "SQL": 2}), taxonomy)
    reviews = apply_manager_rating(reviews, "Python", "programming", 4)

    pending = summarize(reviews, "   ")
    assert (pending.total_assessed, pending.manager_rated, pending.overall_status) == (2, 1, "Pending")
    assert summarize(reviews, "Good progress").overall_status == "Complete"


# --- Grouping & navigation ---

def test_group_sections_skips_empty_sections(taxonomy):
    reviews = reconcile(make_response({"React": 3, "Python": 4, "Cobol": 2}), taxonomy)
    groups = group_sections(reviews, taxonomy)

    assert [g.key for g in groups] == ["programming", "frontend", OTHER]
    assert groups[-1].title == "Other / Misc"
    assert [r.skill for r in groups[1].reviews] == ["React"]

def test_navigator_steps_and_progress():
    navigator = ReviewNavigator(["programming", "frontend", "other"])
    assert navigator.total_steps == 4
    assert navigator.active_section == "programming"
    assert navigator.progress == 25

    navigator.next()
    navigator.next()
    assert navigator.active_section == "other"
    assert navigator.progress == 75

    navigator.next()
    assert navigator.is_review_step
    assert navigator.active_section is None
    assert navigator.next() == 3
    assert navigator.progress == 100

def test_navigator_clamps_and_rounds():
    navigator = ReviewNavigator(["a", "b"])
    assert navigator.previous() == 0
    assert navigator.go_to(10) == 2
    assert navigator.go_to(-5) == 0
    # 1/3 -> 33.33 rounds to 33
    assert navigator.progress == 33
    navigator.next()
    # 2/3 -> 66.67 rounds to 67
    assert navigator.progress == 67

def test_completed_review_opens_on_summary(taxonomy):
    reviews = reconcile(make_response({"Python": 4}), taxonomy)
    navigator = ReviewNavigator.for_reviews(reviews, taxonomy, completed=True)
    assert navigator.is_review_step
    assert navigator.section_keys == ["programming"]

def test_navigator_with_no_sections():
    navigator = ReviewNavigator([])
    assert navigator.is_review_step
    assert navigator.progress == 100
