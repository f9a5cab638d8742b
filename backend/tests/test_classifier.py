from __future__ import annotations
import pytest

from fakes import FakeLLMClient, tool_reply
from jobboard.core.errors import ClassificationParseError
from jobboard.services.classifier import (
    DEFAULT_RATIONALE,
    TOOL_NAME,
    CategoryClassifier,
    is_complete_sentence,
    parse_classification,
)
from jobboard.services.settings_service import load_taxonomy


def make_classifier(replies, **kwargs):
    llm = FakeLLMClient(replies)
    sleeps = []
    classifier = CategoryClassifier(
        llm=llm, taxonomy=load_taxonomy(), model="test-model", max_tokens=256, sleep=sleeps.append, **kwargs
    )
    return classifier, llm, sleeps


def classify(classifier):
    return classifier.classify("7", "Computer Vision Engineer", "Detect defects in images.", None, "ai")


def test_parse_strict_json_inside_prose():
    text = 'Here you go:\n{"category": "computer-vision", "rationale": "Image models.", "confidence": "high"}\nThanks'

    result = parse_classification(text)

    assert (result.category, result.rationale, result.confidence) == ("computer-vision", "Image models.", "high")


def test_parse_repairs_single_quotes_bare_keys_and_trailing_commas():
    text = "{category: 'data-engineer', rationale: 'Builds ETL pipelines.', confidence: 'medium',}"

    result = parse_classification(text)

    assert result.category == "data-engineer"
    assert result.rationale == "Builds ETL pipelines."
    assert result.confidence == "medium"


def test_parse_falls_back_to_field_regexes():
    text = 'category: "analyst"\nrationale: "Reporting on model outputs for the business."\nconfidence: low'

    result = parse_classification(text)

    assert result.category == "analyst"
    assert result.rationale == "Reporting on model outputs for the business."
    assert result.confidence == "low"


def test_parse_regex_tier_defaults_missing_fields():
    result = parse_classification("{broken json, \"category\": \"product\" oops")

    assert result.category == "product"
    assert result.rationale == DEFAULT_RATIONALE
    assert result.confidence == "medium"


def test_parse_failure_raises():
    with pytest.raises(ClassificationParseError):
        parse_classification("I am not sure what to say.")


def test_is_complete_sentence():
    assert is_complete_sentence("Done.")
    assert is_complete_sentence("Really?")
    assert not is_complete_sentence("Builds models for the")
    assert not is_complete_sentence("")


def test_tool_arguments_are_used_directly():
    reply = tool_reply({"category": "computer-vision", "rationale": "Defect detection with image models.", "confidence": "high"})
    classifier, llm, sleeps = make_classifier([reply])

    outcome = classify(classifier)

    assert outcome.result.category == "computer-vision"
    assert outcome.is_valid
    assert outcome.issues == []
    assert len(llm.calls) == 1
    assert llm.calls[0]["tool"]["name"] == TOOL_NAME
    assert sleeps == []


def test_text_reply_goes_through_tolerant_parser():
    reply = tool_reply(None, text='{"category": "computer-vision", "rationale": "Vision-heavy defect detection role.", "confidence": "high"}')
    classifier, _, _ = make_classifier([reply])

    assert classify(classifier).result.category == "computer-vision"


def test_alias_is_corrected_before_validation():
    reply = tool_reply({"category": "mlops", "rationale": "Deploys and monitors ML models.", "confidence": "high"})
    classifier, _, _ = make_classifier([reply])

    outcome = classify(classifier)

    assert outcome.result.category == "machine-learning"
    assert outcome.is_valid


def test_truncated_reply_is_retried_with_fixed_wait():
    truncated = tool_reply({"category": "computer-vision", "rationale": "Defect detection with", "confidence": "high"})
    cut_off = tool_reply(None, text='{"category": "computer-vision", "rat', stop_reason="max_tokens")
    good = tool_reply({"category": "computer-vision", "rationale": "Defect detection with image models.", "confidence": "high"})
    classifier, llm, sleeps = make_classifier([truncated, cut_off, good])

    outcome = classify(classifier)

    assert len(llm.calls) == 3
    assert sleeps == [1.0, 1.0]
    assert outcome.result.rationale == "Defect detection with image models."
    assert outcome.is_valid


def test_incomplete_rationale_accepted_and_flagged_after_last_attempt():
    truncated = tool_reply({"category": "computer-vision", "rationale": "Defect detection with image", "confidence": "high"})
    classifier, llm, sleeps = make_classifier([truncated])

    outcome = classify(classifier)

    assert len(llm.calls) == 3
    assert len(sleeps) == 2
    assert outcome.result.category == "computer-vision"
    assert [i.issue for i in outcome.errors] == ["Incomplete sentence (API truncation)"]
    assert outcome.errors[0].value == "Defect detection with image"[-30:]


def test_persistent_parse_failure_propagates():
    classifier, llm, _ = make_classifier([tool_reply(None, text="no idea")])

    with pytest.raises(ClassificationParseError):
        classify(classifier)
    assert len(llm.calls) == 3


def test_upstream_errors_are_not_retried():
    classifier, llm, _ = make_classifier([RuntimeError("overloaded")])

    with pytest.raises(RuntimeError):
        classify(classifier)
    assert len(llm.calls) == 1


def test_validation_issues_and_defaults():
    reply = tool_reply({"category": "wizardry", "rationale": "", "confidence": "certain"})
    classifier, _, _ = make_classifier([reply])

    outcome = classify(classifier)

    issues = {i.issue: i for i in outcome.issues}
    assert set(issues) == {"Invalid category slug", "Invalid confidence", "Empty rationale"}
    assert all(i.severity == "error" for i in outcome.issues)
    assert issues["Invalid category slug"].value == "wizardry"
    assert issues["Empty rationale"].value == 0
    assert outcome.result.confidence == "medium"
    assert outcome.result.rationale == DEFAULT_RATIONALE
    assert not outcome.is_valid


def test_short_rationale_is_a_warning():
    reply = tool_reply({"category": "sales", "rationale": "Sells AI.", "confidence": "low"})
    classifier, _, _ = make_classifier([reply])

    outcome = classify(classifier)

    assert outcome.is_valid
    assert [(w.issue, w.value) for w in outcome.warnings] == [("Rationale too short", 9)]


def test_prompt_caps_description_and_requirements():
    reply = tool_reply({"category": "engineering", "rationale": "General engineering with some ML.", "confidence": "medium"})
    classifier, llm, _ = make_classifier([reply])

    classifier.classify("1", "Engineer", "d" * 5000, "r" * 5000, "ml")

    user = llm.calls[0]["user"]
    assert "d" * 3000 in user and "d" * 3001 not in user
    assert "r" * 1000 in user and "r" * 1001 not in user
    assert "quality-assurance" in llm.calls[0]["system"]
