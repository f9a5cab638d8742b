from __future__ import annotations
import anthropic
import httpx
import pytest

from fakes import FakeLLMClient, tool_reply
from jobboard.core.errors import ExtractionError
from jobboard.services.extractor import TOOL_NAME, StructuredExtractor, build_extract_tool
from jobboard.services.settings_service import load_taxonomy


def make_extractor(replies):
    llm = FakeLLMClient(replies)
    return StructuredExtractor(llm=llm, taxonomy=load_taxonomy(), model="test-model", max_tokens=1024), llm


def full_args(**overrides):
    args = {
        "jobTitle": "  Senior ML Engineer  ",
        "locationAddress": "Parramatta, NSW",
        "locationType": "hybrid",
        "jobTypes": ["full-time", "permanent"],
        "payType": "range",
        "payRangeMin": 150000,
        "payRangeMax": 180000,
        "payPeriod": "year",
        "salaryIsEstimated": False,
        "highlight1": "Build LLM agents \U0001F916 — end to end",
        "highlight2": "5+ years ML experience",
        "highlight3": "Python, PyTorch, AWS",
        "jobDescription": '<div class="c"><p>Join us.</p></div>',
        "requirements": "",
        "applicationMethod": "external",
        "applicationUrl": "https://acme.ai/apply",
        "applicationEmail": "",
        "companyName": "Acme AI",
        "companyWebsite": "https://acme.ai",
        "category": "machine-learning",
        "aiFocusPercentage": 92,
    }
    args.update(overrides)
    return args


def test_extract_forces_tool_and_sanitizes_record():
    extractor, llm = make_extractor([tool_reply(full_args())])

    record = extractor.extract("listing text", source_url="https://acme.ai/jobs/1")

    call = llm.calls[0]
    assert call["tool"]["name"] == TOOL_NAME
    assert call["model"] == "test-model"
    assert "https://acme.ai/jobs/1" in call["user"]
    assert "machine-learning" in call["system"]

    assert record.job_title == "Senior ML Engineer"
    assert record.location_type == "hybrid"
    assert record.job_types == ["full-time", "permanent"]
    assert record.pay_range_min == 150000
    assert record.salary_is_estimated is False
    assert record.highlight1 == "Build LLM agents - end to end"
    assert record.job_description == "<p>Join us.</p>"
    assert record.ai_focus_percentage == 92


def test_missing_salary_gets_safety_net():
    args = full_args(payType=None, payRangeMin=None, payRangeMax=None, payPeriod=None, salaryIsEstimated=False)
    extractor, _ = make_extractor([tool_reply(args)])

    record = extractor.extract("text")

    assert record.pay_type == "range"
    assert record.pay_range_min == 60000
    assert record.pay_range_max == 90000
    assert record.pay_period == "year"
    assert record.salary_is_estimated is True


def test_fixed_amount_is_not_replaced():
    args = full_args(payType="fixed", payRangeMin=None, payRangeMax=None, payAmount=95, payPeriod="hour")
    extractor, _ = make_extractor([tool_reply(args)])

    record = extractor.extract("text")

    assert record.pay_type == "fixed"
    assert record.pay_amount == 95
    assert record.pay_period == "hour"


@pytest.mark.parametrize(
    "declared,low,high,expected",
    [("fixed", 100000, 120000, "range"), ("range", 100000, None, "minimum"), ("minimum", None, 120000, "maximum")],
)
def test_declared_pay_type_follows_the_amounts(declared, low, high, expected):
    extractor, _ = make_extractor([])

    record = extractor.sanitize(
        full_args(payType=declared, payRangeMin=low, payRangeMax=high, payAmount=None, payPeriod="year")
    )

    assert record.pay_type == expected
    assert record.pay_range_min == low
    assert record.pay_range_max == high
    assert record.salary_is_estimated is False


def test_wrong_types_fall_back_to_defaults():
    args = full_args(
        locationType="moon-base",
        jobTypes=["gig", "contract", "contract", "casual", "graduate", "internship", "part-time"],
        payRangeMin="lots",
        payRangeMax=True,
        aiFocusPercentage=140.6,
        applicationMethod="carrier-pigeon",
        category="ai-safety",
        locationAddress=None,
    )
    extractor, _ = make_extractor([tool_reply(args)])

    record = extractor.extract("text")

    assert record.location_type == "in-person"
    assert record.job_types == ["contract", "casual", "graduate", "internship"]
    assert record.application_method == "external"
    assert record.location_address == "Australia"
    assert record.category == "ai-governance"
    assert record.ai_focus_percentage == 100
    # Non-numeric amounts count as absent, so the safety net applies.
    assert (record.pay_range_min, record.pay_range_max, record.salary_is_estimated) == (60000, 90000, True)


def test_unknown_category_uses_default():
    extractor, _ = make_extractor([tool_reply(full_args(category="astrology"))])

    assert extractor.extract("text").category == "machine-learning"


def test_missing_ai_focus_defaults_to_fifty():
    args = full_args()
    del args["aiFocusPercentage"]
    extractor, _ = make_extractor([tool_reply(args)])

    assert extractor.extract("text").ai_focus_percentage == 50


@pytest.mark.parametrize("title", ["", "   ", None, 42.0])
def test_blank_title_is_rejected(title):
    extractor, _ = make_extractor([tool_reply(full_args(jobTitle=title))])

    if title == 42.0:
        # Numbers are coerced to text, so only empty titles fail.
        assert extractor.extract("text").job_title == "42.0"
        return
    with pytest.raises(ExtractionError, match="missing title"):
        extractor.extract("text")


def test_no_tool_block_is_an_extraction_error():
    extractor, _ = make_extractor([tool_reply(None, text="I cannot help with that.")])

    with pytest.raises(ExtractionError, match="No tool use response from model"):
        extractor.extract("text")


def test_api_failure_is_wrapped():
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    extractor, _ = make_extractor([anthropic.APIConnectionError(request=request)])

    with pytest.raises(ExtractionError, match="model request failed"):
        extractor.extract("text")


def test_tool_schema_lists_taxonomy_slugs():
    tool = build_extract_tool(load_taxonomy())
    props = tool["input_schema"]["properties"]

    assert "quality-assurance" in props["category"]["enum"]
    assert len(props["category"]["enum"]) == 18
    assert "jobTitle" in tool["input_schema"]["required"]
