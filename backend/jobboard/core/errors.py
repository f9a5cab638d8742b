from __future__ import annotations


class FetchError(Exception):
    """No fetch strategy produced usable page text."""


class ExtractionError(Exception):
    """The model returned no usable structured listing."""


class ClassificationParseError(Exception):
    """A classifier reply could not be turned into a classification."""


class IncompleteRationaleError(ClassificationParseError):
    def __init__(self, result):
        super().__init__(f"rationale ends mid-sentence: ...{result.rationale[-30:]}")
        self.result = result


class PaymentSessionNotFound(Exception):
    pass


class ModelNotConfigured(Exception):
    """No API key is available for the language model."""
