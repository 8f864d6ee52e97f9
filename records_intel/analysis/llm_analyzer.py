"""Tier 1: language-model analysis of document chunks."""

import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog
from langchain_core.prompts import ChatPromptTemplate
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, stop_never, wait_fixed

from records_intel.analysis.invalid_sink import InvalidResponseSink
from records_intel.analysis.merger import merge_results
from records_intel.analysis.schemas import AnalysisResponse
from records_intel.analysis.validator import ResponseValidator
from records_intel.config.prompts import ANALYSIS_SYSTEM_PROMPT, ANALYSIS_USER_PROMPT
from records_intel.llm.client import ChatClient, LLMResponse, RateLimitError
from records_intel.models import AnalysisResult

logger = structlog.get_logger(__name__)

ANALYSIS_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", ANALYSIS_SYSTEM_PROMPT),
        ("human", ANALYSIS_USER_PROMPT),
    ]
)

PLACEHOLDER_DOCUMENT_TYPE = "other"
PLACEHOLDER_SUMMARY = "Unable to analyze document"


@dataclass
class ChunkedAnalysis:
    """Outcome of analyzing all chunks of one document.

    Attributes:
        result: Merged record, or the placeholder when no chunk was valid.
        input_tokens: Prompt tokens billed across all answered calls.
        output_tokens: Completion tokens billed across all answered calls.
        invalid_chunks: Chunks whose response failed validation.
        failed_chunks: Chunks skipped because the call itself failed.
        valid_chunks: Chunks that contributed data.
    """

    result: AnalysisResult
    input_tokens: int = 0
    output_tokens: int = 0
    invalid_chunks: int = 0
    failed_chunks: int = 0
    valid_chunks: int = 0

    @property
    def is_placeholder(self) -> bool:
        return self.valid_chunks == 0


def to_analysis_result(payload: AnalysisResponse, file_name: str, data_set: str) -> AnalysisResult:
    """Attach document identity to a validated model response."""
    return AnalysisResult.model_validate(
        {**payload.model_dump(), "file_name": file_name, "data_set": data_set}
    )


def placeholder_result(file_name: str, data_set: str) -> AnalysisResult:
    """Minimal record used when no chunk of a document could be analyzed."""
    return AnalysisResult(
        file_name=file_name,
        data_set=data_set,
        document_type=PLACEHOLDER_DOCUMENT_TYPE,
        date_original=None,
        summary=PLACEHOLDER_SUMMARY,
    )


class LLMAnalyzer:
    """Sends document chunks to a chat model one at a time.

    Rate-limited calls back off for a fixed interval and retry the same
    chunk. Any other call failure skips the chunk. Responses failing
    validation are captured to the invalid-response sink and contribute
    nothing to the merged record.

    Args:
        client: Chat client used for every call.
        validator: Response validator. A default one is created if omitted.
        invalid_sink: Where invalid responses are captured. None disables capture.
        chunk_delay_seconds: Pause between successive chunks of one document.
        rate_limit_backoff_seconds: Pause before retrying a rate-limited chunk.
        rate_limit_max_retries: Retry cap for one chunk. None retries until
            the provider accepts the call.
        sleep: Sleep function, injectable for tests.
    """

    def __init__(
        self,
        client: ChatClient,
        validator: ResponseValidator | None = None,
        invalid_sink: InvalidResponseSink | None = None,
        chunk_delay_seconds: float = 0.5,
        rate_limit_backoff_seconds: float = 10.0,
        rate_limit_max_retries: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.validator = validator or ResponseValidator()
        self.invalid_sink = invalid_sink
        self.chunk_delay_seconds = chunk_delay_seconds
        self.rate_limit_backoff_seconds = rate_limit_backoff_seconds
        self.rate_limit_max_retries = rate_limit_max_retries
        self._sleep = sleep

    @property
    def model_name(self) -> str:
        return self.client.model_name

    def _call_with_backoff(self, messages: list, file_name: str, chunk_label: str) -> LLMResponse:
        if self.rate_limit_max_retries is None:
            stop = stop_never
        else:
            stop = stop_after_attempt(self.rate_limit_max_retries + 1)

        def log_rate_limited(retry_state) -> None:
            logger.warning(
                "rate_limited_backing_off",
                file_name=file_name,
                chunk=chunk_label.strip() or None,
                attempt=retry_state.attempt_number,
                wait_seconds=self.rate_limit_backoff_seconds,
            )

        retrying = Retrying(
            retry=retry_if_exception_type(RateLimitError),
            wait=wait_fixed(self.rate_limit_backoff_seconds),
            stop=stop,
            sleep=self._sleep,
            before_sleep=log_rate_limited,
            reraise=True,
        )
        return retrying(self.client.complete, messages)

    def analyze(self, chunks: list[str], file_name: str, data_set: str) -> ChunkedAnalysis:
        """Analyze the chunks of one document.

        Args:
            chunks: Document chunks in order.
            file_name: Document file name.
            data_set: Data-set label.

        Returns:
            Merged record with token usage and chunk counters. Never raises
            for model or validation failures.
        """
        total = len(chunks)
        outcome = ChunkedAnalysis(result=placeholder_result(file_name, data_set))
        chunk_results: list[AnalysisResult] = []

        logger.info("llm_analysis_start", file_name=file_name, chunks=total)

        for index, chunk in enumerate(chunks):
            chunk_label = f" (chunk {index + 1}/{total})" if total > 1 else ""
            if index > 0 and self.chunk_delay_seconds > 0:
                self._sleep(self.chunk_delay_seconds)

            messages = ANALYSIS_PROMPT.format_messages(
                chunk_label=chunk_label,
                file_name=file_name,
                data_set=data_set,
                chunk_text=chunk,
            )

            try:
                response = self._call_with_backoff(messages, file_name, chunk_label)
            except Exception as e:
                outcome.failed_chunks += 1
                logger.error(
                    "chunk_call_failed",
                    file_name=file_name,
                    chunk_index=index,
                    chunks_total=total,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                continue

            outcome.input_tokens += response.prompt_tokens or 0
            outcome.output_tokens += response.completion_tokens or 0

            validation = self.validator.validate(response.content)
            if not validation.ok:
                outcome.invalid_chunks += 1
                logger.warning(
                    "chunk_response_invalid",
                    file_name=file_name,
                    chunk_index=index,
                    chunks_total=total,
                    reason=validation.reason,
                )
                if self.invalid_sink is not None:
                    self.invalid_sink.persist(
                        file_name=file_name,
                        data_set=data_set,
                        chunk_index=index,
                        chunks_total=total,
                        reason=validation.reason or "",
                        raw_content=response.content,
                    )
                continue

            chunk_results.append(to_analysis_result(validation.payload, file_name, data_set))
            logger.debug("chunk_analyzed", file_name=file_name, chunk_index=index)

        outcome.valid_chunks = len(chunk_results)
        if chunk_results:
            outcome.result = merge_results(chunk_results)
        else:
            logger.warning("document_analysis_placeholder", file_name=file_name, chunks=total)

        logger.info(
            "llm_analysis_complete",
            file_name=file_name,
            valid_chunks=outcome.valid_chunks,
            invalid_chunks=outcome.invalid_chunks,
            failed_chunks=outcome.failed_chunks,
            input_tokens=outcome.input_tokens,
            output_tokens=outcome.output_tokens,
        )
        return outcome
