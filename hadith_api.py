"""
Hadith Memorization API client
==============================
Thin wrapper around the backend REST API: every method is one HTTP call
mapped to pydantic models. No caching and no retries; failures surface as
ApiError so the screens can turn them into a short message.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import requests
from pydantic import BaseModel, ValidationError, field_validator

from hadith_config import settings

log = logging.getLogger(__name__)

MULTIPLE_CHOICE = "multiple_choice"
FILL_BLANKS = "fill_blanks"
QUESTION_TYPES = (MULTIPLE_CHOICE, FILL_BLANKS)


# ── Models ────────────────────────────────────────────────────────────────────


class Companion(BaseModel):
    id: int
    name: str


class Source(BaseModel):
    id: int
    name: str


class Hadith(BaseModel):
    id: int
    text: str
    companions: List[Companion] = []
    sources: List[Source] = []

    @field_validator("companions", "sources", mode="before")
    @classmethod
    def none_to_list(cls, value):
        # the backend serializes empty slices as null
        return [] if value is None else value


class CreateHadithRequest(BaseModel):
    text: str
    companion_ids: List[int]
    source_ids: List[int]


class QuizQuestion(BaseModel):
    id: int
    text: str
    type: str
    companions: Optional[List[Companion]] = None
    sources: Optional[List[Source]] = None
    blank_text: Optional[str] = None
    blank_words: Optional[List[str]] = None
    blank_indices: Optional[List[int]] = None

    @property
    def blank_count(self) -> int:
        return len(self.blank_words or [])


class CheckAnswerRequest(BaseModel):
    hadith_id: int
    question_type: str
    companion_ids: Optional[List[int]] = None
    source_ids: Optional[List[int]] = None
    filled_words: Optional[List[str]] = None
    blank_indices: Optional[List[int]] = None


class CheckAnswerResponse(BaseModel):
    is_correct: bool


class CorrectAnswer(BaseModel):
    correct_companions: List[Companion] = []
    correct_sources: List[Source] = []
    correct_words: Optional[List[str]] = None
    full_text: str = ""

    @field_validator("correct_companions", "correct_sources", mode="before")
    @classmethod
    def none_to_list(cls, value):
        return [] if value is None else value


# ── Errors ────────────────────────────────────────────────────────────────────


class ApiError(Exception):
    """A backend call failed: network error, non-2xx status or bad body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


# ── Client ────────────────────────────────────────────────────────────────────


class HadithApi:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def close(self) -> None:
        self.session.close()

    def _request(self, method: str, path: str, params=None, json=None):
        url = f"{self.base_url}{path}"
        log.debug("%s %s params=%s", method, url, params)
        try:
            if method == "GET":
                response = self.session.get(url, params=params, timeout=self.timeout)
            else:
                response = self.session.post(url, json=json, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            log.warning("%s %s failed with status %s", method, url, status)
            raise ApiError(f"{method} {path} returned {status}", status) from exc
        except requests.RequestException as exc:
            log.warning("%s %s failed: %s", method, url, exc)
            raise ApiError(f"{method} {path} failed: {exc}") from exc

        try:
            return response.json()
        except ValueError as exc:
            log.warning("%s %s returned a non-JSON body", method, url)
            raise ApiError(f"{method} {path} returned invalid JSON") from exc

    def _parse(self, model, data, path: str):
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            log.warning("Unexpected payload from %s: %s", path, exc)
            raise ApiError(f"unexpected payload from {path}") from exc

    def _parse_list(self, model, data, path: str) -> list:
        if data is None:
            return []
        if not isinstance(data, list):
            raise ApiError(f"expected a list from {path}")
        return [self._parse(model, item, path) for item in data]

    # Hadith operations

    def get_hadiths(self) -> list[Hadith]:
        return self._parse_list(Hadith, self._request("GET", "/hadiths"), "/hadiths")

    def get_hadith(self, hadith_id: int) -> Hadith:
        path = f"/hadiths/{hadith_id}"
        return self._parse(Hadith, self._request("GET", path), path)

    def create_hadith(
        self, text: str, companion_ids: list[int], source_ids: list[int]
    ) -> Hadith:
        payload = CreateHadithRequest(
            text=text, companion_ids=list(companion_ids), source_ids=list(source_ids)
        )
        data = self._request("POST", "/hadiths", json=payload.model_dump())
        hadith = self._parse(Hadith, data, "/hadiths")
        log.info("Created hadith %s", hadith.id)
        return hadith

    # Companion operations

    def get_companions(self) -> list[Companion]:
        data = self._request("GET", "/companions")
        return self._parse_list(Companion, data, "/companions")

    def create_companion(self, name: str) -> Companion:
        data = self._request("POST", "/companions", json={"name": name})
        return self._parse(Companion, data, "/companions")

    # Source operations

    def get_sources(self) -> list[Source]:
        return self._parse_list(Source, self._request("GET", "/sources"), "/sources")

    def create_source(self, name: str) -> Source:
        data = self._request("POST", "/sources", json={"name": name})
        return self._parse(Source, data, "/sources")

    # Quiz operations

    def get_random_question(self, question_types=None) -> QuizQuestion:
        params = {"types": ",".join(question_types)} if question_types else None
        data = self._request("GET", "/quiz/random", params=params)
        return self._parse(QuizQuestion, data, "/quiz/random")

    def check_answer(self, request: CheckAnswerRequest) -> CheckAnswerResponse:
        data = self._request(
            "POST", "/quiz/check", json=request.model_dump(exclude_none=True)
        )
        return self._parse(CheckAnswerResponse, data, "/quiz/check")

    def get_correct_answer(
        self, hadith_id: int, question_type: str, blank_indices=None
    ) -> CorrectAnswer:
        path = f"/quiz/answer/{hadith_id}"
        params = {"type": question_type}
        if blank_indices:
            params["blank_indices"] = ",".join(str(i) for i in blank_indices)
        return self._parse(CorrectAnswer, self._request("GET", path, params=params), path)
