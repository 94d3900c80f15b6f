"""
LeetCode question source
- posts the randomQuestion GraphQL query with a difficulty filter
- returns the slug of the selected question
"""
import logging
from typing import List, Optional

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from yeetcode.difficulty import Difficulty

logger = logging.getLogger(__name__)

LEETCODE_URL = "https://leetcode.com"
GRAPHQL_URL = f"{LEETCODE_URL}/graphql"
DEFAULT_TIMEOUT = 15.0

RANDOM_QUESTION_QUERY = """
query randomQuestion($categorySlug: String, $filters: QuestionListFilterInput) {
    randomQuestion(categorySlug: $categorySlug, filters: $filters) {
        titleSlug
    }
}"""


class LeetCodeError(RuntimeError):
    """Any failure while asking LeetCode for a question."""


class RandomQuestionFilters(BaseModel):
    difficulty: Difficulty
    tags: Optional[List[str]] = None


class RandomQuestionVariables(BaseModel):
    categorySlug: str = ""
    filters: RandomQuestionFilters


class RandomQuestionRequest(BaseModel):
    query: str = RANDOM_QUESTION_QUERY
    variables: RandomQuestionVariables


class RandomQuestion(BaseModel):
    title_slug: str = Field("", alias="titleSlug")

    model_config = ConfigDict(populate_by_name=True)


class RandomQuestionData(BaseModel):
    random_question: RandomQuestion = Field(..., alias="randomQuestion")

    model_config = ConfigDict(populate_by_name=True)


class RandomQuestionResponse(BaseModel):
    data: RandomQuestionData


class QuestionReference(BaseModel):
    """The selected question; only the slug is ever used."""
    slug: str

    @property
    def url(self) -> str:
        return problem_url(self.slug)


def problem_url(slug: str) -> str:
    return f"{LEETCODE_URL}/problems/{slug}"


class LeetCodeClient:
    """Client for the LeetCode GraphQL API."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        url: str = GRAPHQL_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.session = session or requests.Session()
        self.url = url
        self.timeout = timeout

    def random_question(self, difficulty: Difficulty, tags: Optional[List[str]] = None) -> QuestionReference:
        """Retrieve a random LeetCode problem of the given difficulty."""
        try:
            request = RandomQuestionRequest(
                variables=RandomQuestionVariables(
                    filters=RandomQuestionFilters(difficulty=difficulty, tags=tags or None),
                ),
            )
            payload = request.model_dump(mode="json", exclude_none=True)
        except ValidationError as exc:
            raise LeetCodeError(f"failed encoding request body: {exc}") from exc

        headers = {
            "Content-Type": "application/json",
            # The API rejects requests without these
            "Origin": LEETCODE_URL,
            "Referer": LEETCODE_URL,
        }
        try:
            resp = self.session.post(self.url, json=payload, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise LeetCodeError(f"failed making http request: {exc}") from exc

        try:
            decoded = RandomQuestionResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise LeetCodeError(f"failed decoding http response: {exc}") from exc

        slug = decoded.data.random_question.title_slug.strip()
        if not slug:
            raise LeetCodeError("response did not include a question slug")

        logger.debug("leetcode picked %s (%s)", slug, difficulty.value)
        return QuestionReference(slug=slug)

    def close(self) -> None:
        self.session.close()
