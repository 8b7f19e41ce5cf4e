"""대화형 탐색 모듈."""

from repo_compass.agent.assistant import Assistant, AssistantResponse, ResponseType
from repo_compass.agent.comparison import compare
from repo_compass.agent.intent import IntentRouter, clean_repo_name, parse_repo_names
from repo_compass.agent.normalizer import QueryNormalizer
from repo_compass.agent.summary import SearchSummarizer, template_summary

__all__ = [
    "Assistant",
    "AssistantResponse",
    "IntentRouter",
    "QueryNormalizer",
    "ResponseType",
    "SearchSummarizer",
    "clean_repo_name",
    "compare",
    "parse_repo_names",
    "template_summary",
]
