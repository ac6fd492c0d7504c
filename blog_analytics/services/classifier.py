"""Blog classifier.

Assigns a category, tags, a sentiment score and a language to a blog from
its title, description and recent post titles, using the Gemini
``generateContent`` REST API. Classification is enrichment only: without a
key, or on any failure, a fixed fallback result is returned.
"""

import json
import logging
from typing import Any, Dict, List, Sequence

import httpx

from blog_analytics.exceptions import ClassifierUnavailable
from blog_analytics.models.schemas import BlogPost, ClassificationResult


logger = logging.getLogger(__name__)

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

CATEGORIES = [
    "Technology",
    "Lifestyle",
    "Travel",
    "Food & Cooking",
    "Photography",
    "Art & Design",
    "Personal",
    "Business",
    "Education",
    "Entertainment",
    "Other",
]

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "category": {
            "type": "STRING",
            "description": "One of the available categories that best fits the blog.",
        },
        "tags": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "3-5 relevant tags/keywords for the blog content.",
        },
        "sentimentScore": {
            "type": "NUMBER",
            "description": "A score from 0 (negative) to 100 (positive) based on the content tone.",
        },
        "language": {
            "type": "STRING",
            "description": "The primary language of the blog (e.g., English, Spanish).",
        },
        "summary": {
            "type": "STRING",
            "description": "A concise 1-sentence summary of what this blog is about.",
        },
    },
    "required": ["category", "tags", "sentimentScore", "language", "summary"],
}


def missing_key_result() -> ClassificationResult:
    return ClassificationResult(
        category="Other",
        tags=["Unclassified"],
        sentiment_score=50,
        language="Unknown",
        summary="API Key missing.",
    )


def failed_result() -> ClassificationResult:
    return ClassificationResult(
        category="Other",
        tags=["Auto-Tag-Error"],
        sentiment_score=50,
        language="English",
        summary="Could not analyze content.",
    )


def build_prompt(title: str, description: str, posts: Sequence[BlogPost]) -> str:
    post_titles = ", ".join(post.title for post in posts)
    return (
        "Analyze the following blog metadata and classify it.\n\n"
        f"Blog Title: {title}\n"
        f"Blog Description: {description}\n"
        f"Recent Post Titles: {post_titles}\n\n"
        f"Available Categories: {', '.join(CATEGORIES)}\n"
    )


def parse_classification(payload: Dict[str, Any]) -> ClassificationResult:
    """Read the JSON answer out of a generateContent response.

    Raises:
        ClassifierUnavailable: If the response holds no usable answer
    """
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise ClassifierUnavailable("Empty response from Gemini") from e

    try:
        data = json.loads(text)
        tags: List[str] = [str(tag) for tag in data["tags"]]
        sentiment = int(round(float(data["sentimentScore"])))
        return ClassificationResult(
            category=str(data["category"]),
            tags=tags,
            sentiment_score=max(0, min(100, sentiment)),
            language=str(data["language"]),
            summary=str(data["summary"]),
        )
    except (ValueError, KeyError, TypeError) as e:
        raise ClassifierUnavailable(f"Malformed classification: {e}") from e


async def classify_blog(
    title: str,
    description: str,
    posts: Sequence[BlogPost],
    api_key: str = "",
    model: str = "gemini-2.5-flash",
    timeout: float = 30.0,
) -> ClassificationResult:
    """Classify a blog.

    Args:
        title: Blog title
        description: Blog description
        posts: Recent posts (only their titles are sent)
        api_key: Gemini API key; empty skips the call
        model: Gemini model name
        timeout: Request timeout in seconds

    Returns:
        ClassificationResult, or a fallback result when classification is
        unavailable
    """
    if not api_key:
        logger.warning("No API key provided, returning default classification")
        return missing_key_result()

    body = {
        "contents": [{"parts": [{"text": build_prompt(title, description, posts)}]}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": RESPONSE_SCHEMA,
        },
    }

    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(
                GEMINI_API_URL.format(model=model),
                headers={"x-goog-api-key": api_key},
                json=body,
            )
            response.raise_for_status()
        return parse_classification(response.json())
    except (httpx.HTTPError, ValueError, ClassifierUnavailable) as e:
        logger.error(f"Classification failed for '{title}': {e}")
        return failed_result()
