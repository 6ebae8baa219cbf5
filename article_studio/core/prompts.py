"""Prompt builders for the article generation pipeline.

Every builder is a pure function returning the ordered chat messages for one
model call. The article prompt carries the JSON contract that the response
extractor relies on.
"""

from typing import List

from article_studio.models.article import (
    GenerationRequest,
    MessageRole,
    ModelMessage,
)

SEO_PREVIEW_LENGTH = 500

ARTICLE_PERSONA = """You are an expert content writer, SEO specialist, and storyteller. Write as if you are a professional human writer for a top-tier publication. Your writing should:
- Be engaging, natural, and easy to read (avoid robotic or repetitive phrasing)
- Use storytelling, examples, and a conversational tone where appropriate
- Use varied sentence structure and vocabulary (avoid generic AI patterns)
- Be SEO-optimized (use headings, subheadings, and integrate keywords naturally)
- Include a compelling introduction and a strong conclusion
- Add value, insight, and a human touch (not just facts)
- Avoid plagiarism and always write in your own words
- Use markdown for headings, subheadings, and lists"""

ARTICLE_FORMAT = """Please structure your response as a single JSON object with the following format:
{
  "title": "SEO-optimized title",
  "content": "Full article content with markdown formatting, headings, and paragraphs",
  "summary": "Brief summary of the article (2-3 sentences)",
  "keywords": ["keyword1", "keyword2", "keyword3"]
}
Return only the JSON object, without code fences or commentary."""


def _message(role: MessageRole, content: str) -> ModelMessage:
    return ModelMessage(role=role, content=content)


def build_article_messages(request: GenerationRequest) -> List[ModelMessage]:
    """Build the system/user message pair for article generation.

    Args:
        request: Validated generation request

    Returns:
        System message with persona and JSON contract, then the user ask
    """
    keywords = ", ".join(request.keywords) if request.keywords else "N/A"
    requirements = [
        f"- Topic: {request.topic}",
        f"- Category: {request.category}",
        f"- Tone: {request.tone.value}",
        f"- Language: {request.language}",
        f"- Target word count: {request.word_count}",
        f"- Keywords: {keywords}",
    ]
    if request.additional_instructions:
        requirements.append(
            f"- Additional instructions: {request.additional_instructions}"
        )

    system_prompt = f"""{ARTICLE_PERSONA}

Your task is to create an article based on the following requirements:
{chr(10).join(requirements)}

{ARTICLE_FORMAT}

Make sure the content is:
- Well-researched and informative
- Engaging and easy to read
- SEO-optimized with proper markdown heading structure
- Free of plagiarism
- Written in a {request.tone.value} tone, in {request.language}
- Approximately {request.word_count} words"""

    user_prompt = (
        f'Please generate an article about "{request.topic}" '
        f"in the {request.category} category."
    )

    return [
        _message(MessageRole.SYSTEM, system_prompt),
        _message(MessageRole.USER, user_prompt),
    ]


def build_seo_messages(
    title: str, content: str, preview_length: int = SEO_PREVIEW_LENGTH
) -> List[ModelMessage]:
    """Build the message pair asking for an SEO title and meta description."""
    system_prompt = (
        "You are an SEO specialist. Generate an SEO-optimized title and "
        "meta description for the given article."
    )
    user_prompt = f"""Please generate SEO metadata for this article:

Title: {title}
Content: {content[:preview_length]}...

Please return a JSON object with:
{{
  "seoTitle": "SEO-optimized title (max 60 characters)",
  "seoDescription": "Meta description (max 160 characters)"
}}"""

    return [
        _message(MessageRole.SYSTEM, system_prompt),
        _message(MessageRole.USER, user_prompt),
    ]


def build_improve_messages(content: str, instructions: str) -> List[ModelMessage]:
    """Build the message pair for rewriting an article."""
    system_prompt = (
        "You are an expert content editor. Improve the provided article based "
        "on the given instructions while maintaining the original meaning and "
        "structure."
    )
    user_prompt = f"""Please improve this article based on the following instructions:

Instructions: {instructions}

Article:
{content}

Please return only the improved article content without any additional formatting or explanations."""

    return [
        _message(MessageRole.SYSTEM, system_prompt),
        _message(MessageRole.USER, user_prompt),
    ]


def build_ideas_messages(topic: str = "") -> List[ModelMessage]:
    """Build the message pair asking for title and keyword ideas."""
    subject = topic or "any topic of your choice"
    user_prompt = f"""Suggest 5-10 catchy and unique article title ideas and 10-20 relevant SEO keywords for the following topic: {subject}.
Answer with JSON in this format:
{{
  "titles": ["title 1", ...],
  "keywords": ["keyword 1", ...]
}}"""

    return [
        _message(
            MessageRole.SYSTEM,
            "You are a creative AI assistant that suggests article ideas.",
        ),
        _message(MessageRole.USER, user_prompt),
    ]
