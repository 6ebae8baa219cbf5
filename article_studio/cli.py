"""Command line interface for article studio."""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Tuple

import click

logger = logging.getLogger(__name__)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug mode")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Article studio CLI.

    Generates SEO articles with OpenRouter models, normalizes stored
    content and serves the web interface.
    """
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    from article_studio.models.settings import Settings

    # Set up logging before any other logging calls
    if debug:
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, Settings().log_level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, force=True)
    logger.debug("Debug mode enabled")


@cli.command()
@click.option("--topic", required=True, help="Article topic")
@click.option("--category", required=True, help="Article category")
@click.option(
    "--tone",
    type=click.Choice(["professional", "casual", "friendly", "formal"]),
    default="professional",
    show_default=True,
)
@click.option("--language", default="English", show_default=True)
@click.option("--word-count", type=int, default=500, show_default=True)
@click.option("--keyword", "keywords", multiple=True, help="SEO keyword (repeatable)")
@click.option("--instructions", default="", help="Additional instructions")
@click.option("--save", is_flag=True, help="Store the article in the database")
@click.option("--author", default="cli", show_default=True, help="Author id for --save")
@click.pass_context
def generate(
    ctx: click.Context,
    topic: str,
    category: str,
    tone: str,
    language: str,
    word_count: int,
    keywords: Tuple[str, ...],
    instructions: str,
    save: bool,
    author: str,
) -> None:
    """Generate an article and print it as JSON."""
    from pydantic import ValidationError

    from article_studio.clients.openrouter import OpenRouterClient
    from article_studio.core.exceptions import ConfigurationError, GenerationError
    from article_studio.core.generator import ArticleGenerator
    from article_studio.core.store import ArticleStore
    from article_studio.models.article import GenerationRequest
    from article_studio.models.settings import Settings

    settings = Settings(debug=ctx.obj.get("debug", False))

    try:
        request = GenerationRequest(
            topic=topic,
            category=category,
            tone=tone,
            language=language,
            word_count=word_count,
            keywords=list(keywords),
            additional_instructions=instructions,
        )
        client = OpenRouterClient.from_settings(settings)
    except ValidationError as e:
        logger.error(f"❌ Invalid generation request: {e}")
        sys.exit(2)
    except ConfigurationError as e:
        logger.error(f"❌ Configuration error: {e}")
        sys.exit(1)

    generator = ArticleGenerator(client, settings)
    logger.info(f"📝 Generating article about '{topic}'...")

    try:
        generated = asyncio.run(generator.create_article(request))
    except GenerationError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    if generated.article.degraded:
        logger.warning("⚠️  Model reply was not valid JSON - fields were recovered heuristically")

    output = generated.model_dump(mode="json")
    if save:
        stored = ArticleStore(settings.database_path).create(author, request, generated)
        output["id"] = stored.id
        logger.info(f"✅ Stored article {stored.id}")

    click.echo(json.dumps(output, indent=2, ensure_ascii=False))


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def normalize(path: str) -> None:
    """Print the normalized markdown of a stored content file."""
    from article_studio.core.normalizer import normalize_content

    content = Path(path).read_text(encoding="utf-8")
    click.echo(normalize_content(content))


@cli.command()
def config() -> None:
    """Show current configuration."""
    from article_studio.models.settings import Settings

    settings = Settings()
    api_key = settings.openrouter_api_key

    click.echo("\n📋 Article Studio Configuration\n")
    click.echo(f"Debug Mode: {settings.debug}")
    click.echo(f"Log Level: {settings.log_level}")
    click.echo(f"Database: {settings.database_path}")

    click.echo("\n🤖 OpenRouter:")
    click.echo(f"  API key: {'✅ ' + api_key[:4] + '...' if api_key else '❌ Missing'}")
    click.echo(f"  Article model: {settings.openrouter_model}")
    click.echo(f"  Ideas model: {settings.openrouter_ideas_model}")
    click.echo(f"  Temperature: {settings.generation_temperature}")
    click.echo(f"  Max tokens: {settings.generation_max_tokens}")
    click.echo(f"  Timeout: {settings.openrouter_timeout}s")

    click.echo("\n🚦 Rate limiting:")
    click.echo(
        f"  {settings.rate_limit_requests} requests per "
        f"{settings.rate_limit_window_seconds:g}s"
    )


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", type=int, default=8000, show_default=True)
def serve(host: str, port: int) -> None:
    """Run the web interface."""
    import uvicorn

    uvicorn.run("article_studio.web.app:app", host=host, port=port)


if __name__ == "__main__":
    cli()
