#!/usr/bin/env python3
"""
coder-cli: ask a model for code and print each generated file as soon as it is finished

Features
- Streams the response and parses fenced blocks (```lang path) as they arrive
- Each file is printed once, in the order it first appeared, when its fence closes
- Syntax highlighted output (Rich)

Configuration
    OPENAI_API_KEY, OPENAI_BASE_URL  (required)
    OPENAI_MODEL, CODER_TEMPERATURE, CODER_MAX_TOKENS, CODER_TIMEOUT  (optional)
"""
from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from typing import Optional

from prompt_toolkit import prompt
from prompt_toolkit.formatted_text import HTML
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.syntax import Syntax

from coder.agent import FAILED, AgentUpdate, coder_agent
from coder.config import ConfigError, CoderConfig
from coder.handler import CodeHandler

console = Console()
logger = logging.getLogger("coder_cli")


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


def read_request() -> Optional[str]:
    """Ask for a request interactively; None when cancelled or empty."""
    try:
        text = prompt(HTML("<ansigreen><b>request&gt;</b></ansigreen> "))
    except (EOFError, KeyboardInterrupt):
        return None
    return text.strip() or None


def render_update(update: AgentUpdate) -> None:
    if update.file is not None:
        lexer = Syntax.guess_lexer(update.file.filename, code=update.file.content)
        syntax = Syntax(update.file.content.rstrip("\n"), lexer, word_wrap=True)
        console.print(Panel(syntax, title=update.file.filename, title_align="left"))
    elif update.state == FAILED:
        console.print(f"[red]Error[/red]: {update.text}")
    else:
        console.print(f"[dim]{update.text}[/dim]")


def build_config(args: argparse.Namespace) -> CoderConfig:
    config = CoderConfig.from_env()
    overrides = {
        "base_url": args.url,
        "model": args.model,
        "temperature": args.temperature,
        "max_tokens": args.max_tokens,
    }
    return replace(config, **{k: v for k, v in overrides.items() if v is not None})


def run(request: str, handler: CodeHandler) -> int:
    history = [{"role": "user", "parts": [{"type": "text", "text": request}]}]
    code = 0
    for update in coder_agent(history, handler):
        render_update(update)
        if update.state == FAILED:
            code = 1
    return code


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point with argument parsing."""
    parser = argparse.ArgumentParser(prog="coder-cli", description="Generate code files from a natural language request")
    parser.add_argument("request", nargs="?", help="What to build (prompted for when omitted)")
    parser.add_argument("--url", default=None, help="API base URL (default: $OPENAI_BASE_URL)")
    parser.add_argument("--model", default=None, help="Model name (default: $OPENAI_MODEL)")
    parser.add_argument("--temperature", type=float, default=None, help="Sampling temperature")
    parser.add_argument("--max-tokens", type=int, default=None, help="Maximum completion tokens")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    try:
        config = build_config(args)
    except ConfigError as e:
        console.print(f"[red]Configuration error[/red]: {e}")
        return 1

    request = args.request or read_request()
    if not request:
        console.print("[dim]Bye![/dim]")
        return 0

    logger.debug("Using model %s at %s", config.model, config.completions_url)
    return run(request, CodeHandler(config))


if __name__ == "__main__":
    raise SystemExit(main())
