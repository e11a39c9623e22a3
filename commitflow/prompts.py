#!/usr/bin/env python3

import click

from .message import CommitAnswer, PromptSpec, validate_subject

__all__ = ["collect_answer"]


def _subject(value: str) -> str:
    try:
        return validate_subject(value)
    except ValueError as e:
        # click.prompt asks again on BadParameter
        raise click.BadParameter(str(e))


def collect_answer(prompt_spec: PromptSpec) -> CommitAnswer:
    """Ask for the commit type, subject and optional description."""
    click.echo("Commit types:")
    for choice in prompt_spec.choices:
        click.echo(f"  {choice.name}")

    commit_type = click.prompt(
        "Commit type",
        type=click.Choice([choice.value for choice in prompt_spec.choices]),
        default=prompt_spec.default,
    )
    subject = click.prompt("Commit subject", value_proc=_subject)
    body = click.prompt(
        "Commit description (optional)",
        default="",
        show_default=False,
        value_proc=str.strip,
    )
    return CommitAnswer(commit_type=commit_type, subject=subject, body=body)
