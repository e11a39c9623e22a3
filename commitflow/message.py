#!/usr/bin/env python3

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

__all__ = [
    "Choice",
    "CommitAnswer",
    "CommitCatalog",
    "CommitTypeSpec",
    "DEFAULT_CATALOG",
    "PromptSpec",
    "build_prompt",
    "compose",
    "validate_subject",
]


@dataclass(frozen=True)
class CommitTypeSpec:
    label: str
    symbol: str
    description: str


@dataclass(frozen=True)
class Choice:
    name: str
    value: str


@dataclass(frozen=True)
class PromptSpec:
    choices: Tuple[Choice, ...]
    default: str


class CommitCatalog:
    """An ordered, immutable table of commit types.

    Labels and symbols must both be unique, so each type has exactly one
    symbol and a symbol identifies its type.
    """

    def __init__(
        self, types: Iterable[CommitTypeSpec], default: Optional[str] = None
    ) -> None:
        self._types: Tuple[CommitTypeSpec, ...] = tuple(types)
        if not self._types:
            raise ValueError("Commit type catalog is empty")

        labels = [t.label for t in self._types]
        symbols = [t.symbol for t in self._types]
        if len(set(labels)) != len(labels):
            raise ValueError(f"Duplicate commit type labels: {labels}")
        if len(set(symbols)) != len(symbols):
            raise ValueError(f"Duplicate commit type symbols: {symbols}")

        self._symbols: Dict[str, str] = {t.label: t.symbol for t in self._types}

        if default is None:
            default = self._types[0].label
        if default not in self._symbols:
            raise ValueError(f"Default commit type {default!r} is not in {labels}")
        self.default = default

    def __iter__(self):
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, label: object) -> bool:
        return label in self._symbols

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(t.label for t in self._types)

    def symbol_for(self, label: str) -> str:
        """Return the symbol of ``label`` followed by the separating space.

        Raises:
            KeyError: If ``label`` is not in the catalog
        """
        return self._symbols[label] + " "


DEFAULT_CATALOG = CommitCatalog(
    [
        CommitTypeSpec("feat", "✨", "A new feature"),
        CommitTypeSpec("fix", "🐛", "A bug fix"),
        CommitTypeSpec(
            "refactor", "🔨", "A code change that neither fixes a bug nor adds a feature"
        ),
        CommitTypeSpec("chore", "🔧", "Changes to the build process or auxiliary tools"),
        CommitTypeSpec("docs", "📝", "Documentation only changes"),
        CommitTypeSpec("style", "🎨", "Formatting that does not affect how the code runs"),
        CommitTypeSpec("test", "✅", "Adding tests"),
    ],
    default="feat",
)


def validate_subject(text: str) -> str:
    """Trim a commit subject, rejecting one that is blank.

    Raises:
        ValueError: If nothing is left after trimming
    """
    subject = text.strip()
    if not subject:
        raise ValueError("A commit subject is required")
    return subject


@dataclass(frozen=True)
class CommitAnswer:
    commit_type: str
    subject: str
    body: str = ""

    def __post_init__(self) -> None:
        # frozen, so normalize through object.__setattr__
        object.__setattr__(self, "subject", validate_subject(self.subject))
        object.__setattr__(self, "body", self.body.strip())


def build_prompt(catalog: CommitCatalog) -> PromptSpec:
    """Render the catalog as aligned choices.

    Every label is padded to the longest one so that the rows line up:
    ``- <label> <symbol> <description>``.
    """
    width = max(len(t.label) for t in catalog)
    choices = tuple(
        Choice(
            name=f"- {t.label.ljust(width)} {t.symbol} {t.description}",
            value=t.label,
        )
        for t in catalog
    )
    return PromptSpec(choices=choices, default=catalog.default)


def compose(answer: CommitAnswer, catalog: CommitCatalog) -> str:
    """Build the commit message text from an answer.

    Returns:
        ``<type>: <symbol> <subject>``, followed by a blank line and the body
        when there is one
    """
    message = f"{answer.commit_type}: {catalog.symbol_for(answer.commit_type)}{answer.subject}"
    if answer.body:
        message += f"\n\n{answer.body}"
    return message
