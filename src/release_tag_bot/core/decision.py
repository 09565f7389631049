"""Tag decision engine.

Turns a commit corpus and the repository's existing tag names into a
TagDecision. The engine is pure: the only collaborator it may consult is an
optional ``tag_exists`` callable supplied by the caller, and identical
inputs always produce an identical decision.

A repository without any valid semver tag starts from a 0.0.0 baseline
rather than failing, so the first qualifying merge into a fresh repository
produces 0.0.1, 0.1.0 or 1.0.0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from release_tag_bot.core.commits import classify_commits
from release_tag_bot.core.version import BumpType, Version, parse_tag

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

logger = logging.getLogger(__name__)

REASON_NO_KEYWORDS = "no matching keywords"
REASON_TAG_EXISTS = "tag already exists"


class DecisionAction(StrEnum):
    """What the caller should do with a decision."""

    CREATE = "create"
    SKIP = "skip"


@dataclass(frozen=True)
class TagDecision:
    """Outcome of a single decision run.

    For a NONE bump, ``baseline`` and ``next_version`` are None. For every
    other bump they are always set, even when the decision is to skip
    because the tag already exists.
    """

    action: DecisionAction
    bump: BumpType
    reason: str | None = None
    baseline: Version | None = None
    baseline_tag: str | None = None
    next_version: Version | None = None
    next_tag: str | None = None
    exists_already: bool = False

    @property
    def should_create(self) -> bool:
        return self.action is DecisionAction.CREATE


@dataclass(frozen=True)
class Baseline:
    """Version the next tag is computed from."""

    version: Version
    tag: str
    is_fallback: bool = False


def select_baseline(tag_names: Iterable[str], v_prefix: bool = False) -> Baseline:
    """Find the latest valid semver tag.

    Names that do not parse are skipped. If none parse, a 0.0.0 baseline
    formatted with ``v_prefix`` is returned and flagged as a fallback.

    Args:
        tag_names: Tag names as listed by the repository host
        v_prefix: Prefix used to name the fallback baseline

    Returns:
        Baseline with the highest version and its original tag name
    """
    candidates: list[tuple[Version, str]] = []
    for name in tag_names:
        version = parse_tag(name)
        if version is not None:
            candidates.append((version, name))

    if not candidates:
        zero = Version.zero()
        return Baseline(zero, zero.format(v_prefix), is_fallback=True)

    # max() keeps the first of equal versions, e.g. "v1.2.3" vs "1.2.3"
    version, name = max(candidates, key=lambda candidate: candidate[0])
    return Baseline(version, name)


def decide(
    commit_corpus: Sequence[str],
    existing_tag_names: Iterable[str],
    v_prefix: bool,
    *,
    fallback_text: str | None = None,
    tag_exists: Callable[[str], bool] | None = None,
) -> TagDecision:
    """Decide whether and which tag to create.

    Args:
        commit_corpus: Raw commit messages of the change set
        existing_tag_names: Every tag name known to the repository host
        v_prefix: Format the next tag with a leading ``v``
        fallback_text: Text classified only if the commits yield no bump
        tag_exists: Called with the next tag name; returning True turns the
            decision into an idempotent skip

    Returns:
        TagDecision describing the action to take
    """
    bump = classify_commits(commit_corpus, fallback_text)
    if bump is BumpType.NONE:
        logger.info("No matching keywords found for version update. Version update skipped")
        return TagDecision(action=DecisionAction.SKIP, bump=bump, reason=REASON_NO_KEYWORDS)

    baseline = select_baseline(existing_tag_names, v_prefix)
    if baseline.is_fallback:
        logger.info("No valid tags found. Starting from 0.0.0 baseline.")

    following = baseline.version.bump(bump)
    next_tag = following.format(v_prefix)
    logger.debug("Bump %s: %s -> %s", bump, baseline.version, next_tag)

    fields = {
        "bump": bump,
        "baseline": baseline.version,
        "baseline_tag": baseline.tag,
        "next_version": following,
        "next_tag": next_tag,
    }

    if tag_exists is not None and tag_exists(next_tag):
        logger.info("Tag %s already exists. Nothing to do.", next_tag)
        return TagDecision(
            action=DecisionAction.SKIP,
            reason=REASON_TAG_EXISTS,
            exists_already=True,
            **fields,
        )

    return TagDecision(action=DecisionAction.CREATE, **fields)
