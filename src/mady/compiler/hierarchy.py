"""Locale hierarchy construction and fallback candidate resolution.

Every ``-``/``_`` delimited prefix of a configured language is a node of the
tree (``en-US-posix`` implies ``en`` and ``en-US``). For each node the
candidate translations are, lowest priority first:

1. translations of its descendants, depth-first in tree order;
2. the resolved candidates of each strict ancestor, root-most first, which
   is also how a sibling dialect reaches the node through the common parent;
3. its own translations.

When the list is flattened the last candidate for a key wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from mady.models import Translation, canonical_tag, language_tokens


@dataclass
class LanguageNode:
    tag: str
    label: str
    parent: str | None = None
    children: list[str] = field(default_factory=list)


class LanguageTree:
    """Parent/child structure implied by a set of language tags."""

    def __init__(self, langs: Iterable[str]) -> None:
        self.nodes: dict[str, LanguageNode] = {}
        configured = sorted(set(langs))
        for lang in configured:
            tokens = language_tokens(lang)
            for depth in range(1, len(tokens) + 1):
                tag = "-".join(tokens[:depth])
                if tag in self.nodes:
                    continue
                parent = "-".join(tokens[: depth - 1]) if depth > 1 else None
                self.nodes[tag] = LanguageNode(tag=tag, label=tag, parent=parent)
                if parent is not None:
                    self.nodes[parent].children.append(tag)
        # Configured spellings (e.g. ``pt_BR``) name the outputs of their node.
        for lang in reversed(configured):
            self.nodes[canonical_tag(lang)].label = lang

    def tags(self) -> list[str]:
        return sorted(self.nodes)

    def ancestors(self, tag: str) -> list[str]:
        """Return the strict ancestors of ``tag``, root-most first."""

        chain: list[str] = []
        parent = self.nodes[tag].parent
        while parent is not None:
            chain.append(parent)
            parent = self.nodes[parent].parent
        return chain[::-1]

    def descendants(self, tag: str) -> list[str]:
        """Return every descendant of ``tag``, depth-first in tree order."""

        out: list[str] = []
        for child in self.nodes[tag].children:
            out.append(child)
            out.extend(self.descendants(child))
        return out


def resolve_candidates(
    langs: Iterable[str], translations: Iterable[Translation]
) -> dict[str, list[Translation]]:
    """Return the ordered candidate list of every hierarchy node, keyed by node label.

    Candidates are concatenated, not deduplicated; storage order is preserved
    within each tier.
    """

    tree = LanguageTree(langs)
    own: dict[str, list[Translation]] = {}
    for translation in translations:
        own.setdefault(canonical_tag(translation.lang), []).append(translation)

    resolved: dict[str, list[Translation]] = {}

    def resolve(tag: str) -> list[Translation]:
        if tag not in resolved:
            candidates: list[Translation] = []
            for descendant in tree.descendants(tag):
                candidates.extend(own.get(descendant, []))
            for ancestor in tree.ancestors(tag):
                candidates.extend(resolve(ancestor))
            candidates.extend(own.get(tag, []))
            resolved[tag] = candidates
        return resolved[tag]

    return {tree.nodes[tag].label: resolve(tag) for tag in tree.tags()}


def hierarchy_languages(langs: Iterable[str]) -> list[str]:
    """Return the labels of every node implied by ``langs``."""

    tree = LanguageTree(langs)
    return [tree.nodes[tag].label for tag in tree.tags()]


__all__ = [
    "LanguageNode",
    "LanguageTree",
    "canonical_tag",
    "hierarchy_languages",
    "language_tokens",
    "resolve_candidates",
]
