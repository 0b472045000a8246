"""
Reference graph over a Collection.

The graph is informational: it powers backlink and orphan reports. Cycles
are legal because references are non-owning links.
"""

from __future__ import annotations

import networkx as nx

from .collection import Collection


class ReferenceGraph:
    """Directed graph with one node per slug and one edge per linked pair.

    Dangling references are left out; repeated references between the same
    two articles collapse into a single edge carrying a ``count``.
    """

    def __init__(self, graph: nx.DiGraph) -> None:
        self._graph = graph

    @classmethod
    def from_collection(cls, collection: Collection) -> "ReferenceGraph":
        graph = nx.DiGraph()
        for slug, article in collection.items():
            graph.add_node(slug, title=article.title, root=article.metadata.technology_root)
        for slug, article in collection.items():
            for ref in article.references:
                if ref.target not in collection:
                    continue
                if graph.has_edge(slug, ref.target):
                    graph[slug][ref.target]["count"] += 1
                else:
                    graph.add_edge(slug, ref.target, count=1)
        return cls(graph)

    @property
    def graph(self) -> nx.DiGraph:
        return self._graph

    def outgoing(self, slug: str) -> list[str]:
        if not self._graph.has_node(slug):
            return []
        return list(self._graph.successors(slug))

    def backlinks(self, slug: str) -> list[str]:
        """Slugs of the articles that link to ``slug``."""
        if not self._graph.has_node(slug):
            return []
        return list(self._graph.predecessors(slug))

    def orphans(self) -> list[str]:
        """Non-root articles that no other article links to."""
        orphans = []
        for slug, data in self._graph.nodes(data=True):
            if data.get("root"):
                continue
            incoming = [src for src in self._graph.predecessors(slug) if src != slug]
            if not incoming:
                orphans.append(slug)
        return orphans

    def cycles(self) -> list[list[str]]:
        """Reference cycles between distinct articles."""
        return [cycle for cycle in nx.simple_cycles(self._graph) if len(cycle) > 1]
