"""Tests for Collection building and reference resolution."""

import pytest

from doc_xref.core.collection import Collection, build, find_duplicate_slugs
from doc_xref.core.errors import DanglingReferenceError, DuplicateSlugError
from doc_xref.core.resolver import ResolutionErrors, resolve, resolve_article, validate_all
from doc_xref.core.types import Article, Prose, Reference, TopicList


def _article(slug: str, refs=(), topics=(), path=None) -> Article:
    body = (Prose(text=f"About {slug}", references=tuple(Reference(t, slug) for t in refs)),)
    topic_lists = ()
    if topics:
        topic_lists = (TopicList(heading="Related", references=tuple(Reference(t, slug) for t in topics)),)
    return Article(slug=slug, title=slug.title(), body=body, topics=topic_lists, path=path)


def test_build_with_unique_slugs_keeps_every_article():
    """Collection size should equal the number of articles"""
    articles = [_article("a"), _article("b"), _article("c")]
    collection = build(articles)

    assert isinstance(collection, Collection)
    assert len(collection) == 3
    assert list(collection) == ["a", "b", "c"]


def test_build_empty_collection():
    """Building from no articles yields an empty collection"""
    assert len(build([])) == 0


def test_build_rejects_duplicate_slug():
    """Two articles sharing a slug should fail naming that slug"""
    with pytest.raises(DuplicateSlugError) as exc_info:
        build([_article("x"), _article("x")])

    assert exc_info.value.slug == "x"
    assert exc_info.value == DuplicateSlugError("x")
    assert exc_info.value.kind == "duplicate_slug"


def test_duplicate_slug_error_lists_paths():
    """Duplicate errors should name both source files when known"""
    with pytest.raises(DuplicateSlugError) as exc_info:
        build([_article("x", path="one/x.md"), _article("x", path="two/x.md")])

    assert exc_info.value.paths == ("one/x.md", "two/x.md")
    assert "one/x.md" in str(exc_info.value)


def test_find_duplicate_slugs_reports_every_duplicate():
    """All duplicated slugs should be reported, in first-seen order"""
    articles = [_article("y"), _article("x"), _article("y"), _article("x"), _article("z")]

    duplicates = find_duplicate_slugs(articles)

    assert duplicates == [DuplicateSlugError("y"), DuplicateSlugError("x")]


def test_find_duplicate_slugs_empty_when_unique():
    assert find_duplicate_slugs([_article("a"), _article("b")]) == []


def test_resolve_returns_exact_article():
    """resolve should hand back the very Article stored under the slug"""
    target = _article("b")
    collection = build([_article("a", refs=["b"]), target])

    assert resolve(collection, Reference("b", "a")) is target


def test_resolve_missing_slug_raises():
    """Unknown slugs should raise a DanglingReferenceError"""
    collection = build([_article("a", refs=["missing"])])

    with pytest.raises(DanglingReferenceError) as exc_info:
        resolve(collection, Reference("missing", "a", line=7))

    error = exc_info.value
    assert error == DanglingReferenceError("missing", "a")
    assert error.line == 7
    assert "a:7" in str(error)


def test_resolve_is_case_sensitive():
    """Slugs are matched exactly, without case folding"""
    collection = build([_article("PwC")])

    with pytest.raises(DanglingReferenceError):
        resolve(collection, Reference("pwc", "PwC"))


def test_self_reference_resolves():
    """An article referencing itself is legal"""
    article = _article("a", refs=["a"])
    collection = build([article])

    assert resolve(collection, Reference("a", "a")) is article
    assert list(validate_all(collection)) == []


def test_validate_all_clean_collection():
    """a -> b with b present should produce no errors"""
    collection = build([_article("a", refs=["b"]), _article("b")])

    assert list(validate_all(collection)) == []


def test_validate_all_reports_dangling_reference():
    """a -> missing should produce exactly one error"""
    collection = build([_article("a", refs=["missing"])])

    assert list(validate_all(collection)) == [DanglingReferenceError("missing", "a")]


def test_validate_all_reports_one_error_per_reference():
    """Every unresolved reference is reported; none are dropped"""
    collection = build(
        [
            _article("a", refs=["m", "b", "m"]),
            _article("b", refs=["n"]),
        ]
    )

    errors = list(validate_all(collection))

    assert errors == [
        DanglingReferenceError("m", "a"),
        DanglingReferenceError("m", "a"),
        DanglingReferenceError("n", "b"),
    ]


def test_validate_all_checks_topic_lists_in_order():
    """Topic list entries are validated after body references, in declared order"""
    collection = build([_article("a", refs=["x"], topics=["y", "a", "z"])])

    errors = list(validate_all(collection))

    assert [e.slug for e in errors] == ["x", "y", "z"]


def test_validate_all_is_restartable_and_idempotent():
    """Iterating the result twice should give the same errors"""
    collection = build([_article("a", refs=["missing", "gone"]), _article("b", refs=["a"])])

    errors = validate_all(collection)

    assert isinstance(errors, ResolutionErrors)
    first = list(errors)
    second = list(errors)
    assert first == second
    assert len(first) == 2
    assert list(validate_all(collection)) == first


def test_validate_all_parallel_matches_sequential():
    """Thread-pool validation keeps collection order"""
    articles = [_article(f"a{i}", refs=[f"a{i + 1}", f"missing{i}"]) for i in range(20)]
    collection = build(articles)

    sequential = list(validate_all(collection))
    parallel = list(validate_all(collection, workers=4))

    assert parallel == sequential
    assert len(parallel) == 21


def test_cycles_are_not_errors():
    """a -> b -> a is a legal cycle"""
    collection = build([_article("a", refs=["b"]), _article("b", refs=["a"])])

    assert list(validate_all(collection)) == []


def test_resolve_article_returns_handles():
    """resolve_article pairs each reference with its target article"""
    b = _article("b")
    a = _article("a", refs=["b"], topics=["a"])
    collection = build([a, b])

    resolved = resolve_article(collection, a)

    assert [r.article for r in resolved] == [b, a]
    assert resolved[0].article is b
    assert resolved[0].reference == Reference("b", "a")


def test_resolve_article_raises_on_dangling():
    collection = build([_article("a", refs=["nope"])])

    with pytest.raises(DanglingReferenceError):
        resolve_article(collection, collection["a"])


def test_collection_is_read_only():
    """Collections expose no mutation"""
    collection = build([_article("a")])

    with pytest.raises(TypeError):
        collection["b"] = _article("b")  # type: ignore[index]


def test_dangling_error_names_the_containing_article():
    """The error source is the article being checked, not the reference's own field"""
    article = Article(
        slug="a",
        title="A",
        body=(Prose(text="x", references=(Reference("missing", "zzz"),)),),
    )

    errors = list(validate_all(build([article])))

    assert errors[0].source == "a"
