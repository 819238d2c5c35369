"""
test_query.py - Unit tests for JSONPath selection and result normalization

Covers:
1. Compilation
2. Selection and match provenance
3. Normalization of zero, one and many matches
4. The non-collapsing array view
5. End-to-end query scenarios
"""

import copy
import json

import pytest

from jqr.errors import InvalidQueryError
from jqr.query import (
    INVALID_QUERY,
    NO_RESULTS,
    JSONPathEngine,
    Match,
    MatchKind,
    OutcomeKind,
    QueryOutcome,
    ResultNormalizer,
    extract_jsonpath,
    query_all,
    query_document,
    resolve,
)


@pytest.fixture
def users_doc():
    return {"users": [{"name": "Alice", "age": 30}, {"name": "Bob", "age": 25}]}


@pytest.fixture
def user_doc():
    return {"user": {"name": "Alice", "tags": ["admin", "dev"]}}


def nested_doc(depth):
    doc = leaf = {}
    for _ in range(depth):
        leaf["a"] = {}
        leaf = leaf["a"]
    return doc


# ============================================================================
# Compilation
# ============================================================================

class TestCompile:

    def test_valid_query_compiles(self):
        assert JSONPathEngine.compile("$.user.name") is not None

    @pytest.mark.parametrize("query", ["$.user[", "$.user]", "", "   "])
    def test_invalid_query_returns_none(self, query):
        assert JSONPathEngine.compile(query) is None

    def test_find_returns_none_for_invalid_query(self, user_doc):
        assert JSONPathEngine.find(user_doc, "$.user[") is None

    @pytest.mark.parametrize("query", ["$", "$.user", "$.user.name", "$.data[0]", "$.data[3].value"])
    def test_definite_paths(self, query):
        assert JSONPathEngine.is_definite(JSONPathEngine.compile(query))

    @pytest.mark.parametrize("query", ["$.*", "$.users[*]", "$..name", "$.users[0:2]"])
    def test_indefinite_paths(self, query):
        assert not JSONPathEngine.is_definite(JSONPathEngine.compile(query))


# ============================================================================
# Selection
# ============================================================================

class TestEvaluate:

    def test_matches_are_borrowed_with_location(self, user_doc):
        matches = JSONPathEngine.find(user_doc, "$.user.name")

        assert len(matches) == 1
        assert matches[0].kind is MatchKind.BORROWED
        assert matches[0].value == "Alice"
        assert matches[0].location is not None

    def test_root_is_borrowed(self, user_doc):
        matches = JSONPathEngine.find(user_doc, "$")

        assert len(matches) == 1
        assert matches[0].kind is MatchKind.BORROWED
        assert matches[0].value is user_doc

    def test_document_order(self, users_doc):
        matches = JSONPathEngine.find(users_doc, "$.users[*].name")
        assert [m.value for m in matches] == ["Alice", "Bob"]

    def test_computed_value_is_synthesized(self, users_doc):
        matches = JSONPathEngine.find(users_doc, "$.users.`len`")

        assert len(matches) == 1
        assert matches[0].kind is MatchKind.SYNTHESIZED
        assert matches[0].value == 2

    def test_missing_field_on_definite_path_is_absent(self, user_doc):
        matches = JSONPathEngine.find(user_doc, "$.user.age")

        assert len(matches) == 1
        assert matches[0].kind is MatchKind.ABSENT
        assert matches[0].value is None

    def test_index_out_of_range_is_absent(self, user_doc):
        matches = JSONPathEngine.find(user_doc, "$.user.tags[5]")
        assert [m.kind for m in matches] == [MatchKind.ABSENT]

    @pytest.mark.parametrize("query", ["$.missing[*]", "$..nothing", "$.users[?(@.age > 100)]"])
    def test_indefinite_path_with_no_match_is_empty(self, users_doc, query):
        assert JSONPathEngine.find(users_doc, query) == []

    def test_does_not_mutate_document(self, users_doc):
        before = copy.deepcopy(users_doc)
        JSONPathEngine.find(users_doc, "$..name")
        assert users_doc == before


# ============================================================================
# Normalization
# ============================================================================

class TestResolve:

    def test_borrowed_value_is_copied(self):
        source = {"a": [1, 2]}
        value = resolve(Match.borrowed(source, "$"))

        assert value == source
        assert value is not source
        assert value["a"] is not source["a"]

    def test_synthesized_value_is_taken_as_is(self):
        computed = [3, 4]
        assert resolve(Match.synthesized(computed)) is computed

    def test_absent_is_null(self):
        assert resolve(Match.absent()) is None

    def test_deeply_nested_value_is_copied(self):
        source = nested_doc(5000)
        value = resolve(Match.borrowed(source, "$"))

        for _ in range(5000):
            assert value is not source
            source, value = source["a"], value["a"]
        assert value == {}


class TestNormalize:

    def test_compile_failure(self):
        outcome = ResultNormalizer.outcome(None, "$.bad[")

        assert outcome.kind is OutcomeKind.INVALID_QUERY
        assert ResultNormalizer.normalize(outcome) == INVALID_QUERY == "Invalid JSONPath query"

    def test_empty(self):
        outcome = ResultNormalizer.outcome([])

        assert outcome.kind is OutcomeKind.EMPTY
        assert ResultNormalizer.normalize(outcome) == NO_RESULTS == "No results found"

    def test_single_match_is_unwrapped(self):
        outcome = QueryOutcome.from_matches([Match.borrowed("Alice")])
        assert ResultNormalizer.normalize(outcome) == "Alice"

    def test_single_array_match_is_not_wrapped_again(self):
        outcome = QueryOutcome.from_matches([Match.borrowed(["a", "b"])])
        assert ResultNormalizer.normalize(outcome) == ["a", "b"]

    def test_single_absent_match_is_null(self):
        outcome = QueryOutcome.from_matches([Match.absent()])
        assert ResultNormalizer.normalize(outcome) is None

    def test_many_matches_keep_order(self):
        outcome = QueryOutcome.from_matches(
            [Match.borrowed(1), Match.synthesized(2), Match.borrowed({"x": 3})]
        )
        assert ResultNormalizer.normalize(outcome) == [1, 2, {"x": 3}]

    def test_absent_inside_many_matches_is_null(self):
        outcome = QueryOutcome.from_matches([Match.borrowed("a"), Match.absent(), Match.borrowed("b")])
        assert ResultNormalizer.normalize(outcome) == ["a", None, "b"]

    def test_cardinality(self):
        outcome = QueryOutcome.from_matches([Match.borrowed(1), Match.borrowed(2)])
        assert outcome.cardinality == 2


class TestCollect:

    def test_single_match_is_wrapped(self):
        outcome = QueryOutcome.from_matches([Match.borrowed("Alice")])
        assert ResultNormalizer.collect(outcome) == ["Alice"]

    def test_empty_is_empty_list(self):
        assert ResultNormalizer.collect(QueryOutcome.from_matches([])) == []

    def test_invalid_query_raises(self):
        with pytest.raises(InvalidQueryError) as exc_info:
            ResultNormalizer.collect(QueryOutcome.invalid("$.bad["))
        assert exc_info.value.query == "$.bad["


# ============================================================================
# End-to-end scenarios
# ============================================================================

class TestExtractJsonpath:

    def test_single_field(self):
        assert extract_jsonpath({"user": {"name": "Alice"}}, "$.user.name") == "Alice"

    def test_nested_field(self):
        assert extract_jsonpath({"user": {"profile": {"name": "Bob"}}}, "$.user.profile.name") == "Bob"

    def test_wildcard_over_array(self):
        doc = {"users": [{"name": "Alice"}, {"name": "Bob"}]}
        assert extract_jsonpath(doc, "$.users[*].name") == ["Alice", "Bob"]

    def test_missing_field_is_null(self):
        assert extract_jsonpath({"user": {"name": "Alice"}}, "$.user.age") is None

    def test_malformed_query(self):
        assert extract_jsonpath({"user": {"name": "Alice"}}, "$.user[") == "Invalid JSONPath query"

    def test_no_results(self, users_doc):
        assert extract_jsonpath(users_doc, "$.missing[*]") == "No results found"

    def test_large_document(self):
        doc = {"data": [{"id": i, "value": i * 2} for i in range(1000)]}
        assert extract_jsonpath(doc, "$.data[999].value") == 1998

    def test_single_object_match_is_unwrapped(self, user_doc):
        assert extract_jsonpath(user_doc, "$.user") == {"name": "Alice", "tags": ["admin", "dev"]}

    def test_result_does_not_alias_document(self, user_doc):
        result = extract_jsonpath(user_doc, "$.user")
        result["tags"].append("changed")

        assert user_doc["user"]["tags"] == ["admin", "dev"]

    def test_idempotent(self, users_doc):
        first = json.dumps(extract_jsonpath(users_doc, "$..name"), indent=2)
        second = json.dumps(extract_jsonpath(users_doc, "$..name"), indent=2)
        assert first == second

    def test_deeply_nested_document_does_not_raise(self):
        doc = nested_doc(5000)

        assert extract_jsonpath(doc, "$..a") == "No results found"
        assert "a" in extract_jsonpath(doc, "$.a.a.a")


class TestQueryDocument:

    def test_no_query_returns_document(self):
        doc = {}
        assert query_document(doc) is doc

    def test_with_query(self, user_doc):
        assert query_document(user_doc, "$.user.name") == "Alice"


class TestQueryAll:

    def test_single_match_is_array(self, user_doc):
        assert query_all(user_doc, "$.user.name") == ["Alice"]

    def test_no_match_is_empty_array(self, users_doc):
        assert query_all(users_doc, "$.missing[*]") == []

    def test_invalid_query_raises(self, user_doc):
        with pytest.raises(InvalidQueryError):
            query_all(user_doc, "$.user[")
