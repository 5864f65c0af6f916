"""Tests for the tree validator: traversal, adjacency, type checks, pruning."""

from __future__ import annotations

import pytest

from manifestcheck.models.errors import DiagnosticCode, DiagnosticSeverity
from manifestcheck.models.schema import SchemaDescriptor, SchemaModel
from manifestcheck.models.tree import (
    Alias,
    MappingCollection,
    Scalar,
    Sequence,
    collection,
    mapping,
)
from manifestcheck.parser.loader import TrackedLoader
from manifestcheck.validation.diagnostics import DiagnosticSink
from manifestcheck.validation.paths import PathArena
from manifestcheck.validation.validator import TreeValidator, validate_tree
from tests.conftest import BROKEN_DEPLOYMENT_YAML, VALID_DEPLOYMENT_YAML


def _codes(diagnostics) -> list[DiagnosticCode]:
    return [d.code for d in diagnostics]


def _parse(content: str):
    documents = TrackedLoader().load_string(content)
    assert len(documents) == 1
    return documents[0]


# ---------------------------------------------------------------------------
# Reference scenarios
# ---------------------------------------------------------------------------


class TestReplicasScenarios:
    def test_quoted_number_is_type_mismatch(self, replicas_schema: SchemaModel) -> None:
        root = _parse('spec:\n  replicas: "3"\n')
        diagnostics = validate_tree(replicas_schema, root)
        assert _codes(diagnostics) == [DiagnosticCode.TYPE_MISMATCH]
        target = diagnostics[0].target
        assert isinstance(target, Scalar)
        assert target.text == "3"
        assert diagnostics[0].message == "Not a valid type"

    def test_plain_number_is_clean(self, replicas_schema: SchemaModel) -> None:
        root = _parse("spec:\n  replicas: 3\n")
        assert validate_tree(replicas_schema, root) == []

    def test_unknown_root_key(self, replicas_schema: SchemaModel) -> None:
        root = _parse("foo: bar\n")
        diagnostics = validate_tree(replicas_schema, root)
        assert _codes(diagnostics) == [DiagnosticCode.UNKNOWN_KEY]
        assert diagnostics[0].target is root.mappings[0]
        assert diagnostics[0].target_text == "foo"
        assert diagnostics[0].message == "Command not found in k8s"

    def test_unknown_child_key(self, replicas_schema: SchemaModel) -> None:
        root = _parse("spec:\n  unknownChild: 1\n")
        diagnostics = validate_tree(replicas_schema, root)
        assert _codes(diagnostics) == [DiagnosticCode.UNKNOWN_KEY, DiagnosticCode.INVALID_CHILD]
        child = root.mappings[0].value.mappings[0]
        assert all(d.target is child for d in diagnostics)
        assert diagnostics[1].message == "This is not a valid child node of the parent"


# ---------------------------------------------------------------------------
# Root-level handling
# ---------------------------------------------------------------------------


class TestRootEntries:
    @pytest.mark.parametrize("root", [None, MappingCollection(), Scalar.string("text")])
    def test_empty_or_absent_document(self, replicas_schema: SchemaModel, root) -> None:
        assert validate_tree(replicas_schema, root) == []

    def test_non_root_key_at_root_is_root_misuse(self, replicas_schema: SchemaModel) -> None:
        root = collection(mapping("replicas", Scalar.number(3)))
        diagnostics = validate_tree(replicas_schema, root)
        assert _codes(diagnostics) == [DiagnosticCode.ROOT_MISUSE]
        assert diagnostics[0].message == "Command is not a root node"

    def test_root_key_without_children_entry(self) -> None:
        schema = SchemaModel(root_nodes=frozenset({"orphan"}))
        root = collection(mapping("orphan", Scalar.string("x")))
        diagnostics = validate_tree(schema, root)
        assert _codes(diagnostics) == [DiagnosticCode.UNKNOWN_KEY]
        # Reported on the key itself, not the whole entry.
        assert diagnostics[0].target is root.mappings[0].key_node

    def test_root_diagnostics_come_first(self, replicas_schema: SchemaModel) -> None:
        root = _parse('spec:\n  replicas: "3"\nreplicas: 1\nfoo: 1\n')
        assert _codes(validate_tree(replicas_schema, root)) == [
            DiagnosticCode.ROOT_MISUSE,
            DiagnosticCode.UNKNOWN_KEY,
            DiagnosticCode.TYPE_MISMATCH,
        ]

    def test_all_severities_are_warnings(self, replicas_schema: SchemaModel) -> None:
        root = _parse("spec:\n  bogus: 1\nreplicas: 1\nfoo: 2\n")
        diagnostics = validate_tree(replicas_schema, root)
        assert diagnostics
        assert {d.severity for d in diagnostics} == {DiagnosticSeverity.WARNING}


# ---------------------------------------------------------------------------
# Traversal order and pruning
# ---------------------------------------------------------------------------


@pytest.fixture
def two_branch_schema() -> SchemaModel:
    return SchemaModel(
        root_nodes=frozenset({"a", "b"}),
        children_nodes={
            "a": (SchemaDescriptor(type="object", children=("leaf",)),),
            "b": (SchemaDescriptor(type="object", children=("leaf",)),),
            "leaf": (SchemaDescriptor(type="string"),),
        },
    )


class TestTraversal:
    def test_later_root_entries_are_explored_first(self, two_branch_schema: SchemaModel) -> None:
        root = _parse("a:\n  x1: 1\nb:\n  x2: 1\n")
        diagnostics = validate_tree(two_branch_schema, root)
        assert [d.target_text for d in diagnostics] == ["x2", "x2", "x1", "x1"]

    def test_invalid_child_subtree_is_pruned(self, replicas_schema: SchemaModel) -> None:
        root = _parse('spec:\n  bogus:\n    replicas: "x"\n    deeper:\n      more: 1\n')
        diagnostics = validate_tree(replicas_schema, root)
        assert _codes(diagnostics) == [DiagnosticCode.UNKNOWN_KEY, DiagnosticCode.INVALID_CHILD]
        assert {d.target_text for d in diagnostics} == {"bogus"}

    def test_known_key_in_wrong_place_is_invalid_child_only(self) -> None:
        schema = SchemaModel(
            root_nodes=frozenset({"spec"}),
            children_nodes={
                "spec": (SchemaDescriptor(type="object", children=("replicas",)),),
                "replicas": (SchemaDescriptor(type="integer"),),
                "image": (SchemaDescriptor(type="string"),),
            },
        )
        root = _parse("spec:\n  image: nginx\n")
        assert _codes(validate_tree(schema, root)) == [DiagnosticCode.INVALID_CHILD]

    def test_collection_under_scalar_typed_key_is_explored(self) -> None:
        schema = SchemaModel(
            root_nodes=frozenset({"spec"}),
            children_nodes={
                "spec": (SchemaDescriptor(type="object", children=("inner",)),),
                "inner": (SchemaDescriptor(type="integer", children=("bogus",)),),
            },
        )
        root = _parse("spec:\n  inner: {bogus: 1}\n")
        diagnostics = validate_tree(schema, root)
        assert _codes(diagnostics) == [DiagnosticCode.UNKNOWN_KEY]
        bogus = root.mappings[0].value.mappings[0].value.mappings[0]
        assert diagnostics[0].target is bogus.key_node

    def test_unknown_key_still_explored(self) -> None:
        schema = SchemaModel(
            root_nodes=frozenset({"spec"}),
            children_nodes={
                "spec": (SchemaDescriptor(type="object", children=("partial",)),),
            },
        )
        root = _parse("spec:\n  partial:\n    child: 1\n")
        diagnostics = validate_tree(schema, root)
        # ``partial`` is adjacent to ``spec`` but has no entry of its own,
        # so its key is unknown and nothing may sit beneath it.
        assert _codes(diagnostics) == [
            DiagnosticCode.UNKNOWN_KEY,
            DiagnosticCode.UNKNOWN_KEY,
            DiagnosticCode.INVALID_CHILD,
        ]
        assert [d.target_text for d in diagnostics] == ["partial", "child", "child"]

    def test_idempotent_across_runs(self) -> None:
        root = _parse(BROKEN_DEPLOYMENT_YAML)
        schema = SchemaModel(
            root_nodes=frozenset({"spec", "kind"}),
            children_nodes={"spec": (SchemaDescriptor(type="object", children=("replicas",)),)},
        )
        first = validate_tree(schema, root)
        second = validate_tree(schema, root)
        assert first == second
        assert len(first) > 0

    def test_same_validator_appends_to_its_sink(self, replicas_schema: SchemaModel) -> None:
        root = _parse("foo: 1\nspec:\n  bogus: 2\n")
        sink = DiagnosticSink()
        validator = TreeValidator(replicas_schema, sink=sink)
        validator.traverse(root)
        first = validator.get_diagnostics()
        validator.traverse(root)
        combined = validator.get_diagnostics()
        assert len(combined) == 2 * len(first)
        assert combined[len(first):] == first
        assert sink.results() == combined


# ---------------------------------------------------------------------------
# Adjacency
# ---------------------------------------------------------------------------


class TestIsValid:
    def test_single_element_path_is_valid(self, replicas_schema: SchemaModel) -> None:
        arena = PathArena()
        index = arena.root(mapping("anything"))
        assert TreeValidator(replicas_schema).is_valid(arena.view(index))

    def test_permitted_child(self, replicas_schema: SchemaModel) -> None:
        arena = PathArena()
        index = arena.extend(arena.root(mapping("spec")), mapping("replicas"))
        assert TreeValidator(replicas_schema).is_valid(arena.view(index))

    def test_unknown_parent_is_invalid(self, replicas_schema: SchemaModel) -> None:
        arena = PathArena()
        index = arena.extend(arena.root(mapping("nope")), mapping("replicas"))
        assert not TreeValidator(replicas_schema).is_valid(arena.view(index))

    def test_only_immediate_parent_matters(self, replicas_schema: SchemaModel) -> None:
        arena = PathArena()
        top = arena.root(mapping("nope"))
        index = arena.extend(arena.extend(top, mapping("spec")), mapping("replicas"))
        assert TreeValidator(replicas_schema).is_valid(arena.view(index))

    def test_children_union_across_descriptors(self) -> None:
        schema = SchemaModel(
            root_nodes=frozenset({"a", "b"}),
            children_nodes={
                "a": (SchemaDescriptor(type="object", children=("shared",)),),
                "b": (SchemaDescriptor(type="object", children=("shared",)),),
                "shared": (
                    SchemaDescriptor(type="string", children=("x",)),
                    SchemaDescriptor(type="object", children=("y",)),
                ),
                "x": (SchemaDescriptor(type="string"),),
                "y": (SchemaDescriptor(type="string"),),
            },
        )
        root = _parse("a:\n  shared:\n    y: hello\nb:\n  shared:\n    x: hi\n")
        assert validate_tree(schema, root) == []


# ---------------------------------------------------------------------------
# Type compatibility
# ---------------------------------------------------------------------------


@pytest.fixture
def typed_schema() -> SchemaModel:
    return SchemaModel(
        root_nodes=frozenset({"count", "name", "flag", "expires", "tags", "either"}),
        children_nodes={
            "count": (SchemaDescriptor(type="integer"),),
            "name": (SchemaDescriptor(type="string"),),
            "flag": (SchemaDescriptor(type="boolean"),),
            "expires": (SchemaDescriptor(type="string"),),
            "tags": (SchemaDescriptor(type="string"),),
            "either": (
                SchemaDescriptor(type="string"),
                SchemaDescriptor(type="integer"),
            ),
        },
    )


class TestIsInvalidType:
    @pytest.mark.parametrize(
        ("document", "invalid"),
        [
            ("count: 3\n", False),
            ("count: 2.5\n", False),
            ('count: "3"\n', True),
            ("count: true\n", True),
            ("name: web\n", False),
            ("name: 80\n", True),
            ("name: null\n", False),
            ("flag: false\n", False),
            ("flag: yes\n", True),
            ("expires: 2024-01-15\n", False),
            ("expires: 2024-01-15T10:30:00Z\n", False),
            ("expires: 2024-13-01\n", True),
            ("either: 7\n", False),
            ("either: seven\n", False),
            ("either: false\n", True),
        ],
    )
    def test_scalar_values(self, typed_schema: SchemaModel, document: str, invalid: bool) -> None:
        root = _parse(document)
        assert TreeValidator(typed_schema).is_invalid_type(root.mappings[0]) is invalid

    def test_number_needs_integer_declaration(self) -> None:
        schema = SchemaModel(
            root_nodes=frozenset({"ratio"}),
            children_nodes={"ratio": (SchemaDescriptor(type="number"),)},
        )
        root = _parse("ratio: 0.5\n")
        assert TreeValidator(schema).is_invalid_type(root.mappings[0])

    @pytest.mark.parametrize(
        "document",
        ["tags: [a, b]\n", "tags:\n  - a\n", "tags: {k: v}\n", "tags:\n"],
    )
    def test_structural_values_are_exempt(self, typed_schema: SchemaModel, document: str) -> None:
        root = _parse(document)
        assert not TreeValidator(typed_schema).is_invalid_type(root.mappings[0])

    def test_alias_value_is_exempt(self, typed_schema: SchemaModel) -> None:
        node = mapping("name", Alias(anchor="x"))
        assert not TreeValidator(typed_schema).is_invalid_type(node)

    def test_unknown_key_has_nothing_to_check(self, typed_schema: SchemaModel) -> None:
        node = mapping("unknown", Scalar.string("x"))
        assert not TreeValidator(typed_schema).is_invalid_type(node)

    def test_none_is_not_invalid(self, typed_schema: SchemaModel) -> None:
        assert not TreeValidator(typed_schema).is_invalid_type(None)

    def test_collection_value_never_reported(self, replicas_schema: SchemaModel) -> None:
        # ``spec`` is declared as a string but carries a mapping.
        root = _parse("spec:\n  replicas: 1\n")
        assert validate_tree(replicas_schema, root) == []


# ---------------------------------------------------------------------------
# Child extraction
# ---------------------------------------------------------------------------


class TestGenerateChildren:
    def test_none_and_scalar(self, replicas_schema: SchemaModel) -> None:
        validator = TreeValidator(replicas_schema)
        assert validator.generate_children(None) == []
        assert validator.generate_children(Scalar.string("x")) == []

    def test_mapping_is_its_own_child(self, replicas_schema: SchemaModel) -> None:
        entry = mapping("replicas", Scalar.number(1))
        assert TreeValidator(replicas_schema).generate_children(entry) == [entry]

    def test_collection_keeps_order(self, replicas_schema: SchemaModel) -> None:
        first, second = mapping("a"), mapping("b")
        children = TreeValidator(replicas_schema).generate_children(collection(first, second))
        assert children == [first, second]

    def test_sequence_items_are_flattened(self, replicas_schema: SchemaModel) -> None:
        a, b, c = mapping("a"), mapping("b"), mapping("c")
        alias = Alias(anchor="ref")
        seq = Sequence(
            items=[
                collection(a, b),
                Scalar.string("plain"),
                Sequence(items=[collection(c)]),
                alias,
            ]
        )
        children = TreeValidator(replicas_schema).generate_children(seq)
        assert children == [a, b, c, alias]

    def test_mapping_value_inside_sequence_is_checked(self) -> None:
        schema = SchemaModel(
            root_nodes=frozenset({"containers"}),
            children_nodes={
                "containers": (SchemaDescriptor(type="array", children=("name",)),),
                "name": (SchemaDescriptor(type="string"),),
            },
        )
        root = _parse("containers:\n  - name: web\n  - nam: db\n  - name: 3\n")
        diagnostics = validate_tree(schema, root)
        assert _codes(diagnostics) == [
            DiagnosticCode.UNKNOWN_KEY,
            DiagnosticCode.INVALID_CHILD,
            DiagnosticCode.TYPE_MISMATCH,
        ]
        assert diagnostics[0].target_text == "nam"
        assert diagnostics[2].target_text == "3"


# ---------------------------------------------------------------------------
# Aliases
# ---------------------------------------------------------------------------


class TestAliases:
    def test_alias_value_is_reported_not_expanded(self) -> None:
        schema = SchemaModel(
            root_nodes=frozenset({"spec", "backup"}),
            children_nodes={
                "spec": (SchemaDescriptor(type="object", children=("replicas",)),),
                "backup": (SchemaDescriptor(type="object", children=("replicas",)),),
                "replicas": (SchemaDescriptor(type="integer"),),
            },
        )
        root = _parse('spec: &base\n  replicas: "bad"\nbackup: *base\n')
        diagnostics = validate_tree(schema, root)
        assert _codes(diagnostics) == [
            DiagnosticCode.UNSUPPORTED_ALIAS,
            DiagnosticCode.TYPE_MISMATCH,
        ]
        assert isinstance(diagnostics[0].target, Alias)
        assert diagnostics[0].target_text == "*base"
        assert diagnostics[0].message == "Aliases are not supported"

    def test_alias_sequence_item(self) -> None:
        schema = SchemaModel(
            root_nodes=frozenset({"items"}),
            children_nodes={"items": (SchemaDescriptor(type="array"),)},
        )
        root = collection(mapping("items", Sequence(items=[Alias(anchor="one")])))
        assert _codes(validate_tree(schema, root)) == [DiagnosticCode.UNSUPPORTED_ALIAS]


# ---------------------------------------------------------------------------
# Full manifests against the bundled schema
# ---------------------------------------------------------------------------


class TestKubernetesSchema:
    def test_valid_deployment(self, k8s_schema: SchemaModel) -> None:
        assert validate_tree(k8s_schema, _parse(VALID_DEPLOYMENT_YAML)) == []

    def test_broken_deployment(self, k8s_schema: SchemaModel) -> None:
        diagnostics = validate_tree(k8s_schema, _parse(BROKEN_DEPLOYMENT_YAML))
        assert _codes(diagnostics) == [
            DiagnosticCode.UNKNOWN_KEY,
            DiagnosticCode.INVALID_CHILD,
            DiagnosticCode.TYPE_MISMATCH,
        ]
        assert [d.target_text for d in diagnostics] == ["imagee", "imagee", "two"]
        assert diagnostics[0].span is not None
        assert diagnostics[0].span.line == 9
