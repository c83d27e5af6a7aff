"""Tests for parent/child composition: fan-out, aggregation and adoption."""

import pytest

from pyqt_formstate.exceptions import FormTreeError
from pyqt_formstate.forms import FieldSchema, Form, FormCollection, FormSchema
from pyqt_formstate.protocols import FormNode


def _positive(value, field, form):
    return "" if value > 0 else "must be positive"


@pytest.fixture
def schema():
    return FormSchema(fields={"quantity": FieldSchema(default=1, validate=_positive)})


@pytest.fixture
def tree(schema):
    root = Form(schema)
    middle = Form(schema, root)
    leaf = Form(schema, middle)
    return root, middle, leaf


def test_children_register_at_construction(tree):
    root, middle, leaf = tree
    assert root.children == (middle,)
    assert middle.children == (leaf,)
    assert leaf.parent is middle
    assert middle.parent is root
    assert isinstance(root, FormNode)


def test_validate_recurses(tree):
    root, middle, leaf = tree
    leaf.set("quantity", 0)
    root.validate()
    assert root.validated and middle.validated and leaf.validated
    assert leaf.get("quantity").validation_message == "must be positive"


def test_validated_aggregates_whole_subtree(tree):
    root, middle, leaf = tree
    root.validate()
    assert root.validated is True

    leaf.clear_validations()
    assert leaf.validated is False
    assert middle.validated is False
    assert root.validated is False


def test_own_flag_required_for_validated(tree):
    root, middle, leaf = tree
    middle.validate()
    assert middle.validated is True
    assert root.validated is False


def test_valid_aggregates_whole_subtree(tree):
    root, middle, leaf = tree
    root.validate()
    assert root.valid is True

    leaf.set("quantity", -1)
    assert leaf.valid is False
    assert middle.valid is False
    assert root.valid is False

    leaf.set("quantity", 2)
    assert root.valid is True


def test_clear_validations_recurses(tree):
    root, middle, leaf = tree
    leaf.set("quantity", 0)
    root.validate()
    root.clear_validations()
    assert leaf.get("quantity").validation_message == ""
    assert not (root.validated or middle.validated or leaf.validated)


def test_clear_fields_recurses(tree):
    root, middle, leaf = tree
    for form in tree:
        form.set("quantity", 9)
    root.validate()

    root.clear_fields()

    assert [form.fields["quantity"] for form in tree] == [1, 1, 1]
    assert not leaf.validated


def test_read_only_cascades(tree):
    root, middle, leaf = tree
    root.read_only = True
    assert middle.read_only and leaf.read_only
    assert leaf.is_field_read_only("quantity") is True

    middle.read_only = False
    assert root.read_only is True
    assert leaf.read_only is False


def test_read_only_cascades_through_collection_members():
    item_schema = FormSchema(fields={
        "sku": FieldSchema(default="", read_only=False),
        "quantity": FieldSchema(default=1),
    })
    root = Form(FormSchema(fields={"customer": FieldSchema(default="")}))
    items = FormCollection(item_schema, root)
    members = [items.add() for _ in range(3)]

    root.read_only = True

    for member in members:
        assert member.is_field_read_only("sku") is True
        assert member.is_field_read_only("quantity") is True


def test_add_child_adopts_parentless_form(schema):
    root = Form(schema)
    child = Form(schema)
    root.add_child(child)
    root.add_child(child)

    assert root.children == (child,)
    assert child.parent is root
    root.validate()
    assert child.validated


def test_add_child_already_registered_is_noop(tree):
    root, middle, leaf = tree
    root.add_child(middle)
    assert root.children == (middle,)


def test_add_child_rejects_foreign_form(tree, schema):
    root, middle, leaf = tree
    other = Form(schema)
    with pytest.raises(FormTreeError):
        other.add_child(leaf)
    with pytest.raises(FormTreeError):
        root.add_child(root)


def test_add_child_adopts_parentless_collection(schema):
    root = Form(schema)
    lines = FormCollection(schema)
    root.add_child(lines)
    member = lines.add()
    member.set("quantity", 0)

    assert lines.owner is root
    assert member.parent is None
    assert root.children == (lines,)

    root.validate()
    assert member.validated
    assert root.validated is True
    assert root.valid is False

    root.read_only = True
    assert member.is_field_read_only("quantity") is True


def test_add_child_rejects_collection_of_own_members(schema):
    root = Form(schema)
    lines = FormCollection(schema, root)
    with pytest.raises(FormTreeError):
        root.add_child(lines)


def test_remove_child_detaches(tree):
    root, middle, leaf = tree
    root.remove_child(middle)
    assert root.children == ()
    assert middle.parent is None

    root.validate()
    assert middle.validated is False
    assert root.validated is True

    # not a child any more
    root.remove_child(middle)
    assert root.children == ()


def test_empty_form_lifecycle():
    form = Form(FormSchema())
    form.validate()
    form.clear_validations()
    form.clear_fields()
    form.validate()
    assert form.validated is True
    assert form.valid is True


def test_order_form_with_line_items():
    """Order with a dynamic list of line items validates as one tree."""
    order_schema = FormSchema(fields={
        "customer": FieldSchema(title="Customer", default="", validate=lambda v, f, form: "" if v else "required"),
    })
    line_schema = FormSchema(fields={
        "sku": FieldSchema(title="SKU", default=""),
        "quantity": FieldSchema(title="Quantity", default=1, validate=_positive),
    })
    order = Form(order_schema)
    lines = FormCollection(line_schema, order)
    lines.fields = [{"sku": "A", "quantity": 2}, {"sku": "B", "quantity": 0}]

    order.set("customer", "ACME")
    order.validate()

    assert lines.validated is True
    assert order.validated is True
    assert lines.valid is False
    assert order.valid is False

    lines.get()[1].set("quantity", 5)
    assert order.valid is True


@pytest.fixture
def calls():
    return []


@pytest.fixture
def counting_schema(calls):
    def count(value, field, form):
        calls.append(form)
        return ""

    return FormSchema(fields={"quantity": FieldSchema(default=1, validate=count)})


def _times_validated(calls, form):
    return sum(1 for called in calls if called is form)


def test_validate_visits_parented_collection_members_once(schema, counting_schema, calls):
    root = Form(schema)
    lines = FormCollection(counting_schema, root)
    members = [lines.add() for _ in range(3)]

    root.validate()

    assert [_times_validated(calls, member) for member in members] == [1, 1, 1]


def test_validate_visits_adopted_collection_members_once(schema, counting_schema, calls):
    root = Form(schema)
    lines = FormCollection(counting_schema)
    members = [lines.add() for _ in range(3)]
    root.add_child(lines)

    root.validate()

    assert [_times_validated(calls, member) for member in members] == [1, 1, 1]


def test_validate_visits_twice_adopted_child_once(schema, counting_schema, calls):
    root = Form(schema)
    child = Form(counting_schema)
    root.add_child(child)
    root.add_child(child)

    root.validate()

    assert _times_validated(calls, child) == 1
