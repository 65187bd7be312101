import pytest

from memlab.snek import (
    Kind,
    new_snek_array,
    new_snek_float,
    new_snek_integer,
    new_snek_string,
    new_snek_vector3,
    snek_add,
)
from memlab.vm import VM


@pytest.fixture
def vm():
    return VM()


def test_integer_is_created_and_tracked(vm):
    obj = new_snek_integer(vm, 5)
    assert obj.kind is Kind.INTEGER
    assert obj.value == 5
    assert obj.is_marked is False
    assert vm.objects == [obj]


def test_float_keeps_exact_value(vm):
    obj = new_snek_float(vm, 1.5)
    assert obj.kind is Kind.FLOAT
    assert obj.value == 1.5


def test_float_is_single_precision(vm):
    obj = new_snek_float(vm, 0.1)
    assert abs(obj.value - 0.1) < 1e-6
    assert obj.value != 0.1


def test_string_is_stored(vm):
    obj = new_snek_string(vm, "hello")
    assert obj.kind is Kind.STRING
    assert obj.value == "hello"


def test_vector3_holds_components(vm):
    x, y, z = (new_snek_integer(vm, n) for n in (1, 2, 3))
    vec = new_snek_vector3(vm, x, y, z)
    assert vec.kind is Kind.VECTOR3
    assert vec.value == (x, y, z)
    assert vm.objects[-1] is vec


@pytest.mark.parametrize("missing", [0, 1, 2])
def test_vector3_rejects_none(vm, missing):
    parts = [new_snek_integer(vm, n) for n in range(3)]
    parts[missing] = None
    before = len(vm.objects)
    with pytest.raises(ValueError):
        new_snek_vector3(vm, *parts)
    assert len(vm.objects) == before


def test_array_starts_empty(vm):
    arr = new_snek_array(vm, 4)
    assert arr.kind is Kind.ARRAY
    assert all(arr.get_item(i) is None for i in range(4))


def test_array_negative_size_rejected(vm):
    with pytest.raises(ValueError):
        new_snek_array(vm, -1)


def test_array_set_then_get(vm):
    arr = new_snek_array(vm, 2)
    item = new_snek_string(vm, "x")
    arr.set_item(1, item)
    assert arr.get_item(1) is item
    assert arr.get_item(0) is None


@pytest.mark.parametrize("index", [2, 10, -1])
def test_array_index_out_of_range(vm, index):
    arr = new_snek_array(vm, 2)
    item = new_snek_integer(vm, 1)
    with pytest.raises(IndexError):
        arr.set_item(index, item)
    with pytest.raises(IndexError):
        arr.get_item(index)


def test_array_ops_on_non_array(vm):
    obj = new_snek_integer(vm, 1)
    with pytest.raises(TypeError):
        obj.set_item(0, obj)
    with pytest.raises(TypeError):
        obj.get_item(0)


def test_array_set_none_rejected(vm):
    arr = new_snek_array(vm, 1)
    with pytest.raises(ValueError):
        arr.set_item(0, None)
    assert arr.get_item(0) is None


def test_add_integers(vm):
    result = snek_add(vm, new_snek_integer(vm, 3), new_snek_integer(vm, 4))
    assert result.kind is Kind.INTEGER
    assert result.value == 7


def test_add_integer_and_float(vm):
    result = snek_add(vm, new_snek_integer(vm, 2), new_snek_float(vm, 0.5))
    assert result.kind is Kind.FLOAT
    assert result.value == 2.5


def test_add_float_and_integer_is_symmetric(vm):
    i = new_snek_integer(vm, 2)
    f = new_snek_float(vm, 0.25)
    left = snek_add(vm, f, i)
    right = snek_add(vm, i, f)
    assert left.kind is Kind.FLOAT
    assert left.value == right.value


def test_add_strings(vm):
    result = snek_add(vm, new_snek_string(vm, "hello, "), new_snek_string(vm, "world"))
    assert result.kind is Kind.STRING
    assert result.value == "hello, world"


def test_add_tracks_result(vm):
    a = new_snek_integer(vm, 1)
    b = new_snek_integer(vm, 1)
    before = len(vm.objects)
    result = snek_add(vm, a, b)
    assert len(vm.objects) == before + 1
    assert vm.objects[-1] is result


def test_add_vectors_componentwise(vm):
    a = new_snek_vector3(vm, *(new_snek_integer(vm, n) for n in (1, 2, 3)))
    b = new_snek_vector3(vm, *(new_snek_float(vm, n) for n in (0.5, 1.5, 2.5)))
    result = snek_add(vm, a, b)
    assert result.kind is Kind.VECTOR3
    for got, p, q in zip(result.value, a.value, b.value):
        expected = snek_add(vm, p, q)
        assert got.kind is expected.kind
        assert got.value == expected.value


def test_add_arrays_concatenates(vm):
    a = new_snek_array(vm, 2)
    b = new_snek_array(vm, 1)
    items = [new_snek_integer(vm, n) for n in range(3)]
    a.set_item(0, items[0])
    a.set_item(1, items[1])
    b.set_item(0, items[2])
    result = snek_add(vm, a, b)
    assert result.kind is Kind.ARRAY
    assert [result.get_item(i) for i in range(3)] == items
    assert result.value is not a.value


def test_add_arrays_keeps_empty_slots(vm):
    a = new_snek_array(vm, 1)
    b = new_snek_array(vm, 1)
    item = new_snek_string(vm, "only")
    b.set_item(0, item)
    result = snek_add(vm, a, b)
    assert result.get_item(0) is None
    assert result.get_item(1) is item


@pytest.mark.parametrize(
    "make_a, make_b",
    [
        (lambda vm: new_snek_integer(vm, 1), lambda vm: new_snek_string(vm, "a")),
        (lambda vm: new_snek_string(vm, "a"), lambda vm: new_snek_integer(vm, 1)),
        (lambda vm: new_snek_float(vm, 1.0), lambda vm: new_snek_string(vm, "a")),
        (lambda vm: new_snek_array(vm, 1), lambda vm: new_snek_integer(vm, 1)),
        (
            lambda vm: new_snek_vector3(
                vm, *(new_snek_integer(vm, n) for n in range(3))
            ),
            lambda vm: new_snek_integer(vm, 1),
        ),
    ],
)
def test_add_incompatible_kinds(vm, make_a, make_b):
    with pytest.raises(TypeError):
        snek_add(vm, make_a(vm), make_b(vm))


def test_add_none_rejected(vm):
    with pytest.raises(ValueError):
        snek_add(vm, new_snek_integer(vm, 1), None)