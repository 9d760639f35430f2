import pytest

from dpgraph import mapper
from dpgraph.errors import NotFoundError
from dpgraph.mapper import (
    CastingError,
    CountMapper,
    DatasetData,
    HierarchyCodelistMapper,
    InputNilError,
    Node,
    NodeIDMapper,
    Relationship,
    Result,
)
from dpgraph.models import (
    Code,
    CodeList,
    CodeListResults,
    CodeResults,
    Edition,
    Editions,
    HierarchyResponse,
)

CODE_LIST_ID = "666"
EDITION = "2018"
NODE_IDENTITY = 666
NODE_VALUE = "node-value"
REL_LABEL = "relationship label"


def test_code_success():
    node = Node(node_identity=NODE_IDENTITY, properties={"value": NODE_VALUE})
    rel = Relationship(properties={"label": REL_LABEL})
    results = CodeResults()
    mapper.codes(results, CODE_LIST_ID, EDITION)(Result(data=[node, rel]))
    assert results.items == [Code(id="666", code=NODE_VALUE, label=REL_LABEL)]


@pytest.mark.parametrize(
    "data, message",
    [
        (["not graph.Node"], 'expected "Node" but was type "str"'),
        ([Node(properties={"value": 666})], 'expected "str" but was type "int"'),
        (
            [Node(properties={"value": "99"}), "not graph.Relationship"],
            'expected "Relationship" but was type "str"',
        ),
        (
            [Node(properties={"value": "99"}), Relationship(properties={"label": 999})],
            'expected "str" but was type "int"',
        ),
    ],
)
def test_code_bad_types(data, message):
    results = CodeResults()
    with pytest.raises(CastingError) as info:
        mapper.codes(results, CODE_LIST_ID, EDITION)(Result(data=data))
    assert str(info.value) == "failed to cast value to requested type, " + message
    assert results.items == []


def test_code_empty_is_not_found():
    results = CodeResults()
    with pytest.raises(NotFoundError):
        mapper.codes(results, CODE_LIST_ID, EDITION)(Result(data=[]))
    assert results.items == []


def test_codes_appends():
    results = CodeResults()
    m = mapper.codes(results, CODE_LIST_ID, EDITION)
    for identity in (1, 2):
        m(Result(data=[Node(node_identity=identity, properties={"value": f"v{identity}"}),
                       Relationship(properties={"label": "l"})]))
    assert [c.id for c in results.items] == ["1", "2"]
    assert [c.code for c in results.items] == ["v1", "v2"]


def test_get_count():
    m = CountMapper()
    m(Result(data=[666]))
    assert m.count == 666


def test_get_count_empty():
    m = CountMapper()
    with pytest.raises(ValueError) as info:
        m(Result(data=[]))
    assert str(info.value) == "get count error: expecting single result value but 0 returned"
    assert m.count == 0


def test_get_count_wrong_type():
    m = CountMapper()
    with pytest.raises(CastingError) as info:
        m(Result(data=["I AM NOT int64"]))
    assert str(info.value) == (
        'failed to cast value to requested type, expected "int" but was type "str"'
    )
    assert m.count == 0


def test_get_node():
    expected = Node(node_identity=666, properties={"key": "value"})
    assert mapper.get_node(expected) == expected


def test_get_node_wrong_type():
    with pytest.raises(CastingError) as info:
        mapper.get_node(["Hello", "world!"])
    assert str(info.value) == (
        'failed to cast value to requested type, expected "Node" but was type "list"'
    )


def test_get_node_nil():
    with pytest.raises(InputNilError):
        mapper.get_node(None)


def test_get_relationship_nil():
    with pytest.raises(InputNilError):
        mapper.get_relationship(None)


def test_get_relationship_wrong_type():
    with pytest.raises(CastingError) as info:
        mapper.get_relationship("I AM THE OWL")
    assert str(info.value) == (
        'failed to cast value to requested type, expected "Relationship" but was type "str"'
    )


def test_get_relationship():
    rel = Relationship(properties={"key": "value"}, rel_identity=666)
    assert mapper.get_relationship(rel) == rel


def test_get_string_property_nil_props():
    with pytest.raises(InputNilError) as info:
        mapper.get_string_property("", None)
    assert str(info.value) == "expected input value but was nil"


def test_get_string_property_missing_key():
    assert mapper.get_string_property("xxx", {"aaa": "aaa"}) == ""


def test_get_string_property_wrong_type():
    with pytest.raises(CastingError) as info:
        mapper.get_string_property("a", {"a": ["not", "a", "string"]})
    assert str(info.value) == (
        'failed to cast value to requested type, expected "str" but was type "list"'
    )


def test_get_string_property_value():
    assert mapper.get_string_property("a", {"a": "aaa"}) == "aaa"


def test_get_bool_property():
    assert mapper.get_bool_property("b", {"b": True}) is True
    assert mapper.get_bool_property("x", {"b": True}) is False
    with pytest.raises(CastingError):
        mapper.get_bool_property("b", {"b": "yes"})


def test_get_int_property():
    assert mapper.get_int_property("n", {"n": 7}) == 7
    assert mapper.get_int_property("x", {}) == 0
    with pytest.raises(CastingError):
        mapper.get_int_property("n", {"n": True})


def test_node_id_mapper():
    m = NodeIDMapper()
    m(Result(data=[42]))
    assert m.node_id == "42"
    with pytest.raises(ValueError):
        m(Result(data=["abc"]))


def test_hierarchy_codelist_mapper():
    m = HierarchyCodelistMapper()
    m(Result(data=[Node(properties={"code_list": "cl1"})]))
    assert m.code_list_id == "cl1"
    with pytest.raises(ValueError, match="code_list property not found"):
        m(Result(data=[Node(properties={"code_list": 5})]))


def test_code_lists():
    results = CodeListResults()
    mapper.code_lists(results)(Result(data=[["_generic", "_code_list_cpih"]]))
    assert results.items == [CodeList(id="cpih")]


def test_code_list():
    target = CodeList()
    mapper.code_list(target, "abc")(Result(data=["x"]))
    assert target.id == "abc"
    with pytest.raises(NotFoundError):
        mapper.code_list(CodeList(), "abc")(Result(data=[]))


def test_editions_and_edition():
    node = Node(properties={"edition": "one-off", "label": "One off"})
    results = Editions()
    mapper.editions(results)(Result(data=[node]))
    assert results.items == [Edition(id="one-off", label="One off")]
    target = Edition()
    mapper.edition(target)(Result(data=[node]))
    assert target == Edition(id="one-off", label="One off")


def test_codes_datasets_collects_versions():
    datasets: dict[str, DatasetData] = {}
    m = mapper.codes_datasets(datasets)
    rel = Relationship(properties={"label": "Geography"})
    for version in (1, 3):
        node = Node(properties={"dataset_id": "ds", "edition": "time-series", "version": version})
        m(Result(data=[node, rel]))
    assert datasets == {
        "ds": DatasetData(dimension_label="Geography", editions={"time-series": [1, 3]})
    }


def test_hierarchy_and_elements():
    node = Node(properties={"code": "K02", "label": "England", "hasData": True,
                            "numberOfChildren": 4})
    response = HierarchyResponse()
    mapper.hierarchy(response)(Result(data=[node]))
    assert (response.id, response.label, response.has_data, response.no_of_children) == (
        "K02", "England", True, 4)
    elements = []
    mapper.hierarchy_element(elements)(Result(data=[node]))
    assert elements[0].id == "K02"
    assert elements[0].no_of_children == 4


def test_hierarchy_bad_property():
    node = Node(properties={"code": 1})
    with pytest.raises(ValueError, match="code property not found"):
        mapper.hierarchy(HierarchyResponse())(Result(data=[node]))