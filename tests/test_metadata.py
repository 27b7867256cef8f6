import pytest

from comparator import MissingTypeError, get_metadata_defaults, parse_descriptor, resolve_metadata

PROPERTY_IO = {
    "events": ["changed"],
    "methods": {},
    "supertype": "ObjectIO",
    "metadataDefaults": {"phetioState": True, "phetioFeatured": True}
}
BOOLEAN_PROPERTY_IO = {
    "events": ["changed"],
    "methods": {},
    "supertype": "PropertyIO",
    "metadataDefaults": {"phetioFeatured": False, "phetioReadOnly": True}
}


@pytest.fixture
def descriptor(make_api):
    return parse_descriptor(make_api(
        elements={
            "sim": {
                "_metadata": {},
                "flagProperty": {
                    "_metadata": {"phetioTypeName": "BooleanPropertyIO", "phetioDocumentation": "x"}
                }
            }
        },
        types={"PropertyIO": PROPERTY_IO, "BooleanPropertyIO": BOOLEAN_PROPERTY_IO}
    ))


def test_defaults_follow_supertype_chain(descriptor):
    defaults = get_metadata_defaults("BooleanPropertyIO", descriptor)

    assert defaults["phetioFeatured"] is False  # own default wins over PropertyIO
    assert defaults["phetioReadOnly"] is True
    assert defaults["phetioState"] is True
    assert defaults["phetioEventType"] == "MODEL"  # inherited from ObjectIO


def test_defaults_are_a_fresh_copy(descriptor):
    defaults = get_metadata_defaults("PropertyIO", descriptor)
    defaults["phetioState"] = False

    assert get_metadata_defaults("PropertyIO", descriptor)["phetioState"] is True
    assert descriptor.types["PropertyIO"].metadata_defaults["phetioState"] is True


def test_element_values_win_over_defaults(descriptor):
    element = descriptor.elements.children["sim"].children["flagProperty"]
    metadata = resolve_metadata(element, descriptor)

    assert metadata["phetioDocumentation"] == "x"
    assert metadata["phetioTypeName"] == "BooleanPropertyIO"
    assert metadata["phetioReadOnly"] is True
    assert metadata["phetioArchetypePhetioID"] is None


def test_missing_type_name_defaults_to_object_io(descriptor):
    metadata = resolve_metadata(descriptor.elements.children["sim"], descriptor)

    assert metadata["phetioTypeName"] == "ObjectIO"
    assert metadata["phetioState"] is True


def test_unknown_type_is_fatal(make_api):
    descriptor = parse_descriptor(make_api(
        elements={"sim": {"_metadata": {"phetioTypeName": "NumberIO"}}}
    ))
    with pytest.raises(MissingTypeError) as excinfo:
        resolve_metadata(descriptor.elements.children["sim"], descriptor)
    assert excinfo.value.type_name == "NumberIO"


def test_unknown_supertype_is_fatal(make_api):
    descriptor = parse_descriptor(make_api(types={"OrphanIO": {"supertype": "GoneIO", "metadataDefaults": {}}}))

    with pytest.raises(MissingTypeError, match="GoneIO"):
        get_metadata_defaults("OrphanIO", descriptor)


def test_legacy_metadata_is_returned_as_is(make_api, dense_defaults):
    dense_defaults["phetioTypeName"] = "NotRegisteredIO"
    descriptor = parse_descriptor(make_api(elements={"sim": dense_defaults}, version=None))
    element = descriptor.elements.children["sim"]

    assert resolve_metadata(element, descriptor) == dense_defaults


def test_legacy_container_has_no_metadata(make_api):
    descriptor = parse_descriptor(make_api(elements={"sim.model": {"phetioState": False}}, version=None))

    assert resolve_metadata(descriptor.elements.children["sim"], descriptor) is None
