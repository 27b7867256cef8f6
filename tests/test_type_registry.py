import copy

import pytest

from comparator import compare_apis
from comparator.type_registry import ADVISORY_SUFFIX

VECTOR_PROPERTY = "PropertyIO<Vector2IO>"


@pytest.fixture
def property_api(make_api):
    return make_api(version=(1, 1), types={
        VECTOR_PROPERTY: {
            "apiStateKeys": ["validValues", "units"],
            "events": ["changed"],
            "metadataDefaults": {},
            "methods": {
                "getValue": {"parameterTypes": [], "returnType": "Vector2IO"},
                "setValue": {"parameterTypes": ["Vector2IO"], "returnType": "VoidIO"},
                "link": {
                    "parameterTypes": ["FunctionIO(Vector2IO,NullableIO<Vector2IO>)=>VoidIO"],
                    "returnType": "VoidIO"
                }
            },
            "parameterTypes": ["Vector2IO"],
            "supertype": "ObjectIO"
        }
    })


def _type(api):
    return api["phetioTypes"][VECTOR_PROPERTY]


def test_identical_types(property_api):
    report = compare_apis(property_api, copy.deepcopy(property_api))

    assert report.breaking_problems == []
    assert report.designed_problems == []


def test_api_state_keys(property_api):
    reference = property_api
    proposed = copy.deepcopy(reference)

    _type(proposed)["apiStateKeys"].append("hi")
    report = compare_apis(reference, proposed)
    assert report.breaking_problems == []
    assert len(report.designed_problems) == 1

    _type(proposed)["apiStateKeys"] = ["validValues"]
    report = compare_apis(reference, proposed)
    assert report.breaking_problems == [f"{VECTOR_PROPERTY} apiStateKeys missing from proposed: units"]
    assert report.designed_problems == [
        f"{VECTOR_PROPERTY} apiStateKeys differ:\n  In reference: units\n  In proposed: "
    ]

    del _type(proposed)["apiStateKeys"]
    report = compare_apis(reference, proposed)
    assert len(report.breaking_problems) == 1
    assert len(report.designed_problems) == 1

    _type(proposed)["apiStateKeys"] = ["hi"]
    del _type(reference)["apiStateKeys"]
    report = compare_apis(reference, proposed)
    assert report.breaking_problems == []
    assert report.designed_problems == [f"{VECTOR_PROPERTY} apiStateKeys unexpectedly present"]


def test_api_state_keys_ignored_before_version_1_1(property_api):
    reference = copy.deepcopy(property_api)
    reference["version"] = {"major": 1, "minor": 0}
    proposed = copy.deepcopy(reference)
    del _type(proposed)["apiStateKeys"]

    report = compare_apis(reference, proposed)

    assert report.breaking_problems == []
    assert report.designed_problems == []


def test_missing_type(property_api, make_api):
    report = compare_apis(property_api, make_api(version=(1, 1)))

    assert report.breaking_problems == [f"Type missing: {VECTOR_PROPERTY}"]


def test_new_type_is_not_a_problem(property_api, make_api):
    report = compare_apis(make_api(version=(1, 1)), property_api)

    assert report.breaking_problems == []
    assert report.designed_problems == []


def test_changed_method_parameter_types(make_api):
    reference = make_api(types={"T": {"supertype": "ObjectIO", "methods": {
        "m": {"parameterTypes": ["X"], "returnType": "VoidIO"}
    }}})
    proposed = copy.deepcopy(reference)
    proposed["phetioTypes"]["T"]["methods"]["m"]["parameterTypes"] = ["Y"]

    report = compare_apis(reference, proposed)

    assert report.breaking_problems == ["T.m has different parameter types: [X] => [Y]"]
    assert report.designed_problems == []


def test_method_changes(property_api):
    proposed = copy.deepcopy(property_api)
    methods = _type(proposed)["methods"]
    del methods["link"]
    methods["getValue"]["returnType"] = "NullableIO<Vector2IO>"
    methods["reset"] = {"parameterTypes": [], "returnType": "VoidIO"}

    report = compare_apis(property_api, proposed)

    assert report.breaking_problems == [
        f"{VECTOR_PROPERTY}.getValue has a different return type Vector2IO => NullableIO<Vector2IO>",
        f"Method missing, type={VECTOR_PROPERTY}, method=link",
    ]


def test_events(property_api):
    proposed = copy.deepcopy(property_api)
    _type(proposed)["events"] = ["reset"]

    report = compare_apis(property_api, proposed)
    assert report.breaking_problems == [f"{VECTOR_PROPERTY} is missing event: changed"]

    _type(proposed)["events"] = ["changed", "reset"]
    assert compare_apis(property_api, proposed).breaking_problems == []


def test_supertype_and_parameter_types_are_advisory(property_api):
    proposed = copy.deepcopy(property_api)
    _type(proposed)["supertype"] = "ReadOnlyPropertyIO"
    _type(proposed)["parameterTypes"] = ["Vector3IO"]
    proposed["phetioTypes"]["ReadOnlyPropertyIO"] = {"supertype": "ObjectIO", "metadataDefaults": {}}

    report = compare_apis(property_api, proposed)

    assert report.breaking_problems == [
        f'{VECTOR_PROPERTY} supertype changed from "ObjectIO" to "ReadOnlyPropertyIO". {ADVISORY_SUFFIX}',
        f"{VECTOR_PROPERTY} parameter types changed from [Vector2IO] to [Vector3IO]. {ADVISORY_SUFFIX}",
    ]
    assert report.advisories == report.breaking_problems
    assert report.designed_problems == []

    report = compare_apis(property_api, proposed, compare_breaking_api_changes=False)
    assert report.breaking_problems == []


def test_metadata_default_changes(make_api):
    reference = make_api()
    proposed = copy.deepcopy(reference)
    proposed["phetioTypes"]["ObjectIO"]["metadataDefaults"]["phetioFeatured"] = True

    report = compare_apis(reference, proposed)

    assert report.breaking_problems == [
        f'ObjectIO metadata value phetioFeatured changed from "false" to "true". {ADVISORY_SUFFIX}'
    ]


def test_metadata_defaults_removed(make_api):
    reference = make_api(types={"T": {"supertype": "ObjectIO", "metadataDefaults": {"phetioState": False}}})
    proposed = copy.deepcopy(reference)
    del proposed["phetioTypes"]["T"]["metadataDefaults"]

    report = compare_apis(reference, proposed)

    assert len(report.breaking_problems) == 1
    assert report.breaking_problems[0].startswith("T metadata defaults not found")


def test_metadata_defaults_not_compared_for_legacy(make_api):
    reference = make_api(version=None)
    reference["phetioTypes"]["ObjectIO"]["metadataDefaults"] = {"phetioFeatured": False}
    proposed = copy.deepcopy(reference)
    proposed["phetioTypes"]["ObjectIO"]["metadataDefaults"] = {"phetioFeatured": True}

    assert compare_apis(reference, proposed).breaking_problems == []
