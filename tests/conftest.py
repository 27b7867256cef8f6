import copy

import pytest

OBJECT_IO = {
    "documentation": "The root of the type hierarchy",
    "events": [],
    "metadataDefaults": {
        "phetioArchetypePhetioID": None,
        "phetioDesigned": False,
        "phetioDocumentation": "",
        "phetioDynamicElement": False,
        "phetioEventType": "MODEL",
        "phetioFeatured": False,
        "phetioHighFrequency": False,
        "phetioIsArchetype": False,
        "phetioPlayback": False,
        "phetioReadOnly": False,
        "phetioState": True,
        "phetioTypeName": "ObjectIO"
    },
    "methodOrder": [],
    "methods": {},
    "parameterTypes": [],
    "supertype": None,
    "typeName": "ObjectIO"
}


def build_api(elements=None, types=None, version=(1, 0)):
    """A current-format descriptor with ObjectIO registered, or legacy when version is None."""
    object_io = copy.deepcopy(OBJECT_IO)
    if version is None:
        del object_io["metadataDefaults"]

    api = {
        "phetioElements": copy.deepcopy(elements or {}),
        "phetioFullAPI": True,
        "phetioTypes": {"ObjectIO": object_io},
        "sim": "natural-selection"
    }
    if types:
        api["phetioTypes"].update(copy.deepcopy(types))
    if version is not None:
        api["version"] = {"major": version[0], "minor": version[1]}
    return api


@pytest.fixture
def make_api():
    return build_api


@pytest.fixture
def dense_defaults():
    """Every ObjectIO metadata value, as a legacy descriptor writes it."""
    return copy.deepcopy(OBJECT_IO["metadataDefaults"])
