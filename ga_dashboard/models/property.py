"""
Tracked GA4 properties and the registry that groups them
"""
import json
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple


@dataclass(frozen=True)
class Property:
    """One GA4 destination (website or app stream)"""
    key: str
    name: str
    property_id: str


@dataclass(frozen=True)
class PropertyGroup:
    """Dashboard section, e.g. Websites or Apps"""
    key: str
    label: str
    items: Tuple[Property, ...]


@dataclass(frozen=True)
class DateRange:
    """Labeled reporting window.

    ``start``/``end`` are ``YYYY-MM-DD`` dates or GA4 relative tokens
    (``today``, ``yesterday``, ``NdaysAgo``) that the backend resolves.
    """
    label: str
    start: str
    end: str


SEVEN_DAY_LABEL = "7 Days"

DEFAULT_DATE_RANGES: Tuple[DateRange, ...] = (
    DateRange("Today", "today", "today"),
    DateRange(SEVEN_DAY_LABEL, "7daysAgo", "today"),
    DateRange("14 Days", "14daysAgo", "today"),
    DateRange("28 Days", "28daysAgo", "today"),
)

TRAILING_WEEK = DateRange(SEVEN_DAY_LABEL, "7daysAgo", "today")


class PropertyRegistry:
    """Immutable set of property groups, built once at startup"""

    def __init__(self, groups: Tuple[PropertyGroup, ...], default_property: Optional[str] = None):
        self.groups = tuple(groups)
        self.default_property = default_property

    def __iter__(self) -> Iterator[Property]:
        for group in self.groups:
            yield from group.items

    def get(self, key_or_name: str) -> Optional[Property]:
        """Look up a property by registry key or display name"""
        for prop in self:
            if key_or_name in (prop.key, prop.name):
                return prop
        return None

    def resolve_property_id(self, key_or_id: Optional[str] = None) -> str:
        """
        Resolve a property argument to a GA4 property id.

        Empty → the default property; known key/name → its id;
        anything else is assumed to already be a raw property id.
        """
        if not key_or_id:
            default = self.get(self.default_property) if self.default_property else None
            if default is None:
                raise ValueError("No property given and no default property configured")
            return default.property_id

        prop = self.get(key_or_id)
        if prop:
            return prop.property_id
        return key_or_id

    @classmethod
    def from_dict(cls, data: Dict) -> "PropertyRegistry":
        """
        Build from the JSON registry layout:

            {
              "defaultProperty": "freeshow",
              "groups": {
                "websites": {"label": "Websites",
                             "items": {"freeshow": {"name": "FreeShow.app", "id": "408962359"}}}
              }
            }
        """
        groups = []
        for group_key, group in data.get("groups", {}).items():
            items = tuple(
                Property(key=key, name=item.get("name", key), property_id=str(item["id"]))
                for key, item in group.get("items", {}).items()
            )
            groups.append(PropertyGroup(key=group_key, label=group.get("label", group_key), items=items))
        return cls(tuple(groups), default_property=data.get("defaultProperty"))

    @classmethod
    def from_file(cls, path: str) -> "PropertyRegistry":
        with open(path) as f:
            return cls.from_dict(json.load(f))


DEFAULT_REGISTRY = {
    "defaultProperty": "freeshow",
    "groups": {
        "websites": {
            "label": "Websites",
            "items": {
                "freeshow": {"name": "FreeShow.app", "id": "408962359"},
                "b1-web": {"name": "B1.church", "id": "363397146"},
                "lessons-church": {"name": "Lessons.church", "id": "363411724"},
                "churchapps": {"name": "ChurchApps.org", "id": "363427908"},
            },
        },
        "apps": {
            "label": "Apps",
            "items": {
                "b1-admin": {"name": "B1 Admin", "id": "516573834"},
                "freeshow-app": {"name": "FreeShow App", "id": "416366588"},
                "b1-mobile": {"name": "B1 Mobile", "id": "347220825"},
                "b1-checkin": {"name": "B1 Checkin", "id": "508251303"},
            },
        },
    },
}


def load_registry(properties_file: Optional[str] = None) -> PropertyRegistry:
    """Registry from the configured JSON file, else the built-in one"""
    if properties_file:
        return PropertyRegistry.from_file(properties_file)
    return PropertyRegistry.from_dict(DEFAULT_REGISTRY)
