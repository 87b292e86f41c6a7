"""Resolume Arena advanced-output XML front-end.

Converts an exported screen setup into the logical composition mapping
understood by ``parse_descriptor``. The relevant part of an export is::

    <XmlState name="...">
      <versionInfo name="Resolume Arena" majorVersion="7" minorVersion="0"
                   microVersion="0"/>
      <ScreenSetup>
        <CurrentCompositionTextureSize width="1920" height="1080"/>
        <screens>
          <Screen>
            <layers>
              <Slice uniqueId="...">
                <Params><Param name="Name" value="Slice 1"/></Params>
                <InputRect><v x="0" y="0"/>...</InputRect>
                <OutputRect><v x="0" y="0"/>...</OutputRect>
              </Slice>
            </layers>
          </Screen>
        </screens>
      </ScreenSetup>
    </XmlState>

Parsing goes through defusedxml since descriptors are user-supplied files.
"""

from __future__ import annotations

from typing import Any
from xml.etree.ElementTree import Element

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from slicemap.composition.descriptor import parse_descriptor
from slicemap.composition.exceptions import MissingRootStructureError
from slicemap.composition.types import CompositionDescriptor

ROOT_TAG = "XmlState"


def resolume_to_mapping(
    xml_text: str | bytes, source: str | None = None
) -> dict[str, Any]:
    """Convert Resolume XML into the logical composition mapping.

    Args:
        xml_text: Content of the exported XML file. Bytes are decoded using
            the encoding named in the XML declaration (UTF-8 by default).
        source: Optional origin (file name) used in error messages.

    Returns:
        Mapping with ``name``, ``version``, ``declaredOutputSize`` (when the
        export has a composition texture size) and ``screen.regions``.

    Raises:
        MissingRootStructureError: If the XML is not well-formed, is not an
            ``XmlState`` document, or lacks ``ScreenSetup`` / ``Screen``.
    """
    try:
        root = ET.fromstring(xml_text)
    except (ET.ParseError, DefusedXmlException) as e:
        raise MissingRootStructureError(
            f"Descriptor is not well-formed XML: {e}", source, missing=ROOT_TAG
        ) from e

    if root.tag != ROOT_TAG:
        raise MissingRootStructureError(
            f"Root element is <{root.tag}>", source, missing=ROOT_TAG
        )

    screen_setup = root.find("ScreenSetup")
    if screen_setup is None:
        raise MissingRootStructureError(
            "Export has no screen setup", source, missing="ScreenSetup"
        )

    screen = screen_setup.find("screens/Screen")
    if screen is None:
        raise MissingRootStructureError(
            "Screen setup has no screens", source, missing="Screen"
        )

    mapping: dict[str, Any] = {
        "name": root.get("name"),
        "screen": {
            "regions": [_slice_to_region(s) for s in screen.findall("layers/Slice")]
        },
    }

    version = root.find("versionInfo")
    if version is not None:
        mapping["version"] = {
            "name": version.get("name"),
            "major": version.get("majorVersion"),
            "minor": version.get("minorVersion"),
            "micro": version.get("microVersion"),
        }

    texture = screen_setup.find("CurrentCompositionTextureSize")
    if texture is not None:
        mapping["declaredOutputSize"] = {
            "width": texture.get("width"),
            "height": texture.get("height"),
        }

    return mapping


def parse_resolume_xml(
    xml_text: str | bytes, source: str | None = None
) -> CompositionDescriptor:
    """Parse Resolume XML straight into a CompositionDescriptor."""
    return parse_descriptor(resolume_to_mapping(xml_text, source), source)


def _slice_to_region(element: Element) -> dict[str, Any]:
    params = [
        {"name": p.get("name"), "value": p.get("value")}
        for p in element.findall("Params/Param")
    ]
    region: dict[str, Any] = {"uniqueId": element.get("uniqueId"), "params": params}

    for tag, key in (("InputRect", "inputQuad"), ("OutputRect", "outputQuad")):
        rect = element.find(tag)
        if rect is not None:
            vertices = [{"x": v.get("x"), "y": v.get("y")} for v in rect.findall("v")]
            region[key] = {"vertices": vertices}
    return region
