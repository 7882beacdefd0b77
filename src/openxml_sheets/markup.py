"""Schema-driven markup decoding for package parts.

Every part type (relationships, workbook, worksheet) is decoded by the same
mechanism: an ElementSchema declares which attributes, text and child
elements of a root element map onto which fields, the markup is walked
against that declaration with lxml, and the resulting mapping is validated
into a pydantic model.

Elements and attributes are matched on their local name, so namespace
prefixes used by different writers do not matter. Anything the schema does
not mention is ignored.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

from lxml import etree
from pydantic import BaseModel, ValidationError

from openxml_sheets.utils.exceptions import DecodeError
from openxml_sheets.utils.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class ChildBinding:
    """Binds child elements of an element to a model field.

    Attributes:
        path: Slash-separated local names leading to the child, relative to
            the bound element (e.g. "sheets/sheet").
        field: Name of the target field.
        schema: Schema of the child. When None the child's text is used.
        repeated: Collect every match into a list instead of the first one.
    """

    path: str
    field: str
    schema: ElementSchema | None = None
    repeated: bool = False

    @property
    def steps(self) -> tuple[str, ...]:
        return tuple(self.path.split("/"))


@dataclass(frozen=True)
class ElementSchema:
    """Declares the expected shape of one element.

    Attributes:
        tag: Local name of the element.
        attributes: Attribute local name to field name.
        text: Field receiving the element text, if any.
        children: Child element bindings.
    """

    tag: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    text: str | None = None
    children: tuple[ChildBinding, ...] = ()


def local_name(element: etree._Element) -> str:
    """Return the tag of an element without its namespace."""
    return etree.QName(element).localname


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        load_dtd=False,
        huge_tree=False,
        remove_comments=True,
        remove_pis=True,
    )


def _iter_path(element: etree._Element, steps: tuple[str, ...]) -> Iterator[etree._Element]:
    """Yield descendants along a path of local names in document order."""
    head, rest = steps[0], steps[1:]
    for child in element:
        if not isinstance(child.tag, str) or local_name(child) != head:
            continue
        if rest:
            yield from _iter_path(child, rest)
        else:
            yield child


def _decode_attributes(element: etree._Element, schema: ElementSchema) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key, value in element.attrib.items():
        name = etree.QName(key).localname
        target = schema.attributes.get(name)
        if target is not None and target not in values:
            values[target] = value
    return values


def _decode_element(element: etree._Element, schema: ElementSchema) -> dict[str, Any]:
    values = _decode_attributes(element, schema)

    if schema.text is not None:
        values[schema.text] = element.text or ""

    for binding in schema.children:
        matches = _iter_path(element, binding.steps)
        if binding.repeated:
            values[binding.field] = [_decode_child(m, binding) for m in matches]
            continue
        first = next(matches, None)
        if first is not None:
            values[binding.field] = _decode_child(first, binding)

    return values


def _decode_child(element: etree._Element, binding: ChildBinding) -> Any:
    if binding.schema is None:
        return element.text or ""
    return _decode_element(element, binding.schema)


def decode_part(
    data: bytes,
    schema: ElementSchema,
    model: type[ModelT],
    part_name: str | None = None,
) -> ModelT:
    """Decode the markup of a part into a model instance.

    Args:
        data: Raw part content.
        schema: Expected shape of the root element.
        model: Pydantic model the decoded mapping is validated into.
        part_name: Name of the part, used in error details.

    Returns:
        The validated model instance.

    Raises:
        DecodeError: If the markup is malformed, the root element does not
            match the schema, or the decoded values fail validation.
    """
    try:
        root = etree.fromstring(data, parser=_make_parser())
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise DecodeError(
            f"Malformed markup in '{part_name or schema.tag}': {exc}",
            part_name=part_name,
        ) from exc

    if root is None:
        raise DecodeError(
            f"Empty document in '{part_name or schema.tag}'",
            part_name=part_name,
        )

    root_name = local_name(root)
    if root_name != schema.tag:
        raise DecodeError(
            f"Expected root element '{schema.tag}', found '{root_name}'",
            part_name=part_name,
            details={"expected": schema.tag, "found": root_name},
        )

    values = _decode_element(root, schema)
    try:
        result = model.model_validate(values)
    except ValidationError as exc:
        raise DecodeError(
            f"Unexpected content in '{part_name or schema.tag}': "
            f"{exc.error_count()} validation error(s)",
            part_name=part_name,
            details={"errors": exc.errors(include_url=False)},
        ) from exc

    logger.debug("Decoded part", part=part_name, root=root_name)
    return result
