"""
crawl_hooks/data_models/records.py

Data models for the records produced by the instrumentation layer.
Field aliases are the wire names the crawler process reads back.
"""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RecordModel(BaseModel):
    """
    Base model for instrumentation records.
    Records are immutable once captured.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Dump the record as plain data using wire (alias) field names."""
        return self.model_dump(by_alias=True)


## Navigation

class NavigationSource(StrEnum):
    """APIs through which a page can navigate or open a new destination."""
    HISTORY_PUSH = "history.pushState"
    HISTORY_REPLACE = "history.replaceState"
    WINDOW_OPEN = "window.open"
    HASH_CHANGE = "hashchange"
    WEBSOCKET = "websocket"
    EVENT_SOURCE = "eventsource"
    FETCH = "fetch"


class NavigationEvent(RecordModel):
    """
    A navigation observed through a hooked navigation sink.
    """
    url: str | None = Field(
        default=None,
        description="Destination or resource URL; absent for some sources",
        examples=["/x", "https://example.com/api/data", "wss://example.com/socket"],
    )
    source: NavigationSource = Field(
        ...,
        description="The API that produced the navigation",
    )


## Elements

class ElementDescriptor(RecordModel):
    """
    Snapshot of an element at capture time, with its CSS path and XPath.
    """
    tag_name: str = Field(
        ...,
        alias="tagName",
        description="Upper-cased tag name",
        examples=["BUTTON", "INPUT"],
    )
    id: str = Field(
        default="",
        description="The id attribute, empty when absent",
    )
    classes: str = Field(
        default="",
        description="Space separated class names",
    )
    attributes: dict[str, str] = Field(
        default_factory=dict,
        description="Copy of the attribute map at capture time",
    )
    text_content: str = Field(
        default="",
        alias="textContent",
        description="Trimmed text content",
    )
    hidden: bool = Field(
        default=False,
        description="Whether the hidden attribute is present",
    )
    name: str | None = Field(
        default=None,
        description="The name attribute",
    )
    type: str | None = Field(
        default=None,
        description="Control type (e.g. 'text', 'submit'), None for non-controls",
    )
    value: str = Field(
        default="",
        description="Current value of form controls",
    )
    outer_html: str = Field(
        default="",
        alias="outerHTML",
        description="Serialized element, possibly truncated",
    )
    css_selector: str = Field(
        default="",
        alias="cssSelector",
        description="CSS selector path from the document root",
        examples=["HTML > BODY > DIV#main > BUTTON.primary"],
    )
    xpath: str = Field(
        default="",
        description="XPath from the document root",
        examples=["/html/body/div[2]/button"],
    )


class EventListenerRecord(RecordModel):
    """
    A listener registration observed on an element.
    """
    element: ElementDescriptor = Field(
        ...,
        description="The element the listener was registered on",
    )
    event_type: str = Field(
        ...,
        alias="type",
        description="The event type",
        examples=["click", "submit"],
    )
    listener_source: str = Field(
        default="",
        alias="listener",
        description="Textual form of the registered callback. Never executed.",
    )
    options: Any = Field(
        default_factory=dict,
        description="Registration options as supplied, {} when none were given",
    )


class InlineListener(RecordModel):
    """
    An inline `on*` handler attribute.
    """
    event_type: str = Field(..., alias="type", examples=["onclick"])
    listener_source: str = Field(default="", alias="listener")


class ElementListeners(RecordModel):
    """
    An element together with its inline handlers.
    """
    element: ElementDescriptor
    listeners: list[InlineListener] = Field(default_factory=list)


## Forms

class FormDescriptor(RecordModel):
    """
    Snapshot of a form (or pseudo-form) with its controls.
    """
    tag_name: str = Field(..., alias="tagName")
    id: str = Field(default="")
    classes: str = Field(default="")
    attributes: dict[str, str] = Field(default_factory=dict)
    outer_html: str = Field(default="", alias="outerHTML")
    action: str = Field(
        default="",
        description="The action attribute, empty when absent",
    )
    method: str = Field(
        default="get",
        description="Lower-cased submission method",
    )
    xpath: str = Field(default="")
    css_selector: str = Field(default="", alias="cssSelector")
    elements: list[ElementDescriptor] = Field(
        default_factory=list,
        description="Controls contained in the form",
    )
