"""
Locates the card record inside a fetched JSON document.

The same card is served under several envelopes. Each envelope is modelled as
its own variant with a `match` method; variants are tried from the most
specific to the least specific and the first match wins.
"""

import logging
from typing import Any, Optional

from pydantic import ValidationError

from yoto_extractor.exceptions import SchemaError
from yoto_extractor.models.card import Card

log = logging.getLogger(__name__)


class CardEnvelope:
    """Base class for the known shapes wrapping a card."""

    name = "card"

    @classmethod
    def match(cls, doc: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Returns the raw card dict if the document has this shape."""
        raise NotImplementedError


class EmbeddedPage(CardEnvelope):
    """A server-rendered page's data block: props.pageProps.card."""

    name = "embedded page"

    @classmethod
    def match(cls, doc: dict[str, Any]) -> Optional[dict[str, Any]]:
        props = doc.get("props")
        if not isinstance(props, dict):
            return None
        page_props = props.get("pageProps")
        if not isinstance(page_props, dict):
            return None
        card = page_props.get("card")
        return card if isinstance(card, dict) else None


class WrappedApi(CardEnvelope):
    """An API response with the card under a top-level 'card' key."""

    name = "wrapped API response"

    @classmethod
    def match(cls, doc: dict[str, Any]) -> Optional[dict[str, Any]]:
        card = doc.get("card")
        return card if isinstance(card, dict) else None


class RawCard(CardEnvelope):
    """The document is the card itself."""

    name = "raw card"

    @classmethod
    def match(cls, doc: dict[str, Any]) -> Optional[dict[str, Any]]:
        if doc.get("cardId") or doc.get("title"):
            return doc
        return None


ENVELOPES: tuple[type[CardEnvelope], ...] = (EmbeddedPage, WrappedApi, RawCard)


def locate_card(doc: Any) -> tuple[type[CardEnvelope], dict[str, Any]]:
    """Finds the first envelope variant matching the document."""
    if isinstance(doc, dict):
        for envelope in ENVELOPES:
            card_data = envelope.match(doc)
            if card_data is not None:
                return envelope, card_data
    raise SchemaError("Unable to find card data in JSON response")


def normalize(doc: Any) -> Card:
    """
    Converts a raw JSON document into a validated, immutable Card.

    Raises:
        SchemaError: If no envelope matches or the card fails validation.
    """
    envelope, card_data = locate_card(doc)
    log.debug(f"Card located in {envelope.name} envelope.")
    try:
        return Card.model_validate(card_data)
    except ValidationError as e:
        raise SchemaError(f"Card data failed validation:\n{e}") from e
