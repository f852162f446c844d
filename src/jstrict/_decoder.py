"""Decoder facade: parse then bind, all or nothing."""

import logging
from typing import Any

from ._binder import Binder
from ._config import DecodeConfig
from ._errors import Cancelled
from ._errors import JSONDecodeError
from ._guard import Deadline
from ._location import FieldPath
from ._parser import JsonInput
from ._parser import parse
from ._profile import ProfileContext
from ._registry import CompiledSchema
from ._registry import SchemaRegistry
from ._schema import Ref
from ._schema import SchemaType
from ._values import ParseValue

logger = logging.getLogger(__name__)


class Decoder:
    """
    Decodes documents of one schema.

    Immutable once constructed; a single instance may be shared by any
    number of threads. Passing an uncompiled schema compiles it here, so
    schema errors surface at construction rather than per request.
    """

    def __init__(
        self,
        schema: CompiledSchema | SchemaType | Ref,
        config: DecodeConfig | None = None,
    ) -> None:
        if not isinstance(schema, CompiledSchema):
            schema = SchemaRegistry().compile(schema)
        self.schema = schema
        self.config = config if config is not None else DecodeConfig()
        self._binder = Binder(self.config)
        self._root_path = FieldPath(schema.root_name)

    def parse(
        self, data: JsonInput, *, deadline: Deadline | None = None
    ) -> ParseValue:
        """Parses without binding, under this decoder's limits."""
        return parse(data, limits=self.config.limits, deadline=deadline)

    def decode(
        self, data: JsonInput, *, deadline: Deadline | None = None
    ) -> Any:
        """
        Validates ``data`` and binds it to the schema.

        Returns the bound value, or raises the first violation found.
        """
        with ProfileContext("decode"):
            try:
                tree = self.parse(data, deadline=deadline)
                return self._binder.bind(
                    tree, self.schema.root, self._root_path, deadline
                )
            except (JSONDecodeError, Cancelled) as e:
                logger.debug(
                    "Decode of %s failed: %s at %s",
                    self.schema.root_name,
                    e.kind.value,
                    e.path or e.position,
                )
                raise


def decode(
    data: JsonInput,
    schema: CompiledSchema | SchemaType | Ref,
    *,
    config: DecodeConfig | None = None,
    deadline: Deadline | None = None,
) -> Any:
    """
    Decodes one document against ``schema``.

    Convenience for one-off calls; build a ``Decoder`` once to decode many
    documents of the same schema.
    """
    return Decoder(schema, config).decode(data, deadline=deadline)
