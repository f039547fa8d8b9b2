from __future__ import annotations

from typing import Any, ClassVar

from pydantic import (
    BaseModel,
    ConfigDict,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    model_serializer,
)


class Document(BaseModel):
    """Base for every on-disk document.

    Unknown keys are kept in ``model_extra`` and dumped back at the same level.
    Named optional fields that are ``None`` are left out of the output, as are
    the collection fields listed in ``omit_when_empty``. Extras are emitted
    as-is, ``null`` values included.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, protected_namespaces=())

    omit_when_empty: ClassVar[frozenset[str]] = frozenset()

    @model_serializer(mode="wrap")
    def _drop_absent(
        self, handler: SerializerFunctionWrapHandler, info: SerializationInfo
    ) -> dict[str, Any]:
        data = handler(self)
        for name, field in type(self).model_fields.items():
            value = getattr(self, name)
            if value is None or (name in self.omit_when_empty and not value):
                key = (field.serialization_alias or field.alias or name) if info.by_alias else name
                data.pop(key, None)
        return data

    @property
    def extras(self) -> dict[str, Any]:
        """Unrecognized keys at this level, in input order. Mutable."""
        if self.__pydantic_extra__ is None:
            object.__setattr__(self, "__pydantic_extra__", {})
        return self.__pydantic_extra__

    def to_data(self, *, json_compatible: bool = True) -> dict[str, Any]:
        """Dump under on-disk key names."""
        return self.model_dump(mode="json" if json_compatible else "python", by_alias=True)

    def replace_extras(self, extras: dict[str, Any]) -> None:
        current = self.extras
        current.clear()
        current.update(extras)
