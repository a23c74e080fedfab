"""
EntityKey - hierarchical store key

A key is a chain of (kind, id) pairs from the entity-group root down to the
entity itself, e.g. Profile('alice') -> Conference(7) -> Session(3).

Two string forms:
- websafe: url-safe base64 of the JSON path, handed to clients
- path: 'Kind:id/Kind:id', used by stores for ancestor prefix matching
"""

import base64
import binascii
from typing import Any, Optional, Union
from urllib.parse import quote

import attrs
import orjson

from src.platform.exception.exceptions import DomainError


KeyId = Union[int, str]


def _validate_id(instance: 'EntityKey', attribute: attrs.Attribute, value: Any) -> None:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise DomainError(f'Invalid key id: {value!r}')
    if value == '':
        raise DomainError('Key id must not be empty')


@attrs.frozen
class EntityKey:
    kind: str
    id: KeyId = attrs.field(validator=_validate_id)
    parent: Optional['EntityKey'] = None

    @property
    def pairs(self) -> list[tuple[str, KeyId]]:
        chain: list[tuple[str, KeyId]] = []
        key: Optional[EntityKey] = self
        while key is not None:
            chain.append((key.kind, key.id))
            key = key.parent
        chain.reverse()
        return chain

    @property
    def root(self) -> 'EntityKey':
        key = self
        while key.parent is not None:
            key = key.parent
        return key

    @property
    def path(self) -> str:
        return '/'.join(f'{kind}:{quote(str(id_), safe="")}' for kind, id_ in self.pairs)

    def is_descendant_of(self, ancestor: 'EntityKey') -> bool:
        """True when `ancestor` is this key or one of its parents."""
        key: Optional[EntityKey] = self
        while key is not None:
            if key == ancestor:
                return True
            key = key.parent
        return False

    def child(self, kind: str, id_: KeyId) -> 'EntityKey':
        return EntityKey(kind=kind, id=id_, parent=self)

    def to_websafe(self) -> str:
        raw = orjson.dumps([[kind, id_] for kind, id_ in self.pairs])
        return base64.urlsafe_b64encode(raw).rstrip(b'=').decode('ascii')

    @classmethod
    def from_websafe(cls, websafe: str) -> 'EntityKey':
        try:
            padded = websafe + '=' * (-len(websafe) % 4)
            pairs = orjson.loads(base64.urlsafe_b64decode(padded.encode('ascii')))
        except (binascii.Error, ValueError, UnicodeEncodeError):
            raise DomainError(f'Malformed key: {websafe}')

        if not isinstance(pairs, list) or not pairs:
            raise DomainError(f'Malformed key: {websafe}')

        key: Optional[EntityKey] = None
        for pair in pairs:
            if not isinstance(pair, list) or len(pair) != 2 or not isinstance(pair[0], str):
                raise DomainError(f'Malformed key: {websafe}')
            key = cls(kind=pair[0], id=pair[1], parent=key)
        assert key is not None
        return key

    def __str__(self) -> str:
        return self.path
