"""Company model (customer firm a proposal is addressed to)."""
from dataclasses import dataclass
from typing import Optional

from teklif.models.identifiers import Identifier, clean_text, normalize_id


@dataclass(frozen=True)
class Company:
    """
    Company (Firma).

    Owned by the company registry; proposals only reference it by id or
    keep an embedded snapshot of it.
    """

    id: Optional[Identifier] = None
    name: str = ''
    contact_person: str = ''
    email: str = ''

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional['Company']:
        if not isinstance(data, dict) or not data:
            return None
        return cls(
            id=normalize_id(data.get('id')),
            name=clean_text(data.get('name')),
            contact_person=clean_text(data.get('contact_person')),
            email=clean_text(data.get('email')),
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'contact_person': self.contact_person,
            'email': self.email,
        }

    def __repr__(self):
        return f"<Company(id={self.id!r}, name='{self.name}')>"
