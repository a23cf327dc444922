"""Proposal status model."""
import enum


class ProposalStatus(enum.Enum):
    """
    Proposal status enum.

    Values are the labels stored by the editor and written to exports.
    The set is closed.
    """
    PENDING = "Bekliyor"
    SENT = "Teklif Gönderildi"
    WON = "Kazanıldı"
    LOST = "Kaybedildi"
    CANCELLED = "İptal Edildi"

    @property
    def label_en(self) -> str:
        return _ENGLISH_LABELS[self]

    @property
    def colors(self) -> dict:
        """Badge colors for the archive list: {'background': ..., 'color': ...}."""
        background, color = _BADGE_COLORS[self]
        return {'background': background, 'color': color}

    @classmethod
    def default(cls) -> 'ProposalStatus':
        return cls.PENDING

    @classmethod
    def parse(cls, value):
        """
        Parse a status from a member, stored label, English label or member name.

        Args:
            value: None, ProposalStatus or str

        Returns:
            ProposalStatus, or None if value is empty

        Raises:
            ValueError: If the text matches no status
        """
        if value is None:
            return None

        if isinstance(value, ProposalStatus):
            return value

        text = str(value).strip()
        if not text:
            return None

        key = text.casefold()
        for status in cls:
            if key in (status.value.casefold(), status.label_en.casefold(), status.name.casefold()):
                return status

        raise ValueError(f"Invalid proposal status: {value}")

    @classmethod
    def choices(cls) -> list:
        """Status options for filter/select widgets, in display order."""
        return [
            {'value': status.value, 'label': status.value, 'label_en': status.label_en, **status.colors}
            for status in cls
        ]


_ENGLISH_LABELS = {
    ProposalStatus.PENDING: "Pending",
    ProposalStatus.SENT: "Proposal Sent",
    ProposalStatus.WON: "Won",
    ProposalStatus.LOST: "Lost",
    ProposalStatus.CANCELLED: "Cancelled",
}

_BADGE_COLORS = {
    ProposalStatus.PENDING: ('rgba(234, 179, 8, 0.2)', '#eab308'),
    ProposalStatus.SENT: ('rgba(59, 130, 246, 0.2)', '#3b82f6'),
    ProposalStatus.WON: ('rgba(34, 197, 94, 0.2)', '#22c55e'),
    ProposalStatus.LOST: ('rgba(239, 68, 68, 0.2)', '#ef4444'),
    ProposalStatus.CANCELLED: ('rgba(100, 116, 139, 0.2)', '#94a3b8'),
}
