import enum


# --- Closed domain values ---
# Stored by stable value; rendered by the pt-BR label tables below.
# Lookup also accepts the label or the member name, so form input such as
# "Mármore" or "MARBLE" resolves to MaterialType.MARBLE.

class _LabeledEnum(str, enum.Enum):

    @property
    def label(self) -> str:
        return self._labels()[self]

    @classmethod
    def _labels(cls) -> dict:
        raise NotImplementedError

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        key = value.strip()
        name = key.upper().replace("-", "_").replace(" ", "_")
        for member in cls:
            if name == member.name or key.casefold() == member.label.casefold():
                return member
        return None


class MaterialType(_LabeledEnum):
    GRANITE = "granite"
    MARBLE = "marble"
    QUARTZ = "quartz"
    QUARTZITE = "quartzite"
    ULTRACOMPACT = "ultracompact"

    @classmethod
    def _labels(cls) -> dict:
        return MATERIAL_TYPE_LABELS


class FinishingType(_LabeledEnum):
    POLISHED = "polished"
    RAW = "raw"
    LEATHERED = "leathered"
    FLAMED = "flamed"
    SANDBLASTED = "sandblasted"
    BRUSHED = "brushed"
    BUSH_HAMMERED = "bush_hammered"

    @classmethod
    def _labels(cls) -> dict:
        return FINISHING_LABELS


class PaymentMethod(_LabeledEnum):
    CASH = "cash"
    CHECK = "check"
    BANK_TRANSFER = "bank_transfer"

    @classmethod
    def _labels(cls) -> dict:
        return PAYMENT_METHOD_LABELS


MATERIAL_TYPE_LABELS = {
    MaterialType.GRANITE: "Granito",
    MaterialType.MARBLE: "Mármore",
    MaterialType.QUARTZ: "Quartzo",
    MaterialType.QUARTZITE: "Quartzito",
    MaterialType.ULTRACOMPACT: "Ultracompacto",
}

FINISHING_LABELS = {
    FinishingType.POLISHED: "Polido",
    FinishingType.RAW: "Bruto",
    FinishingType.LEATHERED: "Levigado",
    FinishingType.FLAMED: "Flameado",
    FinishingType.SANDBLASTED: "Jateado",
    FinishingType.BRUSHED: "Escovado",
    FinishingType.BUSH_HAMMERED: "Apicoado",
}

PAYMENT_METHOD_LABELS = {
    PaymentMethod.CASH: "À vista",
    PaymentMethod.CHECK: "Cheque",
    PaymentMethod.BANK_TRANSFER: "Boleto",
}
