"""
Quotation store — owns the single in-memory quotation of a session.

Form code talks to this object only:
    update_quotation / add_material / update_material / delete_material /
    reset_quotation to change it, snapshot() to read it.

Every mutation validates its input before touching the aggregate and
returns a detached copy of the updated Quotation, so callers never hold
the live aggregate. Totals are never stored here; snapshot() recomputes
them through PricingEngine on every call.
"""

import logging
import uuid
from typing import Optional, Union

from pydantic import BaseModel, ValidationError

from .config import Settings, settings as default_settings
from .errors import InvalidInputError, MaterialNotFoundError
from .formatters import default_validity_date
from .pricing_engine import PricingEngine
from .schemas import (
    Material,
    MaterialCreate,
    MaterialUpdate,
    Quotation,
    QuotationSnapshot,
    QuotationUpdate,
)

logger = logging.getLogger(__name__)


def _validate(schema, data, context: str):
    """Coerce a dict (or pass through a model) into `schema`, or raise InvalidInputError."""
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise InvalidInputError.from_validation_error(e, context) from e


class QuotationStore:
    """Mutation API and read surface for one quotation."""

    def __init__(self, settings: Optional[Settings] = None,
                 pricing_engine: Optional[PricingEngine] = None):
        self.settings = settings or default_settings
        self.pricing_engine = pricing_engine or PricingEngine()
        self.editing_material_id: Optional[str] = None
        self._quotation = self._initial_quotation()

    def _initial_quotation(self) -> Quotation:
        return Quotation(
            company=self.settings.COMPANY_NAME,
            seller=self.settings.SELLER_NAME,
            valid_until=default_validity_date(days=self.settings.DEFAULT_VALID_DAYS),
            default_measure_message=self.settings.DEFAULT_MEASURE_MESSAGE,
        )

    def _copy(self) -> Quotation:
        return self._quotation.model_copy(deep=True)

    @property
    def quotation(self) -> Quotation:
        return self._copy()

    # --- Top-level fields ---

    def update_quotation(self, patch: Union[QuotationUpdate, dict]) -> Quotation:
        """
        Shallow-merge the fields that were set in `patch`.
        Cash always leaves a single installment.
        """
        update = _validate(QuotationUpdate, patch, "quotation")
        changes = update.model_dump(exclude_unset=True)

        installments = changes.get("installments")
        if installments is not None and installments > self.settings.MAX_INSTALLMENTS:
            raise InvalidInputError(
                f"Invalid quotation: installments must be at most "
                f"{self.settings.MAX_INSTALLMENTS}",
                [{"field": "installments",
                  "message": f"must be <= {self.settings.MAX_INSTALLMENTS}"}],
            )

        # None means "not provided" for required fields of the aggregate
        changes = {k: v for k, v in changes.items() if v is not None}
        merged = {**self._quotation.model_dump(), **changes}
        self._quotation = _validate(Quotation, merged, "quotation")
        return self._copy()

    # --- Materials ---

    def get_material(self, material_id: str) -> Material:
        for material in self._quotation.materials:
            if material.id == material_id:
                return material.model_copy(deep=True)
        raise MaterialNotFoundError(material_id)

    def add_material(self, material: Union[MaterialCreate, dict]) -> Quotation:
        """Validate, assign a new id, append. Insertion order is kept."""
        data = _validate(MaterialCreate, material, "material")
        new_material = Material(id=uuid.uuid4().hex, **data.model_dump())
        self._quotation.materials.append(new_material)
        logger.info(
            "Added material %s (%s, %s x%d)",
            new_material.id, new_material.name, new_material.type.label,
            new_material.quantity,
        )
        return self._copy()

    def update_material(self, material_id: str,
                        patch: Union[MaterialUpdate, dict]) -> Quotation:
        """
        Merge the fields set in `patch` into the material with `material_id`.
        The id and every field left out of the patch are preserved.
        Raises MaterialNotFoundError for an unknown id; nothing changes.
        """
        update = _validate(MaterialUpdate, patch, "material")
        changes = update.model_dump(exclude_unset=True)

        materials = self._quotation.materials
        for index, current in enumerate(materials):
            if current.id == material_id:
                break
        else:
            raise MaterialNotFoundError(material_id)

        merged = current.model_dump()
        dimensions = changes.pop("dimensions", None)
        if dimensions:
            merged["dimensions"].update(
                {k: v for k, v in dimensions.items() if v is not None}
            )
        merged.update(changes)
        merged["id"] = current.id

        materials[index] = _validate(Material, merged, "material")
        return self._copy()

    def delete_material(self, material_id: str) -> Quotation:
        """Remove the material with `material_id`. Unknown ids are a no-op."""
        materials = self._quotation.materials
        remaining = [m for m in materials if m.id != material_id]
        if len(remaining) == len(materials):
            logger.warning("Delete ignored, material not found: %s", material_id)
            return self._copy()

        self._quotation.materials = remaining
        if self.editing_material_id == material_id:
            self.editing_material_id = None
        logger.info("Deleted material %s", material_id)
        return self._copy()

    # --- Edit state ---

    def start_editing(self, material_id: str) -> Material:
        material = self.get_material(material_id)
        self.editing_material_id = material_id
        return material

    def stop_editing(self):
        self.editing_material_id = None

    # --- Whole document ---

    def reset_quotation(self) -> Quotation:
        """Back to a fresh default quotation; materials and overrides are discarded."""
        self._quotation = self._initial_quotation()
        self.editing_material_id = None
        logger.info("Quotation reset")
        return self._copy()

    def snapshot(self) -> QuotationSnapshot:
        """Current quotation plus grouped/sorted/totaled view, recomputed now."""
        return self.pricing_engine.build_snapshot(self._quotation)
