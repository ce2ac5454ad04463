"""Draft Schemas: wizard draft payloads.

Invariants:
    - step is one of the four WizardStep values
    - Cross-field step rules (model required, slots for summary) live in core/wizard.py
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from investestate.core.domain_types import DraftStatus, WizardStep


class DraftSave(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_id: str | None = Field(None, max_length=100)
    slots: int = Field(1, ge=1)
    quantity: int = Field(1, ge=1)
    step: WizardStep = WizardStep.EXPLORE_PROJECT


class DraftBody(BaseModel):
    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    project_id: str
    model_id: str | None
    slots: int
    quantity: int
    step: WizardStep
    version: int
    updated_at: datetime


class DraftResponse(BaseModel):
    status: DraftStatus
    draft: DraftBody | None = None
