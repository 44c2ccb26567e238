"""Input validation — turns caller data into domain objects or rejects it.

The Pydantic models below are the single schema for analysis input. The
library entry points (`coerce_medications`, `parse_patient_context`) and
the HTTP request bodies in app.py both validate through them, so a context
accepted by one is accepted by the other.

Malformed input is rejected immediately, never silently coerced: a
medication list that is not a list, a blank drug name, an age of -3 or a
renal category of "terrible" all raise AnalysisValidationError.

Missing optional fields are not errors. Unknown drug names are not errors
either; they are simply drugs the knowledge base has nothing to say about.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from oncosafety.models import Medication, OrganFunction, PatientContext, normalize_name


class AnalysisValidationError(ValueError):
    """Raised when an analysis request is malformed."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


def _describe(exc: ValidationError, root: str) -> str:
    """First Pydantic error as 'root.field: message'."""
    error = exc.errors()[0]
    location = "".join(
        f"[{part}]" if isinstance(part, int) else f".{part}" for part in error["loc"]
    )
    return f"{root}{location}: {error['msg']}"


class MedicationInput(BaseModel):
    """A medication given as an object rather than a bare name."""

    name: StrictStr = Field(validation_alias=AliasChoices("name", "generic_name"))
    code: StrictStr | None = Field(default=None, validation_alias=AliasChoices("code", "rxcui"))

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not normalize_name(value):
            raise ValueError("drug name must not be empty")
        return value.strip()

    def to_medication(self) -> Medication:
        return Medication(name=self.name, code=self.code)


class PatientContextInput(BaseModel):
    """Patient factors. Every field is optional; omitted means not assessed.

    Keys may be snake_case or the camelCase the web front end sends;
    `pregnancy` and `comorbidities` are accepted as older spellings.
    """

    model_config = ConfigDict(extra="forbid")

    age: StrictInt | None = Field(default=None, ge=0)
    sex: StrictStr | None = None
    renal_function: OrganFunction | None = Field(
        default=None, validation_alias=AliasChoices("renal_function", "renalFunction")
    )
    hepatic_function: OrganFunction | None = Field(
        default=None, validation_alias=AliasChoices("hepatic_function", "hepaticFunction")
    )
    pregnant: StrictBool | None = Field(
        default=None, validation_alias=AliasChoices("pregnant", "pregnancy")
    )
    allergies: list[StrictStr] | None = None
    comorbidity_count: StrictInt | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("comorbidity_count", "comorbidityCount", "comorbidities"),
    )
    genetics: dict[StrictStr, StrictStr] | None = None

    @field_validator("renal_function", "hepatic_function", mode="before")
    @classmethod
    def _lowercase_category(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @field_validator("comorbidity_count", mode="before")
    @classmethod
    def _count_comorbidity_list(cls, value: Any) -> Any:
        # a list of conditions only contributes its length
        if isinstance(value, (list, tuple)):
            return len(value)
        return value

    def to_context(self) -> PatientContext:
        genetics = self.genetics or {}
        return PatientContext(
            age=self.age,
            sex=self.sex,
            renal_function=self.renal_function,
            hepatic_function=self.hepatic_function,
            pregnant=self.pregnant,
            allergies=frozenset(
                normalize_name(a) for a in self.allergies or () if normalize_name(a)
            ),
            comorbidity_count=self.comorbidity_count,
            genetics=tuple(
                sorted(
                    (gene.upper().removesuffix("_PHENOTYPE"), phenotype.lower())
                    for gene, phenotype in genetics.items()
                )
            ),
        )


def _coerce_medication(item: Any, index: int) -> Medication:
    if isinstance(item, Medication):
        item = {"name": item.name, "code": item.code}
    elif isinstance(item, str):
        item = {"name": item}
    try:
        return MedicationInput.model_validate(item).to_medication()
    except ValidationError as exc:
        raise AnalysisValidationError(_describe(exc, f"medications[{index}]")) from exc


def coerce_medications(value: Any) -> list[Medication]:
    """Validate a medication list.

    Accepts a list or tuple of strings, Medication objects or mappings with
    a "name" (and optional "code"). Order is preserved.

    Raises:
        AnalysisValidationError: If the value is not a list or an item is
            malformed.
    """
    # a bare string is a Sequence too; reject it explicitly
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise AnalysisValidationError("medications must be a list")
    return [_coerce_medication(item, i) for i, item in enumerate(value)]


def parse_patient_context(value: Any) -> PatientContext:
    """Validate a patient context.

    Accepts None (nothing assessed), a PatientContext, a PatientContextInput
    or a mapping in the shape PatientContextInput describes.

    Raises:
        AnalysisValidationError: On unknown keys or invalid field values.
    """
    if value is None:
        return PatientContext()
    if isinstance(value, PatientContext):
        return value
    if isinstance(value, PatientContextInput):
        return value.to_context()
    if not isinstance(value, Mapping):
        raise AnalysisValidationError("patientContext must be an object")
    try:
        return PatientContextInput.model_validate(value).to_context()
    except ValidationError as exc:
        raise AnalysisValidationError(_describe(exc, "patientContext")) from exc
