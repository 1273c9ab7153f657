"""Property Pydantic schemas for records, writes and the edit form."""

from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from imobi.models.enums import FichaStatus, PropertyStatus, PropertyType


class PropertyBase(BaseModel):
    """Fields shared by every property payload."""

    codigo: str
    locador: str | None = None
    endereco: str
    bairro: str
    tipo: PropertyType
    valor: float = Field(default=0, ge=0)
    iptu: float | None = Field(default=None, ge=0)
    seguro_incendio: float | None = Field(default=None, ge=0)
    descricao: str = ""
    observacao: str | None = None
    status: PropertyStatus = PropertyStatus.AVAILABLE
    ficha_status: FichaStatus | None = None
    ficha_data_atualizacao: int | None = None
    captador: str = ""
    corretor: str | None = None
    vago_em: int | None = None
    liberado_em: int | None = None


class PropertyCreate(PropertyBase):
    """Schema for adding a property; the store assigns id and timestamp."""


# Always present on a stored record
NON_NULLABLE_FIELDS = frozenset(
    {"codigo", "endereco", "bairro", "tipo", "valor", "descricao", "status", "captador"}
)


class PropertyUpdate(BaseModel):
    """Partial update; only the fields that were set are merged."""

    codigo: str | None = None
    locador: str | None = None
    endereco: str | None = None
    bairro: str | None = None
    tipo: PropertyType | None = None
    valor: float | None = Field(default=None, ge=0)
    iptu: float | None = Field(default=None, ge=0)
    seguro_incendio: float | None = Field(default=None, ge=0)
    descricao: str | None = None
    observacao: str | None = None
    status: PropertyStatus | None = None
    ficha_status: FichaStatus | None = None
    ficha_data_atualizacao: int | None = None
    captador: str | None = None
    corretor: str | None = None
    vago_em: int | None = None
    liberado_em: int | None = None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "PropertyUpdate":
        """A field that every record carries may be changed but not cleared."""
        cleared = sorted(
            name
            for name in NON_NULLABLE_FIELDS & self.model_fields_set
            if getattr(self, name) is None
        )
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(cleared)}")
        return self


class Property(PropertyBase):
    """A property as delivered in a snapshot."""

    id: str
    data_atualizacao: int

    model_config = ConfigDict(from_attributes=True, use_enum_values=False)


def local_noon_millis(day: date, tz: ZoneInfo) -> int:
    """Normalize a date-only input to epoch millis at local noon."""
    return int(datetime.combine(day, time(12, 0), tzinfo=tz).timestamp() * 1000)


class PropertyForm(BaseModel):
    """Input collected by the create/edit form.

    Required text fields must be non-blank and monetary fields default to 0.
    Violations surface as a pydantic ``ValidationError`` before anything is
    sent to the store.
    """

    codigo: str
    locador: str = ""
    endereco: str
    bairro: str
    tipo: PropertyType = PropertyType.APARTMENT
    valor: float = Field(ge=0)
    iptu: float = Field(default=0, ge=0)
    seguro_incendio: float = Field(default=0, ge=0)
    descricao: str = ""
    observacao: str = ""
    status: PropertyStatus = PropertyStatus.AVAILABLE
    ficha_status: FichaStatus = FichaStatus.NONE
    captador: str
    corretor: str = ""
    vago_em: date | None = None
    liberado_em: date | None = None

    @field_validator("codigo", "endereco", "bairro", "captador")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        """Reject blank required fields."""
        if not v or not v.strip():
            raise ValueError("Campo obrigatório")
        return v.strip()

    @field_validator("iptu", "seguro_incendio", mode="before")
    @classmethod
    def empty_amount_is_zero(cls, v: object) -> object:
        """Treat an empty monetary input as 0."""
        if v is None or v == "":
            return 0
        return v

    @field_validator("vago_em", "liberado_em", mode="before")
    @classmethod
    def empty_date_is_none(cls, v: object) -> object:
        """Treat an empty date input as unset."""
        if v == "":
            return None
        return v

    def _payload(self, tz: ZoneInfo) -> dict:
        data = self.model_dump(exclude={"vago_em", "liberado_em"})
        data["locador"] = self.locador or None
        data["corretor"] = self.corretor or None
        data["vago_em"] = local_noon_millis(self.vago_em, tz) if self.vago_em else None
        data["liberado_em"] = (
            local_noon_millis(self.liberado_em, tz) if self.liberado_em else None
        )
        return data

    def to_create(self, tz: ZoneInfo, now_ms: int) -> PropertyCreate:
        """Build the add payload; a new record starts its ficha clock now."""
        return PropertyCreate(**self._payload(tz), ficha_data_atualizacao=now_ms)

    def to_update(self, tz: ZoneInfo, now_ms: int) -> PropertyUpdate:
        """Build the update payload for an existing record."""
        data = self._payload(tz)
        if self.ficha_status != FichaStatus.NONE:
            data["ficha_data_atualizacao"] = now_ms
        return PropertyUpdate(**data)
