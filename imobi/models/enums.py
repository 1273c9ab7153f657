"""Enum definitions for property records and dashboard views."""

from enum import Enum


class PropertyStatus(str, Enum):
    """Rental status of a property."""

    AVAILABLE = "Disponível"
    IN_LEASING_PROCESS = "Em processo de locação"
    VACATING = "Desocupando"
    SUSPENDED = "Suspenso"
    LEASED = "Locado"


class PropertyType(str, Enum):
    """Kind of property."""

    HOUSE = "Casa"
    APARTMENT = "Apartamento"
    STUDIO = "Kitnet"
    COMMERCIAL_ROOM = "Sala"
    SHOP = "Loja"
    COMMERCIAL_UNIT = "Comercial"
    GARAGE = "Garagem"


class FichaStatus(str, Enum):
    """Tenant application ("ficha") tracking state."""

    NONE = "Sem ficha"
    HAS_FILE = "Com ficha"
    IN_REVIEW = "Em andamento"
    APPROVED = "Aprovada"


class Category(str, Enum):
    """Derived grouping of property types."""

    RESIDENTIAL = "Residencial"
    COMMERCIAL = "Comercial"


RESIDENTIAL_TYPES = frozenset({PropertyType.HOUSE, PropertyType.APARTMENT, PropertyType.STUDIO})
COMMERCIAL_TYPES = frozenset(
    {
        PropertyType.COMMERCIAL_ROOM,
        PropertyType.SHOP,
        PropertyType.COMMERCIAL_UNIT,
        PropertyType.GARAGE,
    }
)

# Sentinel used by the status and category filters
ALL = "Todos"


class SortField(str, Enum):
    """Sortable dashboard columns."""

    LOCADOR = "locador"
    BAIRRO = "bairro"
    TIPO = "tipo"
    DESCRICAO = "descricao"
    ENDERECO = "endereco"
    VALOR = "valor"
    CODIGO = "codigo"
    OBSERVACAO = "observacao"
    FICHA_STATUS = "ficha_status"
    STATUS = "status"
    DATA_ATUALIZACAO = "data_atualizacao"


class SortDirection(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class ViewMode(str, Enum):
    """Dashboard tab."""

    LIST = "list"
    FINANCIAL = "financial"
