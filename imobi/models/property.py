"""Property database model."""

from sqlalchemy import BigInteger, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from imobi.core.database import Base


class Imovel(Base):
    """Rental property record. Timestamps are epoch milliseconds."""

    __tablename__ = "imoveis"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    codigo: Mapped[str] = mapped_column(String(50), index=True)
    locador: Mapped[str | None] = mapped_column(String(255), nullable=True)
    endereco: Mapped[str] = mapped_column(String(255))
    bairro: Mapped[str] = mapped_column(String(100), index=True)
    tipo: Mapped[str] = mapped_column(String(30))
    valor: Mapped[float] = mapped_column(Float, default=0)
    iptu: Mapped[float | None] = mapped_column(Float, nullable=True)
    seguro_incendio: Mapped[float | None] = mapped_column(Float, nullable=True)
    descricao: Mapped[str] = mapped_column(Text, default="")
    observacao: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(30), index=True)
    data_atualizacao: Mapped[int] = mapped_column(BigInteger, index=True)
    ficha_status: Mapped[str | None] = mapped_column(String(30), nullable=True)
    ficha_data_atualizacao: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    captador: Mapped[str] = mapped_column(String(100))
    corretor: Mapped[str | None] = mapped_column(String(100), nullable=True)
    vago_em: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    liberado_em: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
