# pulse/shared/models/Backlog.py
"""
Backlog public et release notes : contenu bilingue (nl / en).

decision et decided_at ne sont renseignés que lorsque status == decided
(règle appliquée dans modules/backlog/service.py).
"""
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, JSON, Enum as SAEnum
from sqlalchemy.sql import func
from pulse.core.database import Base
from pulse.shared.enums import ProductType, BacklogCategory, BacklogStatus, BacklogDecision


def _values(enum_cls):
    return [m.value for m in enum_cls]


class BacklogItem(Base):
    __tablename__ = "backlog_items"

    id       = Column(Integer, primary_key=True, index=True)
    product  = Column(SAEnum(ProductType, name="producttype", values_callable=_values), nullable=False, index=True)
    category = Column(SAEnum(BacklogCategory, name="backlogcategory", values_callable=_values), nullable=False)
    status   = Column(
        SAEnum(BacklogStatus, name="backlogstatus", values_callable=_values),
        default=BacklogStatus.REVIEW, nullable=False,
    )
    decision = Column(SAEnum(BacklogDecision, name="backlogdecision", values_callable=_values), nullable=True)

    title_nl     = Column(String, nullable=False)
    title_en     = Column(String, nullable=False)
    our_take_nl  = Column(Text, nullable=True)
    our_take_en  = Column(Text, nullable=True)
    rationale_nl = Column(Text, nullable=True)
    rationale_en = Column(Text, nullable=True)

    decided_at = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class ReleaseNote(Base):
    __tablename__ = "release_notes"

    id      = Column(Integer, primary_key=True, index=True)
    product = Column(SAEnum(ProductType, name="producttype", values_callable=_values), nullable=False, index=True)
    version = Column(String, nullable=False)

    title_nl       = Column(String, nullable=False)
    title_en       = Column(String, nullable=False)
    description_nl = Column(Text, nullable=True)
    description_en = Column(Text, nullable=True)
    changes        = Column(JSON, nullable=False, default=list)   # [{"nl": ..., "en": ...}]

    released_at = Column(Date, nullable=False)
    created_at  = Column(DateTime(timezone=True), server_default=func.now())
