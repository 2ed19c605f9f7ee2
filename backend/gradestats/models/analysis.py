"""
Analysis: grade statistics for one subject in one semester (group, department, grade counters, scores).
Always owned by one user via id_user; all access is scoped by id_user.
"""
from datetime import datetime
from decimal import Decimal
from sqlalchemy import Integer, String, Float, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from gradestats.database import Base


class Analysis(Base):
    __tablename__ = "analysis"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    semester: Mapped[int | None] = mapped_column(Integer, nullable=True)
    subject: Mapped[str | None] = mapped_column(String(255), nullable=True)
    id_group: Mapped[str | None] = mapped_column(String(255), nullable=True)
    id_department: Mapped[str | None] = mapped_column(String(255), nullable=True)
    count_stud: Mapped[int | None] = mapped_column(Integer, nullable=True)
    count5: Mapped[int | None] = mapped_column(Integer, nullable=True)
    count4: Mapped[int | None] = mapped_column(Integer, nullable=True)
    count3: Mapped[int | None] = mapped_column(Integer, nullable=True)
    count2: Mapped[int | None] = mapped_column(Integer, nullable=True)
    count_passed: Mapped[int | None] = mapped_column(Integer, nullable=True)
    count_released: Mapped[int | None] = mapped_column(Integer, nullable=True)
    count_not_cert: Mapped[int | None] = mapped_column(Integer, nullable=True)
    count_acad_leave: Mapped[int | None] = mapped_column(Integer, nullable=True)
    count_expelled: Mapped[int | None] = mapped_column(Integer, nullable=True)
    quality: Mapped[Decimal | None] = mapped_column(Numeric(6, 2), nullable=True)
    overall: Mapped[float | None] = mapped_column(Float, nullable=True)
    average: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    id_user: Mapped[int] = mapped_column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )

    user = relationship("User", back_populates="analyses")
