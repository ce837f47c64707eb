"""
Employee Model
One row per employee, keyed by the externally assigned business code.
"""
from sqlalchemy import String, Integer, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime

from app.database import Base


class Employee(Base):
    """Employee master data."""

    __tablename__ = "employees"

    # Surrogate key; also gives the natural (insertion) order for listings
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    empcode: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    sheet_no: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    # Name
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    middle_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Classification
    cbe_noncbe: Mapped[str | None] = mapped_column(String(20), nullable=True)
    rank: Mapped[str] = mapped_column(String(100), nullable=False)
    emp_status: Mapped[str] = mapped_column(String(100), nullable=False)
    position: Mapped[str] = mapped_column(String(255), nullable=False)

    # Assignment
    costcode: Mapped[str | None] = mapped_column(String(50), nullable=True)
    proj_name: Mapped[str] = mapped_column(String(255), nullable=False)
    proj_hr: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Contact and assets
    email_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    mobile_assignment: Mapped[str | None] = mapped_column(String(100), nullable=True)
    mobile_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    laptop_assignment: Mapped[str | None] = mapped_column(String(100), nullable=True)
    asset_code: Mapped[str | None] = mapped_column(String(100), nullable=True)
    others: Mapped[str | None] = mapped_column(Text, nullable=True)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)

    # System fields
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="employee")
    # active, inactive
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="active",
        server_default="active",
        index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<Employee(empcode={self.empcode}, name={self.full_name})>"
