"""
WhatsApp template model storing the editable text of outbound messages.
"""

from datetime import datetime
from sqlalchemy import String, TIMESTAMP, Text
from sqlalchemy.orm import Mapped, mapped_column

from core.database import Base


class WhatsAppTemplate(Base):
    """
    Message template for one notification type.

    template_content uses {variable} placeholders in either vocabulary
    (e.g. {clientName} or {nomeCliente}).
    """

    __tablename__ = "whatsapp_templates"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    template_type: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    """One of the TEMPLATE_* types in core.message_template_constants."""

    template_content: Mapped[str] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))
