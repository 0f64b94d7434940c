from sqlalchemy import Column, Integer, String, JSON, DateTime, Text
from sqlalchemy.sql import func
from backoffice.database import Base

class AdminSetting(Base):
    """Строка настроек ключ-значение (API ключи, правила защиты заказов)"""
    __tablename__ = "admin_settings"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(100), nullable=False, unique=True, index=True)
    value = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<AdminSetting {self.key}>"

class HomePageContent(Base):
    __tablename__ = "home_page_content"

    id = Column(Integer, primary_key=True, index=True)
    section_key = Column(String(100), nullable=False, unique=True, index=True)
    content = Column(JSON, nullable=False, default=dict)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<HomePageContent {self.section_key}>"
