"""AppSettings 도메인의 SQLAlchemy 모델 정의입니다. 스토어 전역 설정은 단일 행으로 관리합니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from backoffice.database import Base


class AppSettings(Base):
    __tablename__ = "app_settings"

    settings_id = Column(Integer, primary_key=True, autoincrement=True)
    store_name = Column(String(100))
    store_logo = Column(Text)  # JSON: {filename, originalName, mimetype, size, url}
    hero_image = Column(Text)  # JSON: same shape as store_logo
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
