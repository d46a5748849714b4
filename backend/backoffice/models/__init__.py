"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from backoffice.models.user import User
from backoffice.models.brand import Brand
from backoffice.models.category import Category
from backoffice.models.product import Product
from backoffice.models.app_settings import AppSettings
from backoffice.models.blog_post import BlogPost

__all__ = [
    "User",
    "Brand",
    "Category",
    "Product",
    "AppSettings",
    "BlogPost",
]
