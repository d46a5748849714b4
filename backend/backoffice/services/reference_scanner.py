"""Reference Scanner 서비스 레이어입니다. 카탈로그/설정/사용자/콘텐츠 테이블에 저장된 업로드 파일 참조를 파일명 집합으로 수집합니다."""

import json
import logging
import posixpath
from typing import Any, Iterable, List, NamedTuple, Optional
from urllib.parse import urlsplit

from sqlalchemy.orm import Session

from backoffice.models.app_settings import AppSettings
from backoffice.models.blog_post import BlogPost
from backoffice.models.brand import Brand
from backoffice.models.category import Category
from backoffice.models.product import Product
from backoffice.models.user import User

logger = logging.getLogger(__name__)


class ProductImages(NamedTuple):
    image_url: Optional[str]
    media: Optional[str]  # JSON list of {url, type, alt}


class CategoryImages(NamedTuple):
    image_url: Optional[str]
    image: Optional[str]  # JSON object {filename, url}
    media: Optional[str]


class BrandImages(NamedTuple):
    logo_url: Optional[str]


class SettingsImages(NamedTuple):
    store_logo: Optional[str]  # JSON object {filename, url, ...}
    hero_image: Optional[str]


class UserImages(NamedTuple):
    avatar_url: Optional[str]


class BlogPostImages(NamedTuple):
    featured_image: Optional[str]
    media: Optional[str]


def extract_filename(ref: Optional[str]) -> Optional[str]:
    """Return the bare filename a stored URL/path points at, or ``None``.

    Accepts absolute URLs (``https://cdn.example.com/uploads/a.png``),
    root-relative paths (``/uploads/a.png``) and bare filenames. Query string
    and fragment are dropped for URLs only; a path keeps its last segment as-is,
    so ``/uploads/sale#1.jpg`` names ``sale#1.jpg``. Never raises.
    """
    if ref is None:
        return None
    value = str(ref).strip()
    if not value:
        return None

    path = value
    if value.lower().startswith(("http://", "https://")):
        try:
            path = urlsplit(value).path
        except ValueError as exc:
            logger.warning("[cleanup] could not parse reference url %r, treating as path: %s", value, exc)

    filename = posixpath.basename(path.replace("\\", "/"))
    return filename or None


def _load_json(raw: Optional[str]) -> Any:
    # Malformed JSON raises ValueError; the scan must never under-report references.
    if not raw:
        return None
    return json.loads(raw)


def _media_urls(raw: Optional[str]) -> List[str]:
    items = _load_json(raw)
    if not isinstance(items, list):
        return []
    return [str(item["url"]) for item in items if isinstance(item, dict) and item.get("url")]


def _image_filename(raw: Optional[str]) -> List[str]:
    image = _load_json(raw)
    if isinstance(image, dict) and image.get("filename"):
        return [str(image["filename"])]
    return []


def _present(*values: Optional[str]) -> List[str]:
    return [value for value in values if value]


def extract_from_product(row: ProductImages) -> List[str]:
    return _present(row.image_url) + _media_urls(row.media)


def extract_from_category(row: CategoryImages) -> List[str]:
    return _present(row.image_url) + _image_filename(row.image) + _media_urls(row.media)


def extract_from_brand(row: BrandImages) -> List[str]:
    return _present(row.logo_url)


def extract_from_settings(row: SettingsImages) -> List[str]:
    return _image_filename(row.store_logo) + _image_filename(row.hero_image)


def extract_from_user(row: UserImages) -> List[str]:
    return _present(row.avatar_url)


def extract_from_blog_post(row: BlogPostImages) -> List[str]:
    return _present(row.featured_image) + _media_urls(row.media)


def _collect_raw_references(db: Session) -> Iterable[str]:
    # Query and JSON decode errors propagate; a partial reference set is never returned.
    for row in db.query(Product.image_url, Product.media).all():
        yield from extract_from_product(ProductImages(*row))
    for row in db.query(Category.image_url, Category.image, Category.media).all():
        yield from extract_from_category(CategoryImages(*row))
    for row in db.query(Brand.logo_url).all():
        yield from extract_from_brand(BrandImages(*row))

    store_settings = db.query(AppSettings.store_logo, AppSettings.hero_image).first()
    if store_settings is not None:
        yield from extract_from_settings(SettingsImages(*store_settings))

    for row in db.query(User.avatar_url).all():
        yield from extract_from_user(UserImages(*row))
    for row in db.query(BlogPost.featured_image, BlogPost.media).all():
        yield from extract_from_blog_post(BlogPostImages(*row))


def collect_referenced_filenames(db: Session) -> set[str]:
    referenced: set[str] = set()
    for raw in _collect_raw_references(db):
        filename = extract_filename(raw)
        if filename:
            referenced.add(filename)

    logger.info("[cleanup] found %d referenced files in database", len(referenced))
    return referenced
