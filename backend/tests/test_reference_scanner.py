import json

import pytest
from sqlalchemy.exc import SQLAlchemyError

from backoffice.models.app_settings import AppSettings
from backoffice.models.blog_post import BlogPost
from backoffice.models.brand import Brand
from backoffice.models.category import Category
from backoffice.models.product import Product
from backoffice.models.user import User
from backoffice.services.reference_scanner import (
    CategoryImages,
    SettingsImages,
    collect_referenced_filenames,
    extract_filename,
    extract_from_category,
    extract_from_settings,
)
from tests.conftest import engine


@pytest.mark.parametrize(
    "ref, expected",
    [
        ("https://cdn.example.com/uploads/photo.png", "photo.png"),
        ("/uploads/photo.png", "photo.png"),
        ("photo.png", "photo.png"),
        ("http://localhost:3000/uploads/a.jpg?v=3#top", "a.jpg"),
        ("/uploads/sale#1.jpg", "sale#1.jpg"),
        ("promo?v2.png", "promo?v2.png"),
        ("uploads\\windows\\b.jpg", "b.jpg"),
        ("  /uploads/padded.webp  ", "padded.webp"),
    ],
)
def test_extract_filename_normalizes_reference_shapes(ref, expected):
    assert extract_filename(ref) == expected


@pytest.mark.parametrize("ref", [None, "", "   ", "https://cdn.example.com/", "/uploads/"])
def test_extract_filename_returns_none_without_basename(ref):
    assert extract_filename(ref) is None


def test_extract_filename_falls_back_to_path_on_unparseable_url():
    # urlsplit rejects the unbalanced IPv6 bracket
    assert extract_filename("https://[broken/uploads/x.png") == "x.png"


def test_extract_from_category_reads_all_image_fields():
    row = CategoryImages(
        image_url="https://cdn.example.com/uploads/cat.png",
        image=json.dumps({"filename": "cat-object.png", "url": "/uploads/cat-object.png"}),
        media=json.dumps([{"url": "/uploads/m1.png", "type": "image"}, {"type": "video"}]),
    )
    assert extract_from_category(row) == [
        "https://cdn.example.com/uploads/cat.png",
        "cat-object.png",
        "/uploads/m1.png",
    ]


def test_extract_from_settings_rejects_malformed_json():
    row = SettingsImages(store_logo='{"filename": "logo.png",}', hero_image=json.dumps({"filename": "hero.jpg"}))
    with pytest.raises(ValueError):
        extract_from_settings(row)


def _seed_catalog(db):
    brand = Brand(name="Acme", slug="acme", logo_url="https://cdn.example.com/uploads/brand-logo.png")
    category = Category(
        name="Shoes",
        slug="shoes",
        image_url="/uploads/category.jpg",
        image=json.dumps({"filename": "category-image.jpg", "url": "/uploads/category-image.jpg"}),
        media=json.dumps([{"url": "/uploads/category-media.jpg"}]),
    )
    db.add_all([brand, category])
    db.commit()

    db.add_all([
        Product(
            name="Runner",
            slug="runner",
            brand_id=brand.brand_id,
            category_id=category.category_id,
            image_url="/uploads/product.jpg",
            media=json.dumps([
                {"url": "https://cdn.example.com/uploads/product-1.jpg", "type": "image"},
                {"url": "/uploads/product.jpg", "type": "image"},
            ]),
        ),
        Product(name="No Image", slug="no-image"),
        AppSettings(
            store_name="Store",
            store_logo=json.dumps({"filename": "store-logo.png", "url": "/uploads/store-logo.png"}),
            hero_image=json.dumps({"filename": "hero.jpg", "url": "/uploads/hero.jpg"}),
        ),
        User(email="a@store.test", name="A", role="staff", avatar_url="/uploads/avatar.png"),
        User(email="b@store.test", name="B", role="staff"),
        BlogPost(
            title="Launch",
            slug="launch",
            content="...",
            featured_image="/uploads/featured.jpg",
            media=json.dumps([{"url": "/uploads/blog-inline.jpg", "type": "image"}]),
        ),
    ])
    db.commit()


def test_collect_referenced_filenames_covers_every_collection(db):
    _seed_catalog(db)

    referenced = collect_referenced_filenames(db)

    assert referenced == {
        "brand-logo.png",
        "category.jpg",
        "category-image.jpg",
        "category-media.jpg",
        "product.jpg",
        "product-1.jpg",
        "store-logo.png",
        "hero.jpg",
        "avatar.png",
        "featured.jpg",
        "blog-inline.jpg",
    }
    assert all("/" not in name for name in referenced)


def test_collect_referenced_filenames_empty_database(db):
    assert collect_referenced_filenames(db) == set()


def test_collect_referenced_filenames_fails_fast_on_malformed_media(db):
    _seed_catalog(db)
    db.add(BlogPost(title="Draft", slug="draft", content="...", media="[{broken"))
    db.commit()

    with pytest.raises(ValueError):
        collect_referenced_filenames(db)


def test_collect_referenced_filenames_fails_fast_on_query_error(db):
    _seed_catalog(db)
    db.close()
    User.__table__.drop(bind=engine)

    with pytest.raises(SQLAlchemyError):
        collect_referenced_filenames(db)
