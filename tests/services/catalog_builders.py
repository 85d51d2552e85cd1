"""Catalog Builders: transient ORM objects with realistic defaults for tests."""

from itertools import count

from catalog_sync.models import Category, Media, Price, Publication, Publisher

_isbn_seq = count(1)


def make_publisher(name: str = "Editorial Kipus", tag_id: int | None = None) -> Publisher:
    return Publisher(name=name, tag_id=tag_id)


def make_category(code: str, category_id: int | None = None) -> Category:
    return Category(code=code, description=f"Subject {code}", category_id=category_id)


def make_publication(
    pub_id: str = "pub-1",
    *,
    isbn: str | None = None,
    product_id: int | None = None,
    amount: float = 100.0,
    currency: str = "USD",
    migrated: bool = False,
    role: int | None = None,
    subject_codes: str | None = "FA|FB",
    publisher: Publisher | None = None,
    cover: str | None = "https://cdn.test/cover.jpg",
) -> Publication:
    publication = Publication(
        id=pub_id,
        isbn=isbn or f"978{next(_isbn_seq):010d}",
        title=f"Title {pub_id}",
        author="Jane Author",
        description="A long description.",
        subject_codes=subject_codes,
        product_form_detail="E101",
        technical_protection="02",
        product_id=product_id,
        updated=False,
        publisher=publisher,
    )
    publication.price = Price(
        amount=amount,
        currency_code=currency,
        country_code="BO",
        price_type="01",
        role=role,
        migrated=migrated,
    )
    publication.media = Media(path=cover) if cover else None
    return publication
