"""Tests for the team scoped store handle."""

from datetime import timedelta

import pytest
from django.db import DatabaseError
from django.utils import timezone

from teahub.apps.core.domain.exceptions import AccessDeniedError, InternalError, NotFoundError, ValidationError

from ..models import ProductIdentifier, TeaProduct
from ..schemas import TEAIdentifier
from ..store import Page, TeaStore

MISSING_UUID = "00000000-0000-4000-8000-000000000000"


def _make_products(store: TeaStore, count: int) -> list[TeaProduct]:
    base = timezone.now()
    return [
        store.products.create(name=f"product-{i}", type="generic", created_at=base + timedelta(seconds=i))
        for i in range(count)
    ]


class TestPage:
    def test_first_page(self):
        page = Page(items=[], total=150, page_offset=0, page_size=100)

        assert page.has_next
        assert not page.has_previous

    def test_last_page(self):
        page = Page(items=[], total=150, page_offset=100, page_size=100)

        assert not page.has_next
        assert page.has_previous

    def test_exact_fit(self):
        page = Page(items=[], total=100, page_offset=0, page_size=100)

        assert not page.has_next


@pytest.mark.django_db
class TestEntityStore:
    def test_create_assigns_team_and_timestamps(self, tea_store: TeaStore):
        product = tea_store.products.create(name="libbar", type="npm")

        assert product.team_id == tea_store.team_id
        assert product.created_at is not None
        assert product.created_at == product.updated_at

    def test_get_unknown_uuid_is_not_found(self, tea_store: TeaStore):
        with pytest.raises(NotFoundError) as exc_info:
            tea_store.products.get(MISSING_UUID)

        assert exc_info.value.detail == "Product not found"

    def test_get_other_teams_entity_is_access_denied(self, tea_store: TeaStore, other_team_store: TeaStore):
        foreign = other_team_store.products.create(name="foreign", type="generic")

        with pytest.raises(AccessDeniedError) as exc_info:
            tea_store.products.get(str(foreign.uuid))

        assert exc_info.value.status_code == 403

    def test_list_is_scoped_to_team(self, tea_store: TeaStore, other_team_store: TeaStore):
        _make_products(tea_store, 2)
        _make_products(other_team_store, 3)

        assert tea_store.products.list().total == 2
        assert other_team_store.products.list().total == 3

    def test_list_orders_newest_first(self, tea_store: TeaStore):
        products = _make_products(tea_store, 3)

        page = tea_store.products.list()
        assert [p.uuid for p in page.items] == [p.uuid for p in reversed(products)]

    def test_list_pages(self, tea_store: TeaStore):
        _make_products(tea_store, 5)

        page = tea_store.products.list(None, page_offset=2, page_size=2)

        assert page.total == 5
        assert len(page.items) == 2
        assert page.has_next
        assert page.has_previous

    def test_update_applies_changes_and_touches_updated_at(self, tea_store: TeaStore):
        product = tea_store.products.create(name="before", type="generic")
        before = product.updated_at

        updated = tea_store.products.update(str(product.uuid), {"name": "after"})

        assert updated.name == "after"
        assert updated.updated_at >= before
        assert TeaProduct.objects.get(pk=product.pk).name == "after"

    def test_delete_other_teams_entity_is_refused(self, tea_store: TeaStore, other_team_store: TeaStore):
        foreign = other_team_store.products.create(name="foreign", type="generic")

        with pytest.raises(AccessDeniedError):
            tea_store.products.delete(str(foreign.uuid))

        assert TeaProduct.objects.filter(pk=foreign.pk).exists()


@pytest.mark.django_db
class TestIdentifierRows:
    def test_identifiers_keep_their_order(self, tea_store: TeaStore):
        identifiers = [
            TEAIdentifier(idType="purl", idValue="pkg:npm/zeta"),
            TEAIdentifier(idType="cpe", idValue="cpe:2.3:a:acme:zeta:*"),
            TEAIdentifier(idType="purl", idValue="pkg:npm/alpha"),
        ]
        product = tea_store.products.create(name="zeta", type="npm", identifiers=identifiers)

        assert tea_store.products.get(str(product.uuid)).identifiers == identifiers

    def test_update_replaces_identifiers(self, tea_store: TeaStore, sample_product: TeaProduct):
        replacement = [TEAIdentifier(idType="tei", idValue="urn:tei:uuid:example.com:1")]

        product = tea_store.products.update(sample_product, {"identifiers": replacement})

        assert product.identifiers == replacement
        assert ProductIdentifier.objects.filter(product=sample_product).count() == 1

    def test_update_without_identifiers_keeps_them(self, tea_store: TeaStore, sample_product: TeaProduct):
        tea_store.products.update(sample_product, {"sku": "SKU-1"})

        assert tea_store.products.get(str(sample_product.uuid)).identifiers == [
            TEAIdentifier(idType="purl", idValue="pkg:generic/libfoo")
        ]

    def test_identifier_filter(self, tea_store: TeaStore, sample_product: TeaProduct):
        _make_products(tea_store, 2)

        page = tea_store.products.list(tea_store.products.identifier_filter("purl", "pkg:generic/libfoo"))

        assert [p.uuid for p in page.items] == [sample_product.uuid]


@pytest.mark.django_db
class TestAtomic:
    def test_database_error_rolls_back_and_becomes_internal_error(self, tea_store: TeaStore):
        with pytest.raises(InternalError):
            with tea_store.atomic():
                tea_store.products.create(name="doomed", type="generic")
                raise DatabaseError("disk full")

        assert not TeaProduct.objects.filter(name="doomed").exists()

    def test_domain_errors_pass_through_after_rollback(self, tea_store: TeaStore):
        with pytest.raises(ValidationError):
            with tea_store.atomic():
                tea_store.products.create(name="doomed", type="generic")
                raise ValidationError("bad input")

        assert not TeaProduct.objects.filter(name="doomed").exists()
