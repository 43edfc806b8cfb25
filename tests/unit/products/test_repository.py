"""Unit tests for ProductDjangoRepository.

Covers:
- Draft creation without I/O.
- Insert (id assignment) and update through ``save``.
- Lookup, listing with count and physical removal.
- Invariants enforced by ``full_clean`` on save.
"""

from __future__ import annotations

import pytest

from django.core.exceptions import ValidationError

from modules.products.models import Product
from modules.products.repositories import IProductRepository, ProductDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return ProductDjangoRepository()


def _make_product(**overrides) -> Product:
    defaults = {"name": "Widget", "price": 10, "stock": 20}
    defaults.update(overrides)
    return Product.objects.create(**defaults)


class TestRepositoryInstantiation:
    def test_is_instance_of_interface(self, repo):
        assert isinstance(repo, IProductRepository)


class TestCreate:
    def test_builds_unsaved_draft(self, repo, django_assert_num_queries):
        with django_assert_num_queries(0):
            draft = repo.create({"name": "Widget", "price": 10, "stock": 20})
        assert draft.id is None
        assert draft.name == "Widget"


class TestSave:
    def test_insert_assigns_id(self, repo):
        product = repo.save(repo.create({"name": "Widget", "price": 10, "stock": 20}))
        assert product.id is not None
        assert Product.objects.filter(id=product.id).exists()

    def test_update_persists_changes(self, repo):
        product = _make_product(stock=20)
        product.stock = 15
        repo.save(product)
        product.refresh_from_db()
        assert product.stock == 15

    def test_rejects_negative_stock(self, repo):
        product = _make_product()
        product.stock = -1
        with pytest.raises(ValidationError):
            repo.save(product)

    def test_rejects_empty_name(self, repo):
        with pytest.raises(ValidationError):
            repo.save(repo.create({"name": "  ", "price": 10, "stock": 0}))

    def test_rejects_zero_price(self, repo):
        with pytest.raises(ValidationError):
            repo.save(repo.create({"name": "Widget", "price": 0, "stock": 0}))


class TestGetById:
    def test_returns_product_when_found(self, repo):
        product = _make_product()
        assert repo.get_by_id(product.id) == product

    def test_returns_none_when_not_found(self, repo):
        assert repo.get_by_id(999999) is None


class TestListWithCount:
    def test_returns_all_products_and_count(self, repo):
        _make_product(name="A")
        _make_product(name="B")
        products, count = repo.list_with_count()
        assert count == 2
        assert [p.name for p in products] == ["A", "B"]

    def test_empty(self, repo):
        assert repo.list_with_count() == ([], 0)


class TestRemove:
    def test_deletes_physically(self, repo):
        product = _make_product()
        product_id = product.id
        repo.remove(product)
        assert not Product.objects.filter(id=product_id).exists()
