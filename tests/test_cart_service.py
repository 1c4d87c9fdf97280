"""
Cart service tests

Exercise the cart rules directly against the service and a real
(SQLite) session: stock bounds, price pinning, accumulation versus
replacement, rollback on rejection and the count/view asymmetry.
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal
import uuid

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from tcommerce.core.exceptions import (
    InsufficientStock,
    InvalidQuantity,
    LineNotFound,
    PersistenceFailure,
    ProductUnavailable,
)
from tcommerce.models.cart import CartItem
from tcommerce.repositories.cart_repo import CartRepository
from tcommerce.repositories.product_repo import ProductRepository
from tcommerce.services.cart_service import CartService


@pytest.fixture
def service() -> CartService:
    return CartService(CartRepository(), ProductRepository())


def _lines(session, user_id):
    session.expire_all()
    return session.exec(select(CartItem).where(CartItem.user_id == user_id)).all()


class TestAddItem:
    def test_first_add_creates_line_with_pinned_price(self, service, session, user, product):
        line = service.add_item(session, user.id, product.id, 3)

        assert line.quantity == 3
        assert line.unit_price == Decimal("9.99")
        assert line.user_id == user.id
        assert line.product_id == product.id
        assert len(_lines(session, user.id)) == 1

    def test_accumulates_and_keeps_first_price(self, service, session, user, product):
        service.add_item(session, user.id, product.id, 2)

        product.price = Decimal("12.50")
        session.add(product)
        session.commit()

        line = service.add_item(session, user.id, product.id, 3)

        assert line.quantity == 5
        assert line.unit_price == Decimal("9.99")
        assert len(_lines(session, user.id)) == 1

    def test_accumulation_bumps_updated_at(self, service, session, user, product):
        first = service.add_item(session, user.id, product.id, 1)
        second = service.add_item(session, user.id, product.id, 1)

        assert second.id == first.id
        assert second.updated_at >= first.updated_at

    def test_quantity_alone_above_stock_is_rejected(self, service, session, user, make_product):
        low_stock = make_product(name="Rare Tea", stock_quantity=2)

        with pytest.raises(InsufficientStock) as exc_info:
            service.add_item(session, user.id, low_stock.id, 3)

        assert exc_info.value.requested == 3
        assert exc_info.value.available == 2
        assert _lines(session, user.id) == []

    def test_rejected_accumulation_leaves_line_unchanged(self, service, session, user, make_product):
        item = make_product(stock_quantity=5)
        service.add_item(session, user.id, item.id, 2)

        with pytest.raises(InsufficientStock):
            service.add_item(session, user.id, item.id, 10)

        (line,) = _lines(session, user.id)
        assert line.quantity == 2

    def test_accumulation_checked_against_current_stock(self, service, session, user, product):
        service.add_item(session, user.id, product.id, 5)

        product.stock_quantity = 6
        session.add(product)
        session.commit()

        with pytest.raises(InsufficientStock):
            service.add_item(session, user.id, product.id, 2)

        line = service.add_item(session, user.id, product.id, 1)
        assert line.quantity == 6

    def test_inactive_product_is_unavailable(self, service, session, user, make_product):
        hidden = make_product(name="Old Stock", is_active=False)

        with pytest.raises(ProductUnavailable):
            service.add_item(session, user.id, hidden.id, 1)

    def test_missing_product_is_unavailable(self, service, session, user):
        with pytest.raises(ProductUnavailable):
            service.add_item(session, user.id, uuid.uuid4(), 1)

    @pytest.mark.parametrize("quantity", [0, -1, 2.5, True, "3"])
    def test_non_positive_or_non_integer_quantity(self, service, session, user, product, quantity):
        with pytest.raises(InvalidQuantity):
            service.add_item(session, user.id, product.id, quantity)

        assert _lines(session, user.id) == []

    def test_concurrent_first_insert_is_merged(self, service, session, user, product, monkeypatch):
        """
        Another transaction created the line between our lookup and our
        insert: the unique constraint fires and the add turns into an
        accumulation instead of failing.
        """
        service.add_item(session, user.id, product.id, 2)

        real_get_item = service.cart_repo.get_item
        calls = {"n": 0}

        def stale_first_lookup(*args, **kwargs):
            calls["n"] += 1
            if calls["n"] == 1:
                return None
            return real_get_item(*args, **kwargs)

        monkeypatch.setattr(service.cart_repo, "get_item", stale_first_lookup)

        line = service.add_item(session, user.id, product.id, 3)

        assert line.quantity == 5
        assert len(_lines(session, user.id)) == 1

    def test_database_error_becomes_persistence_failure(self, service, session, user, product, monkeypatch):
        service.add_item(session, user.id, product.id, 1)

        def broken_update(*args, **kwargs):
            raise OperationalError("UPDATE cart_items", {}, Exception("connection lost"))

        monkeypatch.setattr(service.cart_repo, "update", broken_update)

        with pytest.raises(PersistenceFailure):
            service.add_item(session, user.id, product.id, 1)

        (line,) = _lines(session, user.id)
        assert line.quantity == 1

    def test_unexpected_error_rolls_back(self, service, session, user, product, monkeypatch):
        service.add_item(session, user.id, product.id, 1)

        def broken_to_read(item):
            raise ValueError("cannot serialize line")

        monkeypatch.setattr(service, "_to_read", broken_to_read)

        with pytest.raises(ValueError):
            service.add_item(session, user.id, product.id, 2)

        assert not session.in_transaction()
        (line,) = _lines(session, user.id)
        assert line.quantity == 1


class TestUpdateQuantity:
    def test_replaces_rather_than_accumulates(self, service, session, user, product):
        service.add_item(session, user.id, product.id, 2)

        line = service.update_quantity(session, user.id, product.id, 3)

        assert line.quantity == 3

    def test_keeps_unit_price(self, service, session, user, product):
        service.add_item(session, user.id, product.id, 2)
        product.price = Decimal("1.00")
        session.add(product)
        session.commit()

        line = service.update_quantity(session, user.id, product.id, 4)

        assert line.unit_price == Decimal("9.99")

    def test_absent_line_is_not_created(self, service, session, user, product):
        with pytest.raises(LineNotFound):
            service.update_quantity(session, user.id, product.id, 1)

        assert _lines(session, user.id) == []

    @pytest.mark.parametrize("quantity", [0, -5])
    def test_rejects_non_positive_quantity(self, service, session, user, product, quantity):
        service.add_item(session, user.id, product.id, 2)

        with pytest.raises(InvalidQuantity):
            service.update_quantity(session, user.id, product.id, quantity)

        (line,) = _lines(session, user.id)
        assert line.quantity == 2

    def test_above_stock_is_rejected(self, service, session, user, product):
        service.add_item(session, user.id, product.id, 2)

        with pytest.raises(InsufficientStock):
            service.update_quantity(session, user.id, product.id, 11)

        (line,) = _lines(session, user.id)
        assert line.quantity == 2

    def test_deactivated_product_is_unavailable(self, service, session, user, product):
        service.add_item(session, user.id, product.id, 2)
        product.is_active = False
        session.add(product)
        session.commit()

        with pytest.raises(ProductUnavailable):
            service.update_quantity(session, user.id, product.id, 1)


class TestRemoveAndClear:
    def test_remove_returns_prior_state(self, service, session, user, product):
        service.add_item(session, user.id, product.id, 4)

        removed = service.remove_item(session, user.id, product.id)

        assert removed.quantity == 4
        assert removed.product_id == product.id
        assert _lines(session, user.id) == []

    def test_removed_line_leaves_cart_view(self, service, session, user, product):
        service.add_item(session, user.id, product.id, 1)
        service.remove_item(session, user.id, product.id)

        view = service.get_cart_items(session, user.id)

        assert [line.product_id for line in view.items] == []

    def test_remove_absent_line(self, service, session, user, product):
        with pytest.raises(LineNotFound):
            service.remove_item(session, user.id, product.id)

    def test_clear_empty_cart_returns_zero(self, service, session, user):
        assert service.clear_cart(session, user.id) == 0

    def test_clear_only_touches_owner(self, service, session, make_user, make_product):
        alice = make_user("alice@example.com")
        bob = make_user("bob@example.com")
        tea = make_product(name="Green Tea")
        mug = make_product(name="Mug")

        service.add_item(session, alice.id, tea.id, 1)
        service.add_item(session, alice.id, mug.id, 2)
        service.add_item(session, bob.id, tea.id, 1)

        assert service.clear_cart(session, alice.id) == 2
        assert _lines(session, alice.id) == []
        assert len(_lines(session, bob.id)) == 1


class TestCartView:
    def test_summary_totals(self, service, session, user, make_product):
        coffee = make_product(name="Coffee", price="9.99")
        filters = make_product(name="Filters", price="2.50")

        service.add_item(session, user.id, coffee.id, 3)
        service.add_item(session, user.id, filters.id, 2)

        view = service.get_cart_items(session, user.id)

        assert view.summary.total_items == 5
        assert view.summary.total_amount == Decimal("34.97")
        subtotals = {line.product_name: line.subtotal for line in view.items}
        assert subtotals == {"Coffee": Decimal("29.97"), "Filters": Decimal("5.00")}

    def test_empty_cart_totals(self, service, session, user):
        view = service.get_cart_items(session, user.id)

        assert view.items == []
        assert view.summary.total_items == 0
        assert str(view.summary.total_amount) == "0.00"

    def test_newest_line_first(self, service, session, user, make_product):
        older = make_product(name="Older")
        newer = make_product(name="Newer")
        service.add_item(session, user.id, older.id, 1)
        service.add_item(session, user.id, newer.id, 1)

        line = session.exec(
            select(CartItem).where(CartItem.product_id == older.id)
        ).one()
        line.created_at = datetime.now(timezone.utc) - timedelta(hours=1)
        session.add(line)
        session.commit()

        view = service.get_cart_items(session, user.id)

        assert [item.product_name for item in view.items] == ["Newer", "Older"]

    def test_view_shows_current_price_next_to_pinned_price(self, service, session, user, product):
        service.add_item(session, user.id, product.id, 1)
        product.price = Decimal("11.00")
        session.add(product)
        session.commit()

        (line,) = service.get_cart_items(session, user.id).items

        assert line.unit_price == Decimal("9.99")
        assert line.current_price == Decimal("11.00")
        assert line.subtotal == Decimal("9.99")

    def test_count_includes_inactive_products_but_view_does_not(
        self, service, session, user, make_product
    ):
        kept = make_product(name="Kept", price="1.00")
        retired = make_product(name="Retired", price="5.00")
        service.add_item(session, user.id, kept.id, 1)
        service.add_item(session, user.id, retired.id, 4)

        retired.is_active = False
        session.add(retired)
        session.commit()

        view = service.get_cart_items(session, user.id)

        assert service.get_item_count(session, user.id) == 5
        assert [line.product_name for line in view.items] == ["Kept"]
        assert view.summary.total_items == 1
        assert view.summary.total_amount == Decimal("1.00")

    def test_count_of_empty_cart(self, service, session, user):
        assert service.get_item_count(session, user.id) == 0

    def test_read_failure_becomes_persistence_failure(self, service, session, user, monkeypatch):
        def broken_sum(*args, **kwargs):
            raise OperationalError("SELECT sum", {}, Exception("timeout"))

        monkeypatch.setattr(service.cart_repo, "sum_quantity", broken_sum)

        with pytest.raises(PersistenceFailure):
            service.get_item_count(session, user.id)


def test_stock_scenario(service, session, user, make_product):
    item = make_product(price="9.99", stock_quantity=10)

    line = service.add_item(session, user.id, item.id, 3)
    assert (line.quantity, line.unit_price) == (3, Decimal("9.99"))

    line = service.add_item(session, user.id, item.id, 4)
    assert line.quantity == 7

    line = service.update_quantity(session, user.id, item.id, 10)
    assert line.quantity == 10

    with pytest.raises(InsufficientStock):
        service.update_quantity(session, user.id, item.id, 11)

    (stored,) = _lines(session, user.id)
    assert stored.quantity == 10
