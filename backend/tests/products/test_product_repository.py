import pytest

from stockk.ingredients.models import IngredientDB
from stockk.products.domain.exceptions import ProductNotFoundException
from stockk.products.models import ProductDB, ProductIngredientDB


@pytest.mark.asyncio
async def test_get_by_id_with_bill_of_materials(product_repo, burger_menu):
    burger = await product_repo.get_by_id(burger_menu["burger"])

    assert burger.name == "Burger"
    assert [(e.ingredient_name, e.amount) for e in burger.ingredients] == [
        ("Beef", 150),
        ("Cheese", 30),
        ("Onion", 20),
    ]
    assert all(e.product_id == burger.id for e in burger.ingredients)


@pytest.mark.asyncio
async def test_bill_of_materials_is_ordered_by_ingredient_id(product_repo, session_factory):
    async with session_factory() as session:
        salt = IngredientDB(name="Salt", total_stock=100, current_stock=100)
        pepper = IngredientDB(name="Pepper", total_stock=100, current_stock=100)
        fries = ProductDB(name="Fries")
        session.add_all([salt, pepper, fries])
        await session.flush()
        # Insertion dans l'ordre inverse des IDs
        session.add(ProductIngredientDB(product_id=fries.id, ingredient_id=pepper.id, amount=1))
        session.add(ProductIngredientDB(product_id=fries.id, ingredient_id=salt.id, amount=2))
        await session.commit()
        fries_id, salt_id, pepper_id = fries.id, salt.id, pepper.id

    fries = await product_repo.get_by_id(fries_id)
    assert [e.ingredient_id for e in fries.ingredients] == [salt_id, pepper_id]


@pytest.mark.asyncio
async def test_get_by_id_not_found(product_repo):
    with pytest.raises(ProductNotFoundException) as exc_info:
        await product_repo.get_by_id(4242)
    assert exc_info.value.product_id == 4242
    assert "4242" in str(exc_info.value)


@pytest.mark.asyncio
async def test_product_without_ingredients(product_repo, session_factory):
    async with session_factory() as session:
        water = ProductDB(name="Water")
        session.add(water)
        await session.commit()
        water_id = water.id

    water = await product_repo.get_by_id(water_id)
    assert water.ingredients == []


@pytest.mark.asyncio
async def test_list_all(product_repo, burger_menu):
    products = await product_repo.list_all()
    assert [p.name for p in products] == ["Burger"]
    assert len(products[0].ingredients) == 3
