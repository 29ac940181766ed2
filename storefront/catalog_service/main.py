# storefront/catalog_service/main.py
from fastapi import FastAPI, HTTPException

app = FastAPI(title="Catalog Service (dev mock)")


MENU_ITEMS = {
    "m1": {
        "id": "m1",
        "name": "Margherita Pizza",
        "description": "Tomato, mozzarella, basil",
        "price": 10.00,
        "image": "/img/margherita.jpg",
        "category": "mains",
        "isActive": True,
    },
    "m2": {
        "id": "m2",
        "name": "Caesar Salad",
        "description": "Romaine, parmesan, croutons",
        "price": 7.25,
        "image": "/img/caesar.jpg",
        "category": "starters",
        "isActive": True,
    },
    "m3": {
        "id": "m3",
        "name": "Tiramisu",
        "description": "Espresso, mascarpone, cocoa",
        "price": 5.50,
        "image": "/img/tiramisu.jpg",
        "category": "desserts",
        "isActive": True,
    },
    "m4": {
        "id": "m4",
        "name": "Seasonal Soup",
        "description": "Off the menu until autumn",
        "price": 4.00,
        "image": "/img/soup.jpg",
        "category": "starters",
        "isActive": False,
    },
}


@app.get("/menu")
def list_items():
    return [item for item in MENU_ITEMS.values() if item["isActive"]]


@app.get("/menu/{item_id}")
def get_item(item_id: str):
    item = MENU_ITEMS.get(item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")
    return item
