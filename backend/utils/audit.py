from models.log import ActivityLog, ActivityType, ItemType
from models.product import Product
from storage import DatabaseStorage


# Stages an activity row in the caller's transaction; the caller commits
def write_activity(storage: DatabaseStorage, *, type: ActivityType, product: Product, quantity: int, item_type: ItemType) -> ActivityLog:
    return storage.create_activity_log(
        {
            "type": type.value,
            "product_code": product.code,
            "product_description": product.description,
            "quantity": quantity,
            "category": product.category,
            "item_type": item_type.value,
        },
        commit=False,
    )
