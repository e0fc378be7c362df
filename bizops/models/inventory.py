from tortoise import fields, models


class InventoryItem(models.Model):
    id = fields.IntField(primary_key=True)
    # Orders reference items by name, so this is the lookup key
    product_name = fields.CharField(max_length=255, db_index=True)
    stock_quantity = fields.IntField(default=0) # Never negative; see order_service
    reorder_threshold = fields.IntField(default=0) # For low stock alert
    price = fields.DecimalField(max_digits=12, decimal_places=2)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "inventory"
