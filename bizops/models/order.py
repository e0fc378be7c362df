from tortoise import fields, models


class Order(models.Model):
    id = fields.IntField(primary_key=True)
    client_name = fields.CharField(max_length=255)
    product_name = fields.CharField(max_length=255)
    quantity = fields.IntField()
    order_date = fields.DateField()
    status = fields.CharField(max_length=32, default="Pending")
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "orders"
        indexes = [
            ("product_name",),           # Orders per product
            ("client_name",),            # Client order history
            ("order_date",),             # Time-based queries
        ]
