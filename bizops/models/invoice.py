from tortoise import fields, models


class Invoice(models.Model):
    id = fields.IntField(primary_key=True)
    # One invoice per order, created in the same transaction
    order = fields.OneToOneField("models.Order", related_name="invoice")
    amount = fields.DecimalField(max_digits=14, decimal_places=2)
    due_date = fields.DateField()
    status = fields.CharField(max_length=32, default="Pending")
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "invoices"
