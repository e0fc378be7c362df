from tortoise import fields, models


class User(models.Model):
    id = fields.IntField(primary_key=True)
    email = fields.CharField(max_length=255, unique=True)
    password = fields.CharField(max_length=255) # werkzeug hash, never the plain text
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "users"
